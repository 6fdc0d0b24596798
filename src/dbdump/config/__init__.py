"""Configuration Module for dbdump

Example:
    from dbdump.config import DaemonSettings, EnvLoader

    env = EnvLoader(".env").load(overrides={"EVERY": "6h"})
    settings = DaemonSettings.from_env(env)
"""

from dbdump.config.duration import format_duration, parse_duration
from dbdump.config.env_loader import EnvLoader
from dbdump.config.settings import ENV_KEYS, DaemonSettings

__all__ = [
    "DaemonSettings",
    "ENV_KEYS",
    "EnvLoader",
    "format_duration",
    "parse_duration",
]
