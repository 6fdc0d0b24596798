"""Environment loader with .env support.

Values are merged in a fixed order, later sources winning:
1) .env file (``--env-file``, or ``./.env`` when present)
2) process environment
3) command-line overrides

The loader remembers which source supplied each key so startup logging can
say where a setting came from without printing its value.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Mapping, MutableMapping, Optional

from dotenv import dotenv_values

from dbdump.exceptions import ConfigurationError

SOURCE_FILE = "file"
SOURCE_ENV = "env"
SOURCE_OVERRIDE = "flag"


class EnvLoader:
    """Load environment-style key/value pairs for the daemon."""

    def __init__(self, env_file: Optional[Path | str] = None) -> None:
        """
        Args:
            env_file: Explicit .env path. It must exist. When omitted, ``./.env``
                is read if present.
        """
        self.env_file = Path(env_file) if env_file else None
        self.loaded_file: Optional[Path] = None
        self.sources: Dict[str, str] = {}

    def load(
        self,
        overrides: Optional[Mapping[str, Optional[str]]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> MutableMapping[str, str]:
        """Merge .env, environment and overrides.

        Override values that are None are ignored.

        Raises:
            ConfigurationError: An explicit env file does not exist
        """
        data: MutableMapping[str, str] = {}
        self.sources = {}

        env_path = self._resolve_env_file()
        if env_path is not None:
            file_values = dotenv_values(env_path)
            self._merge(data, {k: v for k, v in file_values.items() if v is not None}, SOURCE_FILE)
            self.loaded_file = env_path

        self._merge(data, os.environ if environ is None else environ, SOURCE_ENV)

        if overrides:
            self._merge(data, {k: str(v) for k, v in overrides.items() if v is not None}, SOURCE_OVERRIDE)

        return data

    def source_of(self, key: str) -> Optional[str]:
        """Where ``key`` came from in the last load: "file", "env", "flag" or None"""
        return self.sources.get(key)

    def _resolve_env_file(self) -> Optional[Path]:
        if self.env_file is not None:
            if not self.env_file.is_file():
                raise ConfigurationError(
                    f"Env file not found: {self.env_file}",
                    details={"env_file": str(self.env_file)},
                )
            return self.env_file

        default = Path.cwd() / ".env"
        return default if default.is_file() else None

    def _merge(self, data: MutableMapping[str, str], values: Mapping[str, str], source: str) -> None:
        for key, value in values.items():
            data[key] = value
            self.sources[key] = source


__all__ = ["EnvLoader", "SOURCE_ENV", "SOURCE_FILE", "SOURCE_OVERRIDE"]
