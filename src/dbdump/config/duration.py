"""Interval parsing

Accepts Go-style durations ("24h", "1h30m", "1.5h", "90s", "500ms") and
plain numbers of seconds.
"""

import math
import re
from datetime import timedelta

from dbdump.exceptions import ConfigurationError

_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_duration(value: str) -> timedelta:
    """Parse a duration string into a timedelta

    Raises:
        ConfigurationError: If the string is not a valid duration
    """
    text = value.strip()
    if not text:
        raise ConfigurationError("Empty duration")

    try:
        seconds = float(text)
    except ValueError:
        seconds = None
    if seconds is not None:
        if not math.isfinite(seconds):
            raise ConfigurationError(f"Invalid duration: {value!r}")
        return _to_timedelta(seconds, value)

    total = 0.0
    pos = 0
    for match in _COMPONENT.finditer(text):
        if match.start() != pos:
            break
        total += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        pos = match.end()

    if pos != len(text) or pos == 0:
        raise ConfigurationError(f"Invalid duration: {value!r}", details={"example": "24h, 1h30m, 90s"})

    return _to_timedelta(total, value)


def _to_timedelta(seconds: float, value: str) -> timedelta:
    try:
        return timedelta(seconds=seconds)
    except OverflowError as e:
        raise ConfigurationError(f"Duration out of range: {value!r}", details={"max": str(timedelta.max)}) from e


def format_duration(interval: timedelta) -> str:
    """Render a timedelta the way parse_duration reads it ("1h30m0s")"""
    seconds = int(interval.total_seconds())
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{minutes}m{secs}s"
    return f"{secs}s"
