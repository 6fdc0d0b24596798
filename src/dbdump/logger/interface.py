"""
Logger interface for dbdump.

Every component takes a Logger so tests can capture what the daemon reports
about each target and stage.
"""

from abc import ABC, abstractmethod
from typing import Any


class Logger(ABC):
    """Abstract base class for the logging interface.

    Keyword arguments are structured fields (``target=``, ``stage=``,
    ``stream=``) rendered after the message or as JSON keys.
    """

    @abstractmethod
    def debug(self, message: str, **kwargs: Any) -> None:
        """Log a debug message."""

    @abstractmethod
    def info(self, message: str, **kwargs: Any) -> None:
        """Log an info message."""

    @abstractmethod
    def warning(self, message: str, **kwargs: Any) -> None:
        """Log a warning message."""

    @abstractmethod
    def error(self, message: str, **kwargs: Any) -> None:
        """Log an error message."""

    @abstractmethod
    def get_run_id(self) -> str:
        """Get the identifier of this daemon run.

        Returns:
            Short unique identifier attached to every record.
        """
