"""Exceptions for dbdump.

All exceptions carry structured error information (code, message, details).

Usage:
    from dbdump.exceptions import DbDumpError, ProcessError
"""

from dbdump.exceptions.base import (
    CompressionError,
    ConfigurationError,
    DbDumpError,
    ProcessError,
    StartError,
    ToolNotFoundError,
    UnsupportedEngineError,
    UploadError,
)

__all__ = [
    "DbDumpError",
    "ConfigurationError",
    "UnsupportedEngineError",
    "ToolNotFoundError",
    "StartError",
    "ProcessError",
    "CompressionError",
    "UploadError",
]
