"""dbdump - scheduled database backups to S3-compatible storage.

This package provides:
- backup: connection targets, dump commands, process runner, compression,
  upload and the backup scheduler
- config: .env/environment loading and typed daemon settings
- logger: structured logging with text or JSON output
- exceptions: error classes with structured error info
"""

__version__ = "1.0.0"

from dbdump.backup import (
    BackupResult,
    BackupScheduler,
    CommandBuilder,
    Compressor,
    ConnectionSpec,
    EngineKind,
    ProcessRunner,
    S3Uploader,
    Stage,
)

from dbdump.config import DaemonSettings, EnvLoader

from dbdump.exceptions import (
    CompressionError,
    ConfigurationError,
    DbDumpError,
    ProcessError,
    StartError,
    ToolNotFoundError,
    UnsupportedEngineError,
    UploadError,
)

from dbdump.logger import Logger, StructuredLogger, create_logger, get_logger

__all__ = [
    "__version__",
    # Backup
    "BackupResult",
    "BackupScheduler",
    "CommandBuilder",
    "Compressor",
    "ConnectionSpec",
    "EngineKind",
    "ProcessRunner",
    "S3Uploader",
    "Stage",
    # Config
    "DaemonSettings",
    "EnvLoader",
    # Exceptions
    "DbDumpError",
    "ConfigurationError",
    "UnsupportedEngineError",
    "ToolNotFoundError",
    "StartError",
    "ProcessError",
    "CompressionError",
    "UploadError",
    # Logger
    "Logger",
    "StructuredLogger",
    "create_logger",
    "get_logger",
]
