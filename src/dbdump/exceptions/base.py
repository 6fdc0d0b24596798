"""Base exception classes for dbdump.

All dbdump exceptions include structured error information:
- code: Machine-readable error identifier
- message: Human-readable error description
- details: Additional context (target, path, exit code, ...)
"""

from typing import Any, Dict, Optional


class DbDumpError(Exception):
    """Base exception for all dbdump errors.

    Attributes:
        code: Machine-readable error code (e.g., "PROCESS_FAILED")
        message: Human-readable error message
        details: Optional additional context for debugging/recovery
    """

    default_code = "DBDUMP_ERROR"

    def __init__(
        self, message: str, code: Optional[str] = None, details: Optional[Dict[str, Any]] = None
    ):
        """Initialize error with structured information.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (defaults to the class code)
            details: Optional additional context
        """
        self.code = code or self.default_code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.code}: {self.message} (details: {self.details})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON logging."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(DbDumpError):
    """Invalid or incomplete configuration. Fatal at startup, never retried."""

    default_code = "CONFIGURATION_ERROR"


class UnsupportedEngineError(ConfigurationError):
    """Requested database engine kind is not supported."""

    default_code = "UNSUPPORTED_ENGINE"


class ToolNotFoundError(DbDumpError):
    """Required external dump tool is not on the execution path."""

    default_code = "TOOL_NOT_FOUND"

    def __init__(self, tool: str, details: Optional[Dict[str, Any]] = None):
        self.tool = tool
        code = f"{tool.upper().replace('-', '_')}_NOT_FOUND"
        super().__init__(f"{tool} not found", code=code, details=details)


class StartError(DbDumpError):
    """External process could not be started."""

    default_code = "PROCESS_START_FAILED"


class ProcessError(DbDumpError):
    """External process exited with a non-zero status."""

    default_code = "PROCESS_FAILED"

    def __init__(self, program: str, exit_code: int, details: Optional[Dict[str, Any]] = None):
        self.program = program
        self.exit_code = exit_code
        merged = {"program": program, "exit_code": exit_code}
        merged.update(details or {})
        super().__init__(f"{program} exited with status {exit_code}", details=merged)


class CompressionError(DbDumpError):
    """Compressing a dump artifact failed."""

    default_code = "COMPRESSION_FAILED"


class UploadError(DbDumpError):
    """Uploading an artifact to object storage failed."""

    default_code = "UPLOAD_FAILED"
