"""
Error taxonomy for q-copy.
Every error carries a stable code so batch failures can be reported uniformly.
"""

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Stable identifiers attached to every q-copy error."""

    INVALID_PATH = "INVALID_PATH"
    INVALID_PATTERN = "INVALID_PATTERN"
    NOT_FOUND = "NOT_FOUND"
    NOT_A_FILE = "NOT_A_FILE"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    SIZE_EXCEEDED = "SIZE_EXCEEDED"
    DECODE_ERROR = "DECODE_ERROR"
    IO_ERROR = "IO_ERROR"
    CONFIG_ERROR = "CONFIG_ERROR"
    CLIPBOARD_ERROR = "CLIPBOARD_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class QCopyError(Exception):
    """Base class for all errors raised by q-copy."""

    code: ErrorCode = ErrorCode.UNKNOWN_ERROR

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path:
            return f"{self.message}: {self.path}"
        return self.message


class InvalidPathError(QCopyError):
    """Raised when a literal path is empty or contains illegal characters."""

    code = ErrorCode.INVALID_PATH


class InvalidPatternError(QCopyError):
    """Raised when a glob pattern is malformed or escapes its scope."""

    code = ErrorCode.INVALID_PATTERN


class NotFoundError(QCopyError):
    code = ErrorCode.NOT_FOUND


class NotAFileError(QCopyError):
    code = ErrorCode.NOT_A_FILE


class ReadPermissionError(QCopyError):
    code = ErrorCode.PERMISSION_DENIED


class SizeExceededError(QCopyError):
    """Raised when a file is larger than the configured limit."""

    code = ErrorCode.SIZE_EXCEEDED

    def __init__(self, message: str, path: Optional[str] = None, size: int = 0, limit: int = 0):
        super().__init__(message, path)
        self.size = size
        self.limit = limit


class DecodeError(QCopyError):
    """Raised when file bytes are not valid text in the configured encoding."""

    code = ErrorCode.DECODE_ERROR


class FileIOError(QCopyError):
    """Raised for OS-level failures other than not-found and permission."""

    code = ErrorCode.IO_ERROR


class ConfigurationError(QCopyError):
    """Raised when the persisted configuration cannot be loaded or saved."""

    code = ErrorCode.CONFIG_ERROR


class ClipboardError(QCopyError):
    code = ErrorCode.CLIPBOARD_ERROR


def error_code_of(error: BaseException) -> ErrorCode:
    """Return the stable code for any exception."""
    if isinstance(error, QCopyError):
        return error.code
    return ErrorCode.UNKNOWN_ERROR
