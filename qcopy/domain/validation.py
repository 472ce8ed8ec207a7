"""
Path and pattern validation.
Stateless checks that raise a specific error kind instead of returning booleans.
"""

import os
import re
import stat
from datetime import datetime, timezone

from .entities import DEFAULT_MAX_FILE_SIZE, FileStats, InputKind
from .errors import (
    FileIOError,
    InvalidPathError,
    InvalidPatternError,
    NotFoundError,
    ReadPermissionError,
    SizeExceededError,
)

GLOB_CHARACTERS = ("*", "?", "[", "{")
LITERAL_FORBIDDEN_CHARACTERS = ("<", ">", ":", '"', "|", "?", "*")
FORBIDDEN_GLOB_SEQUENCES = ("**/**/**", "***")

_DRIVE_PREFIX = re.compile(r"^[A-Za-z]:[\\/]")


def classify_input(value: str) -> InputKind:
    """Classify an input as a glob pattern or a literal path."""
    if any(char in value for char in GLOB_CHARACTERS):
        return InputKind.GLOB_PATTERN
    return InputKind.LITERAL


def validate_path_syntax(path: str) -> None:
    """Reject empty literal paths and paths with characters illegal in filenames."""
    if not path or not path.strip():
        raise InvalidPathError("Path cannot be empty", path)

    candidate = path.strip()
    # A drive letter colon is legal on Windows
    if os.name == "nt" and _DRIVE_PREFIX.match(candidate):
        candidate = candidate[2:]

    illegal = sorted({char for char in candidate if char in LITERAL_FORBIDDEN_CHARACTERS})
    if illegal:
        raise InvalidPathError(
            f"Path contains invalid characters ({' '.join(illegal)})", path
        )


def validate_glob_syntax(pattern: str) -> None:
    """Reject malformed glob patterns and patterns that climb out of their base."""
    if not pattern or not pattern.strip():
        raise InvalidPatternError("Glob pattern cannot be empty", pattern)

    if any(sequence in pattern for sequence in FORBIDDEN_GLOB_SEQUENCES):
        raise InvalidPatternError("Invalid glob pattern syntax", pattern)

    if ".." in pattern:
        raise InvalidPatternError(
            "Glob pattern cannot contain parent directory references", pattern
        )


def validate_input(value: str) -> InputKind:
    """Classify an input, then run the syntax check matching its kind."""
    kind = classify_input(value)
    if kind is InputKind.GLOB_PATTERN:
        validate_glob_syntax(value)
    else:
        validate_path_syntax(value)
    return kind


def expand_home(path: str) -> str:
    """Expand a leading ``~``, ``~/`` or ``~\\``; ``~user`` forms are left alone."""
    value = path.strip()
    if value == "~" or value.startswith(("~/", "~\\")):
        return os.path.expanduser("~") + value[1:]
    return value


def normalize_path(path: str) -> str:
    """Expand ``~`` and return an absolute, normalized path."""
    return os.path.abspath(expand_home(path))


def stat_path(path: str) -> FileStats:
    """
    Return the stats of a path.

    A missing path is not an error; it yields ``FileStats.missing()``.
    Any other OS failure raises ``FileIOError``.
    """
    try:
        info = os.stat(path)
    except (FileNotFoundError, NotADirectoryError):
        return FileStats.missing()
    except (OSError, ValueError) as e:
        raise FileIOError(f"Failed to check file stats ({e})", path) from e

    return FileStats(
        exists=True,
        is_file=stat.S_ISREG(info.st_mode),
        is_directory=stat.S_ISDIR(info.st_mode),
        size=info.st_size,
        last_modified=datetime.fromtimestamp(info.st_mtime, tz=timezone.utc),
    )


def check_readable(path: str) -> None:
    """Raise ``ReadPermissionError`` if the current process cannot read the path."""
    if not os.access(path, os.R_OK):
        raise ReadPermissionError("File is not readable", path)


def check_size(path: str, max_bytes: int = DEFAULT_MAX_FILE_SIZE) -> None:
    """Raise ``SizeExceededError`` if the file is larger than ``max_bytes``."""
    stats = stat_path(path)
    if not stats.exists:
        raise NotFoundError("File does not exist", path)

    if stats.size > max_bytes:
        raise SizeExceededError(
            f"File size ({stats.size} bytes) exceeds maximum allowed size ({max_bytes} bytes)",
            path,
            size=stats.size,
            limit=max_bytes,
        )
