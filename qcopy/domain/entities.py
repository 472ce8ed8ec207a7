"""
Domain entities for q-copy.
Records, results and the persisted configuration model.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import PurePath
from typing import List

from pydantic import AliasChoices, BaseModel, Field, field_validator

from .errors import ErrorCode

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# 50 MiB
DEFAULT_MAX_FILE_SIZE = 50 * 1024 * 1024


class OutputFormat(str, Enum):
    """Supported clipboard output formats."""

    PLAIN = "plain"
    MARKDOWN = "markdown"
    XML = "xml"

    @classmethod
    def choices(cls) -> List[str]:
        return [member.value for member in cls]


class InputKind(str, Enum):
    """How a raw user input is interpreted before resolution."""

    LITERAL = "literal"
    GLOB_PATTERN = "glob"


@dataclass(frozen=True)
class FileStats:
    """Filesystem facts about a path, recomputed on demand."""

    exists: bool
    is_file: bool
    is_directory: bool
    size: int = 0
    last_modified: datetime = EPOCH

    @classmethod
    def missing(cls) -> "FileStats":
        """Stats for a path that does not exist."""
        return cls(exists=False, is_file=False, is_directory=False, size=0, last_modified=EPOCH)


@dataclass(frozen=True)
class ContentRecord:
    """The content of one successfully read file."""

    path: str
    content: str
    size: int
    last_modified: datetime

    @property
    def name(self) -> str:
        """Base name of the file."""
        return PurePath(self.path).name

    @property
    def extension(self) -> str:
        """File extension without the leading dot, empty if none."""
        return PurePath(self.path).suffix[1:]


class AggregationError(BaseModel):
    """A single file that could not be read during aggregation."""

    path: str
    message: str
    code: ErrorCode = ErrorCode.UNKNOWN_ERROR


class AggregationResult(BaseModel):
    """Outcome of reading a batch of files."""

    records_processed: int = 0
    total_size: int = 0
    errors: List[AggregationError] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        """Whether every file in the batch was read."""
        return not self.errors

    def get_summary(self) -> str:
        """Get a human-readable summary of the batch."""
        summary = f"Read {self.records_processed} files ({self.total_size} bytes)"
        if self.errors:
            summary += f", {len(self.errors)} failed"
        return summary


@dataclass
class RemovalSpec:
    """Parsed removal identifiers: 1-based indices, literal paths, and rejects."""

    indices: List[int] = field(default_factory=list)
    paths: List[str] = field(default_factory=list)
    invalid_inputs: List[str] = field(default_factory=list)


class Config(BaseModel):
    """Persisted user configuration."""

    # camelCase aliases accept files written by earlier releases
    file_paths: List[str] = Field(
        default_factory=list, validation_alias=AliasChoices("file_paths", "filePaths")
    )
    output_format: OutputFormat = Field(
        default=OutputFormat.PLAIN, validation_alias=AliasChoices("output_format", "outputFormat")
    )
    include_headers: bool = Field(
        default=True, validation_alias=AliasChoices("include_headers", "includeHeaders")
    )
    prompt: str = Field(default="", description="Text prepended to the clipboard output")

    @field_validator("file_paths")
    @classmethod
    def _paths_not_blank(cls, value: List[str]) -> List[str]:
        for index, entry in enumerate(value, start=1):
            if not entry.strip():
                raise ValueError(f"file path #{index} cannot be empty")
        return value


class CopyResult(BaseModel):
    """Result of a full copy run."""

    paths_resolved: int
    unresolved_inputs: List[str] = Field(default_factory=list)
    aggregation: AggregationResult
    output: str = ""
    delivered: bool = False
    execution_time_seconds: float = 0.0

    @property
    def output_size(self) -> int:
        """Size of the rendered output in UTF-8 bytes."""
        return len(self.output.encode("utf-8"))

    @property
    def success(self) -> bool:
        """Whether at least one file made it into the output."""
        return self.aggregation.records_processed > 0
