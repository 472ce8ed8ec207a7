"""
q-copy

Keep a list of files, directories and glob patterns, and copy their
contents to the clipboard as plain text, Markdown or XML.
"""

__version__ = "1.1.0"
__description__ = "Copy the contents of a saved list of files to the clipboard"

# Public API exports
from .application.copy_files import CopyFilesUseCase
from .application.formatting import ContentFormatter
from .application.manage_paths import ManagePathsUseCase
from .application.operations import aggregate, format_records, parse_removal, resolve_inputs
from .domain.entities import (
    AggregationError,
    AggregationResult,
    Config,
    ContentRecord,
    CopyResult,
    FileStats,
    OutputFormat,
    RemovalSpec,
)
from .domain.errors import ConfigurationError, ErrorCode, QCopyError
from .infrastructure.config_store import ConfigStore
from .infrastructure.file_reader import FileAggregator
from .infrastructure.path_resolver import PathResolver

__all__ = [
    "resolve_inputs",
    "aggregate",
    "format_records",
    "parse_removal",
    "CopyFilesUseCase",
    "ManagePathsUseCase",
    "ContentFormatter",
    "FileAggregator",
    "PathResolver",
    "ConfigStore",
    "Config",
    "ContentRecord",
    "FileStats",
    "AggregationError",
    "AggregationResult",
    "CopyResult",
    "OutputFormat",
    "RemovalSpec",
    "QCopyError",
    "ConfigurationError",
    "ErrorCode",
]
