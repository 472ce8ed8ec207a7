"""
Core operations exposed to the command line layer.
Each one is usable on its own, with collaborators injected as arguments.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from ..domain.entities import DEFAULT_MAX_FILE_SIZE, AggregationResult, ContentRecord, RemovalSpec
from ..domain.range_parser import parse_removal as _parse_removal
from ..infrastructure.file_reader import FileAggregator
from ..infrastructure.path_resolver import PathResolver
from .formatting import format_records

__all__ = ["resolve_inputs", "aggregate", "format_records", "parse_removal"]


def resolve_inputs(inputs: Iterable[str], logger: Optional[logging.Logger] = None) -> List[str]:
    """Expand paths, directories and glob patterns into ordered, unique files."""
    return PathResolver(logger=logger).resolve(inputs)


def aggregate(
    paths: Iterable[str],
    max_file_size: int = DEFAULT_MAX_FILE_SIZE,
    encoding: str = "utf-8",
    max_workers: int = 4,
    logger: Optional[logging.Logger] = None,
) -> Tuple[List[ContentRecord], AggregationResult]:
    """Read resolved files, collecting per-file errors."""
    aggregator = FileAggregator(
        max_file_size=max_file_size, encoding=encoding, max_workers=max_workers, logger=logger
    )
    return aggregator.read_many(paths)


def parse_removal(identifiers: Iterable[str], current_count: int) -> RemovalSpec:
    """Parse removal identifiers against a list of ``current_count`` entries."""
    return _parse_removal(identifiers, current_count)
