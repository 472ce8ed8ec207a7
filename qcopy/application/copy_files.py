"""
Application use case for copying the configured files to the clipboard.
Resolve, read, format, deliver.
"""

import logging
import time
from typing import Callable, Optional

from ..domain.entities import Config, CopyResult, OutputFormat
from ..infrastructure.clipboard import write_clipboard
from ..infrastructure.file_reader import FileAggregator
from ..infrastructure.path_resolver import PathResolver
from .formatting import ContentFormatter

ClipboardSink = Callable[[str], None]


class CopyFilesUseCase:
    """Runs the full pipeline for the persisted path list."""

    def __init__(
        self,
        config: Config,
        resolver: Optional[PathResolver] = None,
        aggregator: Optional[FileAggregator] = None,
        clipboard: Optional[ClipboardSink] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize with optional dependencies for testing."""
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.resolver = resolver or PathResolver(logger=self.logger)
        self.aggregator = aggregator or FileAggregator(logger=self.logger)
        self.clipboard = clipboard or write_clipboard

    def execute(
        self,
        output_format: Optional[OutputFormat] = None,
        include_headers: Optional[bool] = None,
        deliver: bool = True,
    ) -> CopyResult:
        """Execute the copy; per-run overrides fall back to the stored settings."""
        start_time = time.time()

        output_format = OutputFormat(output_format or self.config.output_format)
        if include_headers is None:
            include_headers = self.config.include_headers

        resolution = self.resolver.resolve_detailed(self.config.file_paths)
        unresolved = resolution.unresolved + [str(error) for error in resolution.rejected]

        records, aggregation = self.aggregator.read_many(resolution.paths)

        output = ContentFormatter(include_headers=include_headers).format(records, output_format)
        if output and self.config.prompt:
            output = f"{self.config.prompt}\n\n{output}"

        delivered = False
        if deliver and records:
            # A clipboard failure propagates; nothing persisted is touched here
            self.clipboard(output)
            delivered = True
        elif not records:
            self.logger.warning("No files could be read; clipboard left unchanged")

        return CopyResult(
            paths_resolved=len(resolution.paths),
            unresolved_inputs=unresolved,
            aggregation=aggregation,
            output=output,
            delivered=delivered,
            execution_time_seconds=time.time() - start_time,
        )
