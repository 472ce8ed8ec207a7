"""
File reading infrastructure.
Reads resolved files into content records, isolating failures per file.
"""

import codecs
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterable, List, Optional, Tuple, Union

from ..domain.entities import (
    DEFAULT_MAX_FILE_SIZE,
    AggregationError,
    AggregationResult,
    ContentRecord,
)
from ..domain.errors import (
    DecodeError,
    FileIOError,
    NotAFileError,
    NotFoundError,
    QCopyError,
    ReadPermissionError,
    SizeExceededError,
    error_code_of,
)
from ..domain.validation import check_readable, check_size, stat_path

Outcome = Union[ContentRecord, AggregationError]


class FileAggregator:
    """Reads many files into memory, collecting errors instead of aborting."""

    def __init__(
        self,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        encoding: str = "utf-8",
        max_workers: int = 4,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize with size limit, text encoding and pool size."""
        if max_file_size <= 0:
            raise ValueError("max_file_size must be positive")
        codecs.lookup(encoding)

        self.max_file_size = max_file_size
        self.encoding = encoding
        self.max_workers = max(1, max_workers)
        self.logger = logger or logging.getLogger(__name__)

    def read_one(self, path: str) -> ContentRecord:
        """Read a single file, raising a specific error if it cannot be used."""
        stats = stat_path(path)
        if not stats.exists:
            raise NotFoundError("File does not exist", path)
        if not stats.is_file:
            raise NotAFileError("Path is not a regular file", path)

        check_readable(path)
        check_size(path, self.max_file_size)

        # Whole-file read; the file may have changed since the stat above
        try:
            with open(path, "rb") as f:
                data = f.read(self.max_file_size + 1)
        except FileNotFoundError as e:
            raise NotFoundError("File disappeared before it could be read", path) from e
        except IsADirectoryError as e:
            raise NotAFileError("Path is not a regular file", path) from e
        except PermissionError as e:
            raise ReadPermissionError("Permission denied", path) from e
        except OSError as e:
            raise FileIOError(f"Failed to read file ({e})", path) from e

        if len(data) > self.max_file_size:
            raise SizeExceededError(
                f"File grew beyond the maximum allowed size ({self.max_file_size} bytes)",
                path,
                size=len(data),
                limit=self.max_file_size,
            )

        try:
            content = data.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise DecodeError(f"File is not valid {self.encoding} text", path) from e

        self.logger.debug("Read %s (%d bytes)", path, len(data))
        return ContentRecord(
            path=path,
            content=content,
            size=len(data),
            last_modified=stats.last_modified,
        )

    def read_many(self, paths: Iterable[str]) -> Tuple[List[ContentRecord], AggregationResult]:
        """Read files in order, returning the records that succeeded and a result summary."""
        paths = list(paths)
        self.logger.info("Reading %d files", len(paths))

        if self.max_workers == 1 or len(paths) <= 1:
            outcomes: List[Outcome] = [self._attempt(path) for path in paths]
        else:
            outcomes = self._read_parallel(paths)

        records: List[ContentRecord] = []
        result = AggregationResult()
        for outcome in outcomes:
            if isinstance(outcome, ContentRecord):
                records.append(outcome)
                result.total_size += outcome.size
            else:
                result.errors.append(outcome)
        result.records_processed = len(records)

        self.logger.info(result.get_summary())
        return records, result

    def _read_parallel(self, paths: List[str]) -> List[Outcome]:
        """Read files on a thread pool, merging results back into input order."""
        outcomes: List[Optional[Outcome]] = [None] * len(paths)

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_index = {
                executor.submit(self._attempt, path): index
                for index, path in enumerate(paths)
            }

            for future in as_completed(future_to_index):
                index = future_to_index[future]
                try:
                    outcomes[index] = future.result()
                except Exception as e:
                    self.logger.exception("Unexpected error reading %s", paths[index])
                    outcomes[index] = AggregationError(
                        path=paths[index], message=str(e), code=error_code_of(e)
                    )

        return [outcome for outcome in outcomes if outcome is not None]

    def _attempt(self, path: str) -> Outcome:
        """Read one file, converting a failure into an AggregationError."""
        try:
            return self.read_one(path)
        except QCopyError as e:
            self.logger.debug("Failed to read %s: %s", path, e.message)
            return AggregationError(path=path, message=e.message, code=e.code)
