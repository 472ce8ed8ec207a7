"""
Application use cases for maintaining the persisted path list and settings.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from ..domain.entities import Config, InputKind, OutputFormat
from ..domain.errors import FileIOError, InvalidPathError, InvalidPatternError
from ..domain.range_parser import apply_removal, parse_removal
from ..domain.validation import normalize_path, stat_path, validate_input
from ..infrastructure.config_store import ConfigStore


@dataclass(frozen=True)
class PathStatus:
    """One persisted entry with its current state on disk."""

    index: int
    path: str
    status: str


@dataclass
class AddResult:
    added: List[str] = field(default_factory=list)
    duplicates: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    invalid: List[Tuple[str, str]] = field(default_factory=list)


@dataclass
class RemoveResult:
    removed: List[str] = field(default_factory=list)
    invalid_inputs: List[str] = field(default_factory=list)
    unmatched_paths: List[str] = field(default_factory=list)


def describe_entry(entry: str) -> str:
    """Classify a stored entry as file, directory, pattern or missing."""
    try:
        kind = validate_input(entry)
    except (InvalidPathError, InvalidPatternError):
        return "invalid"

    if kind is InputKind.GLOB_PATTERN:
        return "pattern"

    try:
        stats = stat_path(entry)
    except FileIOError:
        return "inaccessible"
    if stats.is_directory:
        return "directory"
    if stats.is_file:
        return "file"
    return "missing" if not stats.exists else "special"


class ManagePathsUseCase:
    """Adds, lists and removes stored paths, and updates output settings."""

    def __init__(self, store: ConfigStore, logger: Optional[logging.Logger] = None):
        """Initialize with the store that owns persistence."""
        self.store = store
        self.logger = logger or logging.getLogger(__name__)

    def list_entries(self) -> List[PathStatus]:
        """Return the stored entries, numbered from 1."""
        config = self.store.load()
        return [
            PathStatus(index=index, path=entry, status=describe_entry(entry))
            for index, entry in enumerate(config.file_paths, start=1)
        ]

    def add(self, inputs: Iterable[str]) -> AddResult:
        """Validate, normalize and append inputs, skipping duplicates."""
        config = self.store.load()
        result = AddResult()
        known = set(config.file_paths)

        for raw in inputs:
            value = raw.strip()
            try:
                kind = validate_input(value)
            except (InvalidPathError, InvalidPatternError) as e:
                result.invalid.append((raw, e.message))
                continue

            entry = normalize_path(value)
            if entry in known:
                result.duplicates.append(entry)
                continue

            if kind is InputKind.LITERAL and describe_entry(entry) in ("missing", "inaccessible"):
                self.logger.warning("Path does not exist yet: %s", entry)
                result.missing.append(entry)

            known.add(entry)
            config.file_paths.append(entry)
            result.added.append(entry)

        if result.added:
            self.store.save(config)
        return result

    def remove(self, identifiers: Iterable[str]) -> RemoveResult:
        """Remove entries by 1-based index, range, or literal path."""
        config = self.store.load()
        removal = parse_removal(identifiers, len(config.file_paths))

        remaining, removed = apply_removal(config.file_paths, removal)
        unmatched = [
            token
            for token in removal.paths
            if token not in removed and normalize_path(token) not in removed
        ]

        if removed:
            config.file_paths = remaining
            self.store.save(config)

        return RemoveResult(removed=removed, invalid_inputs=removal.invalid_inputs, unmatched_paths=unmatched)

    def clear(self) -> int:
        """Remove every stored entry, returning how many there were."""
        config = self.store.load()
        count = len(config.file_paths)
        if count:
            config.file_paths = []
            self.store.save(config)
        return count

    def set_format(self, output_format: OutputFormat) -> Config:
        return self._update(output_format=OutputFormat(output_format))

    def set_headers(self, include_headers: bool) -> Config:
        return self._update(include_headers=include_headers)

    def set_prompt(self, prompt: str) -> Config:
        return self._update(prompt=prompt)

    def validate(self) -> List[str]:
        """Check the stored configuration and return a list of issues found."""
        issues = []
        entries = self.list_entries()

        if not entries:
            issues.append("No file paths configured")

        for status in entries:
            if status.status in ("missing", "invalid", "inaccessible", "special"):
                issues.append(f"#{status.index} {status.path}: {status.status}")

        return issues

    def _update(self, **changes) -> Config:
        config = self.store.load()
        for name, value in changes.items():
            setattr(config, name, value)
        self.store.save(config)
        return config
