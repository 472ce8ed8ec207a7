"""
Path resolution infrastructure.
Expands literal paths, directories and glob patterns into concrete files.
"""

import glob
import logging
import os
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ..domain.entities import InputKind
from ..domain.errors import FileIOError, InvalidPathError, InvalidPatternError, QCopyError
from ..domain.validation import normalize_path, stat_path, validate_input


def expand_braces(pattern: str) -> List[str]:
    """Expand ``{a,b}`` alternations, which ``glob`` does not understand."""
    start = pattern.find("{")
    while start != -1:
        depth = 0
        commas = []
        for position in range(start, len(pattern)):
            char = pattern[position]
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    break
            elif char == "," and depth == 1:
                commas.append(position)
        else:
            # Unbalanced brace, treat literally
            return [pattern]

        end = position
        if commas:
            bounds = [start] + commas + [end]
            prefix, suffix = pattern[:start], pattern[end + 1:]
            expanded: List[str] = []
            for left, right in zip(bounds, bounds[1:]):
                for variant in expand_braces(prefix + pattern[left + 1:right] + suffix):
                    if variant not in expanded:
                        expanded.append(variant)
            return expanded
        start = pattern.find("{", end + 1)

    return [pattern]


def _is_hidden(name: str) -> bool:
    return name.startswith(".")


@dataclass
class Resolution:
    """Resolved files plus the inputs that produced nothing."""

    paths: List[str] = field(default_factory=list)
    unresolved: List[str] = field(default_factory=list)
    rejected: List[QCopyError] = field(default_factory=list)


class PathResolver:
    """Turns raw user inputs into a deduplicated, ordered list of regular files."""

    def __init__(self, logger: Optional[logging.Logger] = None, include_hidden: bool = False):
        """Initialize with an optional logger and hidden-file policy."""
        self.logger = logger or logging.getLogger(__name__)
        self.include_hidden = include_hidden

    def resolve(self, inputs: Iterable[str]) -> List[str]:
        """Resolve inputs to absolute regular-file paths."""
        return self.resolve_detailed(inputs).paths

    def resolve_detailed(self, inputs: Iterable[str]) -> Resolution:
        """Resolve inputs and report which ones could not be used."""
        resolution = Resolution()
        collected: List[str] = []
        inputs = list(inputs)

        for raw in inputs:
            try:
                files = self._resolve_one(raw)
            except (InvalidPathError, InvalidPatternError) as e:
                self.logger.warning("Skipping invalid input %r: %s", raw, e.message)
                resolution.rejected.append(e)
                continue
            except FileIOError as e:
                self.logger.warning("Could not access %s: %s", raw, e.message)
                resolution.unresolved.append(raw)
                continue

            if files is None:
                self.logger.warning("Could not resolve path: %s", raw)
                resolution.unresolved.append(raw)
                continue

            collected.extend(files)

        resolution.paths = self._deduplicate(collected)
        self.logger.debug("Resolved %d inputs to %d files", len(inputs), len(resolution.paths))
        return resolution

    def _resolve_one(self, raw: str) -> Optional[List[str]]:
        """Resolve a single input; ``None`` means nothing usable was found."""
        value = raw.strip()
        kind = validate_input(value)
        absolute = normalize_path(value)

        stats = stat_path(absolute)

        if stats.exists and stats.is_directory:
            return self._walk_directory(absolute)

        if kind is InputKind.GLOB_PATTERN:
            return self._expand_pattern(absolute)

        if stats.exists and stats.is_file:
            return [absolute]

        return None

    def _walk_directory(self, directory: str) -> List[str]:
        """Recursively list regular files under a directory."""
        files: List[str] = []

        def _on_error(error: OSError) -> None:
            self.logger.debug("Skipping unreadable directory entry: %s", error)

        for current, dirnames, filenames in os.walk(directory, onerror=_on_error):
            if not self.include_hidden:
                dirnames[:] = [name for name in dirnames if not _is_hidden(name)]
            dirnames.sort()

            for name in sorted(filenames):
                if not self.include_hidden and _is_hidden(name):
                    continue
                candidate = os.path.join(current, name)
                # Sockets, FIFOs and broken symlinks are dropped here
                if os.path.isfile(candidate):
                    files.append(candidate)

        return files

    def _expand_pattern(self, pattern: str) -> List[str]:
        """Expand a glob pattern into matching regular files."""
        matches: List[str] = []

        for variant in expand_braces(pattern):
            try:
                found = glob.glob(variant, recursive=True, include_hidden=self.include_hidden)
            except (OSError, ValueError) as e:
                self.logger.debug("Glob expansion failed for %s: %s", variant, e)
                continue

            for match in sorted(found):
                absolute = os.path.abspath(match)
                if os.path.isfile(absolute):
                    matches.append(absolute)

        return matches

    @staticmethod
    def _deduplicate(paths: Iterable[str]) -> List[str]:
        """Drop repeated paths, keeping the first occurrence."""
        return list(dict.fromkeys(paths))
