"""
Removal identifier parsing.
Turns user tokens such as ``3``, ``1-4`` or ``~/notes.md`` into a RemovalSpec.
"""

import re
from typing import Iterable, List, Sequence, Tuple

from .entities import RemovalSpec
from .validation import normalize_path

_NUMBER = re.compile(r"^\d+$")
_RANGE = re.compile(r"^(\d+)-(\d+)$")


def is_numeric_token(token: str) -> bool:
    """Whether a token is a bare integer or a ``start-end`` range."""
    return bool(_NUMBER.match(token) or _RANGE.match(token))


def separate(identifiers: Iterable[str]) -> Tuple[List[str], List[str]]:
    """Split identifiers into numeric tokens and path tokens, preserving order."""
    numeric_tokens: List[str] = []
    path_tokens: List[str] = []

    for identifier in identifiers:
        token = identifier.strip()
        if is_numeric_token(token):
            numeric_tokens.append(token)
        else:
            path_tokens.append(token)

    return numeric_tokens, path_tokens


def _expand_range(token: str) -> List[int]:
    """Return every index covered by a range token, or an empty list if invalid."""
    match = _RANGE.match(token)
    if not match:
        return []

    start, end = int(match.group(1)), int(match.group(2))
    if start <= 0 or end <= 0 or start > end:
        return []
    return list(range(start, end + 1))


def parse_ranges(numeric_tokens: Iterable[str]) -> RemovalSpec:
    """Parse numeric tokens into sorted, deduplicated 1-based indices."""
    indices = set()
    invalid_inputs: List[str] = []

    for raw in numeric_tokens:
        token = raw.strip()
        if _RANGE.match(token):
            expanded = _expand_range(token)
            if expanded:
                indices.update(expanded)
            else:
                invalid_inputs.append(token)
        elif _NUMBER.match(token) and int(token) > 0:
            indices.add(int(token))
        else:
            invalid_inputs.append(token)

    return RemovalSpec(indices=sorted(indices), invalid_inputs=invalid_inputs)


def parse_removal(identifiers: Iterable[str], current_count: int) -> RemovalSpec:
    """
    Parse mixed removal identifiers against a list of ``current_count`` entries.

    Indices beyond the end of the list are reported as invalid inputs.
    """
    numeric_tokens, path_tokens = separate(identifiers)
    removal = parse_ranges(numeric_tokens)

    in_range = [index for index in removal.indices if index <= current_count]
    out_of_range = [str(index) for index in removal.indices if index > current_count]

    return RemovalSpec(
        indices=in_range,
        paths=[token for token in path_tokens if token],
        invalid_inputs=removal.invalid_inputs + out_of_range,
    )


def apply_removal(entries: Sequence[str], removal: RemovalSpec) -> Tuple[List[str], List[str]]:
    """
    Remove the entries targeted by ``removal``.

    Returns ``(remaining, removed)``; both keep the original relative order.
    """
    remaining = list(entries)
    removed_positions = set()

    # Delete from the highest index down so earlier positions do not shift
    for index in sorted(set(removal.indices), reverse=True):
        position = index - 1
        if 0 <= position < len(remaining):
            del remaining[position]
            removed_positions.add(position)

    targets = {normalize_path(path) for path in removal.paths}
    targets.update(removal.paths)
    if targets:
        remaining = [entry for entry in remaining if entry not in targets]

    removed = [
        entry
        for position, entry in enumerate(entries)
        if position in removed_positions or entry in targets
    ]
    return remaining, removed
