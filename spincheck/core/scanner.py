# spincheck/core/scanner.py
# Log scanner: literal-substring search over captured output lines.
#
# Every function takes the start position explicitly and returns the index
# of the hit, so callers resume scanning from a known position instead of
# sharing an iterator. Scans never wrap.

from dataclasses import dataclass
from typing import Optional, Sequence

from .exceptions import DuplicateMarkerError, MarkerNotFoundError


@dataclass(frozen=True)
class ScanHit:
    """A line found by the scanner and its position in the log."""
    index: int
    line:  str


def find_first_containing_from(
    lines:       Sequence[str],
    start_index: int,
    substring:   str,
) -> Optional[ScanHit]:
    """
    Return the first line at or after start_index that contains substring,
    or None.
    """
    for index in range(max(start_index, 0), len(lines)):
        if substring in lines[index]:
            return ScanHit(index=index, line=lines[index])
    return None


def find_first_containing(lines: Sequence[str], substring: str) -> Optional[ScanHit]:
    return find_first_containing_from(lines, 0, substring)


def require_marker(
    lines:       Sequence[str],
    start_index: int,
    substring:   str,
    marker_name: str,
) -> ScanHit:
    """Like find_first_containing_from, but a miss raises MarkerNotFoundError."""
    hit = find_first_containing_from(lines, start_index, substring)
    if hit is None:
        raise MarkerNotFoundError(marker_name, substring, start_index)
    return hit


def count_containing(lines: Sequence[str], substring: str) -> int:
    return sum(1 for line in lines if substring in line)


def require_unique_marker(
    lines:       Sequence[str],
    substring:   str,
    marker_name: str,
) -> ScanHit:
    """
    Return the only line containing substring.

    Raises MarkerNotFoundError when there is none and DuplicateMarkerError
    when there are several.
    """
    hit = require_marker(lines, 0, substring, marker_name)
    occurrences = count_containing(lines, substring)
    if occurrences > 1:
        raise DuplicateMarkerError(marker_name, substring, occurrences)
    return hit


__all__ = [
    "ScanHit",
    "find_first_containing",
    "find_first_containing_from",
    "require_marker",
    "count_containing",
    "require_unique_marker",
]
