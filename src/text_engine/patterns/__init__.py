"""Regex validation/matching and the saved/recent pattern library."""

from .library import DEFAULT_PATTERNS, LibraryStats, PatternLibrary
from .matcher import (
    Match,
    compile_pattern,
    count_and_replace,
    count_matches,
    find_all,
    find_all_with_positions,
    is_valid,
    replace_all,
)

__all__ = [
    "Match",
    "compile_pattern",
    "count_and_replace",
    "count_matches",
    "find_all",
    "find_all_with_positions",
    "is_valid",
    "replace_all",
    "DEFAULT_PATTERNS",
    "LibraryStats",
    "PatternLibrary",
]
