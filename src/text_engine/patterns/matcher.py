"""Stateless regular-expression helpers used by every regex-facing operation.

All functions compile through :func:`compile_pattern`, which turns every
compile failure into :class:`~text_engine.errors.PatternError`. Match
offsets are Python string indices (code points), half-open ``[start, end)``.

Replacement strings are inserted verbatim. Passing ``expand_groups=True``
opts in to :mod:`re` template syntax (``\\1``, ``\\g<name>``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from text_engine.errors import PatternError


@dataclass(frozen=True, slots=True)
class Match:
    text: str
    start: int
    end: int

    def __str__(self) -> str:
        return f"Match[{self.text!r}, start={self.start}, end={self.end}]"


# Oversized repeat counts raise OverflowError and very deep nesting raises
# RecursionError instead of re.error.
_COMPILE_ERRORS = (re.error, OverflowError, RecursionError)


def compile_pattern(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except _COMPILE_ERRORS as exc:
        raise PatternError.from_compile_failure(pattern, exc) from exc


def is_valid(pattern: object) -> bool:
    """Return whether ``pattern`` compiles. Never raises.

    Empty strings, ``None`` and non-string values are invalid.
    """

    if not pattern or not isinstance(pattern, str):
        return False
    try:
        re.compile(pattern)
    except _COMPILE_ERRORS:
        return False
    return True


def find_all(text: Optional[str], pattern: Optional[str]) -> List[str]:
    if not text or not pattern:
        return []
    compiled = compile_pattern(pattern)
    return [match.group(0) for match in compiled.finditer(text)]


def find_all_with_positions(text: Optional[str], pattern: Optional[str]) -> List[Match]:
    if not text or not pattern:
        return []
    compiled = compile_pattern(pattern)
    return [
        Match(text=match.group(0), start=match.start(), end=match.end())
        for match in compiled.finditer(text)
    ]


def count_matches(text: Optional[str], pattern: Optional[str]) -> int:
    if not text or not pattern:
        return 0
    compiled = compile_pattern(pattern)
    return sum(1 for _ in compiled.finditer(text))


def _substitute(
    compiled: re.Pattern[str], text: str, replacement: str, expand_groups: bool
) -> str:
    if expand_groups:
        return compiled.sub(replacement, text)
    return compiled.sub(lambda _match: replacement, text)


def replace_all(
    text: Optional[str],
    pattern: Optional[str],
    replacement: Optional[str],
    *,
    expand_groups: bool = False,
) -> str:
    text = text or ""
    if not text or not pattern:
        return text
    compiled = compile_pattern(pattern)
    return _substitute(compiled, text, replacement or "", expand_groups)


def count_and_replace(
    text: Optional[str],
    pattern: Optional[str],
    replacement: Optional[str],
    *,
    expand_groups: bool = False,
) -> Tuple[int, str]:
    """Count matches, then substitute only when there is at least one.

    Returns ``(count, result)``; ``result`` is ``text`` itself when
    ``count`` is zero.
    """

    text = text or ""
    if not text or not pattern:
        return 0, text
    compiled = compile_pattern(pattern)
    count = sum(1 for _ in compiled.finditer(text))
    if count == 0:
        return 0, text
    return count, _substitute(compiled, text, replacement or "", expand_groups)


__all__ = [
    "Match",
    "compile_pattern",
    "is_valid",
    "find_all",
    "find_all_with_positions",
    "count_matches",
    "replace_all",
    "count_and_replace",
]
