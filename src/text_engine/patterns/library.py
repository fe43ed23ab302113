"""Named pattern storage and the most-recently-used pattern list."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from text_engine.errors import ValidationError
from text_engine.runtime.telemetry import span

from .matcher import compile_pattern, is_valid

DEFAULT_MAX_RECENT = 10

DEFAULT_PATTERNS: Mapping[str, str] = {
    "Email": r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b",
    "URL": r"https?://\S+",
    "Phone (RW)": r"^(?:\+250|0)?7[9832]\d{7}$",
    "Date (MM/DD/YYYY)": r"\b(0?[1-9]|1[0-2])/(0?[1-9]|[12]\d|3[01])/\d{4}\b",
}


@dataclass(slots=True)
class LibraryStats:
    """Lightweight snapshot describing library state."""

    saved_count: int
    recent_count: int


class PatternLibrary:
    """Owns saved ``name -> pattern`` entries and the recent-pattern ring.

    Saved names are unique (last write wins). Recent patterns are kept
    most-recent-first, deduplicated, and capped at ``max_recent``.
    """

    def __init__(
        self,
        *,
        max_recent: int = DEFAULT_MAX_RECENT,
        seed_defaults: bool = True,
        logger_name: str | None = "text_engine.patterns",
    ) -> None:
        if max_recent < 1:
            raise ValueError("max_recent must be at least 1")
        self.max_recent = max_recent
        self._saved: Dict[str, str] = dict(DEFAULT_PATTERNS) if seed_defaults else {}
        self._recent: List[str] = []
        self._logger_name = logger_name

    def save_pattern(self, name: str, pattern: str) -> None:
        if not name:
            raise ValidationError("Pattern name must not be empty", field="name")
        if not pattern:
            raise ValidationError("Pattern must not be empty", field="pattern")
        with span(
            "patterns::save",
            logger_name=self._logger_name,
            component="patterns",
            metadata={"name": name},
        ):
            compile_pattern(pattern)
            self._saved[name] = pattern

    def remove_pattern(self, name: str) -> bool:
        return self._saved.pop(name, None) is not None

    def get_pattern(self, name: str) -> Optional[str]:
        return self._saved.get(name)

    def list_pattern_names(self) -> List[str]:
        return list(self._saved)

    def list_recent_patterns(self) -> List[str]:
        return list(self._recent)

    def remember(self, pattern: Optional[str]) -> bool:
        """Move ``pattern`` to the front of the recent list.

        Empty or non-compiling patterns are not recorded.
        """

        if not pattern or not is_valid(pattern):
            return False
        if pattern in self._recent:
            self._recent.remove(pattern)
        self._recent.insert(0, pattern)
        del self._recent[self.max_recent :]
        return True

    def clear_recent(self) -> None:
        self._recent.clear()

    def stats(self) -> LibraryStats:
        return LibraryStats(saved_count=len(self._saved), recent_count=len(self._recent))


__all__ = ["DEFAULT_PATTERNS", "DEFAULT_MAX_RECENT", "LibraryStats", "PatternLibrary"]
