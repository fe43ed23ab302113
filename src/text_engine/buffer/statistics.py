"""Character, word, sentence, and paragraph counts for a piece of text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

_WHITESPACE = re.compile(r"\s")
_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_PARAGRAPH_SPLIT = re.compile(r"\n\s*\n")


@dataclass(frozen=True, slots=True)
class TextStatistics:
    characters: int = 0
    characters_no_spaces: int = 0
    words: int = 0
    sentences: int = 0
    paragraphs: int = 0

    def __str__(self) -> str:
        return (
            f"Characters: {self.characters}, Without spaces: "
            f"{self.characters_no_spaces}, Words: {self.words}, "
            f"Sentences: {self.sentences}, Paragraphs: {self.paragraphs}"
        )


def _count_parts(pattern: re.Pattern[str], text: str) -> int:
    # trailing separators do not open a new part
    parts = pattern.split(text)
    while parts and not parts[-1]:
        parts.pop()
    return len(parts)


def compute_statistics(text: Optional[str]) -> TextStatistics:
    text = text or ""
    if not text:
        return TextStatistics()
    return TextStatistics(
        characters=len(text),
        characters_no_spaces=len(_WHITESPACE.sub("", text)),
        words=len(text.split()),
        sentences=_count_parts(_SENTENCE_SPLIT, text),
        paragraphs=_count_parts(_PARAGRAPH_SPLIT, text),
    )


__all__ = ["TextStatistics", "compute_statistics"]
