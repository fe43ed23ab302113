"""In-memory record storage with cached word-frequency analysis."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Dict, Iterator, List, Optional, Tuple

from text_engine.runtime.telemetry import span
from text_engine.patterns.matcher import compile_pattern

from .models import TextRecord

DEFAULT_SOURCE = "Unknown"

_NON_WORD = re.compile(r"\W+")

WordCount = Tuple[str, int]


def count_words(content: str) -> Dict[str, int]:
    """Lowercased word counts, in order of each word's first appearance."""

    counts: Dict[str, int] = {}
    for token in _NON_WORD.split(content):
        if not token:
            continue
        word = token.lower()
        counts[word] = counts.get(word, 0) + 1
    return counts


@dataclass(slots=True)
class _CachedFrequency:
    record_id: int
    counts: Dict[str, int]


@dataclass(slots=True)
class StoreStats:
    """Lightweight snapshot describing store state."""

    record_count: int
    cached_count: int
    next_id: int


class RecordStore:
    """Owns the record collection and the per-name frequency cache.

    Records get sequential ids starting at 0 that are never reused. Every
    accessor hands out copies, so callers cannot reach internal state.
    A cache entry is keyed by record name and is dropped whenever the record
    holding that name is renamed, edited, or removed.
    """

    def __init__(
        self,
        *,
        default_source: str = DEFAULT_SOURCE,
        logger_name: str | None = "text_engine.records",
    ) -> None:
        self.default_source = default_source
        self._records: List[TextRecord] = []
        self._frequency_cache: Dict[str, _CachedFrequency] = {}
        self._next_id = 0
        self._logger_name = logger_name

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[TextRecord]:
        return iter(self.list_records())

    def _find(self, record_id: int) -> Optional[TextRecord]:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def _invalidate(self, name: str) -> None:
        self._frequency_cache.pop(name, None)

    def add_record(
        self,
        name: Optional[str] = None,
        content: Optional[str] = None,
        source: Optional[str] = None,
    ) -> int:
        with span(
            "records::add",
            logger_name=self._logger_name,
            component="records",
        ) as handle:
            if not name:
                name = f"Record_{len(self._records) + 1}"
            record = TextRecord(
                id=self._next_id,
                name=name,
                content=content if content is not None else "",
                source=source or self.default_source,
            )
            self._next_id = record.id + 1
            self._records.append(record)
            self._invalidate(name)
            handle.add_metadata("record_id", record.id)
            return record.id

    def update_record(
        self,
        record_id: int,
        name: Optional[str] = None,
        content: Optional[str] = None,
    ) -> bool:
        """Apply a partial update; ``False`` when ``record_id`` is unknown.

        The cache entry under the record's previous name is dropped even when
        neither field changes.
        """

        with span(
            "records::update",
            logger_name=self._logger_name,
            component="records",
            metadata={"record_id": record_id},
        ):
            record = self._find(record_id)
            if record is None:
                return False
            self._invalidate(record.name)
            if name:
                record.name = name
            if content is not None:
                record.content = content
            return True

    def remove_record(self, record_id: int) -> bool:
        with span(
            "records::remove",
            logger_name=self._logger_name,
            component="records",
            metadata={"record_id": record_id},
        ):
            record = self._find(record_id)
            if record is None:
                return False
            self._invalidate(record.name)
            self._records.remove(record)
            return True

    def get_record(self, record_id: int) -> Optional[TextRecord]:
        record = self._find(record_id)
        return replace(record) if record is not None else None

    def list_records(self) -> List[TextRecord]:
        return [replace(record) for record in self._records]

    def analyze_word_frequency(self, record_id: int) -> Dict[str, int]:
        record = self._find(record_id)
        if record is None or not record.content:
            return {}

        cached = self._frequency_cache.get(record.name)
        if cached is not None and cached.record_id == record.id:
            return dict(cached.counts)

        with span(
            "records::analyze",
            logger_name=self._logger_name,
            component="records",
            metadata={"record_id": record.id},
        ):
            counts = count_words(record.content)
            self._frequency_cache[record.name] = _CachedFrequency(
                record_id=record.id, counts=dict(counts)
            )
        return counts

    def most_frequent_words(self, record_id: int, top_n: int) -> List[WordCount]:
        """Top ``top_n`` words by descending count.

        Equal counts keep the order in which the words first appear in the
        record content.
        """

        if top_n <= 0:
            return []
        frequencies = self.analyze_word_frequency(record_id)
        ranked = sorted(frequencies.items(), key=lambda item: item[1], reverse=True)
        return ranked[:top_n]

    def is_cached(self, record_id: int) -> bool:
        record = self._find(record_id)
        if record is None:
            return False
        cached = self._frequency_cache.get(record.name)
        return cached is not None and cached.record_id == record.id

    def search(self, pattern: Optional[str]) -> Dict[int, List[str]]:
        """Map record id to its matches, skipping records without any."""

        if not pattern:
            return {}
        with span(
            "records::search",
            logger_name=self._logger_name,
            component="records",
            metadata={"pattern": pattern},
        ):
            compiled = compile_pattern(pattern)
            results: Dict[int, List[str]] = {}
            for record in self._records:
                matches = [match.group(0) for match in compiled.finditer(record.content)]
                if matches:
                    results[record.id] = matches
            return results

    def stats(self) -> StoreStats:
        return StoreStats(
            record_count=len(self._records),
            cached_count=len(self._frequency_cache),
            next_id=self._next_id,
        )


__all__ = ["DEFAULT_SOURCE", "RecordStore", "StoreStats", "WordCount", "count_words"]
