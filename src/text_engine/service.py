"""Facade composing buffer, pattern, record, and file services for hosts.

Presentation code talks only to :class:`TextProcessingService`. Pattern and
validation errors propagate unchanged; lookups of unknown ids return
``False``/``None``/empty values instead of raising.
"""

from __future__ import annotations

import os
from typing import Any, Callable, Dict, List, Mapping, Optional, TypeVar

from text_engine.buffer import Buffer, BufferView, TextStatistics, compute_statistics
from text_engine.config import EngineConfig
from text_engine.files import FileMetadata, FileProvider, StringTransform
from text_engine.patterns import Match, PatternLibrary
from text_engine.patterns import matcher
from text_engine.records import RecordStore, TextRecord, WordCount
from text_engine.runtime.events import EventBus, EventSink, LogHistory, forward_to_telemetry

T = TypeVar("T")


class _NullSink:
    def emit(
        self,
        event: str,
        payload: Optional[Mapping[str, Any]] = None,
        *,
        level: str = "info",
    ) -> None:
        del event, payload, level


class TextProcessingService:
    """Single entry point for the editor's text, regex, record, and file work."""

    def __init__(
        self,
        *,
        config: Optional[EngineConfig] = None,
        buffer: Optional[Buffer] = None,
        patterns: Optional[PatternLibrary] = None,
        records: Optional[RecordStore] = None,
        files: Optional[FileProvider] = None,
        events: Optional[EventSink] = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.buffer = buffer or Buffer(max_history=self.config.max_history)
        self.patterns = patterns or PatternLibrary(
            max_recent=self.config.max_recent_patterns,
            seed_defaults=self.config.seed_patterns,
        )
        self.records = records or RecordStore(default_source=self.config.default_source)
        self.files = files or FileProvider(
            encoding=self.config.encoding, max_recent=self.config.max_recent_files
        )
        self.events: EventSink = events if events is not None else _NullSink()

    # -- buffer -----------------------------------------------------------------

    @property
    def current_text(self) -> str:
        return self.buffer.text

    def set_current_text(self, text: Optional[str]) -> bool:
        changed = self.buffer.set_text(text)
        if changed:
            self.events.emit("buffer.set", {"length": len(self.buffer.text)})
        return changed

    def clear_text(self) -> bool:
        changed = self.buffer.clear()
        if changed:
            self.events.emit("buffer.clear")
        return changed

    def undo(self) -> bool:
        moved = self.buffer.undo()
        self.events.emit("buffer.undo", {"moved": moved}, level="debug")
        return moved

    def redo(self) -> bool:
        moved = self.buffer.redo()
        self.events.emit("buffer.redo", {"moved": moved}, level="debug")
        return moved

    def can_undo(self) -> bool:
        return self.buffer.history.can_undo()

    def can_redo(self) -> bool:
        return self.buffer.history.can_redo()

    def snapshot(self) -> BufferView:
        return self.buffer.snapshot()

    def text_statistics(self) -> TextStatistics:
        return compute_statistics(self.buffer.text)

    # -- regex ------------------------------------------------------------------

    def find_matches(self, pattern: str) -> List[str]:
        matches = matcher.find_all(self.buffer.text, pattern)
        self.patterns.remember(pattern)
        self.events.emit("pattern.find", {"pattern": pattern, "matches": len(matches)})
        return matches

    def find_matches_with_positions(self, pattern: str) -> List[Match]:
        matches = matcher.find_all_with_positions(self.buffer.text, pattern)
        self.patterns.remember(pattern)
        self.events.emit("pattern.find", {"pattern": pattern, "matches": len(matches)})
        return matches

    def replace_text(
        self, pattern: str, replacement: Optional[str], *, expand_groups: bool = False
    ) -> int:
        """Replace every match in the buffer as one undoable edit.

        Returns the number of matches; zero leaves the history untouched.
        """

        count, result = matcher.count_and_replace(
            self.buffer.text, pattern, replacement, expand_groups=expand_groups
        )
        if count > 0:
            self.buffer.set_text(result, label="replace")
        self.patterns.remember(pattern)
        self.events.emit("pattern.replace", {"pattern": pattern, "count": count})
        return count

    def replace_all_text(
        self,
        text: Optional[str],
        pattern: str,
        replacement: Optional[str],
        *,
        expand_groups: bool = False,
    ) -> str:
        result = matcher.replace_all(
            text, pattern, replacement, expand_groups=expand_groups
        )
        self.patterns.remember(pattern)
        return result

    def is_valid_pattern(self, pattern: Optional[str]) -> bool:
        return matcher.is_valid(pattern)

    def save_pattern(self, name: str, pattern: str) -> None:
        self.patterns.save_pattern(name, pattern)
        self.events.emit("pattern.save", {"name": name})

    def remove_pattern(self, name: str) -> bool:
        return self.patterns.remove_pattern(name)

    def get_pattern(self, name: str) -> Optional[str]:
        return self.patterns.get_pattern(name)

    def list_pattern_names(self) -> List[str]:
        return self.patterns.list_pattern_names()

    def list_recent_patterns(self) -> List[str]:
        return self.patterns.list_recent_patterns()

    # -- files ------------------------------------------------------------------

    def read_from_file(self, path: str | os.PathLike[str]) -> str:
        content = self.files.read_text(path)
        self.buffer.set_text(content, label="load_file")
        self.events.emit("file.read", {"path": str(path), "length": len(content)})
        return content

    def save_to_file(self, path: str | os.PathLike[str]) -> None:
        self.files.write_text(path, self.buffer.text)
        self.events.emit("file.write", {"path": str(path)})

    def process_file_lines(
        self, path: str | os.PathLike[str], line_processor: Callable[[str], T]
    ) -> List[T]:
        return self.files.process_lines(path, line_processor)

    def batch_process_files(
        self, paths: List[str], transform: StringTransform
    ) -> Dict[str, str]:
        def _report(path: str, exc: Exception) -> None:
            self.events.emit(
                "batch.file_error",
                {"path": path, "error": type(exc).__name__, "message": str(exc)},
                level="warning",
            )

        results = self.files.batch_process(paths, transform, on_error=_report)
        self.events.emit("batch.done", {"files": len(results)})
        return results

    def recent_files(self) -> List[FileMetadata]:
        return self.files.recent_files()

    # -- records ----------------------------------------------------------------

    def save_current_text_as_record(
        self, name: Optional[str] = None, source: Optional[str] = None
    ) -> int:
        return self.add_record(name, self.buffer.text, source)

    def add_record(
        self,
        name: Optional[str] = None,
        content: Optional[str] = None,
        source: Optional[str] = None,
    ) -> int:
        record_id = self.records.add_record(name, content, source)
        self.events.emit("record.add", {"record_id": record_id})
        return record_id

    def update_record(
        self, record_id: int, name: Optional[str] = None, content: Optional[str] = None
    ) -> bool:
        updated = self.records.update_record(record_id, name, content)
        if updated:
            self.events.emit("record.update", {"record_id": record_id})
        return updated

    def remove_record(self, record_id: int) -> bool:
        removed = self.records.remove_record(record_id)
        if removed:
            self.events.emit("record.remove", {"record_id": record_id})
        return removed

    def get_record(self, record_id: int) -> Optional[TextRecord]:
        return self.records.get_record(record_id)

    def list_records(self) -> List[TextRecord]:
        return self.records.list_records()

    def load_record_to_current(self, record_id: int) -> bool:
        record = self.records.get_record(record_id)
        if record is None:
            return False
        self.buffer.set_text(record.content, label="load_record")
        return True

    def analyze_word_frequency(self, record_id: int) -> Dict[str, int]:
        return self.records.analyze_word_frequency(record_id)

    def most_frequent_words(self, record_id: int, top_n: int) -> List[WordCount]:
        return self.records.most_frequent_words(record_id, top_n)

    def search_across_records(self, pattern: str) -> Dict[int, List[str]]:
        results = self.records.search(pattern)
        self.events.emit(
            "records.search", {"pattern": pattern, "records": len(results)}
        )
        return results


def create_default_service(
    config: Optional[EngineConfig] = None,
    *,
    telemetry: bool = True,
) -> tuple[TextProcessingService, LogHistory]:
    """Build a service whose events feed a ``LogHistory`` and, optionally, telelog."""

    config = config or EngineConfig.from_env()
    bus = EventBus()
    history = LogHistory(config.log_history_size).attach(bus)
    if telemetry:
        forward_to_telemetry(bus, logger_name="text_engine.service")
    return TextProcessingService(config=config, events=bus), history


__all__ = ["TextProcessingService", "create_default_service"]
