from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple

import pytest

from text_engine import EngineConfig, PatternError, TextProcessingService, ValidationError
from text_engine.runtime.events import EventBus, LogHistory


def make_service(text: str = "", **config: Any) -> TextProcessingService:
    config.setdefault("seed_patterns", False)
    service = TextProcessingService(config=EngineConfig(**config))
    if text:
        service.set_current_text(text)
    return service


def make_recorded_service() -> Tuple[TextProcessingService, List[Tuple[str, Dict[str, Any]]]]:
    bus = EventBus()
    events: List[Tuple[str, Dict[str, Any]]] = []
    bus.subscribe("*", lambda name, payload: events.append((name, dict(payload))))
    service = TextProcessingService(config=EngineConfig(seed_patterns=False), events=bus)
    return service, events


def test_find_matches_searches_current_buffer() -> None:
    service = make_service("aaa")

    assert service.find_matches("a") == ["a", "a", "a"]
    positions = service.find_matches_with_positions("a")
    assert [(m.start, m.end) for m in positions] == [(0, 1), (1, 2), (2, 3)]


def test_find_matches_records_recent_patterns() -> None:
    service = make_service("abc")

    service.find_matches("a")
    service.find_matches_with_positions("b")
    service.replace_text("c", "C")

    assert service.list_recent_patterns() == ["c", "b", "a"]


def test_invalid_pattern_propagates_and_is_not_recorded() -> None:
    service = make_service("abc")

    with pytest.raises(PatternError):
        service.find_matches("(")
    with pytest.raises(PatternError):
        service.replace_text("[", "x")

    assert service.list_recent_patterns() == []
    assert service.current_text == "abc"


def test_is_valid_pattern_has_no_side_effects() -> None:
    service = make_service("abc")

    assert service.is_valid_pattern("a+") is True
    assert service.is_valid_pattern("a+") is True
    assert service.is_valid_pattern("(") is False
    assert service.list_recent_patterns() == []


def test_replace_text_creates_a_single_history_entry() -> None:
    service = make_service("one two one")

    assert service.replace_text("one", "1") == 2
    assert service.current_text == "1 two 1"

    assert service.undo() is True
    assert service.current_text == "one two one"
    assert service.redo() is True
    assert service.current_text == "1 two 1"


def test_zero_match_replace_leaves_history_untouched() -> None:
    service = make_service("first")
    service.set_current_text("second")
    depth = service.snapshot().depth

    assert service.replace_text("zzz", "y") == 0

    assert service.snapshot().depth == depth
    assert service.current_text == "second"
    service.undo()
    assert service.current_text == "first"


def test_replace_all_text_does_not_touch_buffer() -> None:
    service = make_service("buffer")

    assert service.replace_all_text("x-y", "-", "+") == "x+y"
    assert service.current_text == "buffer"
    assert service.snapshot().depth == 2


def test_clear_text_is_undoable() -> None:
    service = make_service("keep me")

    service.clear_text()
    assert service.current_text == ""
    service.undo()
    assert service.current_text == "keep me"


def test_history_limit_comes_from_config() -> None:
    service = make_service(max_history=5)
    for i in range(10):
        service.set_current_text(f"v{i}")

    assert service.snapshot().depth == 5


def test_saved_pattern_round_trip_through_service() -> None:
    service = make_service()

    service.save_pattern("digits", r"\d+")

    assert service.get_pattern("digits") == r"\d+"
    assert service.list_pattern_names() == ["digits"]
    assert service.remove_pattern("digits") is True
    with pytest.raises(ValidationError):
        service.save_pattern("", "a")


def test_record_operations_and_frequency_cache() -> None:
    service = make_service("The cat sat. The cat ran.")

    record_id = service.save_current_text_as_record("story", "editor")
    assert service.analyze_word_frequency(record_id) == {
        "the": 2,
        "cat": 2,
        "sat": 1,
        "ran": 1,
    }

    service.update_record(record_id, "renamed", "dog dog cat")
    assert service.most_frequent_words(record_id, 1) == [("dog", 2)]
    assert service.get_record(record_id).source == "editor"
    assert [r.id for r in service.list_records()] == [record_id]


def test_load_record_to_current_creates_history_entry() -> None:
    service = make_service("buffer text")
    record_id = service.add_record("r", "record text", None)

    assert service.load_record_to_current(record_id) is True
    assert service.current_text == "record text"
    assert service.load_record_to_current(999) is False
    service.undo()
    assert service.current_text == "buffer text"


def test_search_across_records_through_service() -> None:
    service = make_service()
    service.add_record("a", "x1 y2", "s")
    service.add_record("b", "none", "s")

    assert service.search_across_records(r"\d") == {0: ["1", "2"]}
    assert service.search_across_records("q") == {}
    with pytest.raises(PatternError):
        service.search_across_records("(")


def test_read_and_save_file_round_trip(tmp_path: Path) -> None:
    service = make_service()
    source = tmp_path / "in.txt"
    source.write_text("from disk", encoding="utf-8")

    assert service.read_from_file(source) == "from disk"
    assert service.current_text == "from disk"

    service.replace_text("disk", "memory")
    target = tmp_path / "out.txt"
    service.save_to_file(target)

    assert target.read_text(encoding="utf-8") == "from memory"
    assert [entry.operation for entry in service.recent_files()] == ["write", "read"]


def test_batch_process_reports_failures_as_events(tmp_path: Path) -> None:
    service, events = make_recorded_service()
    good = tmp_path / "good.txt"
    good.write_text("abc", encoding="utf-8")
    missing = str(tmp_path / "missing.txt")

    results = service.batch_process_files([str(good), missing], str.upper)

    assert results[str(good)] == "ABC"
    assert results[missing].startswith("Error:")
    failures = [payload for name, payload in events if name == "batch.file_error"]
    assert len(failures) == 1
    assert failures[0]["path"] == missing
    assert failures[0]["level"] == "warning"


def test_service_emits_structured_events() -> None:
    service, events = make_recorded_service()

    service.set_current_text("abc")
    service.find_matches("b")
    service.replace_text("b", "B")
    service.add_record("r", "c", "s")

    names = [name for name, _ in events]
    assert names == ["buffer.set", "pattern.find", "pattern.replace", "record.add"]
    assert events[2][1]["count"] == 1


def test_text_statistics_for_buffer() -> None:
    service = make_service("One two. Three!\n\nFour")

    stats = service.text_statistics()

    assert stats.words == 4
    assert stats.sentences == 3
    assert stats.paragraphs == 2


def test_log_history_collects_service_events() -> None:
    bus = EventBus()
    history = LogHistory(limit=2).attach(bus)
    service = TextProcessingService(config=EngineConfig(seed_patterns=False), events=bus)

    service.set_current_text("a")
    service.set_current_text("b")
    service.clear_text()

    entries = history.entries()
    assert [entry.event for entry in entries] == ["buffer.set", "buffer.clear"]
    assert all("level" not in entry.data for entry in entries)


def test_events_payloads_are_mappings() -> None:
    service, events = make_recorded_service()

    service.undo()

    name, payload = events[0]
    assert name == "buffer.undo"
    assert isinstance(payload, Mapping)
    assert payload == {"level": "debug", "moved": False}
