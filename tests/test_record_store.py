import pytest

from text_engine.errors import PatternError
from text_engine.records import RecordStore, count_words


def make_store(*contents: str) -> RecordStore:
    store = RecordStore()
    for index, content in enumerate(contents):
        store.add_record(f"doc{index}", content, "test")
    return store


def test_add_record_assigns_sequential_ids() -> None:
    store = RecordStore()

    assert store.add_record("a", "x", "s") == 0
    assert store.add_record("b", "y", "s") == 1


def test_ids_are_never_reused_after_removal() -> None:
    store = make_store("one", "two")

    assert store.remove_record(1) is True
    assert store.add_record("three", "3", "s") == 2


def test_add_record_applies_defaults() -> None:
    store = make_store("existing")

    record_id = store.add_record("", None, "")
    record = store.get_record(record_id)

    assert record is not None
    assert record.name == "Record_2"
    assert record.content == ""
    assert record.source == "Unknown"


def test_update_record_is_partial() -> None:
    store = RecordStore()
    record_id = store.add_record("name", "content", "s")

    assert store.update_record(record_id, None, "new content") is True
    record = store.get_record(record_id)
    assert record.name == "name"
    assert record.content == "new content"

    assert store.update_record(record_id, "renamed", None) is True
    record = store.get_record(record_id)
    assert record.name == "renamed"
    assert record.content == "new content"


def test_update_unknown_record_returns_false() -> None:
    store = RecordStore()

    assert store.update_record(42, "name", "content") is False
    assert store.remove_record(42) is False
    assert store.get_record(42) is None


def test_list_records_returns_a_snapshot() -> None:
    store = make_store("alpha")

    records = store.list_records()
    records[0].name = "mutated"
    records.clear()

    assert [record.name for record in store.list_records()] == ["doc0"]


def test_get_record_returns_a_copy() -> None:
    store = make_store("alpha")

    store.get_record(0).content = "changed"

    assert store.get_record(0).content == "alpha"


def test_analyze_word_frequency_is_case_insensitive_and_strips_punctuation() -> None:
    store = make_store("The cat sat. The cat ran.")

    assert store.analyze_word_frequency(0) == {"the": 2, "cat": 2, "sat": 1, "ran": 1}


def test_analyze_word_frequency_for_missing_or_empty_record() -> None:
    store = make_store("")

    assert store.analyze_word_frequency(0) == {}
    assert store.analyze_word_frequency(99) == {}


def test_analyze_word_frequency_caches_and_returns_copies() -> None:
    store = make_store("a b a")

    first = store.analyze_word_frequency(0)
    first["a"] = 100

    assert store.is_cached(0) is True
    assert store.analyze_word_frequency(0) == {"a": 2, "b": 1}


def test_rename_invalidates_cache_and_recomputes() -> None:
    store = make_store("apple apple pear")
    assert store.most_frequent_words(0, 1) == [("apple", 2)]

    store.update_record(0, "renamed", None)
    assert store.is_cached(0) is False
    store.update_record(0, None, "pear pear pear apple")

    assert store.most_frequent_words(0, 1) == [("pear", 3)]


def test_content_update_invalidates_cache() -> None:
    store = make_store("x y")
    store.analyze_word_frequency(0)

    store.update_record(0, None, "z")

    assert store.analyze_word_frequency(0) == {"z": 1}


def test_records_sharing_a_name_do_not_share_cached_counts() -> None:
    store = RecordStore()
    first = store.add_record("same", "red red", "s")
    second = store.add_record("same", "blue", "s")

    assert store.analyze_word_frequency(first) == {"red": 2}
    assert store.analyze_word_frequency(second) == {"blue": 1}


def test_remove_record_drops_cache_entry() -> None:
    store = make_store("w w")
    store.analyze_word_frequency(0)

    store.remove_record(0)

    assert store.stats().cached_count == 0


def test_most_frequent_words_breaks_ties_by_first_appearance() -> None:
    store = make_store("zeta alpha mid zeta alpha beta")

    assert store.most_frequent_words(0, 4) == [
        ("zeta", 2),
        ("alpha", 2),
        ("mid", 1),
        ("beta", 1),
    ]


@pytest.mark.parametrize("top_n", [0, -3])
def test_most_frequent_words_with_non_positive_limit(top_n: int) -> None:
    store = make_store("a b c")

    assert store.most_frequent_words(0, top_n) == []


def test_search_across_records_maps_ids_to_matches() -> None:
    store = make_store("call 555-1234", "no digits", "555-0000 and 555-9999")

    results = store.search(r"\d{3}-\d{4}")

    assert results == {0: ["555-1234"], 2: ["555-0000", "555-9999"]}


def test_search_across_records_without_matches_is_empty() -> None:
    store = make_store("abc", "def")

    assert store.search("xyz") == {}


def test_search_across_records_rejects_invalid_pattern() -> None:
    store = make_store("abc")

    with pytest.raises(PatternError):
        store.search("(")


def test_search_across_records_rejects_oversized_repeat() -> None:
    store = make_store("aaa")

    with pytest.raises(PatternError):
        store.search("a{4294967296}")


def test_count_words_keeps_first_seen_order() -> None:
    assert list(count_words("B a b, A!")) == ["b", "a"]
