import pytest

from text_engine.errors import PatternError, ValidationError
from text_engine.patterns import DEFAULT_PATTERNS, PatternLibrary, find_all


def make_library(**kwargs) -> PatternLibrary:
    kwargs.setdefault("seed_defaults", False)
    return PatternLibrary(**kwargs)


def test_default_patterns_are_seeded() -> None:
    library = PatternLibrary()

    assert set(library.list_pattern_names()) == set(DEFAULT_PATTERNS)
    assert find_all("mail me at a.b@example.org", library.get_pattern("Email")) == [
        "a.b@example.org"
    ]


def test_save_pattern_upserts_by_name() -> None:
    library = make_library()

    library.save_pattern("digits", r"\d+")
    library.save_pattern("digits", r"[0-9]+")

    assert library.get_pattern("digits") == r"[0-9]+"
    assert library.list_pattern_names() == ["digits"]


def test_save_pattern_rejects_invalid_regex() -> None:
    library = make_library()

    with pytest.raises(PatternError):
        library.save_pattern("broken", "(")

    assert library.get_pattern("broken") is None


@pytest.mark.parametrize("name, pattern", [("", "a"), ("name", ""), (None, "a")])
def test_save_pattern_requires_name_and_pattern(name, pattern) -> None:
    library = make_library()

    with pytest.raises(ValidationError):
        library.save_pattern(name, pattern)


def test_remove_pattern_reports_whether_found() -> None:
    library = make_library()
    library.save_pattern("x", "x")

    assert library.remove_pattern("x") is True
    assert library.remove_pattern("x") is False


def test_recent_patterns_are_most_recent_first_and_deduplicated() -> None:
    library = make_library()

    for pattern in ("a", "b", "c", "a"):
        library.remember(pattern)

    assert library.list_recent_patterns() == ["a", "c", "b"]


def test_recent_patterns_are_bounded() -> None:
    library = make_library(max_recent=3)

    for pattern in ("p1", "p2", "p3", "p4", "p5"):
        library.remember(pattern)

    assert library.list_recent_patterns() == ["p5", "p4", "p3"]


def test_remember_skips_empty_and_invalid_patterns() -> None:
    library = make_library()

    assert library.remember("") is False
    assert library.remember("(") is False
    assert library.list_recent_patterns() == []


def test_accessors_return_copies() -> None:
    library = make_library()
    library.remember("a")
    library.save_pattern("n", "a")

    library.list_recent_patterns().append("mutated")
    library.list_pattern_names().clear()

    assert library.list_recent_patterns() == ["a"]
    assert library.list_pattern_names() == ["n"]
    assert library.stats().saved_count == 1


def test_save_pattern_rejects_oversized_repeat() -> None:
    library = make_library()

    with pytest.raises(PatternError):
        library.save_pattern("huge", "a{4294967296}")

    assert library.get_pattern("huge") is None
    assert library.remember("a{4294967296}") is False
