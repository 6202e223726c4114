from types import SimpleNamespace

from hypothesis import given
from hypothesis import strategies as st

from outreach.services.roster import filter_clients, matches


def _client(first="Jane", last="Doe", aka=None, description=None):
    return SimpleNamespace(first_name=first, last_name=last, aka=aka, description=description)


def test_matches_full_name_across_the_space():
    c = _client()
    assert matches(c, "jane doe")
    assert matches(c, "E D")
    assert matches(c, "ne do")


def test_matches_alias_and_description_case_insensitive():
    c = _client(aka="Sunny", description="Red backpack, usually near the pier")
    assert matches(c, "SUNNY")
    assert matches(c, "backpack")
    assert matches(c, "PIER")


def test_query_matching_nothing_excludes():
    c = _client(aka="Sunny", description="Red backpack")
    assert not matches(c, "blue")
    assert filter_clients([c], "blue") == []


def test_absent_fields_are_empty_not_errors():
    legacy_row = {"first_name": "Sam", "last_name": "Lee"}
    assert matches(legacy_row, "sam")
    assert not matches(legacy_row, "none")


def test_blank_query_keeps_everything_in_order():
    rows = [_client("A", "One"), _client("B", "Two"), _client("C", "Three")]
    assert filter_clients(rows, "") == rows
    assert filter_clients(rows, "   ") == rows


def test_filter_keeps_input_order():
    rows = [_client("Ann", "Smith"), _client("Bob", "Jones"), _client("Annie", "Hall")]
    assert [c.first_name for c in filter_clients(rows, "ann")] == ["Ann", "Annie"]


def test_wildcard_characters_are_literal():
    c = _client(aka="100%")
    assert matches(c, "100%")
    assert not matches(_client(aka="1000"), "10%")


_text = st.text(alphabet=st.characters(min_codepoint=32, max_codepoint=126), min_size=1, max_size=30)


@given(_text, st.integers(min_value=0, max_value=29), st.integers(min_value=1, max_value=30))
def test_any_alias_substring_matches(aka: str, start: int, length: int):
    sub = aka[start:start + length]
    if not sub:
        return
    assert filter_clients([_client(first="x", last="y", aka=aka)], sub)
