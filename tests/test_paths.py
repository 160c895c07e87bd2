"""Tests for path resolution and path-key decoding.

Validates:
1. Dot paths and segment lists resolve nested values
2. Missing segments resolve to NOT_FOUND (never None, never created)
3. Bracketed keys decode to segment lists; anything else falls back
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from rules_engine import NOT_FOUND, find_path, parse_key


# ============== FIND PATH ==============

class TestFindPath:
    """Reading values from nested records."""

    @pytest.mark.parametrize("obj,path,expected", [
        ({"x": 2}, "x", 2),
        ({"x": {"b": {"c": "3"}}}, "x.b.c", "3"),
        ({"x": {"b": 1, "w": {"a": {"w": 3}}}}, "x.w.a.w", 3),
        ({"a": {"b": "Hello", "c": "World"}}, "a.b", "Hello"),
        ({"a": {"b": {"c": {"d": "Hello", "e": 42}}}}, "a.b.c.e", 42),
    ])
    def test_existing_leaf(self, obj, path, expected):
        assert find_path(obj, path) == expected

    def test_non_existent_path(self):
        assert find_path({"a": {"b": "Hello"}}, "d.e") is NOT_FOUND

    def test_partial_path_is_not_found(self):
        assert find_path({"a": {"b": {"c": {"d": "Hello"}}}}, "a.b.x") is NOT_FOUND

    def test_segment_list_addresses_dotted_key(self):
        obj = {"a": {"hello.world": "Hello"}}

        assert find_path(obj, ["a", "hello.world"]) == "Hello"
        assert find_path(obj, "a.hello.world") is NOT_FOUND

    def test_dotted_key_at_root_not_reachable_by_string(self):
        """A string path with dots is always split, even if the root owns it."""
        obj = {"b.c": 1, "b": {"c": 2}}

        assert find_path(obj, "b.c") == 2
        assert find_path(obj, ["b.c"]) == 1

    @pytest.mark.parametrize("path", [2, None, 1.5, {"a": 1}])
    def test_non_path_types(self, path):
        assert find_path({"a": {"b": "Hello"}}, path) is NOT_FOUND

    def test_stops_at_non_object(self):
        assert find_path({"a": "text"}, "a.length") is NOT_FOUND
        assert find_path({"a": 5}, "a.b") is NOT_FOUND

    def test_null_leaf_is_not_missing(self):
        """A stored None is a value; only absent keys are NOT_FOUND."""
        assert find_path({"a": {"b": None}}, "a.b") is None
        assert find_path({"a": None}, "a.b") is NOT_FOUND

    def test_list_index_segments(self):
        obj = {"items": [{"name": "first"}, {"name": "second"}]}

        assert find_path(obj, "items.1.name") == "second"
        assert find_path(obj, "items.2.name") is NOT_FOUND
        assert find_path(obj, "items.01.name") is NOT_FOUND

    def test_integer_segment_matches_string_key(self):
        assert find_path({"0": "x"}, [0]) == "x"
        assert find_path({"a": {"0": 1}}, parse_key("['a', 0]")) == 1
        assert find_path({"1": "x"}, [True]) is NOT_FOUND

    def test_does_not_create_keys(self):
        obj = {"a": {}}
        find_path(obj, "a.b.c")

        assert obj == {"a": {}}

    def test_not_found_is_falsy_singleton(self):
        assert not NOT_FOUND
        assert NOT_FOUND is not None
        assert repr(NOT_FOUND) == "NOT_FOUND"
        assert type(NOT_FOUND)() is NOT_FOUND


# ============== PARSE KEY ==============

class TestParseKey:
    """Decoding condition keys."""

    def test_plain_dot_path_unchanged(self):
        assert parse_key("person.age") == "person.age"

    def test_bracketed_single_quotes(self):
        assert parse_key("['company', 'person.name']") == ["company", "person.name"]

    def test_bracketed_double_quotes(self):
        assert parse_key('["a", "b.c"]') == ["a", "b.c"]

    def test_malformed_bracket_falls_back(self):
        assert parse_key("['unterminated") == "['unterminated"

    def test_apostrophe_key_falls_back(self):
        assert parse_key("o'neil") == "o'neil"

    def test_json_scalars_decode(self):
        """Keys that are valid JSON scalars decode to them."""
        assert parse_key("2") == 2
        assert parse_key("true") is True

    def test_non_standard_constants_not_decoded(self):
        assert parse_key("NaN") == "NaN"
        assert parse_key("Infinity") == "Infinity"

    def test_never_raises(self):
        assert parse_key(None) is None
        assert parse_key("[" * 100000) == "[" * 100000

    def test_malformed_key_resolves_literally(self):
        dataset = {"['unterminated": "literal"}
        assert find_path(dataset, parse_key("['unterminated")) == "literal"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
