from __future__ import annotations

from types import MappingProxyType

import pytest

from configr.errors import PathError
from configr.path_resolver import (
    format_path,
    get_path,
    has_path,
    is_parent,
    parse_path,
    paths_equal,
    set_path,
)


def test_parse_dotted_and_bracketed_segments():
    assert parse_path("a.b[2].c") == ("a", "b", 2, "c")
    assert parse_path("project.languages[0].iso") == ("project", "languages", 0, "iso")
    assert parse_path('a["x.y"].z') == ("a", "x.y", "z")
    assert parse_path("a['q']") == ("a", "q")


def test_parse_empty_and_presplit_paths():
    assert parse_path("") == ()
    assert parse_path(None) == ()
    assert parse_path(("a", 1)) == ("a", 1)
    assert parse_path(["a", "b"]) == ("a", "b")


def test_parse_rejects_unbalanced_brackets():
    with pytest.raises(PathError):
        parse_path("a[0")
    with pytest.raises(PathError):
        parse_path("a]b")


def test_bracketed_digits_are_indices_and_dotted_digits_are_keys():
    assert parse_path("a[0]") == ("a", 0)
    assert parse_path("a.0") == ("a", "0")
    assert not paths_equal("a[0]", "a.0")
    assert paths_equal("a.b[1]", ("a", "b", 1))


def test_get_nested_values():
    tree = {"a": {"b": [{"c": 1}, {"c": 2}]}, "flag": False}
    assert get_path(tree, "a.b[1].c") == 2
    assert get_path(tree, "a.b.0.c") == 1
    assert get_path(tree, "flag") is False
    assert get_path(tree, "") is tree


def test_get_returns_default_for_missing_or_null_intermediates():
    tree = {"a": {"b": None}, "items": [1]}
    assert get_path(tree, "a.b.c", "d") == "d"
    assert get_path(tree, "missing.deep.path", 5) == 5
    assert get_path(tree, "items[3]", "none") == "none"
    assert get_path(tree, "items.name", "none") == "none"
    assert get_path(None, "a", "x") == "x"


def test_get_returns_stored_none_leaf():
    assert get_path({"a": None}, "a", "default") is None
    assert has_path({"a": None}, "a")
    assert not has_path({"a": None}, "b")


@pytest.mark.parametrize(
    "path, value",
    [
        ("a", 1),
        ("a.b.c", "deep"),
        ("list[2]", True),
        ("a.items[1].name", "second"),
        ('a["dotted.key"]', 3.5),
    ],
)
def test_write_then_read_round_trip(path, value):
    tree: dict = {}
    set_path(tree, path, value)
    assert get_path(tree, path) == value


def test_set_creates_lists_for_index_segments():
    tree: dict = {}
    set_path(tree, "langs[1].iso", "fr")
    assert tree == {"langs": [None, {"iso": "fr"}]}


def test_set_replaces_scalar_intermediate():
    tree = {"a": 5}
    set_path(tree, "a.b", 1)
    assert tree == {"a": {"b": 1}}


def test_set_keeps_tuple_and_mapping_contents():
    tree = {"a": (1, 2), "m": MappingProxyType({"x": 1})}
    set_path(tree, "a[0]", 9)
    set_path(tree, "m.y", 2)
    assert tree == {"a": [9, 2], "m": {"x": 1, "y": 2}}


def test_set_rejects_empty_path():
    with pytest.raises(PathError):
        set_path({}, "", 1)


def test_parent_relation_is_string_prefix_with_dot():
    assert is_parent("a.b", "a.b.c")
    assert not is_parent("a.b", "a.bc")
    assert not is_parent("a.b", "a.b")
    assert not is_parent("", "a")


def test_format_path_inverts_parse():
    for text in ["a.b[2].c", 'a["x.y"].z', "root"]:
        assert format_path(parse_path(text)) == text
