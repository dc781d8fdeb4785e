from __future__ import annotations

import pytest

from configr.predicates import (
    FunctionPredicate,
    LiteralPredicate,
    PathPredicate,
    as_predicate,
    evaluate,
)


def test_absent_predicate_returns_default():
    assert evaluate(True, None, {}) is True
    assert evaluate(False, None, {}) is False
    assert evaluate(True, "   ", {}) is True


def test_path_predicate_requires_exact_true():
    tree = {"x": {"on": True, "truthy": 1, "text": "yes"}}
    assert evaluate(False, "x.on", tree) is True
    assert evaluate(True, "x.truthy", tree) is False
    assert evaluate(True, "x.text", tree) is False
    assert evaluate(True, "x.missing", tree) is False


def test_function_predicate_sees_whole_tree():
    seen = []

    def predicate(tree):
        seen.append(tree)
        return tree["mode"] == "expert"

    tree = {"mode": "expert"}
    assert evaluate(False, predicate, tree) is True
    assert seen == [tree]


def test_literal_predicate():
    assert evaluate(True, False, {}) is False
    assert evaluate(False, LiteralPredicate(True), {}) is True


def test_as_predicate_builds_tagged_variants():
    assert as_predicate("a.b") == PathPredicate("a.b")
    assert as_predicate(True) == LiteralPredicate(True)
    fn = lambda tree: True  # noqa: E731
    assert as_predicate(fn) == FunctionPredicate(fn)
    assert as_predicate(fn).kind == "predicate"
    with pytest.raises(TypeError):
        as_predicate(42)


def test_predicate_exceptions_propagate():
    def broken(tree):
        raise ValueError("host bug")

    with pytest.raises(ValueError):
        evaluate(True, broken, {})
