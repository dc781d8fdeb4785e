from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Union

from configr.path_resolver import get_path

TreePredicate = Callable[[Any], bool]


@dataclass(frozen=True, slots=True)
class LiteralPredicate:
    value: bool
    kind: str = "literal"


@dataclass(frozen=True, slots=True)
class PathPredicate:
    path: str
    kind: str = "path"


@dataclass(frozen=True, slots=True)
class FunctionPredicate:
    fn: TreePredicate
    kind: str = "predicate"


Predicate = Union[LiteralPredicate, PathPredicate, FunctionPredicate]
PredicateLike = Union[Predicate, bool, str, TreePredicate, None]


def as_predicate(raw: PredicateLike) -> Predicate | None:
    """Coerce a declaration value (bool, path string, callable) into a predicate."""
    if raw is None:
        return None
    if isinstance(raw, (LiteralPredicate, PathPredicate, FunctionPredicate)):
        return raw
    if isinstance(raw, bool):
        return LiteralPredicate(raw)
    if isinstance(raw, str):
        if not raw.strip():
            return None
        return PathPredicate(raw.strip())
    if callable(raw):
        return FunctionPredicate(raw)
    raise TypeError(f"Unsupported predicate: {raw!r}")


def evaluate(default_result: bool, predicate: PredicateLike, tree: Any) -> bool:
    """Evaluate an enable/visible predicate against the whole value tree.

    Absent predicates yield ``default_result``. A path is true only when the
    value there is exactly ``True``. Exceptions raised by host functions are
    not caught.
    """
    resolved = as_predicate(predicate)
    if resolved is None:
        return default_result
    if isinstance(resolved, LiteralPredicate):
        return bool(resolved.value)
    if isinstance(resolved, PathPredicate):
        return get_path(tree, resolved.path) is True
    return bool(resolved.fn(tree))
