from __future__ import annotations

import re
from functools import lru_cache
from typing import Any, Mapping, MutableMapping, Sequence, Union

from configr.errors import PathError

PathSegment = Union[str, int]
Path = tuple[PathSegment, ...]
PathLike = Union[str, int, Sequence[PathSegment], None]

# Plain key, or a bracketed index / quoted key / raw key.
_SEGMENT_RE = re.compile(
    r"""[^.\[\]]+|\[(?:(\d+)|(["'])((?:(?!\2)[^\\]|\\.)*?)\2|([^\]]*))\]"""
)
_NEEDS_BRACKETS_RE = re.compile(r"[.\[\]]")
_MISSING = object()


@lru_cache(maxsize=1024)
def _parse_text(text: str) -> Path:
    segments: list[PathSegment] = []
    pos = 0
    length = len(text)
    while pos < length:
        if text[pos] == ".":
            pos += 1
            continue
        match = _SEGMENT_RE.match(text, pos)
        if match is None:
            raise PathError(f"Cannot parse path '{text}' at offset {pos}.")
        index, _quote, quoted, raw = match.group(1, 2, 3, 4)
        if index is not None:
            segments.append(int(index))
        elif quoted is not None:
            segments.append(re.sub(r"\\(.)", r"\1", quoted))
        elif raw is not None:
            segments.append(raw)
        else:
            segments.append(match.group(0))
        pos = match.end()
    return tuple(segments)


def parse_path(path: PathLike) -> Path:
    """Split ``a.b[2].c`` into ``("a", "b", 2, "c")``.

    Bracketed digits become integer segments so they index sequences; every
    other segment stays a mapping key. Already-split paths pass through.
    """
    if path is None:
        return ()
    if isinstance(path, bool):
        raise PathError(f"Not a path: {path!r}")
    if isinstance(path, int):
        return (path,)
    if isinstance(path, str):
        if not path:
            return ()
        return _parse_text(path)
    return tuple(path)


def format_path(path: PathLike) -> str:
    segments = parse_path(path)
    parts: list[str] = []
    for segment in segments:
        if isinstance(segment, int):
            parts.append(f"[{segment}]")
            continue
        text = str(segment)
        if not text or _NEEDS_BRACKETS_RE.search(text):
            escaped = text.replace("\\", "\\\\").replace('"', '\\"')
            parts.append(f'["{escaped}"]')
        elif parts:
            parts.append("." + text)
        else:
            parts.append(text)
    return "".join(parts)


def _sequence_index(container: Sequence[Any], segment: PathSegment) -> int | None:
    if isinstance(segment, int):
        index = segment
    elif segment.isdigit():
        index = int(segment)
    else:
        return None
    if 0 <= index < len(container):
        return index
    return None


def _child(container: Any, segment: PathSegment, default: Any) -> Any:
    if isinstance(container, Mapping):
        if segment in container:
            return container[segment]
        if isinstance(segment, int) and str(segment) in container:
            return container[str(segment)]
        return default
    if isinstance(container, (list, tuple)):
        index = _sequence_index(container, segment)
        if index is None:
            return default
        return container[index]
    return default


def get_path(tree: Any, path: PathLike, default: Any = None) -> Any:
    """Read the value at ``path``, or ``default`` when any step is missing.

    Walking stops as soon as an intermediate node is absent or ``None``. A
    stored leaf of ``None`` is returned as is.
    """
    current: Any = tree
    for segment in parse_path(path):
        if current is None:
            return default
        current = _child(current, segment, _MISSING)
        if current is _MISSING:
            return default
    return current


def has_path(tree: Any, path: PathLike) -> bool:
    return get_path(tree, path, _MISSING) is not _MISSING


def _assign(container: Any, segment: PathSegment, value: Any) -> None:
    if isinstance(container, list):
        if isinstance(segment, int):
            index = segment
        elif segment.isdigit():
            index = int(segment)
        else:
            raise PathError(f"Cannot use key '{segment}' on a list.")
        if index >= len(container):
            container.extend([None] * (index + 1 - len(container)))
        container[index] = value
        return
    if isinstance(container, MutableMapping):
        key: PathSegment = segment
        if isinstance(segment, int) and segment not in container and str(segment) in container:
            key = str(segment)
        container[key] = value
        return
    raise PathError(f"Cannot write '{segment}' into a {type(container).__name__}.")


def set_path(tree: MutableMapping[str, Any], path: PathLike, value: Any) -> None:
    """Write ``value`` at ``path``, creating intermediate containers."""
    segments = parse_path(path)
    if not segments:
        raise PathError("Path cannot be empty.")
    current: Any = tree
    for segment, next_segment in zip(segments, segments[1:]):
        child = _child(current, segment, _MISSING)
        if isinstance(child, (dict, list)):
            current = child
            continue
        # Tuples and other mappings are replaced by writable copies of themselves.
        if isinstance(child, tuple):
            child = list(child)
        elif isinstance(child, Mapping):
            child = dict(child)
        else:
            child = [] if isinstance(next_segment, int) else {}
        _assign(current, segment, child)
        current = child
    _assign(current, segments[-1], value)


def paths_equal(left: PathLike, right: PathLike) -> bool:
    return parse_path(left) == parse_path(right)


def is_parent(parent_path: str, child_path: str) -> bool:
    # yes: start.font -> start.font.feature
    # no:  start.font -> start.fontfeature
    if not parent_path:
        return False
    return str(child_path).startswith(str(parent_path) + ".")
