"""Shadow values for boolean controls shown with a fixed, disabled state.

A control declared with ``disabled_value`` renders and toggles a boolean that
lives in a :class:`ShadowMap`, never in the settings document itself. The
control is pointed at ``disabledValue$.<mangled path>`` so every read and write
it performs lands in the shadow map.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from configr.errors import ShadowKeyCollisionError
from configr.path_resolver import PathLike, parse_path

logger = logging.getLogger(__name__)

DISABLED_VALUE_ROOT = "disabledValue$"


def mangle_path(path: str) -> str:
    # Dots and brackets would otherwise be read as nested keys.
    return str(path).replace(".", "_").replace("[", "_").replace("]", "_")


def shadow_path_for(path: str) -> str:
    return f"{DISABLED_VALUE_ROOT}.{mangle_path(path)}"


def is_shadow_path(path: PathLike) -> bool:
    segments = parse_path(path)
    return bool(segments) and segments[0] == DISABLED_VALUE_ROOT


def strip_shadow_root(tree: Any) -> Any:
    """Return ``tree`` without a ``disabledValue$`` key, leaving ``tree`` untouched."""
    if isinstance(tree, Mapping) and DISABLED_VALUE_ROOT in tree:
        stripped = dict(tree)
        del stripped[DISABLED_VALUE_ROOT]
        return stripped
    return tree


class ShadowMap:
    """Flat mangled-path -> bool store kept beside the value tree."""

    def __init__(self) -> None:
        self._values: dict[str, bool] = {}
        self._owners: dict[str, str] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def ensure(self, original_path: str, override: bool) -> str:
        """Record ``override`` for ``original_path`` and return the redirected path."""
        original = str(original_path)
        key = mangle_path(original)
        owner = self._owners.get(key)
        if owner is None:
            self._owners[key] = original
            logger.debug("Created shadow key %s for %s", key, original)
        elif owner != original:
            raise ShadowKeyCollisionError(key, owner, original)
        self._values[key] = bool(override)
        return f"{DISABLED_VALUE_ROOT}.{key}"

    def _key(self, path: PathLike) -> str | None:
        segments = parse_path(path)
        if len(segments) != 2 or segments[0] != DISABLED_VALUE_ROOT:
            return None
        return str(segments[1])

    def owns(self, path: PathLike) -> bool:
        return self._key(path) is not None

    def get(self, path: PathLike, default: Any = None) -> Any:
        key = self._key(path)
        if key is None:
            return default
        return self._values.get(key, default)

    def set(self, path: PathLike, value: Any) -> bool:
        key = self._key(path)
        if key is None:
            raise KeyError(f"Not a shadow path: {path!r}")
        new_value = bool(value)
        if self._values.get(key) is new_value:
            return False
        self._values[key] = new_value
        return True

    def original_path(self, path: PathLike) -> str | None:
        key = self._key(path)
        if key is None:
            return None
        return self._owners.get(key)

    def as_dict(self) -> dict[str, bool]:
        return dict(self._values)
