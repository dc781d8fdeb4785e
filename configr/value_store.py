from __future__ import annotations

import logging
from copy import deepcopy
from typing import Any, Mapping

from configr.path_resolver import PathLike, get_path, has_path, set_path

logger = logging.getLogger(__name__)


class FormValueStore:
    """Working copy of the settings document for one editing session.

    The host's initial values are deep-copied once; every later change goes
    through ``write``. Nothing here is persisted.
    """

    def __init__(self, initial_values: Mapping[str, Any] | None = None) -> None:
        self.initial_values: dict[str, Any] = deepcopy(dict(initial_values or {}))
        self.values: dict[str, Any] = deepcopy(self.initial_values)
        self.dirty: bool = False

    def read(self, path: PathLike, default: Any = None) -> Any:
        return get_path(self.values, path, default)

    def write(self, path: PathLike, value: Any) -> bool:
        marker = object()
        current = get_path(self.values, path, marker)
        if current is not marker and current == value and type(current) is type(value):
            return False
        set_path(self.values, path, value)
        self.dirty = True
        logger.debug("Wrote %r at %r", value, path)
        return True

    def has(self, path: PathLike) -> bool:
        return has_path(self.values, path)

    def reset(self) -> None:
        self.values = deepcopy(self.initial_values)
        self.dirty = False

    def snapshot(self) -> dict[str, Any]:
        return deepcopy(self.values)
