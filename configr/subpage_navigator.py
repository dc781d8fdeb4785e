from __future__ import annotations

import logging
from typing import Callable

from configr.path_resolver import is_parent

logger = logging.getLogger(__name__)

FocusListener = Callable[[str | None], None]


class SubPageNavigator:
    """Tracks which subpage, if any, fills the pane.

    There is no stack: opening a subpage replaces the current focus and
    ``back`` always returns to the top level.
    """

    def __init__(self) -> None:
        self._focused_path: str = ""
        self._focused_label: str = ""
        self._listeners: list[FocusListener] = []

    @property
    def focused_path(self) -> str | None:
        return self._focused_path or None

    @property
    def focused_label(self) -> str:
        return self._focused_label

    @property
    def is_focused(self) -> bool:
        return bool(self._focused_path)

    def add_listener(self, listener: FocusListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: FocusListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.focused_path)

    def open_subpage(self, path: str, label: str = "") -> bool:
        target = str(path or "").strip()
        if not target:
            return self.back()
        if target == self._focused_path:
            return False
        logger.debug("Focus %s -> %s", self._focused_path or "<top>", target)
        self._focused_path = target
        self._focused_label = str(label or "")
        self._notify()
        return True

    def back(self) -> bool:
        if not self._focused_path:
            return False
        logger.debug("Focus %s -> <top>", self._focused_path)
        self._focused_path = ""
        self._focused_label = ""
        self._notify()
        return True

    def shows(self, path: str | None) -> bool:
        """Whether a node at ``path`` belongs on screen under the current focus."""
        focused = self._focused_path
        if not focused:
            return True
        candidate = str(path or "")
        if not candidate:
            return False
        return (
            candidate == focused
            or is_parent(candidate, focused)
            or is_parent(focused, candidate)
        )
