from __future__ import annotations

import json
import logging
from copy import deepcopy
from typing import Any, Callable

from configr.shadow_values import strip_shadow_root

logger = logging.getLogger(__name__)

ReportCallback = Callable[[Any], None]


def serialize_tree(tree: Any) -> str:
    return json.dumps(tree, sort_keys=True, default=str)


class ChangeReporter:
    """Forward value-tree snapshots to the host only when their content changes.

    The host gets one object per distinct content and never the same content
    twice, so a host that re-renders in response to a report does not loop.
    """

    def __init__(self, callback: ReportCallback | None = None, initial_values: Any = None) -> None:
        self._callback = callback
        self.last_reported: Any = initial_values
        self._last_serialized: str | None = (
            serialize_tree(strip_shadow_root(initial_values)) if initial_values is not None else None
        )
        self.report_count: int = 0

    @property
    def last_serialized(self) -> str | None:
        return self._last_serialized

    def report(self, tree: Any) -> bool:
        if self._callback is None:
            return False
        candidate = strip_shadow_root(tree)
        serialized = serialize_tree(candidate)
        if serialized == self._last_serialized:
            return False
        self._last_serialized = serialized
        # The session edits its tree in place, so the host gets its own copy.
        self.last_reported = deepcopy(candidate)
        self.report_count += 1
        logger.debug("Reporting settings change #%d", self.report_count)
        self._callback(self.last_reported)
        return True
