from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from configr.change_reporter import ChangeReporter, ReportCallback
from configr.errors import ConfigrError
from configr.nodes import ChildrenLike, ChooserButtonRow, Group, validate_groups
from configr.pane_options import PaneOptions
from configr.path_resolver import PathLike
from configr.render import PaneRenderer, RenderContext, RenderedNode
from configr.search_matcher import SearchMatcher
from configr.shadow_values import ShadowMap, strip_shadow_root
from configr.subpage_navigator import SubPageNavigator
from configr.value_store import FormValueStore

logger = logging.getLogger(__name__)

ValueGetter = Callable[[], dict[str, Any]]


class ConfigrSession:
    """One editing session over a settings document.

    Owns the working copy of the values, the shadow map for disabled booleans,
    subpage focus, the search state and the change reporter. A host renders
    with :meth:`render`, then calls :meth:`complete_render` once the pass is
    over so deferred writes can land.
    """

    def __init__(
        self,
        initial_values: Mapping[str, Any] | None,
        groups: ChildrenLike,
        *,
        on_report: ReportCallback | None = None,
        set_value_getter: Callable[[ValueGetter], None] | None = None,
        options: PaneOptions | Mapping[str, Any] | None = None,
    ) -> None:
        if isinstance(options, PaneOptions):
            self.options = options
        else:
            self.options = PaneOptions.from_mapping(options or {})
        self.groups: list[Group] = validate_groups(groups)
        # A document handed over with a legacy shadow root keeps it out of the session.
        self.store = FormValueStore(strip_shadow_root(dict(initial_values or {})))
        self.shadow = ShadowMap()
        self.navigator = SubPageNavigator()
        self.reporter = ChangeReporter(
            on_report, initial_values=initial_values if initial_values is not None else {}
        )
        self.current_group_index: int = 0
        self.set_current_group(self.options.current_group_index)
        self.search_text: str = ""
        self.matcher: SearchMatcher | None = None
        self._pending: dict[str, None] = {}
        self._rendering = False
        if set_value_getter is not None:
            set_value_getter(self.value_getter())

    # --- values ---------------------------------------------------------

    @property
    def values(self) -> dict[str, Any]:
        return self.store.values

    def value_getter(self) -> ValueGetter:
        return self.store.snapshot

    def read(self, path: PathLike, default: Any = None) -> Any:
        if self.shadow.owns(path):
            return self.shadow.get(path, default)
        return self.store.read(path, default)

    def write(self, path: PathLike, value: Any) -> bool:
        if self.shadow.owns(path):
            return self.shadow.set(path, value)
        return self.store.write(path, value)

    def toggle(self, row: RenderedNode) -> bool:
        """Flip a rendered boolean row, as clicking the row or its checkbox does."""
        if row.disabled:
            return False
        current = self.read(row.effective_path or row.path)
        return self.write(row.effective_path or row.path, not bool(current))

    def choose(self, row: RenderedNode) -> bool:
        node = row.node
        if row.disabled or not isinstance(node, ChooserButtonRow):
            return False
        new_value = node.choose_action(self.read(row.path))
        return self.write(row.path, new_value)

    # --- deferred normalization ----------------------------------------

    @property
    def pending_normalizations(self) -> list[str]:
        return list(self._pending)

    def _queue_normalization(self, path: str) -> None:
        if path not in self._pending:
            logger.debug("Queued False for unset boolean %s", path)
            self._pending[path] = None

    def complete_render(self) -> bool:
        """Apply writes deferred during the last render pass."""
        if self._rendering:
            raise ConfigrError("complete_render() called during a render pass.")
        pending, self._pending = list(self._pending), {}
        changed = False
        for path in pending:
            if self.store.read(path) is None:
                changed = self.store.write(path, False) or changed
        return changed

    # --- navigation and search -----------------------------------------

    def open_subpage(self, path: str, label: str = "") -> bool:
        return self.navigator.open_subpage(path, label)

    def back(self) -> bool:
        return self.navigator.back()

    def set_search(self, text: str | None) -> None:
        self.search_text = str(text or "")
        self.matcher = SearchMatcher.compile(self.search_text)
        logger.debug("Search %r", self.matcher.text if self.matcher else None)

    @property
    def searching(self) -> bool:
        return self.matcher is not None

    def set_current_group(self, index: int) -> None:
        if not self.groups:
            self.current_group_index = 0
            return
        self.current_group_index = max(0, min(int(index), len(self.groups) - 1))

    def group_labels(self) -> list[str]:
        return [group.label for group in self.groups]

    # --- rendering ------------------------------------------------------

    def render(self) -> list[RenderedNode]:
        self.reporter.report(self.store.values)
        context = RenderContext(
            tree=self.store.values,
            read=self.read,
            shadow=self.shadow,
            navigator=self.navigator,
            matcher=self.matcher,
            current_group_index=self.current_group_index,
            show_all_groups=self.options.show_all_groups,
            queue_normalization=self._queue_normalization,
        )
        self._rendering = True
        try:
            return PaneRenderer(context).render(self.groups)
        finally:
            self._rendering = False

    def report(self) -> bool:
        return self.reporter.report(self.store.values)

