from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator

from configr.errors import NestedSubPageError
from configr.nodes import (
    BooleanRow,
    Conditional,
    ControlRow,
    ForEach,
    Group,
    PaneNode,
    SubPage,
    Subgroup,
    iter_static_descendants,
)
from configr.predicates import evaluate
from configr.search_matcher import SearchMatcher, highlight_label
from configr.shadow_values import ShadowMap
from configr.subpage_navigator import SubPageNavigator


@dataclass(slots=True)
class RenderedNode:
    kind: str
    label: str = ""
    path: str = ""
    description: str = ""
    disabled: bool = False
    value: Any = None
    # Where reads and writes for this row go; differs from ``path`` for shadowed rows.
    effective_path: str = ""
    level: int | None = None
    children: list["RenderedNode"] = field(default_factory=list)
    label_segments: list[tuple[str, bool]] = field(default_factory=list)
    match_count: int = 0
    divider_after: bool = False
    focused: bool = False
    back_label: str = ""
    node: PaneNode | None = None

    def walk(self) -> Iterator["RenderedNode"]:
        yield self
        for child in self.children:
            yield from child.walk()


def iter_rendered(nodes: Iterable[RenderedNode]) -> Iterator[RenderedNode]:
    for node in nodes:
        yield from node.walk()


def find_rendered(nodes: Iterable[RenderedNode], path: str) -> RenderedNode | None:
    for node in iter_rendered(nodes):
        if node.path == path:
            return node
    return None


def rendered_labels(nodes: Iterable[RenderedNode]) -> list[str]:
    return [node.label for node in iter_rendered(nodes) if node.label]


def _mark_dividers(rows: list[RenderedNode]) -> None:
    for index, row in enumerate(rows):
        row.divider_after = index < len(rows) - 1


@dataclass(slots=True)
class RenderContext:
    tree: Any
    read: Callable[[str], Any]
    shadow: ShadowMap
    navigator: SubPageNavigator
    matcher: SearchMatcher | None = None
    current_group_index: int = 0
    show_all_groups: bool = False
    queue_normalization: Callable[[str], None] | None = None


class PaneRenderer:
    """Turns declared pane nodes into the tree of rows that is on screen right now.

    Visibility, enablement, subpage focus and search all gate nodes here. An
    active search replaces both the focus filter and the selected-group filter.
    """

    def __init__(self, context: RenderContext) -> None:
        self.context = context

    @property
    def searching(self) -> bool:
        return self.context.matcher is not None

    def render(self, groups: Iterable[Group]) -> list[RenderedNode]:
        ctx = self.context
        groups = list(groups)
        if self.searching or ctx.show_all_groups:
            selected = groups
        else:
            selected = [group for index, group in enumerate(groups) if index == ctx.current_group_index]
        rendered: list[RenderedNode] = []
        for group in selected:
            rendered.extend(
                self._render(group, inherited_disabled=False, match_filter=self.searching, subpage=None)
            )
        return rendered

    def _gated_out(self, node: PaneNode, match_filter: bool) -> bool:
        ctx = self.context
        if not evaluate(True, getattr(node, "visible_when", None), ctx.tree):
            return True
        if self.searching:
            # Items of a list whose search terms matched are all shown.
            return match_filter and not ctx.matcher.node_matches(node, ctx.tree)
        if isinstance(node, ForEach):
            return False
        path = getattr(node, "path", "")
        return bool(path) and not ctx.navigator.shows(path)

    def _render_children(
        self,
        nodes: Iterable[PaneNode],
        *,
        inherited_disabled: bool,
        match_filter: bool,
        subpage: SubPage | None,
        conditional_disabled: bool = False,
    ) -> list[RenderedNode]:
        rendered: list[RenderedNode] = []
        for child in nodes:
            disabled = inherited_disabled or (conditional_disabled and child.supports_disabled)
            rendered.extend(
                self._render(child, inherited_disabled=disabled, match_filter=match_filter, subpage=subpage)
            )
        return rendered

    def _render(
        self,
        node: PaneNode,
        *,
        inherited_disabled: bool,
        match_filter: bool,
        subpage: SubPage | None,
    ) -> list[RenderedNode]:
        if self._gated_out(node, match_filter):
            return []
        if isinstance(node, ControlRow):
            return [self._render_control(node, inherited_disabled)]
        if isinstance(node, SubPage):
            return [self._render_subpage(node, inherited_disabled, match_filter)]
        if isinstance(node, Conditional):
            disabled = not evaluate(True, node.enable_when, self.context.tree)
            return self._render_children(
                node.children,
                inherited_disabled=inherited_disabled,
                match_filter=match_filter,
                subpage=subpage,
                conditional_disabled=disabled,
            )
        if isinstance(node, ForEach):
            return self._render_for_each(node, inherited_disabled, match_filter, subpage)
        if isinstance(node, (Group, Subgroup)):
            return self._render_group(node, inherited_disabled, match_filter, subpage)
        raise TypeError(f"Cannot render {type(node).__name__}")

    def _render_group(
        self,
        node: Group | Subgroup,
        inherited_disabled: bool,
        match_filter: bool,
        subpage: SubPage | None,
    ) -> list[RenderedNode]:
        ctx = self.context
        disabled = inherited_disabled or not evaluate(True, node.enable_when, ctx.tree)
        children = self._render_children(
            node.children, inherited_disabled=disabled, match_filter=match_filter, subpage=subpage
        )
        if not children and (self.searching or ctx.navigator.is_focused):
            return []
        if node.level != 1:
            _mark_dividers(children)
        return [
            RenderedNode(
                kind=node.kind,
                label=node.label,
                path=node.path,
                description=node.description,
                disabled=disabled,
                level=node.level,
                children=children,
                label_segments=highlight_label(ctx.matcher, node.label),
                node=node,
            )
        ]

    def _render_subpage(self, node: SubPage, inherited_disabled: bool, match_filter: bool) -> RenderedNode:
        ctx = self.context
        rendered = RenderedNode(
            kind=node.kind,
            label=node.label,
            path=node.path,
            description=node.description,
            disabled=inherited_disabled,
            effective_path=node.path,
            label_segments=highlight_label(ctx.matcher, node.label),
            node=node,
        )
        if ctx.navigator.focused_path == node.path and not self.searching:
            children = self._render_children(
                node.children, inherited_disabled=inherited_disabled, match_filter=match_filter, subpage=node
            )
            _mark_dividers(children)
            rendered.focused = True
            rendered.back_label = node.label
            rendered.children = children
        elif self.searching:
            rendered.match_count = ctx.matcher.match_count(node, ctx.tree)
        return rendered

    def _render_for_each(
        self,
        node: ForEach,
        inherited_disabled: bool,
        match_filter: bool,
        subpage: SubPage | None,
    ) -> list[RenderedNode]:
        ctx = self.context
        items = node.expand(ctx.tree)
        if subpage is not None:
            for descendant in iter_static_descendants(items):
                if isinstance(descendant, SubPage):
                    raise NestedSubPageError(
                        f"SubPage '{descendant.path}' cannot be nested inside SubPage '{subpage.path}'."
                    )
        if match_filter and ctx.matcher.matches_text(node.search_terms):
            match_filter = False
        return self._render_children(
            items, inherited_disabled=inherited_disabled, match_filter=match_filter, subpage=subpage
        )

    def _render_control(self, row: ControlRow, inherited_disabled: bool) -> RenderedNode:
        ctx = self.context
        disabled = row.disabled or inherited_disabled or not evaluate(True, row.enable_when, ctx.tree)
        effective_path = row.path
        shadowed = False
        if isinstance(row, BooleanRow):
            override = row.resolve_disabled_value(ctx.tree)
            if override is not None:
                effective_path = ctx.shadow.ensure(row.path, override)
                disabled = True
                shadowed = True
        value = ctx.read(effective_path)
        if isinstance(row, BooleanRow) and not shadowed and value is None:
            # No indeterminate state: an unset boolean becomes False once this pass is over.
            if ctx.queue_normalization is not None:
                ctx.queue_normalization(row.path)
            value = False
        return RenderedNode(
            kind=row.kind,
            label=row.label,
            path=row.path,
            description=row.description,
            disabled=disabled,
            value=value,
            effective_path=effective_path,
            label_segments=highlight_label(ctx.matcher, row.label),
            node=row,
        )
