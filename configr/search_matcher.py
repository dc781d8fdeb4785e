from __future__ import annotations

import re
from typing import Any, Iterable

from configr.nodes import ControlRow, ForEach, PaneNode, SubPage, child_nodes


class SearchMatcher:
    """Case-insensitive substring matcher over the declared pane tree.

    Rows match on their label or description. Containers match when any row
    beneath them matches; a container's own label does not count. Subpage
    rows also match on their label, and ``ForEach`` on its search terms.
    """

    __slots__ = ("text", "pattern")

    def __init__(self, text: str) -> None:
        self.text = text
        self.pattern: re.Pattern[str] = re.compile(re.escape(text), re.IGNORECASE)

    @classmethod
    def compile(cls, text: str | None) -> "SearchMatcher | None":
        query = str(text or "").strip()
        if not query:
            return None
        return cls(query)

    def matches_text(self, text: Any) -> bool:
        if not text:
            return False
        return self.pattern.search(str(text)) is not None

    def highlight_spans(self, text: Any) -> list[tuple[int, int]]:
        if not text:
            return []
        return [(match.start(), match.end()) for match in self.pattern.finditer(str(text))]

    def highlight_segments(self, text: Any) -> list[tuple[str, bool]]:
        """Split ``text`` into ``(chunk, matched)`` pieces for emphasis."""
        source = str(text or "")
        segments: list[tuple[str, bool]] = []
        pos = 0
        for start, end in self.highlight_spans(source):
            if start > pos:
                segments.append((source[pos:start], False))
            segments.append((source[start:end], True))
            pos = end
        if pos < len(source):
            segments.append((source[pos:], False))
        return segments

    def row_matches(self, row: ControlRow) -> bool:
        return self.matches_text(row.label) or self.matches_text(row.description)

    def node_matches(self, node: PaneNode, tree: Any = None) -> bool:
        if isinstance(node, ControlRow):
            return self.row_matches(node)
        if isinstance(node, SubPage) and self.matches_text(node.label):
            return True
        if isinstance(node, ForEach) and self.matches_text(node.search_terms):
            return True
        return self.any_matches(child_nodes(node, tree), tree)

    def any_matches(self, nodes: Iterable[PaneNode], tree: Any = None) -> bool:
        return any(self.node_matches(node, tree) for node in nodes)

    def match_count(self, node: PaneNode, tree: Any = None) -> int:
        """Number of direct children that match on their own text.

        Rows count on label or description, containers on their label only.
        """
        count = 0
        for child in child_nodes(node, tree):
            if isinstance(child, ControlRow):
                count += self.row_matches(child)
            else:
                count += self.matches_text(getattr(child, "label", ""))
        return count

    def filter_nodes(self, nodes: Iterable[PaneNode], tree: Any = None) -> list[PaneNode]:
        return [node for node in nodes if self.node_matches(node, tree)]


def highlight_label(matcher: SearchMatcher | None, text: str) -> list[tuple[str, bool]]:
    if matcher is None or not text:
        return [(text, False)] if text else []
    return matcher.highlight_segments(text)
