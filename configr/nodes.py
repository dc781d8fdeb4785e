"""Declarative building blocks of a settings pane.

A pane is a list of :class:`Group` nodes. Groups hold rows and nested
containers (:class:`Subgroup`, :class:`SubPage`, :class:`Conditional`,
:class:`ForEach`). Every control row is bound to a path into the settings
document.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Iterable, Iterator, Literal, Mapping, Union

from configr.errors import MalformedChildError, NestedSubPageError
from configr.path_resolver import get_path
from configr.predicates import PredicateLike, evaluate


class PaneNode:
    __slots__ = ()

    kind: ClassVar[str] = "node"
    # Whether a surrounding Conditional may force this node into a disabled state.
    supports_disabled: ClassVar[bool] = False


ChildrenLike = Union[PaneNode, Iterable[Any], None]


def coerce_children(children: ChildrenLike, owner: str = "container") -> list[PaneNode]:
    """Flatten ``children`` into a list of nodes, failing fast on anything else."""
    if children is None:
        return []
    if isinstance(children, PaneNode):
        return [children]
    if isinstance(children, (str, bytes, Mapping)) or not isinstance(children, Iterable):
        raise MalformedChildError(
            f"{owner} expects pane nodes as children, got {type(children).__name__}."
        )
    result: list[PaneNode] = []
    for child in children:
        if child is None:
            continue
        if isinstance(child, PaneNode):
            result.append(child)
            continue
        if isinstance(child, (list, tuple)):
            result.extend(coerce_children(child, owner))
            continue
        raise MalformedChildError(
            f"{owner} expects pane nodes as children, got {type(child).__name__}: {child!r}"
        )
    return result


# --- control rows -----------------------------------------------------------


@dataclass(slots=True, kw_only=True)
class ControlRow(PaneNode):
    path: str
    label: str
    description: str = ""
    disabled: bool = False
    enable_when: PredicateLike = None
    visible_when: PredicateLike = None

    kind: ClassVar[str] = "control"
    supports_disabled: ClassVar[bool] = True


@dataclass(slots=True, kw_only=True)
class BooleanRow(ControlRow):
    # Switch instead of checkbox; meant for settings that apply right away.
    immediate_effect: bool = False
    # When set, the row is disabled and shows this value instead of the real one.
    disabled_value: PredicateLike = None

    kind: ClassVar[str] = "boolean"

    def resolve_disabled_value(self, tree: Any) -> bool | None:
        if self.disabled_value is None:
            return None
        return evaluate(False, self.disabled_value, tree)


@dataclass(slots=True, kw_only=True)
class InputRow(ControlRow):
    input_type: Literal["text", "number", "email"] = "text"
    units: str = ""

    kind: ClassVar[str] = "input"


@dataclass(slots=True)
class SelectOption:
    value: Any
    label: str = ""
    description: str = ""

    @classmethod
    def from_raw(cls, raw: Any) -> "SelectOption":
        if isinstance(raw, SelectOption):
            return raw
        # Plain numbers are allowed (font sizes and the like).
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            return cls(value=raw, label=str(raw))
        if isinstance(raw, Mapping):
            value = raw.get("value", raw.get("label"))
            label = raw.get("label", value)
            return cls(value=value, label=str(label), description=str(raw.get("description") or ""))
        raise MalformedChildError(f"Unsupported select option: {raw!r}")


@dataclass(slots=True, kw_only=True)
class SelectRow(ControlRow):
    options: list[Any] = field(default_factory=list)
    indented: bool = False

    kind: ClassVar[str] = "select"

    def __post_init__(self) -> None:
        self.options = [SelectOption.from_raw(option) for option in self.options]


@dataclass(slots=True)
class RadioChoice:
    value: Any
    label: str


@dataclass(slots=True, kw_only=True)
class RadioGroupRow(ControlRow):
    choices: list[RadioChoice] = field(default_factory=list)
    row: bool = False

    kind: ClassVar[str] = "radio_group"


@dataclass(slots=True)
class ToggleChoice:
    value: Any
    content: str


@dataclass(slots=True, kw_only=True)
class ToggleGroupRow(ControlRow):
    choices: list[ToggleChoice] = field(default_factory=list)
    height: str = ""

    kind: ClassVar[str] = "toggle_group"


@dataclass(slots=True, kw_only=True)
class ChooserButtonRow(ControlRow):
    """Row with a button that asks the host for a new value (file or folder pickers)."""

    button_label: str
    choose_action: Callable[[Any], Any]

    kind: ClassVar[str] = "chooser"


@dataclass(slots=True, kw_only=True)
class CustomInputRow(ControlRow):
    """Row whose editor widget is supplied by the host.

    ``control`` is called as ``control(value, on_change, disabled)`` and returns
    the widget to place in the row.
    """

    control: Callable[..., Any]
    value_kind: Literal["string", "boolean", "number", "object"] = "string"

    kind: ClassVar[str] = "custom"


# --- containers -------------------------------------------------------------


@dataclass(slots=True, kw_only=True)
class Group(PaneNode):
    label: str
    children: list[PaneNode] = field(default_factory=list)
    description: str = ""
    path: str = ""
    # 1: no card around the rows, 2: subgroup heading.
    level: int | None = None
    enable_when: PredicateLike = None
    visible_when: PredicateLike = None

    kind: ClassVar[str] = "group"

    def __post_init__(self) -> None:
        self.children = coerce_children(self.children, f"Group '{self.label}'")


@dataclass(slots=True, kw_only=True)
class Subgroup(PaneNode):
    label: str
    path: str
    children: list[PaneNode] = field(default_factory=list)
    description: str = ""
    enable_when: PredicateLike = None
    visible_when: PredicateLike = None

    kind: ClassVar[str] = "subgroup"
    level: ClassVar[int] = 2

    def __post_init__(self) -> None:
        self.children = coerce_children(self.children, f"Subgroup '{self.label}'")


@dataclass(slots=True, kw_only=True)
class SubPage(PaneNode):
    """A row that drills down into its children. Only one level deep."""

    label: str
    path: str
    children: list[PaneNode] = field(default_factory=list)
    description: str = ""
    visible_when: PredicateLike = None

    kind: ClassVar[str] = "subpage"

    def __post_init__(self) -> None:
        self.children = coerce_children(self.children, f"SubPage '{self.label}'")
        for descendant in iter_static_descendants(self.children):
            if isinstance(descendant, SubPage):
                raise NestedSubPageError(
                    f"SubPage '{descendant.path}' cannot be nested inside SubPage '{self.path}'."
                )


@dataclass(slots=True, kw_only=True)
class Conditional(PaneNode):
    """Hide its children, or disable the ones that support it, based on the tree."""

    children: list[PaneNode] = field(default_factory=list)
    enable_when: PredicateLike = None
    visible_when: PredicateLike = None

    kind: ClassVar[str] = "conditional"

    def __post_init__(self) -> None:
        self.children = coerce_children(self.children, "Conditional")


@dataclass(slots=True, kw_only=True)
class ForEach(PaneNode):
    """Repeat ``render(item_path, index)`` for every item of the list at ``path``."""

    path: str
    render: Callable[[str, int], ChildrenLike]
    search_terms: str = ""

    kind: ClassVar[str] = "for_each"

    def expand(self, tree: Any) -> list[PaneNode]:
        items = get_path(tree, self.path, [])
        if not isinstance(items, (list, tuple)):
            return []
        nodes: list[PaneNode] = []
        for index in range(len(items)):
            nodes.extend(coerce_children(self.render(f"{self.path}[{index}]", index), "ForEach"))
        return nodes


CONTAINER_TYPES = (Group, Subgroup, SubPage, Conditional)


def child_nodes(node: PaneNode, tree: Any = None) -> list[PaneNode]:
    if isinstance(node, CONTAINER_TYPES):
        return node.children
    if isinstance(node, ForEach):
        return node.expand(tree)
    return []


def iter_static_descendants(nodes: Iterable[PaneNode]) -> Iterator[PaneNode]:
    for node in nodes:
        yield node
        if isinstance(node, CONTAINER_TYPES):
            yield from iter_static_descendants(node.children)


def validate_groups(groups: ChildrenLike) -> list[Group]:
    """Check the top level of a pane: only groups are allowed there."""
    nodes = coerce_children(groups, "Pane")
    for node in nodes:
        if not isinstance(node, Group):
            raise MalformedChildError(
                f"Pane expects Group nodes at the top level, got {type(node).__name__}."
            )
    return nodes  # type: ignore[return-value]
