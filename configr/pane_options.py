from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypedDict


class PaneOptionsDict(TypedDict, total=False):
    label: str
    show_search: bool
    show_all_groups: bool
    current_group_index: int


def default_pane_options() -> PaneOptionsDict:
    return {
        "label": "Settings",
        "show_search": True,
        "show_all_groups": False,
        "current_group_index": 0,
    }


def normalize_pane_options(raw: Any) -> PaneOptionsDict:
    defaults = default_pane_options()
    data = dict(defaults)
    if isinstance(raw, dict):
        for key, value in raw.items():
            data[str(key)] = value

    try:
        group_index = max(0, int(data.get("current_group_index", 0)))
    except Exception:
        group_index = defaults["current_group_index"]

    return {
        "label": str(data.get("label", defaults["label"]) or "").strip() or defaults["label"],
        "show_search": bool(data.get("show_search", defaults["show_search"])),
        "show_all_groups": bool(data.get("show_all_groups", defaults["show_all_groups"])),
        "current_group_index": group_index,
    }


@dataclass(slots=True)
class PaneOptions:
    label: str = "Settings"
    show_search: bool = True
    # Show every group stacked and scroll to the selected one, instead of only the selected one.
    show_all_groups: bool = False
    current_group_index: int = 0

    @classmethod
    def from_mapping(cls, data: Any) -> "PaneOptions":
        n = normalize_pane_options(data)
        return cls(
            label=str(n["label"]),
            show_search=bool(n["show_search"]),
            show_all_groups=bool(n["show_all_groups"]),
            current_group_index=int(n["current_group_index"]),
        )
