from __future__ import annotations

import pytest

pytest.importorskip("PySide6.QtWidgets")

from PySide6.QtWidgets import QCheckBox, QLabel, QLineEdit, QToolButton  # noqa: E402

from configr.nodes import BooleanRow, Group, InputRow, SubPage  # noqa: E402
from configr.ui import ConfigrPane, ContentPane  # noqa: E402
from configr.session import ConfigrSession  # noqa: E402


def _groups() -> list[Group]:
    return [
        Group(
            label="Privacy",
            children=[
                BooleanRow(path="privacy.send_usage", label="Send usage"),
                SubPage(
                    label="Cookies",
                    path="privacy.cookies",
                    children=[BooleanRow(path="privacy.cookies.block", label="Block cookies")],
                ),
                InputRow(path="privacy.note", label="Note", units="chars"),
            ],
        )
    ]


def test_rows_are_built_for_current_group(qapp):
    pane = ContentPane(ConfigrSession({"privacy": {"send_usage": True}}, _groups()))
    boxes = pane.findChildren(QCheckBox)
    assert len(boxes) == 1
    assert boxes[0].isChecked()
    assert pane.row_widget("privacy.note") is not None
    assert pane.findChildren(QLineEdit)
    assert pane.group_widget(0) is not None
    assert pane.group_widget(1) is None


def test_checkbox_writes_through_session(qapp):
    session = ConfigrSession({"privacy": {"send_usage": False}}, _groups())
    pane = ContentPane(session)
    pane.findChildren(QCheckBox)[0].setChecked(True)
    assert session.read("privacy.send_usage") is True


def test_focused_subpage_shows_back_button(qapp):
    session = ConfigrSession({}, _groups())
    pane = ContentPane(session)
    focus_events = []
    pane.focusChanged.connect(focus_events.append)
    session.open_subpage("privacy.cookies", "Cookies")
    pane.rebuild()
    assert focus_events == ["privacy.cookies"]
    assert any(button.objectName() == "SubPageBack" for button in pane.findChildren(QToolButton))
    assert pane.row_widget("privacy.note") is None
    assert pane.row_widget("privacy.cookies.block") is not None


def test_search_marks_subpage_match_count(qapp):
    session = ConfigrSession({}, _groups())
    pane = ContentPane(session)
    session.set_search("block")
    pane.rebuild()
    badges = [label.text() for label in pane.findChildren(QLabel) if label.objectName() == "MatchCount"]
    assert badges == ["1 matches"]


def test_configr_pane_hides_search_and_exposes_values(qapp):
    pane = ConfigrPane({"privacy": {"note": "hi"}}, _groups(), options={"show_search": False})
    assert pane.search.isHidden()
    assert pane.group_list.count() == 1
    assert pane.values() == {"privacy": {"note": "hi"}}


def test_group_widgets_follow_declared_positions(qapp):
    groups = [
        Group(label="Alpha", children=[InputRow(path="a", label="A")]),
        Group(label="Beta", visible_when=False, children=[InputRow(path="b", label="B")]),
        Group(label="Gamma", children=[InputRow(path="c", label="C")]),
    ]
    pane = ContentPane(ConfigrSession({}, groups, options={"show_all_groups": True}))
    assert pane.group_widget(1) is None
    gamma = pane.group_widget(2)
    assert gamma is not None
    assert gamma.findChild(QLabel, "GroupTitle").text() == "Gamma"
