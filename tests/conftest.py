from __future__ import annotations

import os

import pytest

from configr.nodes import BooleanRow, Group, InputRow

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(scope="session")
def qapp():
    widgets = pytest.importorskip("PySide6.QtWidgets")
    app = widgets.QApplication.instance() or widgets.QApplication([])
    yield app


@pytest.fixture
def general_and_advanced() -> list[Group]:
    return [
        Group(
            label="General",
            children=[
                InputRow(path="general.language", label="Language"),
                InputRow(path="general.theme", label="Theme"),
            ],
        ),
        Group(
            label="Advanced",
            children=[
                BooleanRow(path="advanced.proxy", label="Proxy"),
                InputRow(path="advanced.cache_size", label="Cache size", input_type="number"),
            ],
        ),
    ]
