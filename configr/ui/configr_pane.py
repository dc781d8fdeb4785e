from __future__ import annotations

from typing import Any, Callable, Mapping

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QAbstractItemView,
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QVBoxLayout,
    QWidget,
)

from configr.change_reporter import ReportCallback
from configr.nodes import ChildrenLike
from configr.pane_options import PaneOptions
from configr.session import ConfigrSession, ValueGetter
from configr.ui.content_pane import ContentPane

GROUP_LIST_WIDTH = 200
CONTENT_WIDTH = 600


class ConfigrPane(QWidget):
    """Settings screen: title bar, search box, group list and content pane."""

    def __init__(
        self,
        initial_values: Mapping[str, Any] | None,
        groups: ChildrenLike,
        *,
        on_report: ReportCallback | None = None,
        set_value_getter: Callable[[ValueGetter], None] | None = None,
        options: PaneOptions | Mapping[str, Any] | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.setObjectName("ConfigrPane")
        self.session = ConfigrSession(
            initial_values,
            groups,
            on_report=on_report,
            set_value_getter=set_value_getter,
            options=options,
        )
        self._build_ui()

    @property
    def options(self) -> PaneOptions:
        return self.session.options

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(16, 16, 16, 16)
        root.setSpacing(10)

        header_row = QHBoxLayout()
        self.title = QLabel(self.options.label)
        self.title.setObjectName("ConfigrAppBar")
        header_row.addWidget(self.title)
        header_row.addStretch(1)
        root.addLayout(header_row)

        body = QHBoxLayout()
        body.setSpacing(12)

        left = QFrame()
        left.setObjectName("LeftFrame")
        left_layout = QVBoxLayout(left)
        left_layout.setContentsMargins(12, 12, 12, 12)
        left_layout.setSpacing(8)

        self.search = QLineEdit()
        self.search.setPlaceholderText("Search settings...")
        self.search.setClearButtonEnabled(True)
        self.search.textChanged.connect(self._on_search_changed)
        self.search.setVisible(self.options.show_search)
        left_layout.addWidget(self.search)

        self.group_list = QListWidget()
        self.group_list.setSelectionMode(QAbstractItemView.SingleSelection)
        self.group_list.addItems(self.session.group_labels())
        left_layout.addWidget(self.group_list, 1)
        left.setFixedWidth(GROUP_LIST_WIDTH)
        body.addWidget(left)

        self.content = ContentPane(self.session)
        self.content.setMinimumWidth(CONTENT_WIDTH)
        body.addWidget(self.content, 1)
        root.addLayout(body, 1)

        if self.group_list.count():
            self.group_list.setCurrentRow(self.session.current_group_index)
        self.group_list.currentRowChanged.connect(self._on_group_changed)

    def _on_group_changed(self, index: int) -> None:
        if index < 0:
            return
        self.session.set_current_group(index)
        if self.options.show_all_groups:
            self.content.scroll_to_group(index)
            return
        self.content.schedule_rebuild()

    def _on_search_changed(self, text: str) -> None:
        self.session.set_search(text)
        # Group selection means nothing while results from every group are listed.
        self.group_list.setEnabled(not self.session.searching)
        self.content.schedule_rebuild()

    def values(self) -> dict[str, Any]:
        return self.session.value_getter()()

    def keyPressEvent(self, event) -> None:
        if event.key() == Qt.Key_Escape and self.session.navigator.is_focused:
            self.session.back()
            event.accept()
            return
        super().keyPressEvent(event)
