from __future__ import annotations

import html
import logging
from typing import Any, Callable

from PySide6.QtCore import Qt, QTimer, Signal
from PySide6.QtWidgets import (
    QButtonGroup,
    QCheckBox,
    QComboBox,
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QRadioButton,
    QScrollArea,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from configr.nodes import (
    BooleanRow,
    ChooserButtonRow,
    CustomInputRow,
    InputRow,
    RadioGroupRow,
    SelectRow,
    ToggleGroupRow,
)
from configr.render import RenderedNode
from configr.session import ConfigrSession

logger = logging.getLogger(__name__)

DISABLED_GREY = "rgba(5, 1, 1, 0.26)"
SECONDARY_GREY = "rgba(0, 0, 0, 0.54)"
HIGHLIGHT_STYLE = "background-color: yellow;"


def label_html(row: RenderedNode) -> str:
    segments = row.label_segments or [(row.label, False)]
    parts: list[str] = []
    for chunk, matched in segments:
        text = html.escape(chunk)
        parts.append(f'<span style="{HIGHLIGHT_STYLE}">{text}</span>' if matched else text)
    return "".join(parts)


def _coerce_input_value(raw: str, input_type: str) -> Any:
    if input_type != "number":
        return raw
    text = raw.strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return raw


class ClickableRow(QWidget):
    clicked = Signal()

    def mouseReleaseEvent(self, event) -> None:
        if event.button() == Qt.LeftButton:
            self.clicked.emit()
        super().mouseReleaseEvent(event)


class ContentPane(QWidget):
    """Qt rendering of a :class:`ConfigrSession`.

    The whole pane is rebuilt from ``session.render()`` after every change.
    Rebuilds and deferred normalization writes are queued on the event loop so
    a widget is never torn down from inside its own signal handler.
    """

    focusChanged = Signal(object)
    rendered = Signal()

    def __init__(self, session: ConfigrSession, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("ConfigrContentPane")
        self.session = session
        self._rebuild_scheduled = False
        self._group_widgets: dict[int, QWidget] = {}
        self._rows_by_path: dict[str, QWidget] = {}

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(0)

        self.scroll = QScrollArea()
        self.scroll.setWidgetResizable(True)
        self.scroll.setFrameShape(QFrame.NoFrame)
        root.addWidget(self.scroll, 1)

        self.session.navigator.add_listener(self._on_focus_changed)
        self.rebuild()

    # --- scheduling -----------------------------------------------------

    def schedule_rebuild(self) -> None:
        if self._rebuild_scheduled:
            return
        self._rebuild_scheduled = True
        QTimer.singleShot(0, self.rebuild)

    def rebuild(self) -> None:
        self._rebuild_scheduled = False
        scroll_value = self.scroll.verticalScrollBar().value()
        rows = self.session.render()

        container = QWidget()
        container.setObjectName("groups")
        layout = QVBoxLayout(container)
        layout.setContentsMargins(4, 4, 12, 4)
        layout.setSpacing(12)

        # Keyed by declared group index; hidden groups have no entry.
        declared = {id(group): index for index, group in enumerate(self.session.groups)}
        self._group_widgets = {}
        self._rows_by_path = {}
        for node in rows:
            widget = self._build_node(node)
            if node.kind == "group" and id(node.node) in declared:
                self._group_widgets[declared[id(node.node)]] = widget
            layout.addWidget(widget)
        layout.addStretch(1)

        self.scroll.setWidget(container)
        self.scroll.verticalScrollBar().setValue(scroll_value)
        self.rendered.emit()
        QTimer.singleShot(0, self._complete_render)

    def _complete_render(self) -> None:
        if self.session.complete_render():
            self.schedule_rebuild()

    def _on_focus_changed(self, path: str | None) -> None:
        self.focusChanged.emit(path)
        self.schedule_rebuild()

    def _write(self, path: str, value: Any) -> None:
        if self.session.write(path, value):
            self.schedule_rebuild()

    def _toggle_row(self, node: RenderedNode) -> None:
        if self.session.toggle(node):
            self.schedule_rebuild()

    def group_widget(self, index: int) -> QWidget | None:
        return self._group_widgets.get(index)

    def row_widget(self, path: str) -> QWidget | None:
        return self._rows_by_path.get(path)

    def scroll_to_group(self, index: int) -> None:
        widget = self.group_widget(index)
        if widget is not None:
            self.scroll.ensureWidgetVisible(widget, 0, 0)

    # --- builders -------------------------------------------------------

    def _build_node(self, node: RenderedNode) -> QWidget:
        if node.kind in {"group", "subgroup"}:
            return self._build_group(node)
        if node.kind == "subpage":
            if node.focused:
                return self._build_focused_subpage(node)
            return self._build_subpage_row(node)
        return self._build_control_row(node)

    def _build_rows(self, rows: list[RenderedNode], layout: QVBoxLayout) -> None:
        for row in rows:
            layout.addWidget(self._build_node(row))
            if row.divider_after:
                divider = QFrame()
                divider.setFrameShape(QFrame.HLine)
                divider.setFrameShadow(QFrame.Sunken)
                layout.addWidget(divider)

    def _build_group(self, node: RenderedNode) -> QWidget:
        holder = QWidget()
        holder.setProperty("configrPath", node.path)
        layout = QVBoxLayout(holder)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(6)

        title = QLabel(label_html(node))
        title.setTextFormat(Qt.RichText)
        title.setObjectName("SubgroupTitle" if node.level == 2 else "GroupTitle")
        layout.addWidget(title)
        if node.description:
            caption = QLabel(node.description)
            caption.setWordWrap(True)
            caption.setObjectName("GroupCaption")
            layout.addWidget(caption)

        if node.level == 1:
            body = QWidget()
        else:
            body = QFrame()
            body.setObjectName("PaperGroup")
            body.setFrameShape(QFrame.StyledPanel)
        body_layout = QVBoxLayout(body)
        body_layout.setContentsMargins(8, 4, 8, 4)
        body_layout.setSpacing(4)
        self._build_rows(node.children, body_layout)
        layout.addWidget(body)
        return holder

    def _build_focused_subpage(self, node: RenderedNode) -> QWidget:
        holder = QWidget()
        layout = QVBoxLayout(holder)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(6)

        header = QHBoxLayout()
        back = QToolButton()
        back.setObjectName("SubPageBack")
        back.setArrowType(Qt.LeftArrow)
        back.setCursor(Qt.PointingHandCursor)
        back.clicked.connect(lambda *_args: self.session.back())
        header.addWidget(back)
        header.addWidget(QLabel(node.back_label))
        header.addStretch(1)
        layout.addLayout(header)

        body = QWidget()
        body_layout = QVBoxLayout(body)
        body_layout.setContentsMargins(20, 0, 0, 0)
        body_layout.setSpacing(4)
        self._build_rows(node.children, body_layout)
        layout.addWidget(body)
        self._rows_by_path[node.path] = holder
        return holder

    def _row_frame(self, node: RenderedNode, control: QWidget | None, *, one_column: bool = False) -> ClickableRow:
        row = ClickableRow()
        row.setObjectName("ConfigrRow")
        row.setToolTip(node.effective_path or node.path)
        outer = QVBoxLayout(row)
        outer.setContentsMargins(6, 4, 6, 4)
        outer.setSpacing(2)

        label = QLabel(label_html(node))
        label.setTextFormat(Qt.RichText)
        label.setObjectName("RowLabel")
        if node.disabled:
            label.setStyleSheet(f"color: {DISABLED_GREY};")

        if one_column:
            outer.addWidget(label)
            if control is not None:
                outer.addWidget(control)
        else:
            line = QHBoxLayout()
            line.addWidget(label, 1)
            if control is not None:
                line.addWidget(control, 0, Qt.AlignRight)
            outer.addLayout(line)

        if node.description:
            caption = QLabel(node.description)
            caption.setWordWrap(True)
            caption.setObjectName("RowCaption")
            caption.setStyleSheet(f"color: {DISABLED_GREY if node.disabled else SECONDARY_GREY};")
            outer.addWidget(caption)

        if node.match_count:
            badge = QLabel(f"{node.match_count} matches")
            badge.setObjectName("MatchCount")
            badge.setStyleSheet(HIGHLIGHT_STYLE)
            outer.addWidget(badge, 0, Qt.AlignLeft)

        self._rows_by_path[node.path] = row
        return row

    def _build_subpage_row(self, node: RenderedNode) -> QWidget:
        button = QToolButton()
        button.setObjectName("SubPageOpen")
        button.setArrowType(Qt.RightArrow)
        button.setCursor(Qt.PointingHandCursor)
        button.setEnabled(not node.disabled)
        button.clicked.connect(lambda *_args, p=node.path, t=node.label: self.session.open_subpage(p, t))
        row = self._row_frame(node, button)
        if not node.disabled:
            row.clicked.connect(lambda p=node.path, t=node.label: self.session.open_subpage(p, t))
        return row

    def _build_control_row(self, node: RenderedNode) -> QWidget:
        decl = node.node
        if isinstance(decl, BooleanRow):
            row = self._row_frame(node, self._boolean_control(node, decl))
            row.clicked.connect(lambda n=node: self._toggle_row(n))
            return row
        if isinstance(decl, InputRow):
            return self._row_frame(node, self._input_control(node, decl))
        if isinstance(decl, SelectRow):
            return self._row_frame(node, self._select_control(node, decl))
        if isinstance(decl, RadioGroupRow):
            return self._row_frame(node, self._radio_control(node, decl), one_column=True)
        if isinstance(decl, ToggleGroupRow):
            return self._row_frame(node, self._toggle_control(node, decl))
        if isinstance(decl, ChooserButtonRow):
            return self._row_frame(node, self._chooser_control(node, decl))
        if isinstance(decl, CustomInputRow):
            return self._row_frame(node, self._custom_control(node, decl))
        logger.debug("No widget for row kind %s", node.kind)
        return self._row_frame(node, None)

    def _boolean_control(self, node: RenderedNode, decl: BooleanRow) -> QWidget:
        box = QCheckBox()
        box.setObjectName("Switch" if decl.immediate_effect else "Checkbox")
        box.setChecked(bool(node.value))
        box.setEnabled(not node.disabled)
        box.toggled.connect(lambda checked, p=node.effective_path: self._write(p, bool(checked)))
        return box

    def _input_control(self, node: RenderedNode, decl: InputRow) -> QWidget:
        holder = QWidget()
        layout = QHBoxLayout(holder)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(4)

        edit = QLineEdit("" if node.value is None else str(node.value))
        edit.setAlignment(Qt.AlignRight)
        edit.setEnabled(not node.disabled)

        def commit() -> None:
            self._write(node.path, _coerce_input_value(edit.text(), decl.input_type))

        edit.editingFinished.connect(commit)
        layout.addWidget(edit)
        if decl.units:
            layout.addWidget(QLabel(decl.units))
        return holder

    def _select_control(self, node: RenderedNode, decl: SelectRow) -> QWidget:
        combo = QComboBox()
        combo.setMinimumWidth(180)
        current_index = -1
        for index, option in enumerate(decl.options):
            combo.addItem(option.label or str(option.value), option.value)
            if option.description:
                combo.setItemData(index, option.description, Qt.ToolTipRole)
            if option.value == node.value:
                current_index = index
        combo.setCurrentIndex(current_index)
        combo.setEnabled(not node.disabled)
        combo.currentIndexChanged.connect(
            lambda index, c=combo, p=node.path: self._write(p, c.itemData(index)) if index >= 0 else None
        )
        return combo

    def _radio_control(self, node: RenderedNode, decl: RadioGroupRow) -> QWidget:
        holder = QWidget()
        layout: QHBoxLayout | QVBoxLayout = QHBoxLayout(holder) if decl.row else QVBoxLayout(holder)
        layout.setContentsMargins(0, 0, 0, 0)
        group = QButtonGroup(holder)
        group.setExclusive(True)
        for choice in decl.choices:
            radio = QRadioButton(choice.label)
            radio.setChecked(choice.value == node.value)
            radio.setEnabled(not node.disabled)
            radio.toggled.connect(
                lambda checked, v=choice.value, p=node.path: self._write(p, v) if checked else None
            )
            group.addButton(radio)
            layout.addWidget(radio)
        return holder

    def _toggle_control(self, node: RenderedNode, decl: ToggleGroupRow) -> QWidget:
        holder = QWidget()
        layout = QHBoxLayout(holder)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)
        group = QButtonGroup(holder)
        group.setExclusive(True)
        for choice in decl.choices:
            button = QToolButton()
            button.setText(choice.content)
            button.setCheckable(True)
            button.setChecked(choice.value == node.value)
            button.setEnabled(not node.disabled)
            button.toggled.connect(
                lambda checked, v=choice.value, p=node.path: self._write(p, v) if checked else None
            )
            group.addButton(button)
            layout.addWidget(button)
        return holder

    def _chooser_control(self, node: RenderedNode, decl: ChooserButtonRow) -> QWidget:
        holder = QWidget()
        layout = QVBoxLayout(holder)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(2)
        button = QPushButton(decl.button_label)
        button.setEnabled(not node.disabled)

        def on_choose() -> None:
            if self.session.choose(node):
                self.schedule_rebuild()

        button.clicked.connect(lambda *_args: on_choose())
        layout.addWidget(button)
        current = QLabel("" if node.value is None else str(node.value))
        current.setStyleSheet(f"color: {SECONDARY_GREY};")
        layout.addWidget(current)
        return holder

    def _custom_control(self, node: RenderedNode, decl: CustomInputRow) -> QWidget:
        on_change: Callable[[Any], None] = lambda value, p=node.path: self._write(p, value)
        widget = decl.control(node.value, on_change, node.disabled)
        if not isinstance(widget, QWidget):
            raise TypeError(f"Custom control for '{node.path}' must return a QWidget.")
        return widget
