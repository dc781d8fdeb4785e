import json
import logging
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication

from configr.nodes import (
    BooleanRow,
    ChooserButtonRow,
    Conditional,
    ForEach,
    Group,
    InputRow,
    RadioChoice,
    RadioGroupRow,
    SelectRow,
    SubPage,
    Subgroup,
)
from configr.ui import ConfigrPane

DEBUG_ARG = "--debug"

DEMO_VALUES = {
    "appearance": {"language": "en", "theme": "light", "font_size": 14},
    "privacy": {"send_usage": False, "cookies": {"block_third_party": True}},
    "network": {"proxy": {"enabled": False, "host": "", "port": 8080}, "cache_size_mb": 256},
    "project": {"languages": [{"iso": "en", "name": "English"}, {"iso": "fr", "name": "French"}]},
    "downloads": {"folder": str(Path.home())},
}


def _split_startup_args(argv: list[str]) -> tuple[list[str], bool]:
    filtered: list[str] = []
    debug = False
    for arg in argv:
        if arg == DEBUG_ARG:
            debug = True
            continue
        filtered.append(arg)
    return filtered, debug


def _load_initial_values(argv: list[str]) -> dict:
    if not argv:
        return dict(DEMO_VALUES)
    path = Path(argv[0]).expanduser()
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise SystemExit(f"Settings root in '{path}' must be a JSON object, found {type(raw).__name__}.")
    return raw


def build_demo_groups() -> list[Group]:
    return [
        Group(
            label="General",
            children=[
                SelectRow(
                    path="appearance.language",
                    label="Language",
                    options=[{"value": "en", "label": "English"}, {"value": "fr", "label": "French"}],
                ),
                RadioGroupRow(
                    path="appearance.theme",
                    label="Theme",
                    choices=[RadioChoice("light", "Light"), RadioChoice("dark", "Dark")],
                ),
                SelectRow(path="appearance.font_size", label="Font size", options=[10, 12, 14, 16, 18]),
                ChooserButtonRow(
                    path="downloads.folder",
                    label="Download folder",
                    button_label="Choose...",
                    choose_action=lambda current: current,
                ),
            ],
        ),
        Group(
            label="Privacy",
            children=[
                BooleanRow(path="privacy.send_usage", label="Send usage statistics"),
                SubPage(
                    label="Cookies",
                    path="privacy.cookies",
                    children=[
                        BooleanRow(path="privacy.cookies.block_third_party", label="Block third-party cookies"),
                        BooleanRow(
                            path="privacy.cookies.keep_forever",
                            label="Keep cookies forever",
                            description="Managed by your organization",
                            disabled_value=False,
                        ),
                    ],
                ),
            ],
        ),
        Group(
            label="Advanced",
            children=[
                BooleanRow(path="network.proxy.enabled", label="Proxy", immediate_effect=True),
                Conditional(
                    enable_when="network.proxy.enabled",
                    children=[
                        InputRow(path="network.proxy.host", label="Proxy host"),
                        InputRow(path="network.proxy.port", label="Proxy port", input_type="number"),
                    ],
                ),
                InputRow(path="network.cache_size_mb", label="Cache size", input_type="number", units="MB"),
                Subgroup(
                    label="Languages",
                    path="project",
                    children=[
                        ForEach(
                            path="project.languages",
                            search_terms="language iso",
                            render=lambda prefix, index: InputRow(
                                path=f"{prefix}.name", label=f"Language {index + 1}"
                            ),
                        ),
                    ],
                ),
            ],
        ),
    ]


if __name__ == "__main__":
    cli_args, debug = _split_startup_args(sys.argv[1:])
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO)
    log = logging.getLogger("configr.demo")

    app = QApplication([sys.argv[0], *cli_args])
    app.setStyle("Fusion")
    app.setApplicationName("Configr")
    pane = ConfigrPane(
        _load_initial_values(cli_args),
        build_demo_groups(),
        on_report=lambda values: log.info("Settings changed: %s", json.dumps(values, sort_keys=True)),
        options={"label": "Settings"},
    )
    pane.resize(1040, 720)
    pane.show()
    sys.exit(app.exec())
