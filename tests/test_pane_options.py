from configr.pane_options import PaneOptions, default_pane_options, normalize_pane_options


def test_defaults():
    assert normalize_pane_options(None) == default_pane_options()
    options = PaneOptions.from_mapping({})
    assert options.label == "Settings"
    assert options.show_search
    assert not options.show_all_groups
    assert options.current_group_index == 0


def test_bad_values_fall_back():
    normalized = normalize_pane_options({"label": "   ", "current_group_index": "nope"})
    assert normalized["label"] == "Settings"
    assert normalized["current_group_index"] == 0
    assert normalize_pane_options({"current_group_index": -4})["current_group_index"] == 0


def test_from_mapping_keeps_overrides():
    options = PaneOptions.from_mapping({"label": "Preferences", "show_search": False, "show_all_groups": 1})
    assert options == PaneOptions(label="Preferences", show_search=False, show_all_groups=True)
