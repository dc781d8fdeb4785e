from __future__ import annotations

from configr.nodes import BooleanRow, ForEach, Group, InputRow, SubPage, Subgroup
from configr.render import rendered_labels
from configr.search_matcher import SearchMatcher
from configr.session import ConfigrSession


def test_blank_search_compiles_to_nothing():
    assert SearchMatcher.compile("") is None
    assert SearchMatcher.compile("   ") is None
    assert SearchMatcher.compile(None) is None


def test_matching_is_case_insensitive_and_literal():
    matcher = SearchMatcher.compile("LANG")
    assert matcher.matches_text("Language")
    assert not matcher.matches_text("Theme")
    dotted = SearchMatcher.compile("a.b")
    assert dotted.matches_text("see a.b here")
    assert not dotted.matches_text("axb")


def test_highlight_segments_split_around_matches():
    matcher = SearchMatcher.compile("an")
    assert matcher.highlight_segments("Language and") == [
        ("L", False),
        ("an", True),
        ("guage ", False),
        ("an", True),
        ("d", False),
    ]
    assert matcher.highlight_spans("nothing here") == []


def test_rows_match_on_description():
    matcher = SearchMatcher.compile("socks")
    row = InputRow(path="p.host", label="Proxy host", description="HTTP or SOCKS server")
    assert matcher.node_matches(row)


def test_containers_match_only_through_descendants():
    group = Group(
        label="Language stuff",
        children=[Subgroup(label="Inner", path="g.inner", children=[InputRow(path="g.inner.x", label="Spell check")])],
    )
    assert SearchMatcher.compile("spell").node_matches(group)
    assert not SearchMatcher.compile("language").node_matches(group)


def test_subpage_matches_on_label_and_counts_matching_children():
    page = SubPage(
        label="Cookies",
        path="privacy.cookies",
        children=[
            BooleanRow(path="privacy.cookies.block", label="Block cookies"),
            BooleanRow(path="privacy.cookies.clear", label="Clear cookies on exit"),
            BooleanRow(path="privacy.cookies.dnt", label="Do not track"),
        ],
    )
    matcher = SearchMatcher.compile("cookies")
    assert matcher.node_matches(page)
    assert matcher.match_count(page) == 2


def test_match_count_includes_row_descriptions():
    page = SubPage(
        label="Cookies",
        path="privacy.cookies",
        children=[
            BooleanRow(path="privacy.cookies.block", label="Block", description="Third-party cookies"),
            BooleanRow(path="privacy.cookies.clear", label="Clear on exit"),
        ],
    )
    matcher = SearchMatcher.compile("third")
    assert matcher.node_matches(page)
    assert matcher.match_count(page) == 1


def test_for_each_expands_against_tree():
    loop = ForEach(
        path="langs",
        render=lambda prefix, index: InputRow(path=f"{prefix}.name", label=f"Entry {index}"),
        search_terms="languages",
    )
    tree = {"langs": [{"name": "en"}, {"name": "fr"}]}
    assert SearchMatcher.compile("entry 1").node_matches(loop, tree)
    assert SearchMatcher.compile("languages").node_matches(loop, tree)
    assert not SearchMatcher.compile("entry 5").node_matches(loop, tree)


def test_search_shows_only_matching_groups(general_and_advanced):
    session = ConfigrSession({}, general_and_advanced, options={"current_group_index": 1})
    session.set_search("lang")
    rendered = session.render()
    assert [node.label for node in rendered] == ["General"]
    assert rendered_labels(rendered) == ["General", "Language"]


def test_clearing_search_restores_selected_group(general_and_advanced):
    session = ConfigrSession({}, general_and_advanced, options={"current_group_index": 1})
    assert [node.label for node in session.render()] == ["Advanced"]
    session.set_search("lang")
    session.render()
    session.set_search("")
    assert [node.label for node in session.render()] == ["Advanced"]


def test_unmatched_search_renders_nothing(general_and_advanced):
    session = ConfigrSession({}, general_and_advanced)
    session.set_search("zzz")
    assert session.render() == []


def test_search_highlights_rendered_labels(general_and_advanced):
    session = ConfigrSession({}, general_and_advanced)
    session.set_search("cache")
    rendered = session.render()
    row = rendered[0].children[0]
    assert row.label == "Cache size"
    assert row.label_segments == [("Cache", True), (" size", False)]
