from __future__ import annotations

from configr.change_reporter import ChangeReporter
from configr.shadow_values import DISABLED_VALUE_ROOT


def test_equal_content_reports_once():
    reports = []
    reporter = ChangeReporter(reports.append)
    assert reporter.report({"a": 1, "b": [1, 2]})
    assert not reporter.report({"b": [1, 2], "a": 1})
    assert len(reports) == 1


def test_changed_content_reports_new_object():
    reports = []
    reporter = ChangeReporter(reports.append, initial_values={"a": 1})
    assert not reporter.report({"a": 1})
    assert reporter.report({"a": 2})
    assert reports == [{"a": 2}]
    assert reporter.last_reported is reports[0]


def test_reported_object_is_stable_while_content_is_unchanged():
    reports = []
    reporter = ChangeReporter(reports.append)
    live = {"a": 1}
    reporter.report(live)
    first = reporter.last_reported
    reporter.report(dict(live))
    assert reporter.last_reported is first
    live["a"] = 5
    assert first == {"a": 1}


def test_shadow_root_is_stripped_without_mutating_live_tree():
    reports = []
    reporter = ChangeReporter(reports.append)
    live = {"a": 1, DISABLED_VALUE_ROOT: {"a": True}}
    reporter.report(live)
    assert reports == [{"a": 1}]
    assert DISABLED_VALUE_ROOT in live
    live[DISABLED_VALUE_ROOT]["a"] = False
    assert not reporter.report(live)


def test_without_callback_nothing_is_reported():
    reporter = ChangeReporter(None)
    assert not reporter.report({"a": 1})
    assert reporter.report_count == 0
