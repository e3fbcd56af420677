# tests/projection/test_digest.py
"""Tests for attachment classification and extras selection.

Tests cover:
- classify(): first occurrence of reserved types out of band, all entries in order
- Smart / All / ByType / Custom actions
- Action ordering and cross-action duplicates
"""

from datetime import datetime

from faultline.attachments import Attribute, Backtrace, Location
from faultline.projection.digest import (
    All,
    AttachmentDigest,
    ByType,
    Custom,
    Smart,
    classify,
    select_extras,
)
from faultline.reports import Report
from tests.conftest import T0, T1


def _two_timestamps_and_backtrace() -> Report:
    return Report.new("boom", T0, T1, Backtrace("frame 1\nframe 2"))


class TestClassify:
    """classify() builds a per-node digest."""

    def test_empty_node(self) -> None:
        digest = classify(Report("boom"))
        assert digest == AttachmentDigest()

    def test_first_timestamp_wins(self) -> None:
        digest = classify(Report.new("boom", T1, T0))
        assert digest.timestamp == T1

    def test_first_backtrace_and_location_win(self) -> None:
        node = Report.new(
            "boom",
            Backtrace("first"),
            Location("a.py", 1),
            Backtrace("second"),
            Location("b.py", 2),
        )
        digest = classify(node)
        assert digest.backtrace_text == "first"
        assert digest.location_text == "a.py:1"

    def test_all_records_every_attachment_in_order(self) -> None:
        node = Report.new("boom", T0, Attribute("k", "v"), Backtrace("bt"), T1, 42)
        digest = classify(node)
        assert [tag for tag, _ in digest.all] == [datetime, Attribute, Backtrace, datetime, int]
        assert [text for _, text in digest.all] == [
            T0.isoformat(),
            "k: v",
            "bt",
            T1.isoformat(),
            "42",
        ]

    def test_unknown_types_are_only_recorded(self) -> None:
        digest = classify(Report.new("boom", {"a": 1}))
        assert digest.timestamp is None
        assert digest.backtrace_text is None
        assert digest.all == ((dict, "{'a': 1}"),)

    def test_subclass_does_not_match_reserved_tag(self) -> None:
        """Type tags compare by identity, like type ids."""

        class MyTime(datetime):
            pass

        stamp = MyTime(2024, 1, 1)
        digest = classify(Report.new("boom", stamp))
        assert digest.timestamp is None
        assert digest.all[0][0] is MyTime


class TestSmartAction:
    """Smart drops the first occurrence of each reserved type."""

    def test_two_timestamps_and_backtrace(self) -> None:
        """Only the second timestamp survives."""
        digest = classify(_two_timestamps_and_backtrace())
        assert Smart().select(digest) == [T1.isoformat()]

    def test_keeps_non_reserved_attachments(self) -> None:
        node = Report.new("boom", Attribute("user", "alice"), Location("a.py", 3), "note")
        assert Smart().select(classify(node)) == ["user: alice", "note"]

    def test_keeps_duplicate_locations(self) -> None:
        node = Report.new("boom", Location("a.py", 1), Location("b.py", 2))
        assert Smart().select(classify(node)) == ["b.py:2"]

    def test_key_value_attachments_not_suppressed(self) -> None:
        node = Report.new("boom", Attribute("a", 1), Attribute("b", 2))
        assert Smart().select(classify(node)) == ["a: 1", "b: 2"]


class TestOtherActions:
    """All, ByType and Custom."""

    def test_all_includes_everything_in_order(self) -> None:
        digest = classify(_two_timestamps_and_backtrace())
        assert All().select(digest) == [T0.isoformat(), T1.isoformat(), "frame 1\nframe 2"]

    def test_by_type_filters_on_exact_tag(self) -> None:
        node = Report.new("boom", Attribute("a", 1), T0, Attribute("b", 2))
        assert ByType(Attribute).select(classify(node)) == ["a: 1", "b: 2"]
        assert ByType(Location).select(classify(node)) == []

    def test_custom_is_independent_of_attachments(self) -> None:
        assert Custom("service=billing").select(AttachmentDigest()) == ["service=billing"]

    def test_actions_are_value_objects(self) -> None:
        assert Smart() == Smart()
        assert ByType(int) == ByType(int)
        assert ByType(int) != ByType(str)


class TestSelectExtras:
    """select_extras() concatenates action outputs in order."""

    def test_no_actions_no_extras(self) -> None:
        assert select_extras(classify(_two_timestamps_and_backtrace()), ()) == []

    def test_duplicates_across_actions_are_kept(self) -> None:
        digest = classify(_two_timestamps_and_backtrace())
        extras = select_extras(digest, (Smart(), All()))
        assert extras == [T1.isoformat(), T0.isoformat(), T1.isoformat(), "frame 1\nframe 2"]

    def test_order_follows_actions(self) -> None:
        node = Report.new("boom", Attribute("a", 1))
        extras = select_extras(classify(node), (Custom("first"), ByType(Attribute), Custom("last")))
        assert extras == ["first", "a: 1", "last"]
