# tests/telemetry/test_recorder.py
"""Tests for ReportRecorder and emit_events.

Uses RecordingSink so every call the recorder makes is observable.
"""

from faultline.attachments import Backtrace
from faultline.contracts.events import (
    ERROR_TYPE,
    EXCEPTION_MESSAGE,
    EXCEPTION_STACKTRACE,
    EXCEPTION_TYPE,
    FinishedEvent,
)
from faultline.projection import EventSpec
from faultline.reports import Report
from faultline.telemetry.recorder import ReportRecorder, brief_attributes, emit_events, record_report
from faultline.testing import RecordingSink
from tests.conftest import FIXED_NOW, T0, T1, fixed_clock, make_span_context


class UpstreamTimeout(Exception):
    pass


def _report_with_cause() -> Report:
    cause = Report.new(ValueError("bad header"), T1, make_span_context(span_id=0xBEEF))
    return Report.new(
        UpstreamTimeout("upstream timed out"),
        T0,
        Backtrace("at fetch"),
        make_span_context(span_id=0xCAFE),
        children=[cause],
    )


class TestEmitEvents:
    """emit_events() forwards every event in order."""

    def test_emits_in_order_and_counts(self) -> None:
        sink = RecordingSink()
        events = [
            FinishedEvent("exception", T0, ((EXCEPTION_MESSAGE, "a"),)),
            FinishedEvent("exception", T1, ((EXCEPTION_MESSAGE, "b"),)),
        ]
        assert emit_events(sink, events) == 2
        assert sink.events == events

    def test_empty_input(self) -> None:
        assert emit_events(RecordingSink(), []) == 0


class TestAsEvents:
    """Event recording through the fluent surface."""

    def test_default_spec_records_root_only(self) -> None:
        sink = RecordingSink()
        record_report(sink, _report_with_cause(), clock=fixed_clock).as_events()
        assert sink.event_types() == ["UpstreamTimeout"]
        assert sink.events[0].get(EXCEPTION_STACKTRACE) == "at fetch"
        assert sink.events[0].timestamp == T0

    def test_recursive_spec_records_whole_tree(self) -> None:
        sink = RecordingSink()
        record_report(sink, _report_with_cause(), clock=fixed_clock).as_events(EventSpec.standard().recurse())
        assert sink.event_messages() == ["upstream timed out", "bad header"]

    def test_brief_event(self) -> None:
        sink = RecordingSink()
        record_report(sink, _report_with_cause(), clock=fixed_clock).as_event_brief()
        assert len(sink.events) == 1
        assert sink.events[0].keys() == (EXCEPTION_TYPE, EXCEPTION_MESSAGE)

    def test_methods_chain(self) -> None:
        sink = RecordingSink()
        recorder = record_report(sink, _report_with_cause(), clock=fixed_clock)
        assert isinstance(recorder, ReportRecorder)
        assert recorder.as_events().with_error_status().end_span() is recorder


class TestSpanOperations:
    """Status, end time and span attributes."""

    def test_error_status(self) -> None:
        sink = RecordingSink()
        record_report(sink, _report_with_cause()).with_error_status()
        assert len(sink.statuses) == 1
        assert sink.statuses[0].description == "upstream timed out"
        assert sink.statuses[0].error_type == "UpstreamTimeout"

    def test_end_span_at_report_timestamp(self) -> None:
        sink = RecordingSink()
        record_report(sink, _report_with_cause(), clock=fixed_clock).end_span()
        assert sink.ended_at == T0

    def test_end_span_without_timestamp_uses_clock(self) -> None:
        sink = RecordingSink()
        record_report(sink, Report("boom"), clock=fixed_clock).end_span()
        assert sink.ended_at == FIXED_NOW

    def test_span_attributes_stacktrace_is_rendered_tree(self) -> None:
        """The stacktrace carries the whole report, causes included."""
        sink = RecordingSink()
        record_report(sink, _report_with_cause()).on_span_attributes()
        assert sink.span_attributes == {
            EXCEPTION_TYPE: "UpstreamTimeout",
            EXCEPTION_MESSAGE: "upstream timed out",
            EXCEPTION_STACKTRACE: "UpstreamTimeout: upstream timed out\n  | at fetch\n  ValueError: bad header",
        }

    def test_brief_span_attributes(self) -> None:
        sink = RecordingSink()
        record_report(sink, _report_with_cause()).on_span_attributes(brief=True)
        assert EXCEPTION_STACKTRACE not in sink.span_attributes

    def test_span_attributes_without_backtrace(self) -> None:
        sink = RecordingSink()
        record_report(sink, Report("boom")).on_span_attributes()
        assert sink.span_attributes == {
            EXCEPTION_TYPE: "str",
            EXCEPTION_MESSAGE: "boom",
            EXCEPTION_STACKTRACE: "str: boom",
        }

    def test_brief_attributes_helper(self) -> None:
        assert brief_attributes(Report(KeyError("k"))) == (
            (EXCEPTION_TYPE, "KeyError"),
            (EXCEPTION_MESSAGE, "'k'"),
        )


class TestLinkChildReportSpans:
    """Links to spans that reports in the tree were created under."""

    def test_links_every_report_span_in_pre_order(self) -> None:
        sink = RecordingSink(span_context=make_span_context(span_id=0x1))
        record_report(sink, _report_with_cause()).link_child_report_spans()
        assert [link.remote.span_id for link in sink.links] == [0xCAFE, 0xBEEF]
        assert sink.links[1].attributes == (
            (EXCEPTION_TYPE, "ValueError"),
            (EXCEPTION_MESSAGE, "bad header"),
        )

    def test_skips_own_span(self) -> None:
        sink = RecordingSink(span_context=make_span_context(span_id=0xCAFE))
        record_report(sink, _report_with_cause()).link_child_report_spans()
        assert [link.remote.span_id for link in sink.links] == [0xBEEF]

    def test_brief_links_carry_error_type_only(self) -> None:
        sink = RecordingSink()
        record_report(sink, _report_with_cause()).link_child_report_spans(brief=True)
        assert sink.links[0].attributes == ((ERROR_TYPE, "UpstreamTimeout"),)

    def test_reports_without_span_context_are_skipped(self) -> None:
        sink = RecordingSink()
        record_report(sink, Report.new("a", children=[Report("b")])).link_child_report_spans()
        assert sink.links == []
