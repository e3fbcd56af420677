# src/faultline/telemetry/recorder.py
"""Recording report trees on sinks.

``emit_events`` hands projected events to any EventSinkProtocol in order.
``ReportRecorder`` is the fluent surface used around a span:

    record_report(SpanSink(span), report)
        .link_child_report_spans()
        .as_event_brief()
        .with_error_status()

Status, links and span attributes are independent of projection; they
are called by the code around the projector, never by it.
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog
from opentelemetry.trace import SpanContext

from faultline.contracts.events import (
    ERROR_TYPE,
    EXCEPTION_MESSAGE,
    EXCEPTION_STACKTRACE,
    EXCEPTION_TYPE,
    AttributeValue,
    Attributes,
    FinishedEvent,
)
from faultline.contracts.reports import ReportNodeProtocol
from faultline.projection import EventSpec, classify, project
from faultline.projection.spec import Clock, utc_now
from faultline.reports import find_attachment, iter_reports, render_report
from faultline.telemetry.protocols import EventSinkProtocol, SpanSinkProtocol

logger = structlog.get_logger(__name__)


def emit_events(sink: EventSinkProtocol, events: Iterable[FinishedEvent]) -> int:
    """Emit ``events`` on ``sink`` in order. Returns the number emitted."""
    count = 0
    for event in events:
        sink.emit_event(event.name, event.timestamp, event.attributes)
        count += 1
    return count


def brief_attributes(node: ReportNodeProtocol) -> Attributes:
    """Type and message of a report node."""
    return (
        (EXCEPTION_TYPE, node.context_type_name()),
        (EXCEPTION_MESSAGE, node.formatted_context()),
    )


def record_report(sink: SpanSinkProtocol, report: ReportNodeProtocol, *, clock: Clock = utc_now) -> ReportRecorder:
    return ReportRecorder(sink, report, clock=clock)


class ReportRecorder:
    """Fluent recorder for one report on one span sink.

    Every method returns the recorder so calls can be chained.
    """

    def __init__(self, sink: SpanSinkProtocol, report: ReportNodeProtocol, *, clock: Clock = utc_now) -> None:
        self._sink = sink
        self._report = report
        self._clock = clock

    def as_events(self, spec: EventSpec | None = None) -> ReportRecorder:
        """Project the report with ``spec`` and emit every event.

        Defaults to EventSpec.standard(), which does not recurse.
        """
        events = project(self._report, spec if spec is not None else EventSpec.standard(), clock=self._clock)
        emitted = emit_events(self._sink, events)
        logger.debug("report_recorded", events=emitted, context_type=self._report.context_type_name())
        return self

    def as_event_brief(self) -> ReportRecorder:
        """One event with type and message only."""
        return self.as_events(EventSpec.brief())

    def with_error_status(self) -> ReportRecorder:
        """Set the span status to error, described by the report context."""
        self._sink.set_status(self._report.formatted_context(), self._report.context_type_name())
        return self

    def end_span(self) -> ReportRecorder:
        """End the span at the report's timestamp, or now if it has none."""
        digest = classify(self._report)
        self._sink.end(digest.timestamp if digest.timestamp is not None else self._clock())
        return self

    def on_span_attributes(self, *, brief: bool = False) -> ReportRecorder:
        """Set the exception attributes on the span itself.

        Unless ``brief``, the stacktrace is the rendering of the whole
        report tree, so causes and their attachments travel with the span.
        """
        attributes: list[tuple[str, AttributeValue]] = list(brief_attributes(self._report))
        if not brief:
            attributes.append((EXCEPTION_STACKTRACE, render_report(self._report)))
        self._sink.set_attributes(tuple(attributes))
        return self

    def link_child_report_spans(self, *, brief: bool = False) -> ReportRecorder:
        """Link every span a report in the tree was created under.

        Walks the whole tree in pre-order. Reports without a trace context
        attachment, or created under the sink's own span, are skipped.
        ``brief`` links carry only ``error.type``.
        """
        own_context = self._sink.span_context
        linked = 0
        for node in iter_reports(self._report):
            remote = find_attachment(node, SpanContext)
            if remote is None or remote == own_context:
                continue
            if brief:
                attributes: Attributes = ((ERROR_TYPE, node.context_type_name()),)
            else:
                attributes = brief_attributes(node)
            self._sink.add_link(remote, attributes)
            linked += 1
        logger.debug("report_spans_linked", links=linked)
        return self
