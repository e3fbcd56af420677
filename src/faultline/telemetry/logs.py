# src/faultline/telemetry/logs.py
"""OpenTelemetry log record sink.

Each projected event becomes one log record:

- the record's event name is the event name (``exception``), repeated
  as the ``event.name`` attribute for backends that only index attributes
- observed timestamp is the event timestamp, timestamp is emission time
- severity comes from the first SeverityNumber attachment, default ERROR
- trace context comes from the first SpanContext attachment, or the one
  passed in explicitly. Without one the record carries no trace id, even
  when a span is active: the sink never reads the ambient context.
- the body is the ``exception.message`` attribute
"""

from __future__ import annotations

from datetime import datetime

from opentelemetry import trace
from opentelemetry._logs import Logger, LogRecord, SeverityNumber
from opentelemetry.context import Context
from opentelemetry.trace import NonRecordingSpan, SpanContext

from faultline.contracts.events import (
    EVENT_NAME,
    EXCEPTION_MESSAGE,
    Attributes,
    FinishedEvent,
    unix_nanos,
)
from faultline.contracts.reports import ReportNodeProtocol
from faultline.projection import EventSpec, project
from faultline.projection.spec import Clock, utc_now
from faultline.reports import find_attachment
from faultline.telemetry.recorder import emit_events


class LoggerSink:
    """Emit events as OpenTelemetry log records on ``logger``."""

    def __init__(
        self,
        logger: Logger,
        *,
        severity: SeverityNumber = SeverityNumber.ERROR,
        span_context: SpanContext | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._logger = logger
        self._severity = severity
        self._span_context = span_context if span_context is not None and span_context.is_valid else None
        # Always a populated context: LogRecord falls back to the current
        # context when given an empty one
        span = NonRecordingSpan(self._span_context) if self._span_context is not None else trace.INVALID_SPAN
        self._context = trace.set_span_in_context(span, Context())
        self._clock = clock

    @property
    def severity(self) -> SeverityNumber:
        return self._severity

    def emit_event(self, name: str, timestamp: datetime, attributes: Attributes) -> None:
        self._logger.emit(self.build_record(name, timestamp, attributes))

    def build_record(self, name: str, timestamp: datetime, attributes: Attributes) -> LogRecord:
        record_attributes = {EVENT_NAME: name, **dict(attributes)}
        return LogRecord(
            timestamp=unix_nanos(self._clock()),
            observed_timestamp=unix_nanos(timestamp),
            context=self._context,
            severity_text=self._severity.name,
            severity_number=self._severity,
            body=record_attributes.get(EXCEPTION_MESSAGE),
            attributes=record_attributes,
            event_name=name,
        )


def emit_report_log(
    logger: Logger,
    report: ReportNodeProtocol,
    spec: EventSpec | None = None,
    *,
    span_context: SpanContext | None = None,
    clock: Clock = utc_now,
) -> list[FinishedEvent]:
    """Project ``report`` and emit one log record per event.

    Args:
        logger: OpenTelemetry logger to emit on
        report: Root report node
        spec: Projection spec, EventSpec.standard() by default
        span_context: Trace context used when the report carries none
        clock: Source of "now"

    Returns:
        The events that were emitted, in order.
    """
    severity = find_attachment(report, SeverityNumber)
    attached_context = find_attachment(report, SpanContext)
    sink = LoggerSink(
        logger,
        severity=severity if severity is not None else SeverityNumber.ERROR,
        span_context=attached_context if attached_context is not None else span_context,
        clock=clock,
    )
    events = project(report, spec if spec is not None else EventSpec.standard(), clock=clock)
    emit_events(sink, events)
    return events
