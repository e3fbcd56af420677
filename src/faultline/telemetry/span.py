# src/faultline/telemetry/span.py
"""OpenTelemetry span sink.

Adapts an ``opentelemetry.trace.Span`` to SpanSinkProtocol. Timestamps are
converted to integer nanoseconds since the epoch.

Usage:
    tracer = provider.get_tracer("app")
    with tracer.start_as_current_span("work") as span:
        sink = SpanSink(span)
        record_report(sink, report).as_events().with_error_status()
"""

from datetime import datetime

from opentelemetry import trace
from opentelemetry.trace import Span, SpanContext, Status, StatusCode

from faultline.contracts.events import ERROR_TYPE, Attributes, unix_nanos


class SpanSink:
    """Write events, status and links onto one span."""

    def __init__(self, span: Span) -> None:
        self._span = span

    @classmethod
    def current(cls) -> "SpanSink":
        """Sink for the span active in the current OpenTelemetry context."""
        return cls(trace.get_current_span())

    @property
    def span(self) -> Span:
        return self._span

    @property
    def span_context(self) -> SpanContext | None:
        return self._span.get_span_context()

    def emit_event(self, name: str, timestamp: datetime, attributes: Attributes) -> None:
        self._span.add_event(name, attributes=dict(attributes), timestamp=unix_nanos(timestamp))

    def set_status(self, description: str, error_type: str) -> None:
        self._span.set_attribute(ERROR_TYPE, error_type)
        self._span.set_status(Status(StatusCode.ERROR, description))

    def add_link(self, remote: SpanContext, attributes: Attributes) -> None:
        self._span.add_link(remote, attributes=dict(attributes))

    def set_attributes(self, attributes: Attributes) -> None:
        self._span.set_attributes(dict(attributes))

    def end(self, timestamp: datetime) -> None:
        self._span.end(end_time=unix_nanos(timestamp))
