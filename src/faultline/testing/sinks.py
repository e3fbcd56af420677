# src/faultline/testing/sinks.py
"""In-memory sink implementing SpanSinkProtocol and ConfigurableSinkProtocol."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from opentelemetry.trace import SpanContext

from faultline.contracts.events import (
    EXCEPTION_MESSAGE,
    EXCEPTION_TYPE,
    Attributes,
    FinishedEvent,
    freeze_attributes,
)


@dataclass(frozen=True, slots=True)
class RecordedStatus:
    description: str
    error_type: str


@dataclass(frozen=True, slots=True)
class RecordedLink:
    remote: SpanContext
    attributes: Attributes


class RecordingSink:
    """Sink that keeps everything in memory.

    Example:
        sink = RecordingSink()
        record_report(sink, report).as_events().with_error_status()
        assert sink.event_types() == ["OSError"]
        assert sink.statuses[0].error_type == "OSError"
    """

    _name = "recording"

    def __init__(self, span_context: SpanContext | None = None) -> None:
        self._span_context = span_context
        self.events: list[FinishedEvent] = []
        self.statuses: list[RecordedStatus] = []
        self.links: list[RecordedLink] = []
        self.span_attributes: dict[str, Any] = {}
        self.ended_at: datetime | None = None
        self.options: dict[str, Any] = {}
        self.flush_count = 0
        self.close_count = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def span_context(self) -> SpanContext | None:
        return self._span_context

    def configure(self, config: dict[str, Any]) -> None:
        self.options = dict(config)

    def emit_event(self, name: str, timestamp: datetime, attributes: Attributes) -> None:
        self.events.append(FinishedEvent(name, timestamp, freeze_attributes(attributes)))

    def set_status(self, description: str, error_type: str) -> None:
        self.statuses.append(RecordedStatus(description, error_type))

    def add_link(self, remote: SpanContext, attributes: Attributes) -> None:
        self.links.append(RecordedLink(remote, freeze_attributes(attributes)))

    def set_attributes(self, attributes: Attributes) -> None:
        self.span_attributes.update(dict(attributes))

    def end(self, timestamp: datetime) -> None:
        self.ended_at = timestamp

    def flush(self) -> None:
        self.flush_count += 1

    def close(self) -> None:
        self.close_count += 1

    # Assertion helpers

    def event_types(self) -> list[Any]:
        """``exception.type`` of every recorded event, in order."""
        return [event.get(EXCEPTION_TYPE) for event in self.events]

    def event_messages(self) -> list[Any]:
        """``exception.message`` of every recorded event, in order."""
        return [event.get(EXCEPTION_MESSAGE) for event in self.events]
