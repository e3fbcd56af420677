# src/faultline/telemetry/protocols.py
"""Protocol definitions for event sinks.

A sink is wherever finished events end up: an OpenTelemetry span, a log
record stream, the console. The projection core never calls a sink; the
calling code hands projected events to one.

Sinks receive their target explicitly (a span, a logger) rather than
looking up process-wide "current" state.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from faultline.contracts.events import Attributes

if TYPE_CHECKING:
    from opentelemetry.trace import SpanContext


@runtime_checkable
class EventSinkProtocol(Protocol):
    """Anything that can record a named, timestamped event."""

    def emit_event(self, name: str, timestamp: datetime, attributes: Attributes) -> None:
        """Record one event.

        Args:
            name: Event name (``exception`` for projected reports)
            timestamp: Event time
            attributes: Ordered (key, value) pairs
        """
        ...


@runtime_checkable
class SpanSinkProtocol(EventSinkProtocol, Protocol):
    """A sink backed by a span: events plus status, links and lifetime."""

    @property
    def span_context(self) -> "SpanContext | None":
        """Context of the span being written to, if it has one."""
        ...

    def set_status(self, description: str, error_type: str) -> None:
        """Mark the span as failed."""
        ...

    def add_link(self, remote: "SpanContext", attributes: Attributes) -> None:
        """Link the span to another, externally tracked unit of work."""
        ...

    def set_attributes(self, attributes: Attributes) -> None:
        """Set attributes on the span itself."""
        ...

    def end(self, timestamp: datetime) -> None:
        """End the span at ``timestamp``."""
        ...


@runtime_checkable
class ConfigurableSinkProtocol(EventSinkProtocol, Protocol):
    """A sink that can be created from settings.

    Lifecycle:
        1. Discovery: faultline_get_sinks hook returns sink classes
        2. Instantiation: the factory creates instances with no arguments
        3. Configuration: configure() called with sink-specific options
        4. Operation: emit_event() called per event (must not raise)
        5. Shutdown: flush() then close()

    Error handling:
        - configure() MUST raise SinkConfigurationError on invalid options
        - emit_event() MUST NOT raise - log errors and continue
        - close() MUST be idempotent
    """

    @property
    def name(self) -> str:
        """Sink name used in settings (``sinks: [{name: console}]``)."""
        ...

    def configure(self, config: dict[str, Any]) -> None:
        """Apply sink-specific options.

        Raises:
            SinkConfigurationError: If options are invalid
        """
        ...

    def flush(self) -> None:
        ...

    def close(self) -> None:
        ...
