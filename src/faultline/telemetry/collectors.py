# src/faultline/telemetry/collectors.py
"""Report creation metadata.

Reports carry the time they were created and the span they were created
under, so that events can be stamped correctly and causally linked later
even when they are recorded somewhere else.
"""

from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Span

from faultline.projection.spec import Clock, utc_now
from faultline.reports import Report


def collect_metadata(span: Span | None = None, *, clock: Clock = utc_now) -> list[Any]:
    """Creation timestamp plus the span context, when it is valid.

    Args:
        span: Span the report is created under. Defaults to the span
            active in the current OpenTelemetry context.
        clock: Source of the creation timestamp
    """
    metadata: list[Any] = [clock()]
    if span is None:
        span = trace.get_current_span()
    span_context = span.get_span_context()
    if span_context.is_valid:
        metadata.append(span_context)
    return metadata


def new_report(context: Any, *attachments: Any, span: Span | None = None, clock: Clock = utc_now) -> Report:
    """Create a report stamped with creation metadata."""
    return Report.new(context, *collect_metadata(span, clock=clock), *attachments)
