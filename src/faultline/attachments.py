# src/faultline/attachments.py
"""Reserved attachment types and attachment formatting.

Three attachment types are reserved because dedicated event fields
surface them:

- ``datetime.datetime``: when the report was created (event timestamp)
- ``Backtrace``: where the failure happened (``exception.stacktrace``)
- ``Location``: the innermost source location

Trace contexts are attached as ``opentelemetry.trace.SpanContext`` and
key/value data as ``Attribute``. Any other value can be attached too; it
is formatted with ``str()``.
"""

from __future__ import annotations

import functools
import sys
import traceback
from dataclasses import dataclass
from datetime import datetime
from types import TracebackType

from opentelemetry.trace import SpanContext

from faultline.contracts.events import AttributeValue


@dataclass(frozen=True, slots=True)
class Backtrace:
    """Formatted stack frames captured alongside a report."""

    text: str

    @classmethod
    def from_traceback(cls, tb: TracebackType) -> Backtrace:
        return cls("".join(traceback.format_tb(tb)).rstrip("\n"))

    @classmethod
    def capture(cls, skip: int = 0) -> Backtrace:
        """Capture the current stack, dropping this call and ``skip`` callers."""
        frames = traceback.format_stack()[: -(skip + 1)]
        return cls("".join(frames).rstrip("\n"))

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class Location:
    """A single source location."""

    filename: str
    lineno: int
    function: str | None = None

    @classmethod
    def from_traceback(cls, tb: TracebackType) -> Location:
        """Location of the innermost frame of ``tb``."""
        frame = traceback.extract_tb(tb)[-1]
        return cls(frame.filename, frame.lineno or 0, frame.name)

    @classmethod
    def caller(cls, depth: int = 0) -> Location:
        """Location of the code calling this method, ``depth`` frames up."""
        frame = sys._getframe(depth + 1)
        return cls(frame.f_code.co_filename, frame.f_lineno, frame.f_code.co_name)

    def __str__(self) -> str:
        if self.function:
            return f"{self.filename}:{self.lineno} in {self.function}"
        return f"{self.filename}:{self.lineno}"


@dataclass(frozen=True, slots=True)
class Attribute:
    """Key/value data attached to a report."""

    key: str
    value: AttributeValue

    def __str__(self) -> str:
        return f"{self.key}: {self.value}"


@functools.singledispatch
def format_attachment(value: object) -> str:
    """Render an attachment value as text."""
    return str(value)


@format_attachment.register
def _format_datetime(value: datetime) -> str:
    return value.isoformat()


@format_attachment.register
def _format_span_context(value: SpanContext) -> str:
    # W3C traceparent, then the tracestate header on its own line
    text = f"00-{value.trace_id:032x}-{value.span_id:016x}-{int(value.trace_flags):02x}"
    header = value.trace_state.to_header() if value.trace_state is not None else ""
    if header:
        text = f"{text}\n{header}"
    return text
