# src/faultline/contracts/events.py
"""Finished event contract.

A FinishedEvent is the output of compiling one report node against an
event spec. It is handed to a sink immediately and then discarded.

Attribute keys follow the OpenTelemetry semantic conventions for
exceptions on spans, plus ``exception.extras`` for attachment texts that
have no dedicated attribute.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TypeAlias

# Event name used for every diagnostic occurrence
EXCEPTION = "exception"

EXCEPTION_TYPE = "exception.type"
EXCEPTION_MESSAGE = "exception.message"
EXCEPTION_STACKTRACE = "exception.stacktrace"
EXCEPTION_ESCAPED = "exception.escaped"
EXCEPTION_EXTRAS = "exception.extras"
ERROR_TYPE = "error.type"
EVENT_NAME = "event.name"

AttributeValue: TypeAlias = bool | int | float | str | tuple[str, ...]
Attributes: TypeAlias = tuple[tuple[str, AttributeValue], ...]

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


@dataclass(frozen=True, slots=True)
class FinishedEvent:
    """One compiled ``exception`` event.

    Attributes:
        name: Event name (always EXCEPTION for projected reports)
        timestamp: Concrete, timezone-aware event time
        attributes: Ordered (key, value) pairs. Multi-valued attributes
            are tuples of strings.
    """

    name: str
    timestamp: datetime
    attributes: Attributes = ()

    def get(self, key: str) -> AttributeValue | None:
        """Return the first value recorded under ``key``, or None."""
        for attr_key, value in self.attributes:
            if attr_key == key:
                return value
        return None

    def keys(self) -> tuple[str, ...]:
        return tuple(key for key, _ in self.attributes)


def freeze_attributes(pairs: Sequence[tuple[str, AttributeValue]]) -> Attributes:
    """Normalize attribute pairs: list values become tuples."""
    frozen: list[tuple[str, AttributeValue]] = []
    for key, value in pairs:
        if isinstance(value, list):
            value = tuple(value)
        frozen.append((key, value))
    return tuple(frozen)


def unix_nanos(timestamp: datetime) -> int:
    """Integer nanoseconds since the epoch, as OpenTelemetry expects.

    Naive datetimes are taken to be UTC.
    """
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=UTC)
    return (timestamp - _EPOCH) // timedelta(microseconds=1) * 1_000
