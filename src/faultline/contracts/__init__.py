"""Shared contracts for cross-boundary data types.

The report capability protocols and the finished event shape cross the
boundary between the projection core and the telemetry sinks, so they
are defined here.

This package is a LEAF MODULE with no outbound dependencies to projection
or telemetry. Settings classes are NOT re-exported here - import them from
faultline.core.config.
"""

from faultline.contracts.events import (
    ERROR_TYPE,
    EVENT_NAME,
    EXCEPTION,
    EXCEPTION_ESCAPED,
    EXCEPTION_EXTRAS,
    EXCEPTION_MESSAGE,
    EXCEPTION_STACKTRACE,
    EXCEPTION_TYPE,
    Attributes,
    AttributeValue,
    FinishedEvent,
)
from faultline.contracts.reports import AttachmentProtocol, ReportNodeProtocol

__all__ = [
    "ERROR_TYPE",
    "EVENT_NAME",
    "EXCEPTION",
    "EXCEPTION_ESCAPED",
    "EXCEPTION_EXTRAS",
    "EXCEPTION_MESSAGE",
    "EXCEPTION_STACKTRACE",
    "EXCEPTION_TYPE",
    "AttachmentProtocol",
    "AttributeValue",
    "Attributes",
    "FinishedEvent",
    "ReportNodeProtocol",
]
