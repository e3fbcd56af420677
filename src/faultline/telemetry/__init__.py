# src/faultline/telemetry/__init__.py
"""Telemetry sinks for projected report events.

Components:
- protocols: EventSinkProtocol, SpanSinkProtocol, ConfigurableSinkProtocol
- span: SpanSink for OpenTelemetry spans
- logs: LoggerSink and emit_report_log for OpenTelemetry log records
- recorder: emit_events and the fluent ReportRecorder
- collectors: report creation metadata (timestamp, span context)
- hookspecs: pluggy hooks for sink discovery
- factory: create_sinks() from settings
- exporters: built-in settings-creatable sinks (ConsoleSink, OTelLogSink)
- errors: SinkConfigurationError

Usage:
    from faultline.telemetry import SpanSink, record_report

    with tracer.start_as_current_span("work") as span:
        record_report(SpanSink(span), report).as_events().with_error_status()
"""

from faultline.telemetry.collectors import collect_metadata, new_report
from faultline.telemetry.errors import SinkConfigurationError
from faultline.telemetry.exporters import ConsoleSink, OTelLogSink
from faultline.telemetry.factory import create_sinks, discover_sink_registry
from faultline.telemetry.logs import LoggerSink, emit_report_log
from faultline.telemetry.protocols import (
    ConfigurableSinkProtocol,
    EventSinkProtocol,
    SpanSinkProtocol,
)
from faultline.telemetry.recorder import ReportRecorder, brief_attributes, emit_events, record_report
from faultline.telemetry.span import SpanSink

__all__ = [
    "ConfigurableSinkProtocol",
    "ConsoleSink",
    "EventSinkProtocol",
    "LoggerSink",
    "OTelLogSink",
    "ReportRecorder",
    "SinkConfigurationError",
    "SpanSink",
    "SpanSinkProtocol",
    "brief_attributes",
    "collect_metadata",
    "create_sinks",
    "discover_sink_registry",
    "emit_events",
    "emit_report_log",
    "new_report",
    "record_report",
]
