"""Built-in, settings-creatable sinks.

Available sinks:
- ConsoleSink: Write events to stdout/stderr for debugging
- OTelLogSink: Emit events as OpenTelemetry log records

Span sinks are not listed here: they need a live span, which settings
cannot provide. Use faultline.telemetry.span.SpanSink directly.

Plugin registration:
    Sinks are registered via the faultline_get_sinks hook.
    BuiltinSinksPlugin registers all built-in sinks.
"""

from faultline.telemetry.exporters.console import ConsoleSink
from faultline.telemetry.exporters.otel_logs import OTelLogSink
from faultline.telemetry.hookspecs import hookimpl


class BuiltinSinksPlugin:
    """Plugin that registers built-in sinks."""

    @hookimpl
    def faultline_get_sinks(self) -> list[type]:
        return [ConsoleSink, OTelLogSink]


__all__ = [
    "BuiltinSinksPlugin",
    "ConsoleSink",
    "OTelLogSink",
]
