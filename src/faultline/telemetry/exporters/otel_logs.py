# src/faultline/telemetry/exporters/otel_logs.py
"""Settings-driven OpenTelemetry log sink.

Wraps LoggerSink around a logger obtained from the globally configured
OpenTelemetry LoggerProvider. Exporter wiring (which provider, which
exporter) belongs to the application.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

import structlog
from opentelemetry._logs import SeverityNumber, get_logger

from faultline.contracts.events import Attributes
from faultline.telemetry.errors import SinkConfigurationError
from faultline.telemetry.logs import LoggerSink

logger = structlog.get_logger(__name__)


class OTelLogSink:
    """Emit events as OpenTelemetry log records.

    Configuration options:
        logger_name: Name passed to ``get_logger`` (default: "faultline")
        severity: Severity name, e.g. "ERROR" (default), "WARN", "FATAL"
    """

    _name = "otel_logs"

    def __init__(self) -> None:
        self._sink: LoggerSink | None = None

    @property
    def name(self) -> str:
        return self._name

    def configure(self, config: dict[str, Any]) -> None:
        logger_name = config.get("logger_name", "faultline")
        if not isinstance(logger_name, str) or not logger_name:
            raise SinkConfigurationError(self._name, f"'logger_name' must be a non-empty string, got {logger_name!r}")

        severity_name = config.get("severity", "ERROR")
        if not isinstance(severity_name, str):
            raise SinkConfigurationError(
                self._name,
                f"'severity' must be a string, got {type(severity_name).__name__}",
            )
        try:
            severity = SeverityNumber[severity_name.upper()]
        except KeyError:
            raise SinkConfigurationError(self._name, f"Unknown severity '{severity_name}'") from None

        self._sink = LoggerSink(get_logger(logger_name), severity=severity)
        logger.debug("sink_configured", sink=self._name, logger_name=logger_name, severity=severity.name)

    def emit_event(self, name: str, timestamp: datetime, attributes: Attributes) -> None:
        """Emit one log record. Never raises; failures are logged."""
        if self._sink is None:
            logger.warning("OTel log sink not configured, dropping event", sink=self._name, event_name=name)
            return
        try:
            self._sink.emit_event(name, timestamp, attributes)
        except Exception as e:
            logger.warning("Failed to emit log record", sink=self._name, event_name=name, error=str(e))

    def flush(self) -> None:
        """No-op: batching belongs to the LoggerProvider's processors."""
        pass

    def close(self) -> None:
        self._sink = None
