# src/faultline/telemetry/exporters/console.py
"""Console sink for projected events.

Writes events to stdout or stderr in JSON or human-readable format.
Primarily used for local debugging and in tests.
"""

from __future__ import annotations

import json
import sys
from datetime import datetime
from typing import Any, Literal, TextIO, TypeGuard

import structlog

from faultline.contracts.events import EXCEPTION_MESSAGE, EXCEPTION_TYPE, Attributes
from faultline.telemetry.errors import SinkConfigurationError

logger = structlog.get_logger(__name__)


def _is_valid_format(v: str) -> TypeGuard[Literal["json", "pretty"]]:
    return v in {"json", "pretty"}


def _is_valid_output(v: str) -> TypeGuard[Literal["stdout", "stderr"]]:
    return v in {"stdout", "stderr"}


class ConsoleSink:
    """Write events to stdout/stderr.

    Supports two output formats:
    - json: One JSON object per line (for machine processing)
    - pretty: ``[TIMESTAMP] name: type: message (key=value, ...)``

    Configuration options:
        format: Output format - "json" (default) or "pretty"
        output: Output stream - "stdout" (default) or "stderr"

    Example configuration:
        sinks:
          - name: console
            options:
              format: pretty
              output: stderr
    """

    _name = "console"

    _VALID_FORMATS: frozenset[str] = frozenset({"json", "pretty"})
    _VALID_OUTPUTS: frozenset[str] = frozenset({"stdout", "stderr"})

    def __init__(self, stream: TextIO | None = None) -> None:
        """Initialize unconfigured sink.

        Args:
            stream: Write here instead of the configured standard stream.
        """
        self._format: Literal["json", "pretty"] = "json"
        self._output: Literal["stdout", "stderr"] = "stdout"
        self._override = stream
        self._stream: TextIO = stream if stream is not None else sys.stdout

    @property
    def name(self) -> str:
        return self._name

    def configure(self, config: dict[str, Any]) -> None:
        """Apply sink options.

        Raises:
            SinkConfigurationError: If option values are invalid
        """
        format_value = config.get("format", "json")
        if not isinstance(format_value, str):
            raise SinkConfigurationError(
                self._name,
                f"'format' must be a string, got {type(format_value).__name__}",
            )
        if _is_valid_format(format_value):
            self._format = format_value
        else:
            raise SinkConfigurationError(
                self._name,
                f"Invalid format '{format_value}'. Must be one of: {', '.join(sorted(self._VALID_FORMATS))}",
            )

        output_value = config.get("output", "stdout")
        if not isinstance(output_value, str):
            raise SinkConfigurationError(
                self._name,
                f"'output' must be a string, got {type(output_value).__name__}",
            )
        if _is_valid_output(output_value):
            self._output = output_value
        else:
            raise SinkConfigurationError(
                self._name,
                f"Invalid output '{output_value}'. Must be one of: {', '.join(sorted(self._VALID_OUTPUTS))}",
            )
        if self._override is None:
            self._stream = sys.stdout if self._output == "stdout" else sys.stderr

        logger.debug("sink_configured", sink=self._name, format=self._format, output=self._output)

    def emit_event(self, name: str, timestamp: datetime, attributes: Attributes) -> None:
        """Write one event. Never raises; failures are logged."""
        try:
            if self._format == "json":
                line = json.dumps(self._serialize_event(name, timestamp, attributes))
            else:
                line = self._format_pretty(name, timestamp, attributes)
            print(line, file=self._stream)
        except Exception as e:
            logger.warning(
                "Failed to write event",
                sink=self._name,
                event_name=name,
                error=str(e),
            )

    def _serialize_event(self, name: str, timestamp: datetime, attributes: Attributes) -> dict[str, Any]:
        data: dict[str, Any] = {"name": name, "timestamp": timestamp.isoformat()}
        data["attributes"] = {key: list(value) if isinstance(value, tuple) else value for key, value in attributes}
        return data

    def _format_pretty(self, name: str, timestamp: datetime, attributes: Attributes) -> str:
        values = dict(attributes)
        head = f"[{timestamp.isoformat()}] {name}"
        if EXCEPTION_TYPE in values:
            head = f"{head}: {values[EXCEPTION_TYPE]}"
        if EXCEPTION_MESSAGE in values:
            head = f"{head}: {values[EXCEPTION_MESSAGE]}"

        details = []
        for key, value in attributes:
            if key in (EXCEPTION_TYPE, EXCEPTION_MESSAGE):
                continue
            if isinstance(value, tuple):
                value = list(value)
            details.append(f"{key}={value}")
        if details:
            return f"{head} ({', '.join(details)})"
        return head

    def flush(self) -> None:
        try:
            self._stream.flush()
        except Exception as e:
            logger.warning("Failed to flush console stream", sink=self._name, error=str(e))

    def close(self) -> None:
        """No-op: the console sink does not own its stream."""
        pass
