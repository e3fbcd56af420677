# src/faultline/telemetry/errors.py
"""Telemetry-specific exceptions.

These exceptions are for sink setup only. Projection never raises, and
sink emission logs failures instead of raising.
"""


class SinkConfigurationError(Exception):
    """Raised when a sink cannot be discovered, created or configured.

    Attributes:
        sink_name: Name of the sink that failed
        message: Human-readable error description
    """

    def __init__(self, sink_name: str, message: str) -> None:
        self.sink_name = sink_name
        self.message = message
        super().__init__(f"Sink '{sink_name}' failed: {message}")
