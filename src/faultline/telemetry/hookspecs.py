# src/faultline/telemetry/hookspecs.py
"""pluggy hook specifications for event sinks.

Sinks implement these hooks to register themselves. The sink factory
calls them to discover which sink names can be used in settings.

Usage (implementing a sink plugin):
    from faultline.telemetry.hookspecs import hookimpl

    class MySinkPlugin:
        @hookimpl
        def faultline_get_sinks(self):
            return [MySink]
"""

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from faultline.telemetry.protocols import ConfigurableSinkProtocol

PROJECT_NAME = "faultline"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class FaultlineSinkSpec:
    """Hook specifications for sink plugins."""

    @hookspec
    def faultline_get_sinks(self) -> list[type["ConfigurableSinkProtocol"]]:  # type: ignore[empty-body]
        """Return sink classes (not instances) implementing ConfigurableSinkProtocol."""
