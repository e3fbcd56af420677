# src/faultline/telemetry/factory.py
"""Factory functions for creating sinks from settings.

Glue between configuration (SinkSettings) and runtime sink instances:
1. Discover sink classes via pluggy hooks
2. Instantiate and configure the sinks named in settings

Usage:
    from faultline.core.config import load_settings
    from faultline.telemetry.factory import create_sinks

    settings = load_settings(Path("faultline.yaml"))
    sinks = create_sinks(settings.sinks)
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

import pluggy
import structlog

from faultline.telemetry.errors import SinkConfigurationError
from faultline.telemetry.exporters import BuiltinSinksPlugin
from faultline.telemetry.hookspecs import PROJECT_NAME, FaultlineSinkSpec
from faultline.telemetry.protocols import ConfigurableSinkProtocol

if TYPE_CHECKING:
    from faultline.core.config import SinkSettings

logger = structlog.get_logger(__name__)


def _resolve_sink_name(sink_class: type[ConfigurableSinkProtocol]) -> str:
    """Resolve a sink's settings name from its class.

    Prefers a class-level ``_name`` to avoid instantiating plugin code.

    Raises:
        SinkConfigurationError: If the name is missing or not a non-empty string.
    """
    class_name = getattr(sink_class, "__name__", repr(sink_class))
    if "_name" in sink_class.__dict__:
        name_hint = sink_class.__dict__["_name"]
        if type(name_hint) is str and name_hint != "":
            return name_hint
        raise SinkConfigurationError(
            class_name,
            f"Sink class attribute _name must be a non-empty string, got {name_hint!r}",
        )

    try:
        instance = sink_class()
    except Exception as e:
        raise SinkConfigurationError(
            class_name,
            f"Failed to instantiate sink class during discovery: {e}",
        ) from e

    resolved = instance.name
    if type(resolved) is not str or resolved == "":
        raise SinkConfigurationError(class_name, f"Sink name must be a non-empty string, got {resolved!r}")
    return resolved


def discover_sink_registry(sink_plugins: Iterable[Any] = ()) -> dict[str, type[ConfigurableSinkProtocol]]:
    """Discover sinks via pluggy hooks.

    Registers the built-in sinks plus any plugin objects given by the
    caller, then builds the name->class registry.

    Raises:
        SinkConfigurationError: If a plugin is invalid, a hook misbehaves,
            or two sinks share a name.
    """
    plugin_manager = pluggy.PluginManager(PROJECT_NAME)
    plugin_manager.add_hookspecs(FaultlineSinkSpec)

    for plugin in (BuiltinSinksPlugin(), *sink_plugins):
        try:
            plugin_manager.register(plugin)
            plugin_manager.check_pending()
        except (pluggy.PluginValidationError, ValueError) as e:
            if isinstance(e, pluggy.PluginValidationError):
                plugin_manager.unregister(plugin=plugin)
            raise SinkConfigurationError(
                "sink_plugins",
                f"Invalid sink plugin {type(plugin).__name__}: {e}",
            ) from e

    registry: dict[str, type[ConfigurableSinkProtocol]] = {}
    for hook_impl in plugin_manager.hook.faultline_get_sinks.get_hookimpls():
        plugin_name = type(hook_impl.plugin).__name__
        try:
            sink_classes = hook_impl.function()
        except Exception as e:
            raise SinkConfigurationError(
                "sink_plugins",
                f"Sink plugin {plugin_name} failed in faultline_get_sinks: {e}",
            ) from e

        if sink_classes is None or type(sink_classes) in (str, bytes):
            raise SinkConfigurationError(
                "sink_plugins",
                f"faultline_get_sinks in plugin {plugin_name} returned {type(sink_classes).__name__}; expected iterable of sink classes",
            )

        for sink_class in sink_classes:
            sink_name = _resolve_sink_name(sink_class)
            if sink_name in registry:
                raise SinkConfigurationError(
                    sink_name,
                    f"Duplicate sink name '{sink_name}' discovered: {registry[sink_name].__name__} and {sink_class.__name__}",
                )
            registry[sink_name] = sink_class

    return registry


def create_sinks(
    sink_settings: Iterable[SinkSettings],
    *,
    sink_plugins: Iterable[Any] = (),
) -> list[ConfigurableSinkProtocol]:
    """Instantiate and configure every sink named in settings.

    Raises:
        SinkConfigurationError: If discovery fails, a name is unknown, or a
            sink rejects its options.
    """
    registry = discover_sink_registry(sink_plugins)

    sinks: list[ConfigurableSinkProtocol] = []
    for settings in sink_settings:
        try:
            sink_class = registry[settings.name]
        except KeyError:
            raise SinkConfigurationError(
                settings.name,
                f"Unknown sink. Available sinks: {sorted(registry)}",
            ) from None

        sink = sink_class()
        sink.configure(dict(settings.options))
        sinks.append(sink)
        logger.debug("sink_created", sink=settings.name, options_keys=sorted(settings.options))

    if not sinks:
        logger.warning("no_sinks_configured")

    return sinks
