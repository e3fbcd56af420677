# src/faultline/core/logging.py
"""structlog setup driven by LoggingSettings.

faultline modules log through ``structlog.get_logger(__name__)`` with
event-style keys (``sink_configured``, ``report_recorded``). An application
that embeds faultline can keep its own logging setup; this module is for
hosts that load a faultline settings file and want its ``logging`` block
applied:

    settings = load_settings(Path("faultline.yaml"))
    configure_from_settings(settings.logging)

Both structlog and stdlib records are rendered by one ProcessorFormatter
on stderr, so OpenTelemetry's own stdlib warnings come out in the same
format as faultline's events.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.stdlib import ProcessorFormatter

from faultline.core.config import LoggingSettings

# OpenTelemetry SDK loggers report every dropped attribute and export retry
OTEL_LOGGERS: tuple[str, ...] = (
    "opentelemetry",
    "opentelemetry.sdk",
    "opentelemetry.exporter",
)


def _drop_formatter_keys(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    # ProcessorFormatter.format() always adds both keys
    del event_dict["_record"]
    del event_dict["_from_structlog"]
    return event_dict


def _pre_chain() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.stdlib.PositionalArgumentsFormatter(),
    ]


def _renderer_chain(json_output: bool) -> list[Any]:
    if json_output:
        return [
            _drop_formatter_keys,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [_drop_formatter_keys, structlog.dev.ConsoleRenderer(colors=False)]


def configure_from_settings(settings: LoggingSettings) -> None:
    """Apply a ``logging`` settings block to structlog and the root logger.

    OpenTelemetry loggers are held at WARNING or the configured level,
    whichever is stricter.
    """
    level = logging.getLevelName(settings.level)
    pre_chain = _pre_chain()

    structlog.configure(
        processors=[*pre_chain, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Reconfiguration must reach loggers created earlier
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        ProcessorFormatter(
            processors=_renderer_chain(settings.json_output),
            foreign_pre_chain=pre_chain,
        )
    )
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    for name in OTEL_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def configure_logging(*, json_output: bool = False, level: str = "INFO") -> None:
    """Keyword form of configure_from_settings, validated the same way."""
    configure_from_settings(LoggingSettings(level=level, json_output=json_output))
