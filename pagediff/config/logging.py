"""structlog configuration for pagediff runs."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from collections.abc import MutableMapping
    from typing import TextIO

APP_NAME = "pagediff"


def resolve_level(name: str) -> int:
    """Map a level name such as ``"debug"`` to its number; unknown names mean INFO."""
    return logging.getLevelNamesMapping().get(name.upper(), logging.INFO)


def _add_app_name(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    event_dict.setdefault("app", APP_NAME)
    return event_dict


def setup_logging(
    log_level: str = "INFO",
    json_output: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Send pagediff events to ``stream`` (stderr unless given).

    Events below ``log_level`` are dropped by the bound logger before any
    processor runs. Each event records the module that emitted it. Output is
    JSON when asked for or when the stream is not a terminal.
    """
    stream = stream or sys.stderr
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        _add_app_name,
        structlog.processors.CallsiteParameterAdder(
            [structlog.processors.CallsiteParameter.MODULE]
        ),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_output or not stream.isatty():
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(resolve_level(log_level)),
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=False,
    )
