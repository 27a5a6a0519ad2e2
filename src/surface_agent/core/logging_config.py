"""
Logging
structlog on top of stdlib logging, shared by the validator, router and agent.
"""

import logging
import sys
from typing import Any, MutableMapping

import structlog
from pythonjsonlogger import jsonlogger

# Longest string value emitted in a log event (model output is untrusted)
MAX_LOGGED_VALUE = 200

TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def truncate_values(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Clip long string values so raw model output never floods the logs."""
    for key, value in event_dict.items():
        if key != "event" and isinstance(value, str) and len(value) > MAX_LOGGED_VALUE:
            event_dict[key] = value[:MAX_LOGGED_VALUE] + "..."
    return event_dict


def _stdlib_handler(json_logs: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    if json_logs:
        handler.setFormatter(jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    return handler


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """
    Route structlog events through stdlib logging.

    Args:
        level: Minimum level name; unknown names fall back to INFO
        json_logs: Render events as JSON instead of the console format
    """
    # basicConfig leaves an already configured root logger alone
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), handlers=[_stdlib_handler(json_logs)])

    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            truncate_values,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Logger for a module (pass ``__name__``)."""
    return structlog.get_logger(name)


class LogContext:
    """
    Bind key/value pairs to every event logged inside the block.

    The orchestrator opens one per turn so phase logs carry the entry
    point and action id.
    """

    def __init__(self, **values: Any) -> None:
        self.values = values

    def __enter__(self) -> "LogContext":
        structlog.contextvars.bind_contextvars(**self.values)
        return self

    def __exit__(self, *exc_info: Any) -> None:
        structlog.contextvars.unbind_contextvars(*self.values)
