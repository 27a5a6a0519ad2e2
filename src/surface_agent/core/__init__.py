"""Core utilities and infrastructure."""

from .config import Settings, get_settings
from .logging_config import configure_logging, get_logger, LogContext
from .json import (
    extract_json,
    safe_json_dumps,
    strict_loads,
    JSONParseError,
    validate_json_size,
    validate_json_depth,
)
from .validate import (
    RequestValidationError,
    QueryRequest,
    ActionRequest,
    validate_request,
)
from .tracing import trace_operation


def create_container(settings: Settings | None = None):
    """Create dependency injection container (lazy import to avoid circular deps)."""
    from .container import create_container as _create_container

    return _create_container(settings)


__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Logging
    "configure_logging",
    "get_logger",
    "LogContext",
    "trace_operation",
    # JSON
    "extract_json",
    "safe_json_dumps",
    "strict_loads",
    "JSONParseError",
    "validate_json_size",
    "validate_json_depth",
    # Requests
    "RequestValidationError",
    "QueryRequest",
    "ActionRequest",
    "validate_request",
    # DI
    "create_container",
]
