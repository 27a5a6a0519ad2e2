"""
Operation Tracing
Structured timing logs around agent phases.
"""

import time
from contextlib import contextmanager
from typing import Any, Iterator

from .logging_config import get_logger

logger = get_logger(__name__)

SLOW_OPERATION_SECONDS = 1.0


@contextmanager
def trace_operation(operation: str, **kwargs: Any) -> Iterator[None]:
    """
    Context manager for tracing operations with structured logging.

    Args:
        operation: Name of the operation
        **kwargs: Additional context to log
    """
    start = time.perf_counter()
    logger.debug("operation_start", operation=operation, **kwargs)

    try:
        yield
    except Exception as e:
        logger.error(
            "operation_error",
            operation=operation,
            error=str(e),
            duration_ms=(time.perf_counter() - start) * 1000,
            **kwargs,
        )
        raise
    else:
        duration = time.perf_counter() - start
        event = "operation_slow" if duration > SLOW_OPERATION_SECONDS else "operation_end"
        log = logger.warning if duration > SLOW_OPERATION_SECONDS else logger.info
        log(event, operation=operation, duration_ms=duration * 1000, **kwargs)
