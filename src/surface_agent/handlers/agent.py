"""Agent Handler."""

from typing import Any, Callable

from pydantic import ValidationError as PydanticValidationError

from ..agents import AgentContext, AgentOrchestrator
from ..core import (
    ActionRequest,
    QueryRequest,
    RequestValidationError,
    get_logger,
    validate_request,
)
from .responses import HandlerResponse, exception_response

logger = get_logger(__name__)


def _context(raw: dict[str, Any]) -> AgentContext:
    try:
        return AgentContext.coerce(raw)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        raise RequestValidationError(f"context.{field}: {first.get('msg', 'invalid value')}", "context") from e


class AgentHandler:
    """
    Handles "submit query" and "submit action" operations.

    Each request runs on a fresh orchestrator from ``orchestrator_factory``.
    """

    def __init__(self, orchestrator_factory: Callable[[], AgentOrchestrator]) -> None:
        self.orchestrator_factory = orchestrator_factory

    def submit_query(self, query: Any, context: Any = None) -> HandlerResponse:
        """Generate a surface for a natural-language query."""
        try:
            request = validate_request(QueryRequest, query=query, context={} if context is None else context)
            logger.info("query", query=request.query[:50])

            response = self.orchestrator_factory().process(request.query, _context(request.context))
            return HandlerResponse(200, {"success": True, **response.to_wire()})
        except RequestValidationError as e:
            logger.warning("validation_failed", error=str(e), field=e.field)
            return exception_response(e)
        except Exception as e:
            logger.error("query_failed", error=str(e), exc_info=True)
            return exception_response(e)

    def submit_action(self, action_id: Any, form_data: Any = None, context: Any = None) -> HandlerResponse:
        """Route a form submission through the agent."""
        try:
            request = validate_request(
                ActionRequest,
                action_id=action_id,
                form_data={} if form_data is None else form_data,
                context={} if context is None else context,
            )
            logger.info("action", action_id=request.action_id)

            response = self.orchestrator_factory().process_action(
                request.action_id, request.form_data, _context(request.context)
            )
            return HandlerResponse(200, {"success": True, **response.to_wire()})
        except RequestValidationError as e:
            logger.warning("validation_failed", error=str(e), field=e.field)
            return exception_response(e)
        except Exception as e:
            logger.error("action_failed", error=str(e), exc_info=True)
            return exception_response(e)
