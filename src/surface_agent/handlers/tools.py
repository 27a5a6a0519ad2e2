"""Tools Handler."""

from typing import Any

from ..core import ActionRequest, RequestValidationError, get_logger, validate_request
from ..tools import ToolRegistry, ToolRouter
from .responses import HandlerResponse, exception_response, tool_error_status

logger = get_logger(__name__)


class ToolsHandler:
    """Direct tool execution and tool listing."""

    def __init__(self, router: ToolRouter, registry: ToolRegistry) -> None:
        self.router = router
        self.registry = registry

    def execute(self, action_id: Any, params: Any = None) -> HandlerResponse:
        """Route one action; the status reflects the tool error code."""
        try:
            request = validate_request(
                ActionRequest, action_id=action_id, form_data={} if params is None else params
            )
            result = self.router.route(request.action_id, request.form_data)
        except RequestValidationError as e:
            logger.warning("validation_failed", error=str(e), field=e.field)
            return exception_response(e)
        except Exception as e:
            logger.error("tool_request_failed", error=str(e), exc_info=True)
            return exception_response(e)

        if result.success:
            return HandlerResponse(200, result.to_wire())
        return HandlerResponse(tool_error_status(result.error.code if result.error else None), result.to_wire())

    def list_tools(self) -> HandlerResponse:
        return HandlerResponse(200, {"success": True, "tools": self.registry.prompt_definitions()})
