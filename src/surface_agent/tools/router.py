"""
Tool Router
Routes submitted form actions to registered tools.
"""

from typing import Any

from ..core import get_logger
from .coercion import coerce_parameters, matches_type, type_name
from .models import ToolDefinition, ToolErrorCode, ToolResult
from .registry import ToolRegistry

logger = get_logger(__name__)


class ToolRouter:
    """
    Resolves an action id to a tool, then coerces, validates and executes.

    Every outcome is a ToolResult; nothing here raises for bad input.
    """

    def __init__(self, registry: ToolRegistry | None) -> None:
        if registry is None:
            raise ValueError("ToolRouter requires a ToolRegistry instance")
        self.registry = registry

    def route(self, action_id: Any, form_data: dict[str, Any] | None = None) -> ToolResult:
        """
        Route and execute an action.

        Args:
            action_id: Action id from the submitted form
            form_data: Raw form field values

        Returns:
            Structured result; handlers are never invoked on invalid input
        """
        form_data = form_data or {}

        if not isinstance(action_id, str) or not action_id:
            return ToolResult.failure(
                ToolErrorCode.INVALID_ACTION_ID,
                "Action ID must be a non-empty string",
                {"actionId": action_id},
            )

        tool = self.registry.get(action_id)
        if tool is None:
            logger.warning("tool_not_found", action_id=action_id)
            return ToolResult.failure(
                ToolErrorCode.TOOL_NOT_FOUND,
                f"No tool registered for action: {action_id}",
                {"actionId": action_id},
            )

        params = coerce_parameters(tool.parameters, form_data)

        failure = self.validate_parameters(tool, params)
        if failure is not None:
            logger.warning(
                "tool_params_invalid",
                action_id=action_id,
                details=failure.error.details if failure.error else None,
            )
            return failure

        return self.registry.execute(action_id, params)

    def validate_parameters(self, tool: ToolDefinition, params: dict[str, Any]) -> ToolResult | None:
        """Return a VALIDATION_ERROR result, or None when params are acceptable."""
        missing: list[str] = []
        type_errors: list[dict[str, str]] = []

        for param in tool.parameters:
            value = params.get(param.name)

            if param.required and (value is None or value == ""):
                missing.append(param.name)
                continue

            if value is None:
                continue

            if not matches_type(value, param.type):
                type_errors.append(
                    {
                        "parameter": param.name,
                        "expected": param.type.value,
                        "received": type_name(value),
                    }
                )

        if missing:
            return ToolResult.failure(
                ToolErrorCode.VALIDATION_ERROR,
                f"Missing required parameter: {missing[0]}",
                {"missingRequired": missing, "provided": list(params)},
            )

        if type_errors:
            return ToolResult.failure(
                ToolErrorCode.VALIDATION_ERROR,
                f"Invalid parameter type for: {type_errors[0]['parameter']}",
                {"typeErrors": type_errors},
            )

        return None

    def can_route(self, action_id: str) -> bool:
        return self.registry.has(action_id)

    def available_actions(self) -> list[str]:
        return self.registry.action_ids()
