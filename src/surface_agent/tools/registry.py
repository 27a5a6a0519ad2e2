"""
Tool Registry
Explicit, injected registry of tools keyed by action id.

Populate once at startup, then call ``freeze()``. After that the registry is
read-only and safe for unsynchronized concurrent reads; registering while
reads are in flight is not supported.
"""

import time
from typing import Any

from ..core import get_logger
from .models import ToolDefinition, ToolErrorCode, ToolMetadata, ToolResult

logger = get_logger(__name__)


class ToolRegistrationError(Exception):
    """A tool could not be registered."""

    pass


class ToolRegistry:
    """Registry of tool definitions and their handlers."""

    def __init__(self) -> None:
        self.tools: dict[str, ToolDefinition] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Close registration; the registry is read-only from now on."""
        self._frozen = True
        logger.info("registry_frozen", tools=len(self.tools))

    def register(self, tool: ToolDefinition) -> None:
        """
        Register a tool.

        Raises:
            ToolRegistrationError: If frozen, or the action id is already registered
        """
        if self._frozen:
            raise ToolRegistrationError(f"Registry is frozen; cannot register '{tool.action_id}'")
        if tool.action_id in self.tools:
            raise ToolRegistrationError(f"action_id '{tool.action_id}' already registered")

        self.tools[tool.action_id] = tool
        logger.info("tool_registered", action_id=tool.action_id, name=tool.name)

    def get(self, action_id: str) -> ToolDefinition | None:
        """Get tool by action id."""
        return self.tools.get(action_id)

    def has(self, action_id: str) -> bool:
        return action_id in self.tools

    def action_ids(self) -> list[str]:
        return list(self.tools)

    def prompt_definitions(self) -> list[dict[str, Any]]:
        """Definitions without handlers, for LLM prompts and listings."""
        return [tool.prompt_definition() for tool in self.tools.values()]

    def execute(self, action_id: str, params: dict[str, Any]) -> ToolResult:
        """
        Invoke a tool handler, wrapping the outcome in a ToolResult.

        Handler exceptions are reported as EXECUTION_ERROR, never raised.
        """
        start = time.perf_counter()
        tool = self.get(action_id)

        if tool is None:
            return ToolResult.failure(
                ToolErrorCode.TOOL_NOT_FOUND,
                f"No tool registered for action: {action_id}",
                {"actionId": action_id},
                ToolMetadata(execution_time=(time.perf_counter() - start) * 1000),
            )

        try:
            data = tool.handler(params)
        except Exception as e:
            elapsed = (time.perf_counter() - start) * 1000
            logger.error("tool_failed", action_id=action_id, error=str(e), exc_info=True)
            return ToolResult.failure(
                ToolErrorCode.EXECUTION_ERROR,
                "Tool execution failed",
                {"toolName": tool.name, "error": str(e)},
                ToolMetadata(execution_time=elapsed, tool_name=tool.name),
            )

        elapsed = (time.perf_counter() - start) * 1000
        logger.info("tool_executed", action_id=action_id, duration_ms=elapsed)
        return ToolResult(
            success=True,
            data=data,
            metadata=ToolMetadata(execution_time=elapsed, tool_name=tool.name),
        )
