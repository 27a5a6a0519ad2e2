"""Handlers for agent and tool operations."""

from .responses import HandlerResponse, exception_response, tool_error_status
from .agent import AgentHandler
from .tools import ToolsHandler

__all__ = [
    "HandlerResponse",
    "exception_response",
    "tool_error_status",
    "AgentHandler",
    "ToolsHandler",
]
