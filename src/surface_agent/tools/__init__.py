"""
Tools
Registry, parameter coercion and routing of form actions to tool handlers.
"""

from .models import (
    ParameterType,
    ToolDefinition,
    ToolError,
    ToolErrorCode,
    ToolMetadata,
    ToolParameter,
    ToolResult,
)
from .registry import ToolRegistry, ToolRegistrationError
from .coercion import coerce_parameters, matches_type
from .router import ToolRouter
from .definitions import register_builtin_tools, register_instance_tools

__all__ = [
    "ParameterType",
    "ToolDefinition",
    "ToolError",
    "ToolErrorCode",
    "ToolMetadata",
    "ToolParameter",
    "ToolResult",
    "ToolRegistry",
    "ToolRegistrationError",
    "coerce_parameters",
    "matches_type",
    "ToolRouter",
    "register_builtin_tools",
    "register_instance_tools",
]
