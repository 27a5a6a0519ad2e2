"""
Built-in tool categories.
"""

from typing import TYPE_CHECKING

from .instances import CREATE_INSTANCE, LIST_INSTANCES, register_instance_tools

if TYPE_CHECKING:
    from ..registry import ToolRegistry


def register_builtin_tools(registry: "ToolRegistry") -> None:
    """Register every built-in tool category."""
    register_instance_tools(registry)


__all__ = [
    "CREATE_INSTANCE",
    "LIST_INSTANCES",
    "register_instance_tools",
    "register_builtin_tools",
]
