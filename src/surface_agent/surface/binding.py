"""
Data Binding
Resolves path and literal bindings against the longer-lived data model.

Wire shapes: ``{"path": "data.instances[0].name"}`` and ``{"literalString": "Hello"}``.
"""

import re
from typing import Any

from pydantic import BaseModel, ConfigDict

_INDEXED_SEGMENT = re.compile(r"^(\w+)\[(\d+)\]$")


class PathBinding(BaseModel):
    """Reference into the data model by dot-notation path."""

    model_config = ConfigDict(frozen=True)

    path: str


class LiteralBinding(BaseModel):
    """Value embedded directly in the surface."""

    model_config = ConfigDict(frozen=True)

    value: Any


Binding = PathBinding | LiteralBinding


def is_path_binding(value: Any) -> bool:
    """Check if a value is a path binding (model or wire form)."""
    return isinstance(value, PathBinding) or (
        isinstance(value, dict) and isinstance(value.get("path"), str)
    )


def is_literal_binding(value: Any) -> bool:
    """Check if a value is a literal binding (model or wire form)."""
    return isinstance(value, LiteralBinding) or (isinstance(value, dict) and "literalString" in value)


def _step(current: Any, key: str) -> Any:
    if isinstance(current, dict):
        return current.get(key)
    if isinstance(current, (list, tuple)) and key.isdigit():
        index = int(key)
        return current[index] if index < len(current) else None
    return None


def resolve_path(path: str, data_model: Any) -> Any:
    """
    Walk the data model by dot-separated segments.

    Segments of the form ``name[index]`` index into arrays. A missing
    intermediate key yields None rather than an error.
    """
    if not path or not isinstance(path, str) or data_model is None:
        return None

    current = data_model
    for segment in path.split("."):
        if current is None:
            return None
        match = _INDEXED_SEGMENT.match(segment)
        if match:
            key, index = match.groups()
            current = _step(_step(current, key), index)
        else:
            current = _step(current, segment)

    return current


def resolve(binding: Any, data_model: Any) -> Any:
    """
    Resolve a binding to its value.

    Path bindings are looked up in ``data_model``, literal bindings return
    their embedded value, anything else is returned unchanged.
    """
    if isinstance(binding, PathBinding):
        return resolve_path(binding.path, data_model)
    if isinstance(binding, LiteralBinding):
        return binding.value
    if is_path_binding(binding):
        return resolve_path(binding["path"], data_model)
    if is_literal_binding(binding):
        return binding["literalString"]
    return binding


def extract_path_bindings(properties: dict[str, Any]) -> list[tuple[str, str]]:
    """
    Collect every path binding nested in a properties map.

    Returns:
        ``(dotted_key, path)`` pairs in traversal order
    """
    found: list[tuple[str, str]] = []

    def traverse(obj: dict[str, Any], prefix: str) -> None:
        for key, value in obj.items():
            full_key = f"{prefix}.{key}" if prefix else key
            if is_path_binding(value):
                found.append((full_key, value["path"]))
            elif isinstance(value, dict):
                traverse(value, full_key)

    traverse(properties, "")
    return found


class BindingResolver:
    """Resolves bindings against one data model."""

    def __init__(self, data_model: dict[str, Any] | None = None) -> None:
        self.data_model = data_model or {}

    def resolve(self, binding: Any) -> Any:
        return resolve(binding, self.data_model)

    def resolve_properties(self, properties: dict[str, Any]) -> dict[str, Any]:
        """Resolve the top-level bindings of a component's properties."""
        return {key: self.resolve(value) for key, value in properties.items()}
