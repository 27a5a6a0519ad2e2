"""Surface Data Models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .catalog import ComponentKind


class ComponentNode(BaseModel):
    """One whitelisted component of a surface."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Unique identifier within the surface")
    kind: ComponentKind = Field(..., description="Whitelisted component kind")
    properties: dict[str, Any] = Field(default_factory=dict)

    def to_wire(self) -> dict[str, Any]:
        """Encode as ``{"id": ..., "component": {"<Kind>": {...}}}``."""
        return {"id": self.id, "component": {self.kind.value: self.properties}}


class SurfaceDescription(BaseModel):
    """Complete, replaceable UI description emitted per agent turn."""

    model_config = ConfigDict(frozen=True)

    surface_id: str
    components: list[ComponentNode] = Field(default_factory=list)

    def to_wire(self) -> dict[str, Any]:
        """Encode in the ``surfaceUpdate`` wire format."""
        return {
            "surfaceUpdate": {
                "surfaceId": self.surface_id,
                "components": [node.to_wire() for node in self.components],
            }
        }

    def get(self, component_id: str) -> ComponentNode | None:
        """Find a component by id."""
        for node in self.components:
            if node.id == component_id:
                return node
        return None


def component_map(surface: SurfaceDescription) -> dict[str, ComponentNode]:
    """Map component ids to their nodes."""
    return {node.id: node for node in surface.components}


def component_ids(surface: SurfaceDescription) -> set[str]:
    """All component ids of a surface."""
    return {node.id for node in surface.components}


def resolve_child(surface: SurfaceDescription, child_id: str) -> ComponentNode | None:
    """Resolve a child reference to its component, or None if absent."""
    return surface.get(child_id)
