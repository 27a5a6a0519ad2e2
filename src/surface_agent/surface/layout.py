"""
Render Plan
Single-level flatten of a validated surface into top-level render nodes.
"""

from dataclasses import dataclass
from typing import Any

from .catalog import ComponentKind, ComponentWhitelist
from .models import SurfaceDescription, component_ids, resolve_child


@dataclass(frozen=True)
class RenderNode:
    """A component scheduled for rendering, with its resolved child (if owned)."""

    id: str
    kind: ComponentKind
    properties: dict[str, Any]
    child: "RenderNode | None" = None


def child_ids(surface: SurfaceDescription) -> set[str]:
    """Ids of existing components referenced as ``child``."""
    referenced = set()
    for node in surface.components:
        if "child" in ComponentWhitelist.contract_for(node.kind).references:
            target = node.properties.get("child")
            if isinstance(target, str) and target:
                referenced.add(target)
    return referenced & component_ids(surface)


def top_level_ids(surface: SurfaceDescription) -> list[str]:
    """Component ids not referenced as a child, in surface order."""
    referenced = child_ids(surface)
    return [node.id for node in surface.components if node.id not in referenced]


def render_plan(surface: SurfaceDescription) -> list[RenderNode]:
    """
    Compute the ordered top-level render nodes.

    Children render only through their referrer and do not expand their own
    children. When several referrers name the same child, the first one
    processed (in surface order) owns it and the others render without it.
    """
    referenced = child_ids(surface)
    claimed: set[str] = set()
    plan = []

    for node in surface.components:
        if node.id in referenced:
            continue

        child = None
        target = node.properties.get("child")
        if (
            "child" in ComponentWhitelist.contract_for(node.kind).references
            and isinstance(target, str)
            and target not in claimed
        ):
            child_node = resolve_child(surface, target)
            if child_node is not None:
                claimed.add(target)
                child = RenderNode(child_node.id, child_node.kind, child_node.properties)

        plan.append(RenderNode(node.id, node.kind, node.properties, child))

    return plan
