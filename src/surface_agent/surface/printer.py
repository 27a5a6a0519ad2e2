"""Canonical surface serializer."""

from typing import Any

from ..core.json import safe_json_dumps
from .models import SurfaceDescription


def canonical_wire(surface: SurfaceDescription) -> dict[str, Any]:
    """Wire dict with components in order and each component's properties key-sorted."""
    return {
        "surfaceUpdate": {
            "surfaceId": surface.surface_id,
            "components": [
                {
                    "id": node.id,
                    "component": {
                        node.kind.value: {key: node.properties[key] for key in sorted(node.properties)}
                    },
                }
                for node in surface.components
            ],
        }
    }


def print_surface(surface: SurfaceDescription) -> str:
    """
    Encode a validated surface canonically, without whitespace.

    The output is never larger than the compact encoding the validator
    measured, so ``print_surface(parse(print_surface(s))) == print_surface(s)``
    holds for every validated ``s`` under the same size limit.
    """
    return safe_json_dumps(canonical_wire(surface))
