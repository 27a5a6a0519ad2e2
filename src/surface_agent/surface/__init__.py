"""
Surface Layer
Whitelist, validation, canonical printing and bindings for declarative UI surfaces.
"""

from .catalog import ComponentKind, ComponentWhitelist, PropertyContract, CONTRACTS
from .errors import SurfaceErrorCode, ValidationFailure
from .models import ComponentNode, SurfaceDescription, component_map, component_ids, resolve_child
from .parser import StructureValidator, parse_surface
from .printer import print_surface, canonical_wire
from .layout import RenderNode, render_plan, top_level_ids, child_ids
from .binding import (
    Binding,
    BindingResolver,
    LiteralBinding,
    PathBinding,
    extract_path_bindings,
    is_literal_binding,
    is_path_binding,
    resolve,
    resolve_path,
)

__all__ = [
    # Catalog
    "ComponentKind",
    "ComponentWhitelist",
    "PropertyContract",
    "CONTRACTS",
    # Errors
    "SurfaceErrorCode",
    "ValidationFailure",
    # Models
    "ComponentNode",
    "SurfaceDescription",
    "component_map",
    "component_ids",
    "resolve_child",
    # Validation
    "StructureValidator",
    "parse_surface",
    # Serialization
    "print_surface",
    "canonical_wire",
    # Layout
    "RenderNode",
    "render_plan",
    "top_level_ids",
    "child_ids",
    # Bindings
    "Binding",
    "BindingResolver",
    "LiteralBinding",
    "PathBinding",
    "extract_path_bindings",
    "is_literal_binding",
    "is_path_binding",
    "resolve",
    "resolve_path",
]
