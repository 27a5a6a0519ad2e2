"""
Component Catalog
The fixed whitelist of component kinds and their property contracts.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class ComponentKind(str, Enum):
    """Whitelisted component kinds (the wire tag of a component object)."""

    TEXT_INPUT = "TextInput"
    SELECT = "Select"
    CHECKBOX = "Checkbox"
    TEXT = "Text"
    ALERT = "Alert"
    TABLE = "Table"
    BUTTON = "Button"


USAGE_HINTS = ("h1", "h2", "h3", "p", "span")
ALERT_TYPES = ("success", "error", "warning", "info")
BUTTON_VARIANTS = ("primary", "secondary", "destructive")

# Property that may point at another component's id on any kind
GENERIC_REFERENCE_FIELD = "ref"


@dataclass(frozen=True)
class PropertyContract:
    """Required/optional properties of one component kind."""

    required: tuple[str, ...] = ()
    optional: tuple[str, ...] = ()
    # Properties holding the id of another component in the same surface
    references: tuple[str, ...] = ()
    # Closed value sets for enumerated properties
    choices: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    # Kinds a reference property may point at (strict mode only)
    reference_kinds: Mapping[str, tuple["ComponentKind", ...]] = field(default_factory=dict)

    @property
    def properties(self) -> tuple[str, ...]:
        return self.required + self.optional


CONTRACTS: Mapping[ComponentKind, PropertyContract] = MappingProxyType(
    {
        ComponentKind.TEXT_INPUT: PropertyContract(
            optional=("value", "placeholder", "label", "required"),
        ),
        ComponentKind.SELECT: PropertyContract(
            required=("options",),
            optional=("value", "label", "required"),
        ),
        ComponentKind.CHECKBOX: PropertyContract(
            optional=("value", "label"),
        ),
        ComponentKind.TEXT: PropertyContract(
            required=("text",),
            optional=("usageHint",),
            choices={"usageHint": USAGE_HINTS},
        ),
        ComponentKind.ALERT: PropertyContract(
            required=("type", "message"),
            optional=("title",),
            choices={"type": ALERT_TYPES},
        ),
        ComponentKind.TABLE: PropertyContract(
            required=("columns",),
            optional=("data",),
        ),
        ComponentKind.BUTTON: PropertyContract(
            required=("action",),
            optional=("child", "variant"),
            references=("child",),
            choices={"variant": BUTTON_VARIANTS},
            reference_kinds={"child": (ComponentKind.TEXT,)},
        ),
    }
)


class ComponentWhitelist:
    """Lookup over the static component catalog."""

    @staticmethod
    def is_allowed(kind: str) -> bool:
        """Check if a component kind tag is whitelisted."""
        return kind in ComponentWhitelist.kinds()

    @staticmethod
    def contract_for(kind: str | ComponentKind) -> PropertyContract:
        """
        Get the property contract for a kind.

        Raises:
            KeyError: If the kind is not whitelisted
        """
        return CONTRACTS[ComponentKind(kind)]

    @staticmethod
    def kinds() -> list[str]:
        """All whitelisted kind tags, in catalog order."""
        return [kind.value for kind in ComponentKind]

    @staticmethod
    def reference_fields(kind: str | ComponentKind) -> tuple[str, ...]:
        """Reference-bearing properties for a kind, including the generic ``ref``."""
        return CONTRACTS[ComponentKind(kind)].references + (GENERIC_REFERENCE_FIELD,)
