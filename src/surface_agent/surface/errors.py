"""Surface validation failures (returned as values, never raised)."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class SurfaceErrorCode(str, Enum):
    """Failure kinds produced by the structure validator."""

    JSON_SYNTAX = "JSON_SYNTAX"
    SCHEMA_INVALID = "SCHEMA_INVALID"
    UNKNOWN_COMPONENT = "UNKNOWN_COMPONENT"
    INVALID_REFERENCE = "INVALID_REFERENCE"
    SECURITY_VIOLATION = "SECURITY_VIOLATION"


@dataclass(frozen=True)
class ValidationFailure:
    """First violation found in a candidate surface."""

    code: SurfaceErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code.value, "message": self.message, "details": dict(self.details)}
