"""
Tool Type Definitions
Core types for tool registration and execution results.
"""

from typing import Any, Callable
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ParameterType(str, Enum):
    """Declared parameter types (form values are coerced into these)."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    ANY = "any"


class ToolErrorCode(str, Enum):
    """Failure kinds produced by the registry and router."""

    TOOL_NOT_FOUND = "TOOL_NOT_FOUND"
    INVALID_ACTION_ID = "INVALID_ACTION_ID"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    EXECUTION_ERROR = "EXECUTION_ERROR"


class ToolParameter(BaseModel):
    """Parameter definition for a tool"""

    name: str = Field(..., min_length=1)
    type: ParameterType
    description: str = ""
    required: bool = False

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v: Any) -> Any:
        return v.lower() if isinstance(v, str) else v


ToolHandler = Callable[[dict[str, Any]], Any]


class ToolDefinition(BaseModel):
    """Tool definition bound to an action id"""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    action_id: str = Field(..., min_length=1, description="Unique action identifier")
    description: str = ""
    endpoint: str | None = None
    parameters: list[ToolParameter] = Field(default_factory=list)
    returns: str = Field(default="object", description="Return type description")
    handler: ToolHandler = Field(..., exclude=True)

    def prompt_definition(self) -> dict[str, Any]:
        """Definition without the handler, for prompts and tool listings."""
        return self.model_dump(mode="json", exclude={"endpoint"})


class WireModel(BaseModel):
    """Models exchanged with callers in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ToolError(WireModel):
    """Structured tool failure"""

    code: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class ToolMetadata(WireModel):
    """Execution metadata"""

    execution_time: float = 0.0  # milliseconds
    tool_name: str | None = None


class ToolResult(WireModel):
    """Result of routing one action to a tool"""

    success: bool
    data: Any = None
    error: ToolError | None = None
    metadata: ToolMetadata = Field(default_factory=ToolMetadata)

    @classmethod
    def failure(
        cls,
        code: ToolErrorCode | str,
        message: str,
        details: dict[str, Any] | None = None,
        metadata: ToolMetadata | None = None,
    ) -> "ToolResult":
        """Build a failed result."""
        return cls(
            success=False,
            error=ToolError(
                code=code.value if isinstance(code, ToolErrorCode) else code,
                message=message,
                details=details or {},
            ),
            metadata=metadata or ToolMetadata(),
        )
