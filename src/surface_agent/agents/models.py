"""Agent Data Models."""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..surface import SurfaceDescription
from ..tools import ToolResult


class AgentState(str, Enum):
    """States of the ReAct loop."""

    IDLE = "idle"
    REASONING = "reasoning"
    ACTING = "acting"
    OBSERVING = "observing"
    DECIDING = "deciding"


class DecisionType(str, Enum):
    """Outcome of the decide step."""

    COMPLETE = "complete"
    CONTINUE = "continue"  # reserved; decide() never produces it
    RETRY = "retry"
    ERROR = "error"


class Phase(str, Enum):
    """Model call phases; each gets its own prompt instruction."""

    REASONING = "reasoning"
    ACTING = "acting"
    INFERRING_ADJUSTMENTS = "inferring_adjustments"
    GENERATING_RESULT_UI = "generating_result_ui"
    GENERATING_ERROR_UI = "generating_error_ui"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Reasoning(CamelModel):
    """Result of the reasoning phase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    intent: Any = None
    required_info: Any = None
    confidence: Any = None


class Observation(CamelModel):
    """What the agent saw after a tool ran."""

    success: bool
    data: Any = None
    error: dict[str, Any] | None = None
    reason: str | None = None

    @classmethod
    def from_tool_result(cls, result: ToolResult) -> "Observation":
        error = result.error.to_wire() if result.error else None
        reason = None
        if not result.success:
            reason = (result.error.message if result.error else None) or "Tool execution failed"
        return cls(success=result.success, data=result.data, error=error, reason=reason)

    @property
    def error_code(self) -> str | None:
        return self.error.get("code") if self.error else None


class Decision(BaseModel):
    type: DecisionType
    adjustments: dict[str, Any] | None = None
    error: dict[str, Any] | None = None


class RetryInfo(CamelModel):
    """Failure context carried into the next attempt."""

    previous_observation: Observation
    adjustments: dict[str, Any] = Field(default_factory=dict)
    attempt_number: int = Field(default=1, ge=1)


class AgentContext(CamelModel):
    """
    Caller-owned session context.

    Passed in and returned by value each turn; unknown keys are preserved.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow", frozen=True
    )

    conversation_history: list[dict[str, Any]] = Field(default_factory=list)
    previous_ui: dict[str, Any] | None = Field(default=None, alias="previousUI")
    form_data: dict[str, Any] | None = None
    retry_info: RetryInfo | None = None

    @classmethod
    def coerce(cls, context: "AgentContext | dict[str, Any] | None") -> "AgentContext":
        """Accept a context model, its wire dict, or nothing."""
        if context is None:
            return cls()
        if isinstance(context, cls):
            return context
        return cls.model_validate(context)


class AgentResponse(BaseModel):
    """Surface produced by one turn, plus the updated context."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    type: Literal["ui", "result", "error"]
    surface: SurfaceDescription
    context: AgentContext
    tool_result: ToolResult | None = None

    def to_wire(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "type": self.type,
            "ui": self.surface.to_wire(),
            "context": self.context.to_wire(),
        }
        if self.tool_result is not None:
            body["toolResult"] = self.tool_result.to_wire()
        return body
