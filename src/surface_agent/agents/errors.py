"""Agent errors."""

from typing import Any

from ..surface import ValidationFailure


class AgentError(Exception):
    """Agent turn failed."""

    pass


class InvalidModelOutputError(AgentError):
    """A generated surface failed validation; fatal for the turn."""

    def __init__(self, phase: str, failure: ValidationFailure) -> None:
        super().__init__(f"Invalid UI structure in {phase}: {failure.message}")
        self.phase = phase
        self.failure = failure

    def to_dict(self) -> dict[str, Any]:
        return {"phase": self.phase, **self.failure.to_dict()}
