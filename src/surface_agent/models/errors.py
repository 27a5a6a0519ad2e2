"""LLM provider errors."""

from enum import Enum
from typing import Any


class LLMErrorCode(str, Enum):
    """Failure kinds raised at the provider boundary."""

    MISSING_API_KEY = "MISSING_API_KEY"
    RATE_LIMITED = "RATE_LIMITED"
    LLM_CONNECTION = "LLM_CONNECTION"
    EMPTY_RESPONSE = "EMPTY_RESPONSE"
    JSON_PARSE_ERROR = "JSON_PARSE_ERROR"


class LLMError(Exception):
    """Structured provider failure."""

    def __init__(self, code: LLMErrorCode, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code.value, "message": self.message, "details": self.details}

    def __repr__(self) -> str:
        return f"LLMError({self.code.value}, {self.message!r})"
