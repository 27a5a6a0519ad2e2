"""Transport-agnostic handler responses and error status mapping."""

from dataclasses import dataclass, field
from typing import Any

from ..agents import InvalidModelOutputError
from ..core import RequestValidationError
from ..models import LLMError, LLMErrorCode


@dataclass(frozen=True)
class HandlerResponse:
    """Status code plus JSON-ready body."""

    status: int
    body: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def error_body(code: str, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    error: dict[str, Any] = {"code": code, "message": message}
    if details:
        error["details"] = details
    return {"success": False, "error": error}


# Provider failures: (status, public code, public message, include details)
_LLM_ERRORS: dict[LLMErrorCode, tuple[int, str, str, bool]] = {
    LLMErrorCode.MISSING_API_KEY: (500, "CONFIGURATION_ERROR", "LLM API key not configured", False),
    LLMErrorCode.RATE_LIMITED: (503, "RATE_LIMITED", "Rate limit exceeded, please try again later", True),
    LLMErrorCode.LLM_CONNECTION: (502, "LLM_CONNECTION", "Failed to connect to LLM service", True),
    LLMErrorCode.EMPTY_RESPONSE: (502, "EMPTY_RESPONSE", "LLM returned an empty response", False),
    LLMErrorCode.JSON_PARSE_ERROR: (502, "JSON_PARSE_ERROR", "LLM returned malformed JSON", False),
}

TOOL_ERROR_STATUS: dict[str, int] = {
    "TOOL_NOT_FOUND": 404,
    "VALIDATION_ERROR": 400,
    "INVALID_ACTION_ID": 400,
    "EXECUTION_ERROR": 500,
    "UNAUTHORIZED": 401,
    "FORBIDDEN": 403,
}


def tool_error_status(code: str | None) -> int:
    return TOOL_ERROR_STATUS.get(code or "", 500)


def exception_response(error: Exception) -> HandlerResponse:
    """Map an exception escaping the agent to a status and error body."""
    if isinstance(error, RequestValidationError):
        details = {"field": error.field} if error.field else None
        return HandlerResponse(400, error_body("VALIDATION_ERROR", str(error), details))

    if isinstance(error, LLMError):
        status, code, message, with_details = _LLM_ERRORS[error.code]
        return HandlerResponse(status, error_body(code, message, error.details if with_details else None))

    if isinstance(error, InvalidModelOutputError):
        return HandlerResponse(
            502,
            error_body("INVALID_MODEL_OUTPUT", "The model produced an invalid UI structure", error.to_dict()),
        )

    return HandlerResponse(500, error_body("INTERNAL_ERROR", str(error) or "An unexpected error occurred"))
