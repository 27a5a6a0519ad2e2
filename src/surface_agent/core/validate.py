"""Request validation for the agent operations."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .json import JSONParseError, safe_json_dumps, validate_json_depth, validate_json_size


# Validation limits
MAX_QUERY_LENGTH = 10_000
MAX_CONTEXT_SIZE = 256 * 1024  # 256KB
MAX_FORM_SIZE = 64 * 1024  # 64KB
MAX_JSON_DEPTH = 32


class RequestValidationError(Exception):
    """An operation request was malformed."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class RequestValidator(BaseModel):
    """Base validator with strict configuration."""

    model_config = ConfigDict(strict=True, extra="forbid", frozen=True)


def _check_payload(value: dict[str, Any], max_size: int, name: str) -> dict[str, Any]:
    try:
        validate_json_depth(value, MAX_JSON_DEPTH)
        validate_json_size(safe_json_dumps(value), max_size, name)
    except JSONParseError as e:
        raise ValueError(str(e)) from e
    return value


class QueryRequest(RequestValidator):
    """Validated "submit query" request."""

    query: str = Field(min_length=1, max_length=MAX_QUERY_LENGTH)
    context: dict[str, Any] = Field(default_factory=dict)

    @field_validator("query")
    @classmethod
    def validate_query(cls, v: str) -> str:
        """Ensure query is non-empty after stripping."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Query cannot be empty")
        return stripped

    @field_validator("context")
    @classmethod
    def validate_context(cls, v: dict[str, Any]) -> dict[str, Any]:
        return _check_payload(v, MAX_CONTEXT_SIZE, "context")


class ActionRequest(RequestValidator):
    """Validated "submit action" request (a form submission)."""

    action_id: str = Field(min_length=1, max_length=256)
    form_data: dict[str, Any] = Field(default_factory=dict)
    context: dict[str, Any] = Field(default_factory=dict)

    @field_validator("action_id")
    @classmethod
    def validate_action_id(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("action_id cannot be blank")
        return v

    @field_validator("form_data")
    @classmethod
    def validate_form_data(cls, v: dict[str, Any]) -> dict[str, Any]:
        return _check_payload(v, MAX_FORM_SIZE, "formData")

    @field_validator("context")
    @classmethod
    def validate_context(cls, v: dict[str, Any]) -> dict[str, Any]:
        return _check_payload(v, MAX_CONTEXT_SIZE, "context")


def validate_request(model: type[RequestValidator], **data: Any) -> Any:
    """
    Build a request model, converting pydantic errors into RequestValidationError.

    Raises:
        RequestValidationError: With the first offending field
    """
    try:
        return model(**data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        raise RequestValidationError(f"{field}: {first.get('msg', 'invalid value')}", field) from e
