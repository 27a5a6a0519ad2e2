"""
Provider configuration with strong typing.
"""

from enum import Enum
import os
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from ..core.config import Settings


class ChatModel(str, Enum):
    """Known Mistral chat models."""

    LARGE = "mistral-large-latest"  # Default
    MEDIUM = "mistral-medium-latest"
    SMALL = "mistral-small-latest"


class ProviderConfig(BaseModel):
    """Type-safe chat-completions provider configuration."""

    model_config = ConfigDict(frozen=True)

    model_name: str = Field(default=ChatModel.LARGE.value)
    api_key: str | None = Field(default=None)
    base_url: str = Field(default="https://api.mistral.ai/v1")
    timeout: float = Field(default=30.0, gt=0)
    temperature: float = Field(default=0.2, ge=0.0, le=2.0)

    # Rate-limit backoff
    max_retries: int = Field(default=3, ge=0)
    base_delay: float = Field(default=1.0, ge=0.0)  # seconds

    # Circuit breaker
    breaker_fail_max: int = Field(default=5, ge=1)
    breaker_reset_timeout: float = Field(default=30.0, gt=0)

    def __init__(self, **data: Any) -> None:
        """Initialize config with API key from environment if not provided."""
        if not data.get("api_key"):
            data["api_key"] = os.getenv("MISTRAL_API_KEY")
        super().__init__(**data)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "ProviderConfig":
        return cls(
            model_name=settings.llm_model,
            api_key=settings.llm_api_key or None,
            base_url=settings.llm_base_url,
            timeout=settings.llm_timeout,
            temperature=settings.llm_temperature,
            max_retries=settings.llm_max_retries,
            base_delay=settings.llm_base_delay,
        )
