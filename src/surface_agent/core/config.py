"""Configuration Management."""

import os
from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="SURFACE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")

    # LLM provider
    llm_model: str = Field(default="mistral-large-latest", description="Chat model name")
    llm_api_key: str = Field(
        default_factory=lambda: os.getenv("MISTRAL_API_KEY", ""), description="Provider API key"
    )
    llm_base_url: str = Field(default="https://api.mistral.ai/v1", description="Provider base URL")
    llm_timeout: float = Field(default=30.0, gt=0, description="Provider request timeout")
    llm_temperature: float = Field(default=0.2, ge=0.0, le=2.0, description="Model temperature")
    llm_max_retries: int = Field(default=3, ge=0, description="Rate-limit retries inside the provider")
    llm_base_delay: float = Field(default=1.0, ge=0.0, description="Backoff base delay (seconds)")

    # Agent
    agent_max_retries: int = Field(default=3, ge=1, description="Tool retry attempts per action")
    history_window: int = Field(default=5, ge=1, description="History entries included in prompts")

    # Surface validation
    max_surface_size: int = Field(default=512 * 1024, gt=0, description="Max surface size (bytes)")
    max_surface_depth: int = Field(default=32, gt=0, description="Max surface nesting depth")
    strict_contracts: bool = Field(default=False, description="Check component property contracts")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
