"""
Models package - LLM provider integration.
Chat capability, provider configuration and the Mistral client.
"""

from .config import ChatModel, ProviderConfig
from .errors import LLMError, LLMErrorCode
from .provider import LLMProvider, ResponseFormat
from .mistral import MistralClient
from .loader import ProviderLoader

__all__ = [
    "ChatModel",
    "ProviderConfig",
    "LLMError",
    "LLMErrorCode",
    "LLMProvider",
    "ResponseFormat",
    "MistralClient",
    "ProviderLoader",
]
