"""LLM provider capability consumed by the agent."""

from typing import Any, Literal, Protocol, runtime_checkable

ResponseFormat = Literal["json", "text"]


@runtime_checkable
class LLMProvider(Protocol):
    """
    Chat capability.

    Returns the parsed JSON object for ``response_format="json"`` and
    ``{"content": text}`` for ``"text"``. Failures raise ``LLMError``.
    """

    def chat(
        self, system_prompt: str, user_prompt: str, response_format: ResponseFormat = "json"
    ) -> dict[str, Any]: ...
