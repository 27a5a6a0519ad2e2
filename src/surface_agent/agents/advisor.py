"""Adjustment advisor: suggests parameter changes before a tool retry."""

from typing import Any, Protocol

from ..core import get_logger
from ..models import LLMProvider
from .models import AgentContext, Observation, Phase
from .prompts import PromptComposer

logger = get_logger(__name__)

ADJUSTMENT_INSTRUCTION = "Analyze the failure and suggest parameter adjustments for retry"


class AdjustmentAdvisor(Protocol):
    def infer(self, observation: Observation, context: AgentContext) -> dict[str, Any]: ...


class LLMAdjustmentAdvisor:
    """Asks the model for a free-form adjustments map."""

    def __init__(self, provider: LLMProvider, composer: PromptComposer) -> None:
        self.provider = provider
        self.composer = composer

    def infer(self, observation: Observation, context: AgentContext) -> dict[str, Any]:
        response = self.provider.chat(
            self.composer.compose_system_prompt(),
            self.composer.compose_user_prompt(
                Phase.INFERRING_ADJUSTMENTS,
                context,
                observation=observation,
                instruction=ADJUSTMENT_INSTRUCTION,
            ),
            "json",
        )
        adjustments = response.get("adjustments")
        if not isinstance(adjustments, dict):
            logger.debug("no_adjustments", received=type(adjustments).__name__)
            return {}
        return adjustments
