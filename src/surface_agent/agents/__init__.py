"""
Agents
ReAct orchestration, prompt composition and retry adjustment.
"""

from .models import (
    AgentContext,
    AgentResponse,
    AgentState,
    Decision,
    DecisionType,
    Observation,
    Phase,
    Reasoning,
    RetryInfo,
)
from .errors import AgentError, InvalidModelOutputError
from .prompts import PromptComposer
from .workflows import WorkflowLibrary, WorkflowStep, WorkflowTemplate
from .examples import ALL_EXAMPLES, FewShotExample, get_example
from .advisor import AdjustmentAdvisor, LLMAdjustmentAdvisor
from .react import AgentOrchestrator, NON_RETRYABLE_CODES

__all__ = [
    "AgentContext",
    "AgentResponse",
    "AgentState",
    "Decision",
    "DecisionType",
    "Observation",
    "Phase",
    "Reasoning",
    "RetryInfo",
    "AgentError",
    "InvalidModelOutputError",
    "PromptComposer",
    "WorkflowLibrary",
    "WorkflowStep",
    "WorkflowTemplate",
    "ALL_EXAMPLES",
    "FewShotExample",
    "get_example",
    "AdjustmentAdvisor",
    "LLMAdjustmentAdvisor",
    "AgentOrchestrator",
    "NON_RETRYABLE_CODES",
]
