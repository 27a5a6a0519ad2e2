"""
ReAct Orchestrator
Reason → Act → Observe → Decide loop that turns queries and form submissions
into validated surfaces.

The orchestrator holds no session state: the caller owns ``AgentContext`` and
gets a new one back each turn. ``state`` only reflects the phase of the call
in flight, so one orchestrator serves one call at a time.
"""

import time
from typing import Any, Callable

from returns.result import Failure

from ..core import LogContext, get_logger, safe_json_dumps, trace_operation
from ..models import LLMError, LLMProvider
from ..monitoring import MetricsCollector, metrics_collector
from ..surface import StructureValidator, SurfaceDescription
from ..tools import ToolResult, ToolRouter
from .advisor import AdjustmentAdvisor, LLMAdjustmentAdvisor
from .errors import InvalidModelOutputError
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
from .prompts import PromptComposer

logger = get_logger(__name__)

DEFAULT_MAX_RETRIES = 3

# Tool error codes that end the turn without asking for adjustments
NON_RETRYABLE_CODES = frozenset({"UNAUTHORIZED", "FORBIDDEN", "NOT_FOUND"})

MAX_RETRIES_ERROR = {"code": "MAX_RETRIES", "message": "Maximum retry attempts exceeded"}


class AgentOrchestrator:
    """ReAct state machine over an LLM provider, a tool router and the validator."""

    def __init__(
        self,
        provider: LLMProvider | None,
        composer: PromptComposer | None,
        router: ToolRouter | None,
        validator: StructureValidator | None,
        advisor: AdjustmentAdvisor | None = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        metrics: MetricsCollector | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if provider is None:
            raise ValueError("AgentOrchestrator requires an LLM provider")
        if composer is None:
            raise ValueError("AgentOrchestrator requires a prompt composer")
        if router is None:
            raise ValueError("AgentOrchestrator requires a tool router")
        if validator is None:
            raise ValueError("AgentOrchestrator requires a structure validator")
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")

        self.provider = provider
        self.composer = composer
        self.router = router
        self.validator = validator
        self.advisor = advisor or LLMAdjustmentAdvisor(provider, composer)
        self.max_retries = max_retries
        self.metrics = metrics or metrics_collector
        self._clock = clock
        self.state = AgentState.IDLE

    def reset(self) -> None:
        """Return to idle."""
        self.state = AgentState.IDLE

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def process(self, query: str, context: AgentContext | dict[str, Any] | None = None) -> AgentResponse:
        """
        Handle a fresh user query: reason, then generate a surface.

        Raises:
            LLMError: Provider failure in either phase
            InvalidModelOutputError: The generated surface failed validation
        """
        context = AgentContext.coerce(context)
        start = time.perf_counter()
        outcome = "failed"

        with LogContext(entry="query"):
            try:
                self.state = AgentState.REASONING
                reasoning = self.reason(query, context)

                self.state = AgentState.ACTING
                surface = self._generate_surface(Phase.ACTING, context, query=query, reasoning=reasoning)
                outcome = "ui"
            finally:
                self.state = AgentState.IDLE
                self.metrics.record_turn("query", outcome, time.perf_counter() - start)

        logger.info("query_processed", surface_id=surface.surface_id, components=len(surface.components))
        new_context = self.update_context(
            context, surface, query=query, reasoning=reasoning.to_wire(), surfaceId=surface.surface_id
        )
        return AgentResponse(type="ui", surface=surface, context=new_context)

    def process_action(
        self,
        action_id: str,
        form_data: dict[str, Any] | None = None,
        context: AgentContext | dict[str, Any] | None = None,
    ) -> AgentResponse:
        """
        Handle a form submission with a bounded retry loop.

        Provider failures while inferring adjustments or building the result
        surface become an error surface. A failure while building the error
        surface itself propagates.

        Raises:
            LLMError: Provider failure while generating the error surface
            InvalidModelOutputError: A generated surface failed validation
        """
        context = AgentContext.coerce(context)
        start = time.perf_counter()
        outcome = "failed"

        with LogContext(entry="action", action_id=action_id):
            try:
                response = self._run_action(action_id, form_data or {}, context)
                outcome = response.type
            finally:
                self.state = AgentState.IDLE
                self.metrics.record_turn("action", outcome, time.perf_counter() - start)

        return response

    def _run_action(self, action_id: str, form_data: dict[str, Any], context: AgentContext) -> AgentResponse:
        current = context.model_copy(update={"form_data": form_data})
        tool_result: ToolResult | None = None
        attempt = 0

        while attempt < self.max_retries:
            self.state = AgentState.ACTING
            tool_result = self.act(action_id, form_data)

            self.state = AgentState.OBSERVING
            observation = self.observe(tool_result)

            self.state = AgentState.DECIDING
            try:
                decision = self.decide(observation, current)
            except LLMError as e:
                logger.warning("adjustment_inference_failed", code=e.code.value)
                return self._error_response(e.to_dict(), current, tool_result)

            match decision.type:
                case DecisionType.COMPLETE:
                    return self._result_response(tool_result, current)
                case DecisionType.RETRY:
                    attempt += 1
                    self.metrics.record_retry()
                    logger.info(
                        "tool_retry",
                        attempt=attempt,
                        max_retries=self.max_retries,
                        code=observation.error_code,
                    )
                    current = self.update_context_for_retry(current, observation, decision.adjustments or {})
                case DecisionType.ERROR:
                    return self._error_response(decision.error or {}, current, tool_result)
                case DecisionType.CONTINUE:
                    raise NotImplementedError("multi-step continuation is not supported")

        logger.warning("max_retries_exceeded", attempts=attempt)
        return self._error_response(MAX_RETRIES_ERROR, current, tool_result)

    # ------------------------------------------------------------------
    # Loop steps
    # ------------------------------------------------------------------

    def reason(self, query: str, context: AgentContext) -> Reasoning:
        """Ask the model for intent, required info and confidence."""
        response = self._chat(Phase.REASONING, context, query=query)
        return Reasoning.model_validate(response)

    def act(self, action_id: str, form_data: dict[str, Any]) -> ToolResult:
        start = time.perf_counter()
        result = self.router.route(action_id, form_data)
        self.metrics.record_tool(
            action_id, "success" if result.success else "failure", time.perf_counter() - start
        )
        return result

    @staticmethod
    def observe(result: ToolResult) -> Observation:
        return Observation.from_tool_result(result)

    def decide(self, observation: Observation, context: AgentContext) -> Decision:
        """
        Complete on success, stop on non-retryable codes, otherwise retry
        with adjustments from the advisor.
        """
        if observation.success:
            return Decision(type=DecisionType.COMPLETE)

        if observation.error_code in NON_RETRYABLE_CODES:
            return Decision(type=DecisionType.ERROR, error=observation.error)

        adjustments = self.advisor.infer(observation, context)
        return Decision(type=DecisionType.RETRY, adjustments=adjustments)

    # ------------------------------------------------------------------
    # Surfaces
    # ------------------------------------------------------------------

    def _result_response(self, tool_result: ToolResult, context: AgentContext) -> AgentResponse:
        try:
            surface = self._generate_surface(Phase.GENERATING_RESULT_UI, context, result=tool_result)
        except LLMError as e:
            logger.warning("result_ui_failed", code=e.code.value)
            return self._error_response(e.to_dict(), context, tool_result)

        new_context = self.update_context(context, surface, completed=True, result=tool_result.to_wire())
        return AgentResponse(type="result", surface=surface, context=new_context, tool_result=tool_result)

    def _error_response(
        self, error: dict[str, Any], context: AgentContext, tool_result: ToolResult | None
    ) -> AgentResponse:
        surface = self._generate_surface(Phase.GENERATING_ERROR_UI, context, error=error)
        new_context = self.update_context(context, surface, error=error)
        return AgentResponse(type="error", surface=surface, context=new_context, tool_result=tool_result)

    def _chat(self, phase: Phase, context: AgentContext, **sections: Any) -> dict[str, Any]:
        system_prompt = self.composer.compose_system_prompt()
        user_prompt = self.composer.compose_user_prompt(phase, context, **sections)

        start = time.perf_counter()
        with trace_operation("llm_call", phase=phase.value):
            try:
                response = self.provider.chat(system_prompt, user_prompt, "json")
            except LLMError:
                self.metrics.record_llm_call(phase.value, "error", time.perf_counter() - start)
                raise

        self.metrics.record_llm_call(phase.value, "success", time.perf_counter() - start)
        return response

    def _generate_surface(self, phase: Phase, context: AgentContext, **sections: Any) -> SurfaceDescription:
        """Model call whose output must validate; invalid output is fatal."""
        response = self._chat(phase, context, **sections)

        result = self.validator.parse(safe_json_dumps(response))
        if isinstance(result, Failure):
            failure = result.failure()
            self.metrics.record_validation(failure.code.value)
            logger.warning("invalid_model_output", phase=phase.value, code=failure.code.value)
            raise InvalidModelOutputError(phase.value, failure)

        self.metrics.record_validation()
        return result.unwrap()

    # ------------------------------------------------------------------
    # Context
    # ------------------------------------------------------------------

    def update_context(self, context: AgentContext, surface: SurfaceDescription, **entry: Any) -> AgentContext:
        """Append one history entry and remember the surface just produced."""
        history = [*context.conversation_history, {"timestamp": int(self._clock() * 1000), **entry}]
        return context.model_copy(update={"conversation_history": history, "previous_ui": surface.to_wire()})

    @staticmethod
    def update_context_for_retry(
        context: AgentContext, observation: Observation, adjustments: dict[str, Any]
    ) -> AgentContext:
        previous = context.retry_info.attempt_number if context.retry_info else 0
        retry_info = RetryInfo(
            previous_observation=observation,
            adjustments=adjustments,
            attempt_number=previous + 1,
        )
        return context.model_copy(update={"retry_info": retry_info})
