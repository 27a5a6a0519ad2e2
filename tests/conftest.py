"""Pytest configuration and fixtures."""

import os
from typing import Any

import pytest
from prometheus_client import CollectorRegistry

from surface_agent.agents import AgentOrchestrator, PromptComposer
from surface_agent.models import LLMError
from surface_agent.monitoring import MetricsCollector
from surface_agent.surface import StructureValidator
from surface_agent.tools import (
    ParameterType,
    ToolDefinition,
    ToolParameter,
    ToolRegistry,
    ToolRouter,
    register_builtin_tools,
)


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ["SURFACE_LOG_LEVEL"] = "DEBUG"
    os.environ["MISTRAL_API_KEY"] = "test-api-key"  # Mock API key


# ============================================================================
# Stubs
# ============================================================================

class ScriptedProvider:
    """
    LLM provider stub replaying scripted responses in order.

    Entries may be dicts (returned) or exceptions (raised). Every call is
    recorded with the phase parsed from the user prompt.
    """

    def __init__(self, responses: list[Any] | None = None) -> None:
        self.responses = list(responses or [])
        self.calls: list[dict[str, str]] = []

    def chat(self, system_prompt: str, user_prompt: str, response_format: str = "json") -> dict[str, Any]:
        first_line = user_prompt.splitlines()[0] if user_prompt else ""
        phase = first_line.removeprefix("## Phase: ").strip().lower().replace(" ", "_")
        self.calls.append({"phase": phase, "system": system_prompt, "user": user_prompt})

        if not self.responses:
            raise AssertionError(f"unexpected LLM call in phase {phase}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def phases(self) -> list[str]:
        return [call["phase"] for call in self.calls]


class StubAdvisor:
    """Adjustment advisor returning fixed adjustments."""

    def __init__(self, adjustments: dict[str, Any] | None = None, error: Exception | None = None) -> None:
        self.adjustments = adjustments or {"instanceType": "t2.small"}
        self.error = error
        self.calls = 0

    def infer(self, observation, context) -> dict[str, Any]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.adjustments


class CountingTool:
    """Tool handler returning a fixed value (or raising) and counting calls."""

    def __init__(self, result: Any = None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def __call__(self, params: dict[str, Any]) -> Any:
        self.calls.append(params)
        if self.error is not None:
            raise self.error
        return self.result


# ============================================================================
# Data Fixtures
# ============================================================================

def make_surface(surface_id: str = "s1", components: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    if components is None:
        components = [
            {"id": "title", "component": {"Text": {"text": {"literalString": "Done"}, "usageHint": "h1"}}},
            {"id": "alert", "component": {"Alert": {"type": "success", "message": "It worked"}}},
        ]
    return {"surfaceUpdate": {"surfaceId": surface_id, "components": components}}


@pytest.fixture
def sample_surface() -> dict[str, Any]:
    """Create-instance form with a Button whose label is declared after it."""
    return make_surface(
        "create-instance-form",
        [
            {"id": "title", "component": {"Text": {"text": {"literalString": "Create Instance"}, "usageHint": "h1"}}},
            {
                "id": "name",
                "component": {
                    "TextInput": {
                        "value": {"path": "formValues.instanceName"},
                        "label": "Instance name",
                        "required": True,
                    }
                },
            },
            {
                "id": "type",
                "component": {
                    "Select": {
                        "value": {"path": "formValues.instanceType"},
                        "options": [
                            {"value": "t2.micro", "label": "t2.micro"},
                            {"value": "t2.small", "label": "t2.small"},
                        ],
                        "label": "Instance type",
                    }
                },
            },
            {
                "id": "submit",
                "component": {
                    "Button": {"child": "submit-label", "action": {"name": "create_instance"}, "variant": "primary"}
                },
            },
            {"id": "submit-label", "component": {"Text": {"text": {"literalString": "Create"}}}},
        ],
    )


@pytest.fixture
def result_surface() -> dict[str, Any]:
    return make_surface("result")


@pytest.fixture
def error_surface() -> dict[str, Any]:
    return make_surface(
        "error",
        [{"id": "err", "component": {"Alert": {"type": "error", "message": "Something went wrong"}}}],
    )


@pytest.fixture
def reasoning_response() -> dict[str, Any]:
    return {"intent": "create_instance", "requiredInfo": ["instanceName"], "confidence": 0.9}


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def metrics() -> MetricsCollector:
    """Metrics collector on a private registry."""
    return MetricsCollector(registry=CollectorRegistry())


@pytest.fixture
def tool_registry() -> ToolRegistry:
    """Registry with the built-in example tools."""
    registry = ToolRegistry()
    register_builtin_tools(registry)
    return registry


@pytest.fixture
def router(tool_registry) -> ToolRouter:
    return ToolRouter(tool_registry)


@pytest.fixture
def validator() -> StructureValidator:
    return StructureValidator()


@pytest.fixture
def composer(tool_registry) -> PromptComposer:
    return PromptComposer(tool_registry=tool_registry)


@pytest.fixture
def provider() -> ScriptedProvider:
    return ScriptedProvider()


@pytest.fixture
def advisor() -> StubAdvisor:
    return StubAdvisor()


def register_tool(registry: ToolRegistry, action_id: str, handler, required: tuple[str, ...] = ()) -> None:
    registry.register(
        ToolDefinition(
            name=action_id.replace("_", " ").title(),
            action_id=action_id,
            description=f"Test tool {action_id}",
            parameters=[ToolParameter(name=name, type=ParameterType.STRING, required=True) for name in required],
            handler=handler,
        )
    )


@pytest.fixture
def make_orchestrator(provider, composer, router, validator, advisor, metrics):
    """Factory for orchestrators wired to the stubs (override any collaborator)."""

    def factory(**overrides: Any) -> AgentOrchestrator:
        deps = {
            "provider": provider,
            "composer": composer,
            "router": router,
            "validator": validator,
            "advisor": advisor,
            "metrics": metrics,
            "clock": lambda: 1_700_000_000.0,
        }
        deps.update(overrides)
        return AgentOrchestrator(**deps)

    return factory


@pytest.fixture
def advisor_factory():
    """Build adjustment advisor stubs."""
    return StubAdvisor


@pytest.fixture
def rate_limited_error() -> LLMError:
    from surface_agent.models import LLMErrorCode

    return LLMError(LLMErrorCode.RATE_LIMITED, "Rate limit exceeded", {"retryAfter": 2})


# ============================================================================
# Factory Fixtures
# ============================================================================

@pytest.fixture
def surface_factory():
    """Build wire-format surfaces."""
    return make_surface


@pytest.fixture
def tool_factory():
    """Build counting tool handlers."""
    return CountingTool


@pytest.fixture
def add_tool(tool_registry):
    """Register an extra string-parameter tool on the shared registry."""

    def add(action_id: str, handler, required: tuple[str, ...] = ()) -> None:
        register_tool(tool_registry, action_id, handler, required)

    return add
