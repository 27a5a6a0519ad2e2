"""Tests for the dependency injection container."""

import pytest

from surface_agent.agents import AgentOrchestrator, AgentState
from surface_agent.core import Settings, create_container
from surface_agent.handlers import AgentHandler, ToolsHandler
from surface_agent.models import LLMError, MistralClient, ProviderLoader
from surface_agent.surface import StructureValidator
from surface_agent.tools import ToolRegistry


@pytest.fixture
def settings():
    return Settings(_env_file=None, llm_api_key="container-key", agent_max_retries=2, strict_contracts=True)


@pytest.fixture
def injector(settings):
    container = create_container(settings)
    yield container
    ProviderLoader.unload()


@pytest.mark.unit
def test_wires_handlers(injector):
    agent_handler = injector.get(AgentHandler)
    tools_handler = injector.get(ToolsHandler)

    orchestrator = agent_handler.orchestrator_factory()
    assert isinstance(orchestrator, AgentOrchestrator)
    assert isinstance(orchestrator.provider, MistralClient)
    assert tools_handler.registry is injector.get(ToolRegistry)


@pytest.mark.unit
def test_orchestrator_per_resolution(injector):
    """Test each turn gets its own orchestrator while collaborators stay shared."""
    handler = injector.get(AgentHandler)
    first = handler.orchestrator_factory()
    second = handler.orchestrator_factory()

    assert first is not second
    assert first.router is second.router
    assert first.provider is second.provider
    assert handler is injector.get(AgentHandler)
    assert injector.get(AgentOrchestrator) is not injector.get(AgentOrchestrator)


@pytest.mark.unit
def test_orchestrator_state_not_shared(injector):
    handler = injector.get(AgentHandler)
    first = handler.orchestrator_factory()
    first.state = AgentState.ACTING

    assert handler.orchestrator_factory().state is AgentState.IDLE


@pytest.mark.unit
def test_settings_flow_into_components(injector):
    orchestrator = injector.get(AgentOrchestrator)
    validator = injector.get(StructureValidator)

    assert orchestrator.max_retries == 2
    assert validator.strict is True
    assert orchestrator.provider.config.api_key == "container-key"


@pytest.mark.unit
def test_registry_is_frozen_singleton(injector):
    registry = injector.get(ToolRegistry)

    assert registry.frozen
    assert registry is injector.get(ToolRegistry)
    assert registry.action_ids() == ["create_instance", "list_instances"]


@pytest.mark.unit
def test_missing_api_key_surfaces_on_resolution(monkeypatch):
    monkeypatch.delenv("MISTRAL_API_KEY", raising=False)
    container = create_container(Settings(_env_file=None, llm_api_key=""))

    with pytest.raises(LLMError):
        container.get(AgentOrchestrator)

    response = container.get(AgentHandler).submit_query("list my servers")
    assert response.status == 500
    assert response.body["error"]["code"] == "CONFIGURATION_ERROR"
