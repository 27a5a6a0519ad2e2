"""Tests for the operation handlers."""

import pytest

from surface_agent.handlers import AgentHandler, ToolsHandler, exception_response, tool_error_status
from surface_agent.models import LLMError, LLMErrorCode


@pytest.fixture
def agent_handler(make_orchestrator):
    return AgentHandler(make_orchestrator)


@pytest.fixture
def tools_handler(router, tool_registry):
    return ToolsHandler(router, tool_registry)


# ============================================================================
# Agent Handler
# ============================================================================

@pytest.mark.unit
def test_submit_query(agent_handler, provider, reasoning_response, sample_surface):
    provider.responses = [reasoning_response, sample_surface]

    response = agent_handler.submit_query("  create an instance  ")

    assert response.status == 200
    assert response.ok
    assert response.body["success"] is True
    assert response.body["type"] == "ui"
    assert response.body["ui"] == sample_surface
    assert response.body["context"]["conversationHistory"][0]["query"] == "create an instance"


@pytest.mark.unit
@pytest.mark.parametrize("query", ["", "   ", 42, None])
def test_submit_query_rejects_bad_query(agent_handler, provider, query):
    response = agent_handler.submit_query(query)

    assert response.status == 400
    assert response.body["error"]["code"] == "VALIDATION_ERROR"
    assert provider.calls == []


@pytest.mark.unit
def test_submit_query_rejects_bad_context(agent_handler, provider):
    response = agent_handler.submit_query("hello", {"conversationHistory": "not a list"})

    assert response.status == 400
    assert response.body["error"]["details"] == {"field": "context"}
    assert provider.calls == []


@pytest.mark.unit
def test_rate_limited_maps_to_503(agent_handler, provider, rate_limited_error):
    provider.responses = [rate_limited_error]

    response = agent_handler.submit_query("hello")

    assert response.status == 503
    assert response.body == {
        "success": False,
        "error": {
            "code": "RATE_LIMITED",
            "message": "Rate limit exceeded, please try again later",
            "details": {"retryAfter": 2},
        },
    }


@pytest.mark.unit
def test_invalid_model_output_maps_to_502(agent_handler, provider, reasoning_response):
    provider.responses = [reasoning_response, {"surfaceUpdate": {"components": []}}]

    response = agent_handler.submit_query("hello")

    assert response.status == 502
    assert response.body["error"]["code"] == "INVALID_MODEL_OUTPUT"
    assert response.body["error"]["details"]["phase"] == "acting"


@pytest.mark.unit
def test_unexpected_error_maps_to_500(agent_handler, provider):
    provider.responses = [RuntimeError("kaboom")]

    response = agent_handler.submit_query("hello")

    assert response.status == 500
    assert response.body["error"] == {"code": "INTERNAL_ERROR", "message": "kaboom"}


@pytest.mark.unit
def test_submit_action(agent_handler, provider, result_surface):
    provider.responses = [result_surface]

    response = agent_handler.submit_action(
        "create_instance",
        {"instanceName": "web-1", "instanceType": "t2.micro", "region": "us-east-1"},
    )

    assert response.status == 200
    assert response.body["type"] == "result"
    assert response.body["toolResult"]["data"]["instanceName"] == "web-1"


@pytest.mark.unit
@pytest.mark.parametrize("action_id, form_data", [("", {}), ("  ", {}), ("create_instance", "name=x")])
def test_submit_action_rejects_bad_request(agent_handler, action_id, form_data):
    response = agent_handler.submit_action(action_id, form_data)
    assert response.status == 400


# ============================================================================
# Tools Handler
# ============================================================================

@pytest.mark.unit
def test_execute_tool(tools_handler):
    response = tools_handler.execute("list_instances", {"state": "stopped"})

    assert response.status == 200
    assert response.body["success"] is True
    assert response.body["data"]["count"] == 1
    assert response.body["metadata"]["toolName"] == "List Instances"


@pytest.mark.unit
def test_execute_unknown_tool(tools_handler):
    response = tools_handler.execute("nope", {})

    assert response.status == 404
    assert response.body["error"]["code"] == "TOOL_NOT_FOUND"


@pytest.mark.unit
def test_execute_missing_parameter(tools_handler):
    response = tools_handler.execute("create_instance", {"region": "us-east-1"})

    assert response.status == 400
    assert response.body["error"]["details"]["missingRequired"] == ["instanceName", "instanceType"]


@pytest.mark.unit
def test_execute_handler_failure(tools_handler, add_tool, tool_factory):
    add_tool("broken", tool_factory(error=RuntimeError("nope")))

    response = tools_handler.execute("broken")

    assert response.status == 500
    assert response.body["error"]["code"] == "EXECUTION_ERROR"


@pytest.mark.unit
def test_list_tools(tools_handler):
    response = tools_handler.list_tools()

    assert response.status == 200
    assert [tool["action_id"] for tool in response.body["tools"]] == ["create_instance", "list_instances"]


# ============================================================================
# Status mapping
# ============================================================================

@pytest.mark.unit
@pytest.mark.parametrize(
    "code, status, public_code",
    [
        (LLMErrorCode.MISSING_API_KEY, 500, "CONFIGURATION_ERROR"),
        (LLMErrorCode.RATE_LIMITED, 503, "RATE_LIMITED"),
        (LLMErrorCode.LLM_CONNECTION, 502, "LLM_CONNECTION"),
        (LLMErrorCode.EMPTY_RESPONSE, 502, "EMPTY_RESPONSE"),
        (LLMErrorCode.JSON_PARSE_ERROR, 502, "JSON_PARSE_ERROR"),
    ],
)
def test_llm_error_status(code, status, public_code):
    response = exception_response(LLMError(code, "failure", {"status": 500}))

    assert response.status == status
    assert response.body["error"]["code"] == public_code


@pytest.mark.unit
def test_configuration_error_hides_details():
    response = exception_response(LLMError(LLMErrorCode.MISSING_API_KEY, "no key", {"secret": "x"}))
    assert "details" not in response.body["error"]


@pytest.mark.unit
@pytest.mark.parametrize(
    "code, status",
    [("TOOL_NOT_FOUND", 404), ("VALIDATION_ERROR", 400), ("FORBIDDEN", 403), ("SOMETHING_ELSE", 500), (None, 500)],
)
def test_tool_error_status(code, status):
    assert tool_error_status(code) == status
