"""
Cloud Instance Tools
Simulated instance management, used as the reference tool category.
"""

import random
import secrets
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from ..models import ParameterType, ToolDefinition, ToolParameter

if TYPE_CHECKING:
    from ..registry import ToolRegistry


SAMPLE_INSTANCES: tuple[dict[str, Any], ...] = (
    {
        "instanceId": "i-abc123def456",
        "instanceName": "web-server-1",
        "instanceType": "t2.micro",
        "region": "us-east-1",
        "state": "running",
        "publicIp": "54.123.45.67",
        "privateIp": "10.0.1.100",
        "createdAt": "2024-01-15T10:30:00Z",
    },
    {
        "instanceId": "i-def456ghi789",
        "instanceName": "api-server-1",
        "instanceType": "t2.small",
        "region": "us-west-2",
        "state": "running",
        "publicIp": "52.234.56.78",
        "privateIp": "10.0.2.50",
        "createdAt": "2024-02-20T14:45:00Z",
    },
    {
        "instanceId": "i-ghi789jkl012",
        "instanceName": "db-server-1",
        "instanceType": "t2.medium",
        "region": "us-east-1",
        "state": "stopped",
        "publicIp": None,
        "privateIp": "10.0.1.200",
        "createdAt": "2024-03-10T08:15:00Z",
    },
)


def create_instance(params: dict[str, Any]) -> dict[str, Any]:
    """Simulate launching an instance; returns it in the pending state."""
    name = params["instanceName"]
    return {
        "instanceId": f"i-{secrets.token_hex(6)}",
        "instanceName": name,
        "instanceType": params["instanceType"],
        "region": params["region"],
        "state": "pending",
        "tags": {"Name": name, **(params.get("tags") or {})},
        "createdAt": datetime.now(timezone.utc).isoformat(),
        "publicIp": None,
        "privateIp": f"10.0.{random.randint(0, 254)}.{random.randint(0, 254)}",
    }


def list_instances(params: dict[str, Any]) -> dict[str, Any]:
    region = params.get("region")
    state = params.get("state")

    instances = [
        dict(instance)
        for instance in SAMPLE_INSTANCES
        if (not region or instance["region"] == region) and (not state or instance["state"] == state)
    ]
    return {
        "instances": instances,
        "count": len(instances),
        "filters": {"region": region, "state": state},
    }


CREATE_INSTANCE = ToolDefinition(
    name="Create Instance",
    action_id="create_instance",
    description="Creates a new cloud instance with the specified configuration",
    endpoint="/api/tools/create-instance",
    parameters=[
        ToolParameter(
            name="instanceName",
            type=ParameterType.STRING,
            description="Name for the new instance",
            required=True,
        ),
        ToolParameter(
            name="instanceType",
            type=ParameterType.STRING,
            description="Instance type (e.g., t2.micro, t2.small, t2.medium)",
            required=True,
        ),
        ToolParameter(
            name="region",
            type=ParameterType.STRING,
            description="AWS region for the instance",
            required=True,
        ),
        ToolParameter(
            name="tags",
            type=ParameterType.OBJECT,
            description="Optional tags for the instance",
        ),
    ],
    returns="object",
    handler=create_instance,
)

LIST_INSTANCES = ToolDefinition(
    name="List Instances",
    action_id="list_instances",
    description="Lists all cloud instances with optional filtering",
    endpoint="/api/tools/list-instances",
    parameters=[
        ToolParameter(
            name="region",
            type=ParameterType.STRING,
            description="Filter by AWS region (optional)",
        ),
        ToolParameter(
            name="state",
            type=ParameterType.STRING,
            description="Filter by instance state (running, stopped, pending)",
        ),
    ],
    returns="array",
    handler=list_instances,
)


def register_instance_tools(registry: "ToolRegistry") -> None:
    """Register the instance management tools."""
    registry.register(CREATE_INSTANCE)
    registry.register(LIST_INSTANCES)
