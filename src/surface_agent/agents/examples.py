"""
Few-Shot Examples
Complete surfaces shown to the model as response-format guidance.
"""

from typing import Any

from pydantic import BaseModel

from ..core import safe_json_dumps


class FewShotExample(BaseModel):
    description: str
    response: dict[str, Any]


def _text(component_id: str, text: str, hint: str) -> dict[str, Any]:
    return {"id": component_id, "component": {"Text": {"text": {"literalString": text}, "usageHint": hint}}}


def _button(component_id: str, child: str, action: str, variant: str) -> dict[str, Any]:
    return {
        "id": component_id,
        "component": {"Button": {"child": child, "action": {"name": action}, "variant": variant}},
    }


def _alert(component_id: str, type_: str, title: str, message: str) -> dict[str, Any]:
    return {"id": component_id, "component": {"Alert": {"type": type_, "title": title, "message": message}}}


def _surface(surface_id: str, components: list[dict[str, Any]]) -> dict[str, Any]:
    return {"surfaceUpdate": {"surfaceId": surface_id, "components": components}}


EXAMPLE_INITIAL_FORM = FewShotExample(
    description="Generate a form for creating a new instance",
    response=_surface(
        "create-instance-form",
        [
            _text("title", "Create New Instance", "h1"),
            _text("description", "Fill in the details below to create a new instance.", "p"),
            {
                "id": "name-input",
                "component": {
                    "TextInput": {
                        "value": {"path": "formValues.instanceName"},
                        "placeholder": "Enter instance name",
                        "label": "Instance Name",
                        "required": True,
                    }
                },
            },
            {
                "id": "type-select",
                "component": {
                    "Select": {
                        "value": {"path": "formValues.instanceType"},
                        "options": [
                            {"value": "t2.micro", "label": "Micro"},
                            {"value": "t2.small", "label": "Small"},
                            {"value": "t2.medium", "label": "Medium"},
                        ],
                        "label": "Instance Type",
                        "required": True,
                    }
                },
            },
            _text("submit-text", "Create Instance", "span"),
            _button("submit-button", "submit-text", "create_instance", "primary"),
        ],
    ),
)

EXAMPLE_SUCCESS_RESULT = FewShotExample(
    description="Display success message after instance creation",
    response=_surface(
        "create-instance-result",
        [
            _alert(
                "success-alert",
                "success",
                "Instance Created Successfully",
                'Your new instance "my-instance" has been created and is now running.',
            ),
            _text("details-title", "Instance Details", "h2"),
            {
                "id": "details-table",
                "component": {
                    "Table": {
                        "columns": [{"key": "property", "label": "Property"}, {"key": "value", "label": "Value"}],
                        "data": {"path": "data.details"},
                    }
                },
            },
            _text("new-button-text", "Create Another", "span"),
            _button("new-button", "new-button-text", "reset_form", "secondary"),
        ],
    ),
)

EXAMPLE_LIST_RESULT = FewShotExample(
    description="Display list of items in a table after tool execution",
    response=_surface(
        "list-items-result",
        [
            _alert("success-alert", "success", "Items Retrieved", "Found 3 items matching your criteria."),
            _text("results-title", "Results", "h1"),
            {
                "id": "results-table",
                "component": {
                    "Table": {
                        "columns": [
                            {"key": "name", "label": "Name"},
                            {"key": "status", "label": "Status"},
                            {"key": "createdAt", "label": "Created"},
                        ],
                        "data": {"path": "data.items"},
                    }
                },
            },
            _text("new-query-text", "New Query", "span"),
            _button("new-query-button", "new-query-text", "reset_form", "secondary"),
        ],
    ),
)

EXAMPLE_ERROR_UI = FewShotExample(
    description="Display error message with retry option",
    response=_surface(
        "error-display",
        [
            _alert(
                "error-alert",
                "error",
                "Creation Failed",
                "Unable to create the instance. Please check your inputs and try again.",
            ),
            _text("retry-text", "Try Again", "span"),
            _button("retry-button", "retry-text", "retry_action", "primary"),
            _text("cancel-text", "Cancel", "span"),
            _button("cancel-button", "cancel-text", "reset_form", "secondary"),
        ],
    ),
)

EXAMPLE_WARNING_UI = FewShotExample(
    description="Display validation warning",
    response=_surface(
        "validation-warning",
        [
            _alert(
                "warning-alert",
                "warning",
                "Missing Information",
                "Please fill in all required fields before submitting.",
            ),
        ],
    ),
)

ALL_EXAMPLES = [
    EXAMPLE_INITIAL_FORM,
    EXAMPLE_SUCCESS_RESULT,
    EXAMPLE_LIST_RESULT,
    EXAMPLE_ERROR_UI,
    EXAMPLE_WARNING_UI,
]

_BY_KIND = {
    "form": EXAMPLE_INITIAL_FORM,
    "success": EXAMPLE_SUCCESS_RESULT,
    "list": EXAMPLE_LIST_RESULT,
    "error": EXAMPLE_ERROR_UI,
    "warning": EXAMPLE_WARNING_UI,
}

KEY_PATTERNS = """## Key Patterns from Examples
1. Always include a surfaceId that describes the UI purpose
2. Use unique, descriptive ids for each component
3. Structure forms as title, description, inputs, then button
4. For buttons, create a separate Text component and reference it via child
5. Use the Alert type that matches the feedback
6. Include both primary and secondary actions when appropriate
7. After tool execution, bind Table data to "data.<arrayName>" (e.g. "data.instances")"""


def get_example(kind: str) -> FewShotExample | None:
    """Example by kind: form, success, list, error or warning."""
    return _BY_KIND.get(kind)


def generate_examples_prompt(examples: list[FewShotExample]) -> str:
    """Render the few-shot layer; empty when there are no examples."""
    if not examples:
        return ""

    rendered = "\n\n".join(
        f"### Example {i}: {example.description}\n```json\n{safe_json_dumps(example.response, indent=2)}\n```"
        for i, example in enumerate(examples, 1)
    )
    return (
        "## Few-Shot Examples\n\n"
        "Study these examples to understand the expected response format:\n\n"
        f"{rendered}\n\n"
        f"{KEY_PATTERNS}"
    )
