"""
Workflow Templates
Multi-step task patterns described to the model in the system prompt.
"""

from pydantic import BaseModel, Field


class WorkflowStep(BaseModel):
    """One form in a multi-step workflow."""

    name: str
    description: str
    required_fields: list[str] = Field(default_factory=list)
    ui_hint: str = ""


class WorkflowTemplate(BaseModel):
    """Workflow template definition"""

    name: str = Field(min_length=1)
    description: str = ""
    steps: list[WorkflowStep]


DEFAULT_WORKFLOWS: dict[str, WorkflowTemplate] = {
    "createInstance": WorkflowTemplate(
        name="Create Instance",
        description="Multi-step workflow for creating a new resource instance",
        steps=[
            WorkflowStep(
                name="Basic Information",
                description="Collect basic instance information",
                required_fields=["instanceName", "instanceType"],
                ui_hint="Form with a TextInput for the name and a Select for the type",
            ),
            WorkflowStep(
                name="Configuration",
                description="Configure instance settings",
                required_fields=["region"],
                ui_hint="Form with a Select for the region and optional tags",
            ),
            WorkflowStep(
                name="Confirmation",
                description="Review and confirm instance creation",
                ui_hint="Summary Table with a confirm Button",
            ),
        ],
    ),
    "userRegistration": WorkflowTemplate(
        name="User Registration",
        description="Multi-step user registration workflow",
        steps=[
            WorkflowStep(
                name="Account Details",
                description="Collect user account information",
                required_fields=["email", "username"],
                ui_hint="Form with email and username text inputs",
            ),
            WorkflowStep(
                name="Profile Setup",
                description="Set up user profile",
                required_fields=["displayName"],
                ui_hint="Form with display name and optional bio",
            ),
            WorkflowStep(
                name="Preferences",
                description="Configure user preferences",
                required_fields=["notifications"],
                ui_hint="Checkboxes for notification preferences",
            ),
        ],
    ),
    "dataQuery": WorkflowTemplate(
        name="Data Query",
        description="Single-step data query workflow",
        steps=[
            WorkflowStep(
                name="Query Parameters",
                description="Specify query parameters",
                required_fields=["query"],
                ui_hint="Text input for query with optional filters",
            ),
        ],
    ),
}

WORKFLOW_GUIDELINES = """## Workflow Guidelines
1. Track the current step in the workflow
2. Validate required fields before proceeding to the next step
3. Allow users to go back to previous steps when appropriate
4. Show progress for multi-step workflows
5. Display a summary before final confirmation
6. Handle errors at each step"""


def _format_step(index: int, step: WorkflowStep) -> str:
    return (
        f"  Step {index}: {step.name}\n"
        f"    - Description: {step.description}\n"
        f"    - Required fields: {', '.join(step.required_fields) or 'none'}\n"
        f"    - UI hint: {step.ui_hint or 'none'}"
    )


class WorkflowLibrary:
    """
    Named workflow templates for the prompt composer.

    Each library owns a copy of the defaults, so registering a template on
    one composer's library never leaks into another.
    """

    def __init__(self, templates: dict[str, WorkflowTemplate] | None = None) -> None:
        self.templates = dict(DEFAULT_WORKFLOWS if templates is None else templates)

    def get(self, workflow_id: str) -> WorkflowTemplate | None:
        """Get template by ID"""
        return self.templates.get(workflow_id)

    def names(self) -> list[str]:
        return list(self.templates)

    def register(self, workflow_id: str, template: WorkflowTemplate | dict) -> WorkflowTemplate:
        """
        Add or replace a template.

        Raises:
            ValueError: Empty id, or a dict that is not a valid template
        """
        if not workflow_id:
            raise ValueError("Workflow id cannot be empty")
        if not isinstance(template, WorkflowTemplate):
            # pydantic.ValidationError is a ValueError
            template = WorkflowTemplate.model_validate(template)
        self.templates[workflow_id] = template
        return template

    def generate_prompt(self) -> str:
        """Describe every template, or an empty string when there are none."""
        if not self.templates:
            return ""

        descriptions = "\n\n".join(
            f"### {template.name}\n{template.description}\n\n"
            + "\n".join(_format_step(i, step) for i, step in enumerate(template.steps, 1))
            for template in self.templates.values()
        )
        return (
            "## Workflow Templates\n\n"
            "When handling multi-step tasks, follow these workflow patterns:\n\n"
            f"{descriptions}\n\n"
            f"{WORKFLOW_GUIDELINES}"
        )
