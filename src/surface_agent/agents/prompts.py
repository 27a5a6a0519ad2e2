"""
Prompt Composer
Layered system prompt and phase-aware user prompts for the ReAct loop.
"""

from typing import TYPE_CHECKING, Any

from ..core import safe_json_dumps
from ..surface import CONTRACTS, ComponentKind
from .examples import ALL_EXAMPLES, FewShotExample, generate_examples_prompt
from .models import AgentContext, Phase
from .workflows import WorkflowLibrary

if TYPE_CHECKING:
    from ..tools import ToolRegistry

LAYER_SEPARATOR = "\n\n---\n\n"
DEFAULT_HISTORY_WINDOW = 5


BASE_PROMPT = """You are an assistant that generates user interfaces as structured JSON. You follow the ReAct pattern (Reasoning, Acting, Observing) to guide users through tasks with forms.

## Response Format
Respond ONLY with valid JSON. Surfaces use this exact structure:
{
  "surfaceUpdate": {
    "surfaceId": "unique-surface-id",
    "components": [
      {"id": "unique-component-id", "component": {"ComponentType": {}}}
    ]
  }
}

## Rules
1. No markdown and no text outside the JSON
2. Every component id is unique within the surface
3. Use only the whitelisted component types listed below
4. Include every required property of a component
5. Start forms with a Text heading and end them with a Button whose action.name is a tool action_id
6. Use Alert components for feedback and Table components for lists of records
7. Never put HTML, scripts or event handlers in any string"""


# Example property payloads for each kind
_EXAMPLES: dict[ComponentKind, dict[str, Any]] = {
    ComponentKind.TEXT_INPUT: {
        "value": {"path": "formValues.fieldName"},
        "label": "Field Label",
        "placeholder": "Enter text here...",
        "required": True,
    },
    ComponentKind.SELECT: {
        "value": {"path": "formValues.selection"},
        "options": [{"value": "opt1", "label": "Option 1"}],
        "label": "Select an option",
    },
    ComponentKind.CHECKBOX: {"value": {"path": "formValues.agreed"}, "label": "I agree"},
    ComponentKind.TEXT: {"text": {"literalString": "Welcome"}, "usageHint": "h1"},
    ComponentKind.ALERT: {"type": "success", "title": "Done", "message": "Action completed."},
    ComponentKind.TABLE: {
        "columns": [{"key": "name", "label": "Name"}],
        "data": {"path": "data.items"},
    },
    ComponentKind.BUTTON: {"child": "button-label-id", "action": {"name": "submit_form"}, "variant": "primary"},
}


def generate_ui_schema_prompt() -> str:
    """Describe the component whitelist from the catalog."""
    sections = [
        "## Available UI Components",
        "You can ONLY use the following component types. Any other type is rejected.",
    ]
    for kind, contract in CONTRACTS.items():
        lines = [f"### {kind.value}"]
        if contract.required:
            lines.append(f"- Required: {', '.join(contract.required)}")
        if contract.optional:
            lines.append(f"- Optional: {', '.join(contract.optional)}")
        for prop, values in contract.choices.items():
            lines.append(f"- {prop} is one of: {', '.join(values)}")
        for prop in contract.references:
            lines.append(f"- {prop} is the id of another component in the same surface")
        lines.append(f"Example: {safe_json_dumps({kind.value: _EXAMPLES[kind]})}")
        sections.append("\n".join(lines))

    sections.append(
        "Bindings: use {\"path\": \"dot.separated[0].path\"} to read from the data model "
        "and {\"literalString\": \"text\"} for fixed text."
    )
    return "\n\n".join(sections)


def _format_tool(tool: dict[str, Any]) -> str:
    params = "\n".join(
        f"    - {p['name']} ({p['type']}) {'(required)' if p.get('required') else '(optional)'}: "
        f"{p.get('description') or 'No description'}"
        for p in tool.get("parameters", [])
    )
    return (
        f"### {tool['name']}\n"
        f"- Action ID: `{tool['action_id']}`\n"
        f"- Description: {tool.get('description') or 'No description provided'}\n"
        f"- Parameters:\n{params or '    None'}\n"
        f"- Returns: {tool.get('returns') or 'object'}"
    )


def generate_tools_prompt(definitions: list[dict[str, Any]]) -> str:
    """Describe registered tools for the model."""
    if not definitions:
        return "## Available Tools\n\nNo tools are registered. Generate UI for information gathering only."

    tools = "\n\n".join(_format_tool(tool) for tool in definitions)
    return (
        "## Available Tools\n\n"
        "Use a tool's action_id as the Button action.name to submit a form to it.\n\n"
        f"{tools}\n\n"
        "## Tool Usage\n"
        "1. Match form fields to tool parameters by name\n"
        "2. Provide an input for every required parameter"
    )


RESPONSE_RULES = """## Data Model
After a tool runs, its result is available to bindings as {"success", "data", "error", "metadata"}; for example {"path": "data.instances"}."""


PHASE_INSTRUCTIONS: dict[Phase, str] = {
    Phase.REASONING: (
        "## Phase: Reasoning\n"
        "Analyze the user's request and determine the intent, the information needed "
        "and which tool should be used.\n"
        "Respond with a JSON object containing: intent, requiredInfo, confidence"
    ),
    Phase.ACTING: (
        "## Phase: Acting\n"
        "Based on the reasoning, generate a UI that collects the required information or displays results."
    ),
    Phase.INFERRING_ADJUSTMENTS: (
        "## Phase: Inferring Adjustments\n"
        "The previous action failed. Analyze the error and suggest adjustments.\n"
        "Respond with a JSON object containing: adjustments (parameter modifications to try)"
    ),
    Phase.GENERATING_RESULT_UI: (
        "## Phase: Generating Result UI\n"
        "The tool execution succeeded. Generate a UI with a success Alert and the relevant data."
    ),
    Phase.GENERATING_ERROR_UI: (
        "## Phase: Generating Error UI\n"
        "An error occurred. Generate a UI with an error Alert and recovery options."
    ),
}

JSON_OBJECT_RESPONSE = (
    "## Response Required\n"
    "Respond with a valid JSON object as specified above. Do not include any text outside the JSON."
)
SURFACE_RESPONSE = (
    "## Response Required\n"
    "Respond with a surfaceUpdate JSON object containing components. "
    "Do not include any text outside the JSON."
)


def _json_block(title: str, value: Any) -> str:
    return f"## {title}\n```json\n{safe_json_dumps(value, indent=2)}\n```"


def _plain(value: Any) -> Any:
    return value.to_wire() if hasattr(value, "to_wire") else value


class PromptComposer:
    """Assembles prompts from modular layers."""

    def __init__(
        self,
        tool_registry: "ToolRegistry | None" = None,
        base_prompt: str = BASE_PROMPT,
        history_window: int = DEFAULT_HISTORY_WINDOW,
        workflows: WorkflowLibrary | None = None,
        examples: list[FewShotExample] | None = None,
    ) -> None:
        self.tool_registry = tool_registry
        self.base_prompt = base_prompt
        self.history_window = history_window
        self.workflows = workflows if workflows is not None else WorkflowLibrary()
        self.examples = list(ALL_EXAMPLES if examples is None else examples)

    def set_custom_workflows(self, workflows: WorkflowLibrary) -> None:
        self.workflows = workflows

    def set_examples(self, examples: list[FewShotExample]) -> None:
        self.examples = list(examples)

    def compose_system_prompt(self) -> str:
        """
        Layers: base rules, UI schema, tools, workflows, few-shot examples,
        response rules. Workflow and example layers are left out when empty.
        """
        definitions = self.tool_registry.prompt_definitions() if self.tool_registry else []
        layers = [
            self.base_prompt,
            generate_ui_schema_prompt(),
            generate_tools_prompt(definitions),
            self.workflows.generate_prompt(),
            generate_examples_prompt(self.examples),
            RESPONSE_RULES,
        ]
        return LAYER_SEPARATOR.join(layer for layer in layers if layer)

    def compose_user_prompt(
        self,
        phase: Phase | str | None = None,
        context: AgentContext | None = None,
        *,
        query: str | None = None,
        instruction: str | None = None,
        result: Any = None,
        error: Any = None,
        observation: Any = None,
        reasoning: Any = None,
    ) -> str:
        """
        Compose the user prompt for one phase.

        Sections appear only when their value is present. Session state
        (previous UI, form data, retry info, history) comes from ``context``.
        """
        context = context or AgentContext()
        if isinstance(phase, str) and not isinstance(phase, Phase):
            try:
                phase = Phase(phase)
            except ValueError:
                pass  # free-form phase label
        sections: list[str] = []

        if phase is not None:
            sections.append(self.phase_instruction(phase))
        if query:
            sections.append(f"## User Request\n{query}")
        if instruction:
            sections.append(f"## Instruction\n{instruction}")
        if context.previous_ui:
            sections.append(_json_block("Previous UI State", context.previous_ui))
        if context.form_data:
            sections.append(_json_block("Submitted Form Data", context.form_data))
        if result is not None:
            sections.append(_json_block("Tool Execution Result", _plain(result)))
        if error is not None:
            sections.append(_json_block("Error Information", _plain(error)))
        if observation is not None:
            sections.append(_json_block("Observation", _plain(observation)))
        if reasoning is not None:
            sections.append(_json_block("Reasoning", _plain(reasoning)))
        if context.retry_info is not None:
            sections.append(
                f"## Retry Information\nAttempt: {context.retry_info.attempt_number}\n"
                f"Adjustments: {safe_json_dumps(context.retry_info.adjustments, indent=2)}"
            )

        history = context.conversation_history[-self.history_window :]
        if history:
            entries = "\n\n".join(
                f"Entry {i}: {safe_json_dumps(entry, indent=2)}" for i, entry in enumerate(history, 1)
            )
            sections.append(f"## Recent Conversation History\n{entries}")

        sections.append(self.response_instruction(phase))
        return "\n\n".join(sections)

    @staticmethod
    def phase_instruction(phase: Phase | str) -> str:
        if isinstance(phase, Phase):
            return PHASE_INSTRUCTIONS[phase]
        return f"## Phase: {phase}"

    @staticmethod
    def response_instruction(phase: Phase | str | None) -> str:
        if phase in (Phase.REASONING, Phase.INFERRING_ADJUSTMENTS):
            return JSON_OBJECT_RESPONSE
        return SURFACE_RESPONSE
