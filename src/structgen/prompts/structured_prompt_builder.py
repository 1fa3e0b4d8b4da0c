from structgen.core.schema import SchemaDescriptor  # noqa: D100

from .base import BasePromptBuilder
from .schema_renderer import render

JSON_ONLY_INSTRUCTION = (
    "IMPORTANT: You MUST respond with valid JSON only. "
    "No extra text, no markdown code fences, just pure JSON."
)


class StructuredPromptBuilder(BasePromptBuilder):
    """Appends a rendered schema and a JSON-only instruction to a system prompt.

    Used by backends without native schema support, where the expected shape
    can only be communicated through the prompt itself.
    """

    def __init__(self, schema: SchemaDescriptor):  # noqa: D107
        self.schema = schema

    def create_prompt(self, system_prompt: str) -> str:
        """Return `system_prompt` followed by the structural instructions."""
        prompt_parts = [
            system_prompt.rstrip(),
            JSON_ONLY_INSTRUCTION,
            f"Required JSON structure:\n{render(self.schema)}",
        ]
        return "\n\n".join(part for part in prompt_parts if part)


class PassthroughPromptBuilder(BasePromptBuilder):
    """Leaves the system prompt untouched (native-schema backends, free text)."""

    def create_prompt(self, system_prompt: str) -> str:  # noqa: D102
        return system_prompt
