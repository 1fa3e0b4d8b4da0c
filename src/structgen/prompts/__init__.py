"""Prompt builders and the schema-to-prompt renderer."""

from .base import BasePromptBuilder
from .schema_renderer import render
from .structured_prompt_builder import (
    PassthroughPromptBuilder,
    StructuredPromptBuilder,
)

__all__ = [
    "BasePromptBuilder",
    "PassthroughPromptBuilder",
    "StructuredPromptBuilder",
    "render",
]
