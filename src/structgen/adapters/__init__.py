"""Provider adapters: one implementation per backend family."""

from .base import GenerationAdapter
from .gemini import GeminiAdapter
from .openai_compat import OpenAICompatAdapter
from .registry import create_adapter
from .transport import HttpTransport

__all__ = [
    "GeminiAdapter",
    "GenerationAdapter",
    "HttpTransport",
    "OpenAICompatAdapter",
    "create_adapter",
]
