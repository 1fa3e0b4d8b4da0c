"""Adapter selection from a resolved provider configuration."""

from structgen.config.providers import ProviderConfig

from .base import GenerationAdapter
from .gemini import GeminiAdapter
from .openai_compat import OpenAICompatAdapter
from .transport import HttpTransport


def create_adapter(
    config: ProviderConfig, transport: HttpTransport | None = None
) -> GenerationAdapter:
    """Return the adapter for `config`'s provider family.

    Native-schema providers get `GeminiAdapter`; everything else speaks the
    OpenAI-compatible protocol.
    """
    transport = transport or HttpTransport(timeout=config.request_timeout)
    if config.native_schema:
        return GeminiAdapter(config, transport)
    return OpenAICompatAdapter(config, transport)
