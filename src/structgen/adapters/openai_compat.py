"""Prompt-coerced adapter for OpenAI-compatible ``chat/completions`` APIs.

Covers DeepSeek, Moonshot, Qwen (DashScope compatible mode), GLM, OpenAI
and any custom endpoint speaking the same protocol. These backends have no
portable schema parameter, so the expected shape is rendered into the
system prompt and JSON mode is requested.
"""

from __future__ import annotations

import logging
from typing import Any

from structgen.config.providers import ProviderConfig
from structgen.constants import (
    DEFAULT_TOP_P,
    RAW_PREVIEW_CHARS,
    TRUNCATION_FINISH_REASONS,
)
from structgen.core.exceptions import EmptyResponseError
from structgen.core.types import GenerationRequest, RawModelResponse
from structgen.prompts import (
    BasePromptBuilder,
    PassthroughPromptBuilder,
    StructuredPromptBuilder,
)

from .transport import HttpTransport

log = logging.getLogger(__name__)


class OpenAICompatAdapter:
    """Calls ``{base_url}/chat/completions`` with bearer authentication."""

    native_schema = False

    def __init__(self, config: ProviderConfig, transport: HttpTransport) -> None:  # noqa: D107
        self.config = config
        self.transport = transport

    @property
    def endpoint(self) -> str:  # noqa: D102
        return f"{self.config.base_url}/chat/completions"

    def build_payload(self, request: GenerationRequest) -> dict[str, Any]:
        """Translate a request into a ``chat/completions`` body."""
        builder: BasePromptBuilder = (
            StructuredPromptBuilder(request.schema)
            if request.schema is not None
            else PassthroughPromptBuilder()
        )
        payload: dict[str, Any] = {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": builder.create_prompt(request.system_prompt)},
                {"role": "user", "content": request.user_prompt},
            ],
            "temperature": request.temperature,
            "top_p": DEFAULT_TOP_P,
            "max_tokens": self.config.max_output_tokens,
        }
        seed = request.seed if request.seed is not None else self.config.seed
        if seed is not None:
            payload["seed"] = seed
        if request.schema is not None:
            payload["response_format"] = {"type": "json_object"}
        return payload

    async def generate(self, request: GenerationRequest) -> RawModelResponse:
        """Issue one chat completion call."""
        body = await self.transport.post_json(
            self.endpoint,
            self.build_payload(request),
            headers={"Authorization": f"Bearer {self.config.api_key}"},
        )
        return self._parse(body)

    def _parse(self, body: dict[str, Any]) -> RawModelResponse:
        choices = body.get("choices") or []
        if not choices:
            raise EmptyResponseError(f"{self.config.provider} returned no choices")

        choice = choices[0]
        content = (choice.get("message") or {}).get("content")
        finish_reason = choice.get("finish_reason")

        if not isinstance(content, str) or not content.strip():
            raise EmptyResponseError(
                f"{self.config.provider} returned empty content "
                f"(finish_reason={finish_reason})"
            )

        truncated = finish_reason in TRUNCATION_FINISH_REASONS
        if truncated:
            log.warning(
                "%s output truncated by max_tokens=%d; relying on repair",
                self.config.provider,
                self.config.max_output_tokens,
            )
        log.debug("%s raw preview: %r", self.config.provider, content[:RAW_PREVIEW_CHARS])

        return RawModelResponse(
            text=content,
            truncated=truncated,
            provider_metadata={
                "provider": self.config.provider,
                "model": body.get("model", self.config.model),
                "finish_reason": finish_reason,
                "usage": body.get("usage") or {},
            },
        )
