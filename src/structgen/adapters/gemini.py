"""Native-schema adapter for Gemini's ``generateContent`` REST endpoint.

The schema is forwarded as ``responseSchema`` so the backend constrains
decoding itself. Output still goes through the sanitizer downstream:
native schema support lowers the failure rate, it does not remove it.
"""

from __future__ import annotations

import logging
from typing import Any

from structgen.config.providers import ProviderConfig
from structgen.constants import (
    DEFAULT_TOP_K,
    DEFAULT_TOP_P,
    RAW_PREVIEW_CHARS,
    TRUNCATION_FINISH_REASONS,
)
from structgen.core.exceptions import EmptyResponseError
from structgen.core.schema import to_provider_schema
from structgen.core.types import GenerationRequest, RawModelResponse
from structgen.prompts import PassthroughPromptBuilder

from .transport import HttpTransport

log = logging.getLogger(__name__)


class GeminiAdapter:
    """Calls ``models/{model}:generateContent`` with a JSON response schema."""

    native_schema = True

    def __init__(self, config: ProviderConfig, transport: HttpTransport) -> None:  # noqa: D107
        self.config = config
        self.transport = transport
        self.prompt_builder = PassthroughPromptBuilder()

    @property
    def endpoint(self) -> str:
        """Full ``generateContent`` URL for the configured model."""
        return f"{self.config.base_url}/models/{self.config.model}:generateContent"

    def build_payload(self, request: GenerationRequest) -> dict[str, Any]:
        """Translate a request into the ``generateContent`` body."""
        generation_config: dict[str, Any] = {
            "temperature": request.temperature,
            "topK": DEFAULT_TOP_K,
            "topP": DEFAULT_TOP_P,
            "maxOutputTokens": self.config.max_output_tokens,
        }
        seed = request.seed if request.seed is not None else self.config.seed
        if seed is not None:
            generation_config["seed"] = seed
        if request.schema is not None:
            generation_config["responseMimeType"] = "application/json"
            generation_config["responseSchema"] = to_provider_schema(request.schema)

        payload: dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": request.user_prompt}]}],
            "generationConfig": generation_config,
        }
        system = self.prompt_builder.create_prompt(request.system_prompt)
        if system:
            payload["systemInstruction"] = {"parts": [{"text": system}]}
        return payload

    async def generate(self, request: GenerationRequest) -> RawModelResponse:
        """Issue one ``generateContent`` call."""
        body = await self.transport.post_json(
            self.endpoint,
            self.build_payload(request),
            headers={"x-goog-api-key": self.config.api_key},
        )
        return self._parse(body)

    def _parse(self, body: dict[str, Any]) -> RawModelResponse:
        candidates = body.get("candidates") or []
        if not candidates:
            block = (body.get("promptFeedback") or {}).get("blockReason")
            reason = f" (blocked: {block})" if block else ""
            raise EmptyResponseError(f"Gemini returned no candidates{reason}")

        candidate = candidates[0]
        parts = (candidate.get("content") or {}).get("parts") or []
        text = "".join(p.get("text", "") for p in parts if isinstance(p, dict))
        finish_reason = candidate.get("finishReason")

        if not text.strip():
            raise EmptyResponseError(
                f"Gemini returned empty content (finishReason={finish_reason})"
            )

        truncated = finish_reason in TRUNCATION_FINISH_REASONS
        if truncated:
            log.warning(
                "Gemini output truncated by token limit; relying on repair "
                "(model=%s, %d chars)",
                self.config.model,
                len(text),
            )
        log.debug("Gemini raw preview: %r", text[:RAW_PREVIEW_CHARS])

        return RawModelResponse(
            text=text,
            truncated=truncated,
            provider_metadata={
                "provider": self.config.provider,
                "model": body.get("modelVersion", self.config.model),
                "finish_reason": finish_reason,
                "usage": body.get("usageMetadata") or {},
            },
        )
