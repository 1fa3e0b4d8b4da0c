"""Adapters over mocked HTTP: payload shapes, headers and reply parsing."""

import httpx
import pytest

from structgen.adapters import GeminiAdapter, OpenAICompatAdapter, create_adapter
from structgen.config import FrozenConfig, build_provider_config
from structgen.core.exceptions import EmptyResponseError, TransportError
from structgen.core.schema import array_of, number, object_of, string
from structgen.core.types import GenerationRequest
from structgen.prompts.structured_prompt_builder import JSON_ONLY_INSTRUCTION

pytestmark = pytest.mark.unit

SCHEMA = object_of(
    {"score": number(minimum=0, maximum=10), "tips": array_of(string())},
    required=("score",),
)


def _request(**overrides):
    fields = {
        "system_prompt": "You are a writing coach.",
        "user_prompt": "Grade this draft.",
        "schema": SCHEMA,
        "temperature": 0.2,
    }
    fields.update(overrides)
    return GenerationRequest(**fields)


def _gemini(transport, **config):
    return create_adapter(build_provider_config(FrozenConfig(api_key="g-key", **config)), transport)


def _compat(transport, **config):
    config.setdefault("provider", "deepseek")
    return create_adapter(build_provider_config(FrozenConfig(api_key="d-key", **config)), transport)


class TestAdapterSelection:
    def test_native_and_compatible_families(self, mock_http):
        transport, _ = mock_http(lambda req: httpx.Response(200, json={}))

        assert isinstance(_gemini(transport), GeminiAdapter)
        assert isinstance(_compat(transport), OpenAICompatAdapter)
        assert isinstance(_compat(transport, provider="zhipu"), OpenAICompatAdapter)


class TestGeminiAdapter:
    @pytest.mark.asyncio
    async def test_payload_carries_native_schema(self, mock_http, gemini_reply):
        transport, handler = mock_http(
            lambda req: httpx.Response(200, json=gemini_reply('{"score": 7}'))
        )

        response = await _gemini(transport, seed=11).generate(_request())

        request = handler.requests[0]
        assert request.url.path.endswith("/models/gemini-2.0-flash:generateContent")
        assert request.headers["x-goog-api-key"] == "g-key"
        body = handler.bodies()[0]
        config = body["generationConfig"]
        assert config["responseMimeType"] == "application/json"
        assert config["responseSchema"]["type"] == "OBJECT"
        assert config["responseSchema"]["required"] == ["score"]
        assert config["temperature"] == 0.2
        assert config["seed"] == 11
        assert body["systemInstruction"]["parts"][0]["text"] == "You are a writing coach."
        assert body["contents"][0]["parts"][0]["text"] == "Grade this draft."

        assert response.text == '{"score": 7}'
        assert response.truncated is False
        assert response.provider_metadata["finish_reason"] == "STOP"

    @pytest.mark.asyncio
    async def test_free_text_request_has_no_schema(self, mock_http, gemini_reply):
        transport, handler = mock_http(lambda req: httpx.Response(200, json=gemini_reply("Hi")))

        await _gemini(transport).generate(_request(schema=None))

        config = handler.bodies()[0]["generationConfig"]
        assert "responseSchema" not in config
        assert "seed" not in config

    @pytest.mark.asyncio
    async def test_request_seed_overrides_config_seed(self, mock_http, gemini_reply):
        transport, handler = mock_http(lambda req: httpx.Response(200, json=gemini_reply("{}")))

        await _gemini(transport, seed=1).generate(_request(seed=2))

        assert handler.bodies()[0]["generationConfig"]["seed"] == 2

    @pytest.mark.asyncio
    async def test_truncation_is_flagged(self, mock_http, gemini_reply):
        transport, _ = mock_http(
            lambda req: httpx.Response(200, json=gemini_reply('{"score": 7, "ti', "MAX_TOKENS"))
        )

        response = await _gemini(transport).generate(_request())

        assert response.truncated is True

    @pytest.mark.asyncio
    async def test_blocked_prompt_is_empty(self, mock_http):
        transport, _ = mock_http(
            lambda req: httpx.Response(200, json={"promptFeedback": {"blockReason": "SAFETY"}})
        )

        with pytest.raises(EmptyResponseError, match="SAFETY"):
            await _gemini(transport).generate(_request())

    @pytest.mark.asyncio
    async def test_blank_text_is_empty(self, mock_http, gemini_reply):
        transport, _ = mock_http(lambda req: httpx.Response(200, json=gemini_reply("  \n")))

        with pytest.raises(EmptyResponseError):
            await _gemini(transport).generate(_request())


class TestOpenAICompatAdapter:
    @pytest.mark.asyncio
    async def test_schema_is_rendered_into_system_prompt(self, mock_http, openai_reply):
        transport, handler = mock_http(
            lambda req: httpx.Response(200, json=openai_reply('{"score": 7}'))
        )

        response = await _compat(transport).generate(_request())

        request = handler.requests[0]
        assert str(request.url) == "https://api.deepseek.com/chat/completions"
        assert request.headers["authorization"] == "Bearer d-key"
        body = handler.bodies()[0]
        assert body["model"] == "deepseek-chat"
        assert body["response_format"] == {"type": "json_object"}
        assert body["temperature"] == 0.2
        system, user = body["messages"]
        assert system["role"] == "system"
        assert system["content"].startswith("You are a writing coach.")
        assert JSON_ONLY_INSTRUCTION in system["content"]
        assert '"score"' in system["content"]
        assert user == {"role": "user", "content": "Grade this draft."}

        assert response.text == '{"score": 7}'
        assert response.provider_metadata["provider"] == "deepseek"

    @pytest.mark.asyncio
    async def test_free_text_request_skips_json_mode(self, mock_http, openai_reply):
        transport, handler = mock_http(lambda req: httpx.Response(200, json=openai_reply("Hi")))

        await _compat(transport, provider="moonshot").generate(_request(schema=None))

        body = handler.bodies()[0]
        assert "response_format" not in body
        assert body["messages"][0]["content"] == "You are a writing coach."

    @pytest.mark.asyncio
    async def test_length_finish_is_truncated(self, mock_http, openai_reply):
        transport, _ = mock_http(
            lambda req: httpx.Response(200, json=openai_reply('{"score": 7, "ti', "length"))
        )

        response = await _compat(transport).generate(_request())

        assert response.truncated is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [{"choices": []}, {"choices": [{"message": {"content": None}}]}, {}],
        ids=["no-choices", "null-content", "empty-body"],
    )
    async def test_missing_content_is_empty(self, mock_http, body):
        transport, _ = mock_http(lambda req: httpx.Response(200, json=body))

        with pytest.raises(EmptyResponseError):
            await _compat(transport).generate(_request())


class TestHttpTransport:
    @pytest.mark.asyncio
    async def test_server_error_carries_status(self, mock_http):
        transport, _ = mock_http(lambda req: httpx.Response(503, text="overloaded"))

        with pytest.raises(TransportError, match=r"API Error \(503\): overloaded") as exc:
            await _compat(transport).generate(_request())

        assert exc.value.status_code == 503

    @pytest.mark.asyncio
    async def test_non_json_body(self, mock_http):
        transport, _ = mock_http(lambda req: httpx.Response(200, text="<html>gateway</html>"))

        with pytest.raises(TransportError, match="not JSON"):
            await _gemini(transport).generate(_request())

    @pytest.mark.asyncio
    async def test_non_object_body(self, mock_http):
        transport, _ = mock_http(lambda req: httpx.Response(200, json=[1, 2]))

        with pytest.raises(TransportError, match="Expected a JSON object"):
            await _gemini(transport).generate(_request())

    @pytest.mark.asyncio
    async def test_network_failure(self, mock_http):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        transport, _ = mock_http(refuse)

        with pytest.raises(TransportError, match="failed"):
            await _compat(transport).generate(_request())

    @pytest.mark.asyncio
    async def test_timeout(self, mock_http):
        def stall(request):
            raise httpx.ReadTimeout("read timed out", request=request)

        transport, _ = mock_http(stall)

        with pytest.raises(TransportError, match="timed out"):
            await _gemini(transport).generate(_request())
