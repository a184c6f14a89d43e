"""Tests for core/translation/engines/openai_engine.py: fallback MT engine."""

import json

import httpx
import pytest

from core.translation.engines.openai_engine import SYSTEM_PROMPT, OpenAIEngine


def make_engine(handler, requests=None, api_key="sk-test"):
    def recording(request):
        if requests is not None:
            requests.append(request)
        return handler(request)

    client = httpx.AsyncClient(
        transport=httpx.MockTransport(recording),
        base_url="https://api.openai.test/v1",
    )
    return OpenAIEngine(api_key=api_key, client=client)


def completion(content, usage=None):
    return httpx.Response(200, json={
        "choices": [{"message": {"role": "assistant", "content": content}}],
        "usage": usage or {"prompt_tokens": 40, "completion_tokens": 5, "total_tokens": 45},
    })


class TestOpenAIEngine:

    @pytest.mark.asyncio
    async def test_successful_translation(self):
        requests = []
        engine = make_engine(lambda request: completion(" Bonjour. \n"), requests)

        result = await engine.translate("Hello.", "english", "french")

        assert result.success is True
        assert result.translated_text == "Bonjour."
        assert result.tokens_used == 45
        assert result.engine == "openai_gpt-4o"

        body = json.loads(requests[0].content)
        assert requests[0].url.path == "/v1/chat/completions"
        assert body["model"] == "gpt-4o"
        assert body["temperature"] == 1.0
        assert body["max_completion_tokens"] == 15000
        assert body["response_format"] == {"type": "text"}
        assert body["messages"][0]["role"] == "system"
        assert body["messages"][0]["content"] == SYSTEM_PROMPT.format(source="english", target="french")
        assert body["messages"][1] == {"role": "user", "content": "Hello."}

    def test_prompt_names_both_languages(self):
        engine = OpenAIEngine(api_key="sk-test")
        system = engine.build_messages("Hi", "german", "italian")[0]["content"]
        assert "german text into italian" in system

    @pytest.mark.asyncio
    async def test_server_error(self):
        engine = make_engine(lambda request: httpx.Response(500, text="upstream down"))
        result = await engine.translate("Hello.", "en", "fr")
        assert result.success is False
        assert "500" in result.error

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        result = await make_engine(handler).translate("Hello.", "en", "fr")
        assert result.success is False
        assert result.error == "Translation timeout"

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        result = await make_engine(handler).translate("Hello.", "en", "fr")
        assert result.success is False
        assert result.error.startswith("Connection error")

    @pytest.mark.asyncio
    async def test_malformed_response(self):
        engine = make_engine(lambda request: httpx.Response(200, json={"choices": []}))
        result = await engine.translate("Hello.", "en", "fr")
        assert result.success is False
        assert result.error.startswith("Malformed response")

    @pytest.mark.asyncio
    async def test_empty_translation(self):
        engine = make_engine(lambda request: completion(""))
        result = await engine.translate("Hello.", "en", "fr")
        assert result.success is False
        assert result.error == "Empty translation"

    @pytest.mark.asyncio
    async def test_missing_api_key_makes_no_request(self):
        requests = []
        engine = make_engine(lambda request: completion("x"), requests, api_key="")
        result = await engine.translate("Hello.", "en", "fr")
        assert result.success is False
        assert requests == []
        assert engine.is_available() is False

    def test_engine_id_includes_model(self):
        engine = OpenAIEngine(api_key="sk-test", model="gpt-4o-mini")
        assert engine.engine_id == "openai_gpt-4o-mini"
        assert engine.is_available() is True
