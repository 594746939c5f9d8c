from __future__ import annotations

import json

import httpx
import pytest

from studybuddy.core.errors import ImageGenerationError, LLMProviderError
from studybuddy.core.image_provider import NullImageProvider, OpenAIImageProvider, get_image_provider
from studybuddy.core.llm_provider import (
    NullLLMProvider,
    OllamaLLMProvider,
    OpenAILLMProvider,
    get_llm_provider,
)
from studybuddy.core.settings import settings


@pytest.fixture
def openai_key(monkeypatch):
    monkeypatch.setattr(settings, "openai_api_key", "sk-test-key-123456")
    monkeypatch.setattr(settings, "openai_base_url", "https://llm.test/v1")


def _sse(*events: str) -> bytes:
    return "".join(f"data: {e}\n\n" for e in events).encode()


@pytest.mark.asyncio
async def test_openai_stream_yields_content_deltas(openai_key):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["authorization"]
        seen["body"] = json.loads(request.content)
        body = _sse(
            json.dumps({"choices": [{"delta": {"role": "assistant"}}]}),
            json.dumps({"choices": [{"delta": {"content": "Hel"}}]}),
            json.dumps({"choices": []}),
            json.dumps({"choices": [{"delta": {"content": "lo"}}]}),
            "[DONE]",
        )
        return httpx.Response(200, content=body, headers={"content-type": "text/event-stream"})

    provider = OpenAILLMProvider(model_name="gpt-test", transport=httpx.MockTransport(handler))
    deltas = await provider.open_stream("be kind", [{"role": "user", "content": "hi"}])
    assert [d async for d in deltas] == ["Hel", "lo"]
    assert seen["url"] == "https://llm.test/v1/chat/completions"
    assert seen["auth"] == "Bearer sk-test-key-123456"
    assert seen["body"]["stream"] is True
    assert seen["body"]["messages"] == [
        {"role": "system", "content": "be kind"},
        {"role": "user", "content": "hi"},
    ]


@pytest.mark.asyncio
async def test_openai_rejection_raises_before_streaming(openai_key):
    transport = httpx.MockTransport(lambda request: httpx.Response(401, json={"error": "bad key"}))
    provider = OpenAILLMProvider(transport=transport)
    with pytest.raises(LLMProviderError, match="401"):
        await provider.open_stream("sys", [])


@pytest.mark.asyncio
async def test_openai_without_key_is_rejected(monkeypatch):
    monkeypatch.setattr(settings, "openai_api_key", "")
    with pytest.raises(LLMProviderError):
        await OpenAILLMProvider().open_stream("sys", [])


@pytest.mark.asyncio
async def test_ollama_stream_reads_ndjson(monkeypatch):
    monkeypatch.setattr(settings, "ollama_base_url", "http://ollama.test")
    lines = [
        {"message": {"role": "assistant", "content": "Two "}, "done": False},
        {"message": {"role": "assistant", "content": "words"}, "done": False},
        {"message": {"role": "assistant", "content": ""}, "done": True},
    ]
    body = "\n".join(json.dumps(line) for line in lines).encode()

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/chat"
        return httpx.Response(200, content=body)

    provider = OllamaLLMProvider(model_name="tiny", transport=httpx.MockTransport(handler))
    deltas = await provider.open_stream("sys", [{"role": "user", "content": "hi"}])
    assert [d async for d in deltas] == ["Two ", "words"]


@pytest.mark.asyncio
async def test_image_provider_returns_first_url(openai_key):
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        assert request.url.path == "/v1/images/generations"
        assert body["prompt"] == "a red kite"
        assert body["n"] == 1
        return httpx.Response(200, json={"data": [{"url": "https://img.test/kite.png"}]})

    provider = OpenAIImageProvider(transport=httpx.MockTransport(handler))
    assert await provider.generate("a red kite") == "https://img.test/kite.png"


@pytest.mark.asyncio
async def test_image_provider_errors(openai_key):
    empty = OpenAIImageProvider(transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"data": []})))
    with pytest.raises(ImageGenerationError):
        await empty.generate("x")

    refused = OpenAIImageProvider(transport=httpx.MockTransport(lambda r: httpx.Response(400, json={})))
    with pytest.raises(httpx.HTTPStatusError):
        await refused.generate("x")


def test_provider_factories_follow_settings(monkeypatch):
    monkeypatch.setattr(settings, "llm_provider", "ollama")
    monkeypatch.setattr(settings, "image_provider", "openai")
    assert isinstance(get_llm_provider(), OllamaLLMProvider)
    assert isinstance(get_image_provider(), OpenAIImageProvider)

    monkeypatch.setattr(settings, "llm_provider", "none")
    monkeypatch.setattr(settings, "image_provider", "none")
    assert isinstance(get_llm_provider(), NullLLMProvider)
    assert isinstance(get_image_provider(), NullImageProvider)
