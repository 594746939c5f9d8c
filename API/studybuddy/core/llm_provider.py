import json
from abc import ABC, abstractmethod
from typing import AsyncIterator

import httpx

from studybuddy.core.errors import LLMProviderError
from studybuddy.core.logging import DOMAIN_CHAT, get_domain_logger
from studybuddy.core.settings import settings

logger = get_domain_logger(__name__, DOMAIN_CHAT)


def _timeout(seconds: float) -> httpx.Timeout:
    # 0 (or less) means wait for the provider indefinitely.
    return httpx.Timeout(seconds if seconds and seconds > 0 else None)


class BaseLLMProvider(ABC):
    provider_name: str

    @abstractmethod
    async def open_stream(self, system: str, messages: list[dict]) -> AsyncIterator[str]:
        """
        Send the completion request and return an iterator of text deltas.

        Raises before returning if the provider rejects the call, so callers can
        fail the whole request without having started a response.
        """
        raise NotImplementedError


class _HTTPStreamingProvider(BaseLLMProvider):
    model_name: str

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=_timeout(settings.llm_timeout_seconds), transport=self._transport)

    @abstractmethod
    def _build_request(self, client: httpx.AsyncClient, system: str, messages: list[dict]) -> httpx.Request:
        raise NotImplementedError

    @abstractmethod
    def _parse_line(self, line: str) -> tuple[str, bool]:
        """Return ``(delta, done)`` for one line of the upstream body."""
        raise NotImplementedError

    async def open_stream(self, system: str, messages: list[dict]) -> AsyncIterator[str]:
        client = self._client()
        response = None
        try:
            response = await client.send(self._build_request(client, system, messages), stream=True)
            if response.is_error:
                body = (await response.aread()).decode("utf-8", errors="replace")
                raise LLMProviderError(
                    f"{self.provider_name} rejected completion: {response.status_code} {body[:300]}"
                )
        except Exception:
            if response is not None:
                await response.aclose()
            await client.aclose()
            raise
        logger.info("Upstream stream opened | provider=%s model=%s", self.provider_name, self.model_name)
        return self._iter_deltas(client, response)

    async def _iter_deltas(self, client: httpx.AsyncClient, response: httpx.Response) -> AsyncIterator[str]:
        try:
            async for line in response.aiter_lines():
                line = line.strip()
                if not line:
                    continue
                delta, done = self._parse_line(line)
                if delta:
                    yield delta
                if done:
                    break
        finally:
            await response.aclose()
            await client.aclose()


class OpenAILLMProvider(_HTTPStreamingProvider):
    """OpenAI-compatible chat completions with ``stream: true`` (server-sent ``data:`` lines)."""

    provider_name = "openai"

    def __init__(self, model_name: str | None = None, transport: httpx.AsyncBaseTransport | None = None):
        super().__init__(transport)
        self.model_name = model_name or settings.llm_model

    def _build_request(self, client: httpx.AsyncClient, system: str, messages: list[dict]) -> httpx.Request:
        if not settings.openai_api_key:
            raise LLMProviderError("missing OPENAI_API_KEY")
        return client.build_request(
            "POST",
            f"{settings.openai_base_url.rstrip('/')}/chat/completions",
            json={
                "model": self.model_name,
                "stream": True,
                "messages": [{"role": "system", "content": system}, *messages],
            },
            headers={"Authorization": f"Bearer {settings.openai_api_key}"},
        )

    def _parse_line(self, line: str) -> tuple[str, bool]:
        if not line.startswith("data:"):
            return "", False
        data = line[len("data:"):].strip()
        if data == "[DONE]":
            return "", True
        chunk = json.loads(data)
        choices = chunk.get("choices") or []
        if not choices:
            return "", False
        delta = (choices[0].get("delta") or {}).get("content") or ""
        return delta, False


class OllamaLLMProvider(_HTTPStreamingProvider):
    """Ollama ``/api/chat`` streaming, one JSON object per line."""

    provider_name = "ollama"

    def __init__(self, model_name: str | None = None, transport: httpx.AsyncBaseTransport | None = None):
        super().__init__(transport)
        self.model_name = model_name or settings.ollama_model

    def _build_request(self, client: httpx.AsyncClient, system: str, messages: list[dict]) -> httpx.Request:
        return client.build_request(
            "POST",
            f"{settings.ollama_base_url.rstrip('/')}/api/chat",
            json={
                "model": self.model_name,
                "stream": True,
                "messages": [{"role": "system", "content": system}, *messages],
            },
        )

    def _parse_line(self, line: str) -> tuple[str, bool]:
        body = json.loads(line)
        if body.get("error"):
            raise LLMProviderError(f"ollama stream error: {body['error']}")
        delta = (body.get("message") or {}).get("content") or ""
        return delta, bool(body.get("done"))


class NullLLMProvider(BaseLLMProvider):
    provider_name = "none"
    model_name = "none"

    async def open_stream(self, system: str, messages: list[dict]) -> AsyncIterator[str]:
        raise LLMProviderError("no language-model provider configured (LLM_PROVIDER=none)")


def get_llm_provider() -> BaseLLMProvider:
    provider = (settings.llm_provider or "").lower()
    if provider == "openai":
        return OpenAILLMProvider()
    if provider == "ollama":
        return OllamaLLMProvider()
    return NullLLMProvider()
