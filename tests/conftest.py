from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path
from typing import AsyncIterator

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
API_DIR = ROOT / "API"
if str(API_DIR) not in sys.path:
    sys.path.insert(0, str(API_DIR))

# Test-mode runtime guards:
# - no external LLM/image traffic
# - deterministic fakes are patched in per test
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("LLM_PROVIDER", "none")
os.environ.setdefault("IMAGE_PROVIDER", "none")
os.environ.setdefault("OPENAI_API_KEY", "")

from studybuddy.core.errors import ImageGenerationError, LLMProviderError  # noqa: E402
from studybuddy.main import app  # noqa: E402


class FakeLLM:
    """Replays fixed deltas and records what it was asked."""

    provider_name = "fake"
    model_name = "fake"

    def __init__(self, deltas: list[str] | None = None, reject: bool = False, fail_after: int | None = None):
        self.deltas = list(deltas or [])
        self.reject = reject
        self.fail_after = fail_after
        self.calls: list[tuple[str, list[dict]]] = []

    async def open_stream(self, system: str, messages: list[dict]) -> AsyncIterator[str]:
        self.calls.append((system, messages))
        if self.reject:
            raise LLMProviderError("rejected by fake provider")
        return self._iter()

    async def _iter(self) -> AsyncIterator[str]:
        for sent, delta in enumerate(self.deltas):
            if sent == self.fail_after:
                break
            await asyncio.sleep(0)
            yield delta
        if self.fail_after is not None:
            raise LLMProviderError("upstream connection dropped")


class FakeImages:
    """Maps descriptions to urls; unknown descriptions fail. Optional per-prompt delays."""

    provider_name = "fake"

    def __init__(self, urls: dict[str, str] | None = None, delays: dict[str, float] | None = None):
        self.urls = dict(urls or {})
        self.delays = dict(delays or {})
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        await asyncio.sleep(self.delays.get(prompt, 0))
        if prompt not in self.urls:
            raise ImageGenerationError(f"no image for {prompt!r}")
        return self.urls[prompt]


@pytest.fixture(scope="session")
def client() -> TestClient:
    with TestClient(app) as tc:
        yield tc


@pytest.fixture
def visual_profile() -> dict:
    return {"name": "Maya", "age": 9, "learningStyle": "visual"}


@pytest.fixture
def auditory_profile() -> dict:
    return {"name": "Leo", "age": 12, "learningStyle": "auditory"}


@pytest.fixture
def patch_providers(monkeypatch):
    """Install fake providers behind POST /api/chat; returns them for inspection."""
    from studybuddy.api import chat as chat_module

    def _install(llm: FakeLLM, images: FakeImages | None = None):
        images = images or FakeImages()
        monkeypatch.setattr(chat_module, "get_llm_provider", lambda: llm)
        monkeypatch.setattr(chat_module, "get_image_provider", lambda: images)
        return llm, images

    return _install
