from abc import ABC, abstractmethod

import httpx

from studybuddy.core.errors import ImageGenerationError
from studybuddy.core.settings import settings


class BaseImageProvider(ABC):
    provider_name: str

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """Return the URL of one generated image, or raise."""
        raise NotImplementedError


class OpenAIImageProvider(BaseImageProvider):
    provider_name = "openai"

    def __init__(
        self,
        model_name: str | None = None,
        size: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.model_name = model_name or settings.image_model
        self.size = size or settings.image_size
        self._transport = transport

    async def generate(self, prompt: str) -> str:
        if not settings.openai_api_key:
            raise ImageGenerationError("missing OPENAI_API_KEY")
        seconds = settings.image_timeout_seconds
        timeout = httpx.Timeout(seconds if seconds and seconds > 0 else None)
        async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
            response = await client.post(
                f"{settings.openai_base_url.rstrip('/')}/images/generations",
                json={"model": self.model_name, "prompt": prompt, "n": 1, "size": self.size},
                headers={"Authorization": f"Bearer {settings.openai_api_key}"},
            )
            response.raise_for_status()
            data = response.json().get("data") or []
        url = data[0].get("url") if data and isinstance(data[0], dict) else None
        if not url:
            raise ImageGenerationError(f"{self.provider_name} returned no image url")
        return url


class NullImageProvider(BaseImageProvider):
    provider_name = "none"

    async def generate(self, prompt: str) -> str:
        raise ImageGenerationError("no image provider configured (IMAGE_PROVIDER=none)")


def get_image_provider() -> BaseImageProvider:
    provider = (settings.image_provider or "").lower()
    if provider == "openai":
        return OpenAIImageProvider()
    return NullImageProvider()
