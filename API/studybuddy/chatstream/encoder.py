"""
Server side of the chat stream: relay tutor text as it arrives, then append the
generated images for any markers it contained.
"""
from __future__ import annotations

import asyncio
import time
from typing import AsyncIterator, Sequence

from studybuddy.chatstream.instructions import build_system_instruction
from studybuddy.chatstream.wire_format import (
    IMAGE_DATA_END,
    IMAGE_DATA_START,
    extract_image_requests,
    serialize_image_batch,
)
from studybuddy.core.image_provider import BaseImageProvider
from studybuddy.core.llm_provider import BaseLLMProvider
from studybuddy.core.logging import DOMAIN_CHAT, DOMAIN_IMAGES, get_domain_logger
from studybuddy.schemas.chat import ChatMessageIn, ImageRequest, ImageResult, LearnerProfile

logger = get_domain_logger(__name__, DOMAIN_CHAT)
image_logger = get_domain_logger(__name__, DOMAIN_IMAGES)


class StreamEncoder:
    def __init__(self, llm: BaseLLMProvider, images: BaseImageProvider):
        self.llm = llm
        self.images = images

    async def open(self, history: Sequence[ChatMessageIn], profile: LearnerProfile) -> AsyncIterator[str]:
        """
        Start the upstream completion and return the response body iterator.

        Anything that goes wrong here propagates to the caller before a single
        byte of the response exists.
        """
        system = build_system_instruction(profile)
        messages = [{"role": m.role, "content": m.content} for m in history]
        deltas = await self.llm.open_stream(system, messages)
        return self._body(deltas, profile)

    async def _body(self, deltas: AsyncIterator[str], profile: LearnerProfile) -> AsyncIterator[str]:
        started = time.perf_counter()
        parts: list[str] = []
        try:
            async for delta in deltas:
                if not delta:
                    continue
                parts.append(delta)
                yield delta
        except Exception:
            logger.exception("Text stream failed after %d deltas", len(parts))
            raise
        logger.info(
            "Text stream complete | deltas=%d chars=%d elapsed_ms=%d",
            len(parts),
            sum(len(p) for p in parts),
            int((time.perf_counter() - started) * 1000),
        )

        # Markers are only resolved once the full text is known.
        if not profile.is_visual:
            return
        requests = extract_image_requests("".join(parts))
        if not requests:
            return
        yield IMAGE_DATA_START
        results = await self.resolve_images(requests)
        yield serialize_image_batch(results)
        yield IMAGE_DATA_END

    async def resolve_images(self, requests: Sequence[ImageRequest]) -> list[ImageResult]:
        """Resolve every request concurrently; output order follows ``requests``."""
        started = time.perf_counter()
        results = await asyncio.gather(
            *(self._resolve_one(index, request) for index, request in enumerate(requests))
        )
        image_logger.info(
            "Image batch resolved | requested=%d failed=%d elapsed_ms=%d",
            len(results),
            sum(1 for r in results if r.error),
            int((time.perf_counter() - started) * 1000),
        )
        return list(results)

    async def _resolve_one(self, index: int, request: ImageRequest) -> ImageResult:
        try:
            url = await self.images.generate(request.description)
            return ImageResult(index=index, description=request.description, url=url)
        except Exception as exc:
            image_logger.warning("Image generation failed | index=%d description=%r error=%s", index, request.description, exc)
            return ImageResult(index=index, description=request.description, error=True)
