from __future__ import annotations

from typing import Callable

import httpx

from studybuddy.chatstream.decoder import BatchErrorHook, StreamDecoder
from studybuddy.client.profile_store import ProfileStore
from studybuddy.client.transcript import Transcript
from studybuddy.core.logging import DOMAIN_CHAT, get_domain_logger
from studybuddy.schemas.chat import ConversationMessage, LearnerProfile

logger = get_domain_logger(__name__, DOMAIN_CHAT)

CHAT_PATH = "/api/chat"


class ChatRequestError(RuntimeError):
    """The chat endpoint answered with an error status."""


class TutorSession:
    """
    Dashboard chat for one learner.

    The profile is handed in explicitly and sent with every turn. One turn runs
    at a time: ``send`` ignores new input while a reply is streaming.
    """

    def __init__(
        self,
        profile: LearnerProfile,
        http: httpx.AsyncClient,
        *,
        chat_path: str = CHAT_PATH,
        on_batch_error: BatchErrorHook | None = None,
    ):
        self.profile = profile
        self.http = http
        self.chat_path = chat_path
        self.on_batch_error = on_batch_error
        self.transcript = Transcript()
        self.is_loading = False

    @classmethod
    def from_store(cls, store: ProfileStore, http: httpx.AsyncClient, **kwargs) -> "TutorSession":
        """Raises ProfileNotFoundError when nobody has registered yet."""
        return cls(store.require(), http, **kwargs)

    async def send(
        self,
        text: str,
        on_update: Callable[[ConversationMessage], None] | None = None,
    ) -> ConversationMessage | None:
        """Run one turn; returns the assistant message, or None if nothing was sent or the server refused it."""
        if not text.strip() or self.is_loading:
            return None

        self.transcript.add_user_message(text)
        self.is_loading = True
        reply: ConversationMessage | None = None
        try:
            payload = {
                "messages": self.transcript.payload(),
                "studentData": self.profile.model_dump(mode="json", by_alias=True),
            }
            async with self.http.stream("POST", self.chat_path, json=payload) as response:
                if response.is_error:
                    raise ChatRequestError(f"{response.status_code} {response.reason_phrase}")
                reply = self.transcript.begin_assistant_message()
                decoder = StreamDecoder(reply, on_error=self.on_batch_error)
                try:
                    async for fragment in response.aiter_text():
                        decoder.feed(fragment)
                        if on_update:
                            on_update(reply)
                finally:
                    decoder.close()
            if on_update:
                on_update(reply)
        except (httpx.HTTPError, ChatRequestError) as exc:
            logger.error("Chat error: %s", exc)
        finally:
            self.transcript.complete()
            self.is_loading = False
        return reply
