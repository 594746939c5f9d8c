"""
Client side of the chat stream.

The transport hands over text fragments whose boundaries mean nothing: a
delimiter, a JSON batch or a single character may be split anywhere. The
decoder folds the fragments, one at a time and in order, into the assistant
message it was created for. Text is appended as soon as it can no longer be
the beginning of the start delimiter; everything between the delimiters is
buffered and applied to the message in one step when the end delimiter shows
up.
"""
from __future__ import annotations

from typing import Callable

from studybuddy.chatstream.wire_format import (
    IMAGE_DATA_END,
    IMAGE_DATA_START,
    parse_image_batch,
    to_display_form,
)
from studybuddy.core.logging import DOMAIN_CHAT, get_domain_logger
from studybuddy.schemas.chat import ConversationMessage

logger = get_domain_logger(__name__, DOMAIN_CHAT)

BatchErrorHook = Callable[[Exception, str], None]


class TruncatedImageBatchError(ValueError):
    """The stream ended before the image batch's end delimiter arrived."""


def _log_batch_error(exc: Exception, payload: str) -> None:
    logger.warning("Discarding image batch: %s | payload=%r", exc, payload[:200])


def _partial_delimiter_length(text: str, delimiter: str) -> int:
    """Length of the longest suffix of ``text`` that is a proper prefix of ``delimiter``."""
    for size in range(min(len(text), len(delimiter) - 1), 0, -1):
        if text.endswith(delimiter[:size]):
            return size
    return 0


class StreamDecoder:
    def __init__(self, message: ConversationMessage, on_error: BatchErrorHook | None = None):
        self.message = message
        self.on_error = on_error or _log_batch_error
        self.collecting_image_data = False
        self.image_buffer = ""
        self.closed = False
        self._pending = ""

    def feed(self, fragment: str) -> None:
        if self.closed:
            raise RuntimeError("feed() after close()")
        data = fragment
        while data:
            if self.collecting_image_data:
                data = self._consume_image_data(data)
            else:
                data = self._consume_text(data)

    def close(self) -> None:
        """Finish decoding. A half-received image batch is dropped."""
        if self.closed:
            return
        self.closed = True
        if self.collecting_image_data:
            payload = self.image_buffer
            self.collecting_image_data = False
            self.image_buffer = ""
            self.on_error(TruncatedImageBatchError("stream ended inside the image batch"), payload)
        elif self._pending:
            self._append(self._pending)
            self._pending = ""

    def _consume_text(self, data: str) -> str:
        text = self._pending + data
        self._pending = ""
        start = text.find(IMAGE_DATA_START)
        if start == -1:
            held = _partial_delimiter_length(text, IMAGE_DATA_START)
            self._append(text[: len(text) - held])
            self._pending = text[len(text) - held:]
            return ""
        self._append(text[:start])
        self.collecting_image_data = True
        self.image_buffer = ""
        return text[start + len(IMAGE_DATA_START):]

    def _consume_image_data(self, data: str) -> str:
        searched = max(0, len(self.image_buffer) - len(IMAGE_DATA_END) + 1)
        self.image_buffer += data
        end = self.image_buffer.find(IMAGE_DATA_END, searched)
        if end == -1:
            return ""
        payload = self.image_buffer[:end]
        rest = self.image_buffer[end + len(IMAGE_DATA_END):]
        self.collecting_image_data = False
        self.image_buffer = ""
        self._attach_images(payload)
        return rest

    def _attach_images(self, payload: str) -> None:
        try:
            results = parse_image_batch(payload)
        except ValueError as exc:
            self.on_error(exc, payload)
            return
        self.message.content = to_display_form(self.message.content, results)
        self.message.images = results

    def _append(self, text: str) -> None:
        if text:
            self.message.content += text
