from __future__ import annotations

from studybuddy.schemas.chat import ConversationMessage


class TranscriptBusyError(RuntimeError):
    """A message was added while an assistant reply is still streaming."""


class Transcript:
    """
    Chronological chat transcript.

    At most one assistant message is in progress at a time. Its handle is
    returned by ``begin_assistant_message`` and stays valid until ``complete``;
    decoders write to that handle, never to "the last message".
    """

    def __init__(self) -> None:
        self.messages: list[ConversationMessage] = []
        self.in_progress: ConversationMessage | None = None

    def add_user_message(self, content: str) -> ConversationMessage:
        if self.in_progress is not None:
            raise TranscriptBusyError("assistant reply still in progress")
        message = ConversationMessage(role="user", content=content)
        self.messages.append(message)
        return message

    def begin_assistant_message(self) -> ConversationMessage:
        if self.in_progress is not None:
            raise TranscriptBusyError("assistant reply still in progress")
        message = ConversationMessage(role="assistant", content="")
        self.messages.append(message)
        self.in_progress = message
        return message

    def complete(self) -> None:
        self.in_progress = None

    def payload(self) -> list[dict]:
        """Messages as sent to the chat endpoint."""
        return [m.model_dump(exclude_none=True) for m in self.messages]

    def __len__(self) -> int:
        return len(self.messages)
