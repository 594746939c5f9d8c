"""
Display model for transcript messages. Turning blocks into pixels or terminal
text is left to whoever shows them.
"""
from __future__ import annotations

from dataclasses import dataclass

from studybuddy.schemas.chat import ConversationMessage

LOADING_INDICATOR = "..."
IMAGE_FAILED_TEXT = "Image generation failed"


@dataclass(frozen=True)
class TextBlock:
    text: str


@dataclass(frozen=True)
class LoadingBlock:
    text: str = LOADING_INDICATOR


@dataclass(frozen=True)
class ImageBlock:
    url: str
    caption: str


@dataclass(frozen=True)
class FailedImageBlock:
    caption: str
    text: str = IMAGE_FAILED_TEXT


RenderBlock = TextBlock | LoadingBlock | ImageBlock | FailedImageBlock


def render_message(message: ConversationMessage, *, in_progress: bool = False) -> list[RenderBlock]:
    if not message.images:
        if not message.content and in_progress and message.role == "assistant":
            return [LoadingBlock()]
        return [TextBlock(message.content)]

    blocks: list[RenderBlock] = [TextBlock(message.content)]
    for image in message.images:
        if image.failed:
            blocks.append(FailedImageBlock(caption=image.description))
        else:
            blocks.append(ImageBlock(url=image.url, caption=image.description))
    return blocks


def render_plain(blocks: list[RenderBlock]) -> str:
    """Terminal rendering used by the CLI."""
    lines: list[str] = []
    for block in blocks:
        if isinstance(block, ImageBlock):
            lines.append(f"  [picture] {block.url}")
            lines.append(f"  {block.caption}")
        elif isinstance(block, FailedImageBlock):
            lines.append(f"  [{block.text}]")
            lines.append(f"  {block.caption}")
        else:
            lines.append(block.text)
    return "\n".join(lines)
