"""
Wire format shared by the chat stream encoder (server) and decoder (client).

A chat response body is the tutor text, relayed as it arrives, optionally
followed by one image batch:

    <text deltas...>\\n\\n__IMAGE_DATA_START__\\n<JSON array>\\n__IMAGE_DATA_END__

The delimiters are plain text and are not escaped, so model output that
contains them verbatim cannot be told apart from a real batch.
"""
from __future__ import annotations

import json
import re

from pydantic import TypeAdapter

from studybuddy.schemas.chat import ImageRequest, ImageResult

IMAGE_DATA_START = "\n\n__IMAGE_DATA_START__\n"
IMAGE_DATA_END = "\n__IMAGE_DATA_END__"

# Case-sensitive on IMAGE so display-form markers are never picked up again.
IMAGE_MARKER_PATTERN = re.compile(r"\[IMAGE:\s*(.*?)\]", re.DOTALL)

_image_batch_adapter = TypeAdapter(list[ImageResult])


def extract_image_requests(text: str) -> list[ImageRequest]:
    """Return every marker in ``text``, left to right, with its exact matched span."""
    return [
        ImageRequest(description=match.group(1), placeholder_text=match.group(0))
        for match in IMAGE_MARKER_PATTERN.finditer(text or "")
    ]


def raw_marker(description: str) -> str:
    return f"[IMAGE: {description}]"


def display_marker(description: str) -> str:
    return f"[Image: {description}]"


def to_display_form(content: str, results: list[ImageResult]) -> str:
    """Swap each result's raw marker for its display form, first occurrence only."""
    for result in results:
        content = content.replace(raw_marker(result.description), display_marker(result.description), 1)
    return content


def serialize_image_batch(results: list[ImageResult]) -> str:
    return json.dumps([result.model_dump(exclude_none=True) for result in results])


def parse_image_batch(payload: str) -> list[ImageResult]:
    """Parse the text between the delimiters; raises ValueError on malformed input."""
    return _image_batch_adapter.validate_python(json.loads(payload.strip()))
