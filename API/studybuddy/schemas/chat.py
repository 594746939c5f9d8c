from __future__ import annotations

from enum import Enum
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

Role = Literal["user", "assistant"]


class LearningStyle(str, Enum):
    visual = "visual"
    auditory = "auditory"
    kinesthetic = "kinesthetic"
    reading = "reading"


class LearnerProfile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    age: int = Field(ge=5, le=18)
    learning_style: LearningStyle = Field(alias="learningStyle")

    @property
    def is_visual(self) -> bool:
        return self.learning_style == LearningStyle.visual


class ImageRequest(BaseModel):
    description: str
    placeholder_text: str


class ImageResult(BaseModel):
    index: int
    description: str
    url: str | None = None
    error: bool | None = None

    @model_validator(mode="after")
    def _url_or_error(self) -> "ImageResult":
        # Exactly one outcome per image: a url, or error=true.
        if bool(self.url) == bool(self.error):
            raise ValueError("image result needs exactly one of url or error=true")
        return self

    @property
    def failed(self) -> bool:
        return bool(self.error) or not self.url


class ConversationMessage(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    role: Role
    content: str = ""
    images: list[ImageResult] | None = None


class ChatMessageIn(BaseModel):
    """History entry as forwarded to the model; any other client fields are dropped."""

    model_config = ConfigDict(extra="ignore")

    role: Role
    content: str


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    messages: list[ChatMessageIn]
    student_data: LearnerProfile = Field(alias="studentData")
