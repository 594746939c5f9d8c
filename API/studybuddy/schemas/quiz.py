from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from studybuddy.schemas.chat import LearningStyle


class QuizOption(BaseModel):
    value: LearningStyle
    label: str


class QuizQuestion(BaseModel):
    id: int
    question: str
    options: list[QuizOption]


class QuizQuestionsResponse(BaseModel):
    questions: list[QuizQuestion]
    descriptions: dict[str, str]


class QuizResultRequest(BaseModel):
    answers: dict[int, LearningStyle] = Field(default_factory=dict)


class QuizResultResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    learning_style: LearningStyle | None = Field(default=None, alias="learningStyle")
    description: str = ""
    counts: dict[str, int]
