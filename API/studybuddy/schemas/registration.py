from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from studybuddy.schemas.chat import LearnerProfile, LearningStyle

MIN_AGE = 5
MAX_AGE = 18


class RegistrationForm(BaseModel):
    """Values typed into the registration form; age arrives as free text."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    name: str
    age: str
    learning_style: LearningStyle | None = Field(default=None, alias="learningStyle", validate_default=True)

    @field_validator("name")
    @classmethod
    def _name_length(cls, value: str) -> str:
        if len(value) < 2:
            raise ValueError("Name must be at least 2 characters.")
        return value

    @field_validator("age", mode="before")
    @classmethod
    def _age_range(cls, value) -> str:
        text = str(value if value is not None else "").strip()
        try:
            age = int(text)
        except ValueError:
            raise ValueError(f"Age must be between {MIN_AGE} and {MAX_AGE}") from None
        if not MIN_AGE <= age <= MAX_AGE:
            raise ValueError(f"Age must be between {MIN_AGE} and {MAX_AGE}")
        return text

    @field_validator("learning_style", mode="before")
    @classmethod
    def _style_required(cls, value):
        if value in (None, ""):
            raise ValueError("Please select a learning style.")
        return value

    def to_profile(self) -> LearnerProfile:
        return LearnerProfile(name=self.name, age=int(self.age), learning_style=self.learning_style)
