from __future__ import annotations

from studybuddy.schemas.chat import LearnerProfile

TUTOR_SYSTEM = (
    "You are a helpful AI tutor. Your student is {age} years old and prefers {style} learning style. "
    "Tailor your responses accordingly to be age-appropriate and align with their learning preferences."
)

VISUAL_DIRECTIVE = (
    "\n\nBecause this student learns best visually, include an illustration whenever a picture "
    "would make an idea easier to understand. To request one, write a marker in exactly this form: "
    "[IMAGE: <short description of the picture>]. "
    "For example: \"Plants make food from light [IMAGE: sunlight shining on a green leaf with arrows "
    "showing energy going in] and water.\" "
    "Only add a marker where it genuinely helps; it is fine to use none."
)


def build_system_instruction(profile: LearnerProfile) -> str:
    instruction = TUTOR_SYSTEM.format(age=profile.age, style=profile.learning_style.value)
    if profile.is_visual:
        instruction += VISUAL_DIRECTIVE
    return instruction
