"""
Learning-style quiz shown to parents after registration.
Each question has exactly four options, one per learning style, in the order
visual, auditory, kinesthetic, reading.
"""
from __future__ import annotations

QUESTIONS = [
    {
        "id": 1,
        "question": "How does your child prefer to learn new information?",
        "options": [
            {"value": "visual", "label": "By seeing pictures, diagrams, or videos"},
            {"value": "auditory", "label": "By listening to explanations or discussions"},
            {"value": "kinesthetic", "label": "By doing hands-on activities or experiments"},
            {"value": "reading", "label": "By reading books or written instructions"},
        ],
    },
    {
        "id": 2,
        "question": "When trying to remember something, what does your child do?",
        "options": [
            {"value": "visual", "label": "Visualize it in their mind"},
            {"value": "auditory", "label": "Repeat it out loud or talk through it"},
            {"value": "kinesthetic", "label": "Act it out or use physical gestures"},
            {"value": "reading", "label": "Write it down or make notes"},
        ],
    },
    {
        "id": 3,
        "question": "What activities does your child enjoy most?",
        "options": [
            {"value": "visual", "label": "Drawing, watching videos, or looking at pictures"},
            {"value": "auditory", "label": "Listening to music, talking, or singing"},
            {"value": "kinesthetic", "label": "Sports, dancing, or building things"},
            {"value": "reading", "label": "Reading books or writing stories"},
        ],
    },
    {
        "id": 4,
        "question": "How does your child typically explain things to others?",
        "options": [
            {"value": "visual", "label": "Shows pictures or draws diagrams"},
            {"value": "auditory", "label": "Explains verbally with detailed descriptions"},
            {"value": "kinesthetic", "label": "Uses gestures or demonstrates physically"},
            {"value": "reading", "label": "Writes it down or refers to written material"},
        ],
    },
    {
        "id": 5,
        "question": "When your child is bored, what do they typically do?",
        "options": [
            {"value": "visual", "label": "Doodle, watch videos, or look at pictures"},
            {"value": "auditory", "label": "Talk to someone or listen to music"},
            {"value": "kinesthetic", "label": "Move around, play with objects, or exercise"},
            {"value": "reading", "label": "Read a book or write something"},
        ],
    },
]

LEARNING_STYLE_DESCRIPTIONS = {
    "visual": "Visual learners learn best by seeing. They prefer pictures, diagrams, and spatial understanding.",
    "auditory": "Auditory learners learn best by hearing. They prefer discussions, verbal instructions, and sound.",
    "kinesthetic": "Kinesthetic learners learn best by doing. They prefer hands-on activities and physical movement.",
    "reading": "Reading/Writing learners learn best through text. They prefer reading books and taking notes.",
}


def get_questions_for_api() -> list[dict]:
    return [dict(q, options=[dict(o) for o in q["options"]]) for q in QUESTIONS]
