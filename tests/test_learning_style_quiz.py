from __future__ import annotations

import pytest

from studybuddy.agents.learning_style import LearningStyleQuiz, dominant_style, score_quiz, tally_answers
from studybuddy.data.learning_style_quiz import QUESTIONS
from studybuddy.schemas.chat import LearningStyle


def test_quiz_has_five_questions_with_one_option_per_style():
    assert len(QUESTIONS) == 5
    for question in QUESTIONS:
        assert [o["value"] for o in question["options"]] == ["visual", "auditory", "kinesthetic", "reading"]


def test_dominant_style_wins():
    result = score_quiz({1: "kinesthetic", 2: "kinesthetic", 3: "visual", 4: "kinesthetic", 5: "reading"})
    assert result["learning_style"] == LearningStyle.kinesthetic
    assert result["counts"] == {"visual": 1, "auditory": 0, "kinesthetic": 3, "reading": 1}
    assert result["description"].startswith("Kinesthetic learners")


def test_tie_goes_to_earliest_style():
    counts = tally_answers({1: "reading", 2: "auditory", 3: "reading", 4: "auditory"})
    assert dominant_style(counts) == LearningStyle.auditory


def test_no_answers_gives_no_style():
    result = score_quiz({})
    assert result["learning_style"] is None
    assert result["description"] == ""


def test_unknown_answers_are_not_counted():
    assert tally_answers({1: "smell", 2: "visual"}) == {"visual": 1, "auditory": 0, "kinesthetic": 0, "reading": 0}


def test_quiz_walkthrough_with_back_and_change():
    quiz = LearningStyleQuiz()
    quiz.answer("visual")
    assert quiz.next() is False
    quiz.answer("auditory")
    quiz.previous()
    assert quiz.current == 0
    quiz.answer("auditory")  # changes the first answer
    for _ in range(4):
        quiz.next()
        quiz.answer("auditory")
    assert quiz.is_last
    assert quiz.next() is True
    assert quiz.finished
    assert quiz.result["learning_style"] == LearningStyle.auditory
    assert quiz.result["counts"]["auditory"] == 5


def test_previous_on_first_question_stays_put():
    quiz = LearningStyleQuiz()
    quiz.previous()
    assert quiz.current == 0


def test_answer_must_be_an_option():
    quiz = LearningStyleQuiz()
    with pytest.raises(ValueError):
        quiz.answer("smell")


def test_quiz_questions_endpoint(client):
    response = client.get("/quiz/learning-style")
    assert response.status_code == 200
    body = response.json()
    assert len(body["questions"]) == 5
    assert set(body["descriptions"]) == {"visual", "auditory", "kinesthetic", "reading"}


def test_quiz_result_endpoint(client):
    response = client.post(
        "/quiz/learning-style/result",
        json={"answers": {"1": "visual", "2": "visual", "3": "reading"}},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["learningStyle"] == "visual"
    assert body["counts"]["reading"] == 1


def test_quiz_result_endpoint_rejects_unknown_style(client):
    response = client.post("/quiz/learning-style/result", json={"answers": {"1": "smell"}})
    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "validation_error"
