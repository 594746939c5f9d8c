from __future__ import annotations

from fastapi import APIRouter

from studybuddy.agents.learning_style import score_quiz
from studybuddy.data.learning_style_quiz import LEARNING_STYLE_DESCRIPTIONS, get_questions_for_api
from studybuddy.schemas.quiz import QuizQuestionsResponse, QuizResultRequest, QuizResultResponse

router = APIRouter(prefix="/quiz", tags=["quiz"])


@router.get("/learning-style", response_model=QuizQuestionsResponse)
async def learning_style_questions() -> QuizQuestionsResponse:
    return QuizQuestionsResponse(
        questions=get_questions_for_api(),
        descriptions=LEARNING_STYLE_DESCRIPTIONS,
    )


@router.post("/learning-style/result", response_model=QuizResultResponse)
async def learning_style_result(req: QuizResultRequest) -> QuizResultResponse:
    return QuizResultResponse(**score_quiz(req.answers))
