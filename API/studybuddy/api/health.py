from fastapi import APIRouter

from studybuddy.core.settings import settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "service": "studybuddy-api",
        "llm_provider": settings.llm_provider,
        "image_provider": settings.image_provider,
    }
