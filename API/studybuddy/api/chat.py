from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse, StreamingResponse

from studybuddy.chatstream.encoder import StreamEncoder
from studybuddy.core.image_provider import get_image_provider
from studybuddy.core.llm_provider import get_llm_provider
from studybuddy.core.logging import DOMAIN_CHAT, get_domain_logger
from studybuddy.schemas.chat import ChatRequest

router = APIRouter(prefix="/api", tags=["chat"])
logger = get_domain_logger(__name__, DOMAIN_CHAT)

CHAT_ERROR_MESSAGE = "Error processing your request"
STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


@router.post("/chat")
async def chat(request: Request):
    # The body is parsed by hand: every failure here is a plain-text 500, not a 422 envelope.
    try:
        payload = ChatRequest.model_validate(await request.json())
        encoder = StreamEncoder(get_llm_provider(), get_image_provider())
        body = await encoder.open(payload.messages, payload.student_data)
    except Exception:
        logger.exception("Chat error")
        return PlainTextResponse(CHAT_ERROR_MESSAGE, status_code=500)

    logger.info(
        "Chat turn started | history=%d age=%d style=%s",
        len(payload.messages),
        payload.student_data.age,
        payload.student_data.learning_style.value,
    )
    return StreamingResponse(body, media_type="text/event-stream", headers=STREAM_HEADERS)
