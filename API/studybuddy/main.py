from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from studybuddy.api.chat import router as chat_router
from studybuddy.api.health import router as health_router
from studybuddy.api.quiz import router as quiz_router
from studybuddy.core.errors import (
    http_exception_handler,
    request_id_middleware,
    unhandled_exception_handler,
    validation_exception_handler,
)
from studybuddy.core.logging import configure_logging
from studybuddy.core.settings import settings


configure_logging(settings.log_level)

app = FastAPI(title="StudyBuddy API", version="0.1.0")
app.include_router(health_router)
app.include_router(chat_router)
app.include_router(quiz_router)
app.middleware("http")(request_id_middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)
