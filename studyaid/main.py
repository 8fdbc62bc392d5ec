from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler

from .settings import Settings, settings as default_settings
from .services.llm import GenerationClient
from .services.scheduler import AsyncioScheduler
from .state.controller import StudyController
from .routers import upload, flashcards, quiz

# ---------- logging ----------
logger.remove()
logger.add(
    lambda msg: print(msg, end=""),
    format="{time:YYYY-MM-DD HH:mm:ss} | {level:<8} | {message}",
    level=default_settings.LOG_LEVEL,
)


def build_controller(s: Settings) -> StudyController:
    # raises ConfigurationError when the credential is missing
    client = GenerationClient.from_settings(s)
    return StudyController(
        client,
        AsyncioScheduler(),
        max_upload_bytes=s.max_upload_bytes,
        max_text_chars=s.MAX_TEXT_CHARS,
        transition_seconds=s.transition_seconds,
    )


def create_app(s: Optional[Settings] = None, controller: Optional[StudyController] = None) -> FastAPI:
    s = s or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.controller is None:
            app.state.controller = build_controller(s)
        logger.info(f"[startup] model={s.OPENAI_MODEL} mock={s.MOCK_MODE}")
        yield

    # ---------- app / limiter ----------
    limiter = Limiter(key_func=get_remote_address, default_limits=[s.RATE_LIMIT])
    app = FastAPI(title="Study Aids API", version="1.0.0", lifespan=lifespan)
    app.state.limiter = limiter
    app.state.controller = controller

    # ---------- CORS ----------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=s.ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*", "Content-Type", "X-Requested-With"],
    )

    # SlowAPI middleware + handler
    app.add_middleware(SlowAPIMiddleware)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # ---------- middleware: request log ----------
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.0f} ms)")
        return response

    # ---------- health ----------
    @app.get("/health")
    def health():
        return {
            "ok": True,
            "mock": s.MOCK_MODE,
            "model": s.OPENAI_MODEL,
            "rate_limit": s.RATE_LIMIT,
            "max_upload_mb": s.MAX_UPLOAD_MB,
            "max_text_chars": s.MAX_TEXT_CHARS,
        }

    # ---------- routers ----------
    app.include_router(upload.router, tags=["upload"])
    app.include_router(flashcards.router, tags=["flashcards"])
    app.include_router(quiz.router, tags=["quiz"])
    return app


app = create_app()
