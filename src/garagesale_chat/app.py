from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import redis.asyncio as aioredis
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from garagesale_chat.api.middleware.correlation_id import CorrelationIdMiddleware
from garagesale_chat.api.middleware.request_timing import RequestTimingMiddleware
from garagesale_chat.api.routers import chats, health
from garagesale_chat.application.exceptions import (
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from garagesale_chat.config import settings
from garagesale_chat.infrastructure.db.session import engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    app.state.redis = aioredis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
    )
    logger.info("Redis connection pool created")

    yield

    await app.state.redis.aclose()
    await engine.dispose()
    logger.info("Redis and database pools closed")


def create_app() -> FastAPI:
    app = FastAPI(
        title="GarageSale Chat Service",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(chats.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def _not_found(_req: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.detail})

    @app.exception_handler(ForbiddenError)
    async def _forbidden(_req: Request, exc: ForbiddenError) -> JSONResponse:
        return JSONResponse(status_code=403, content={"detail": exc.detail})

    @app.exception_handler(ValidationError)
    async def _validation(req: Request, exc: ValidationError) -> JSONResponse:
        logger.info("Rejected %s %s: %s", req.method, req.url.path, exc.detail)
        return JSONResponse(status_code=422, content={"detail": exc.detail})
