from __future__ import annotations

import logging

import redis.asyncio as aioredis
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from garagesale_chat.config import settings
from garagesale_chat.infrastructure.db.session import AsyncSessionLocal

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


async def _check_postgres() -> None:
    async with AsyncSessionLocal() as session:
        await session.execute(text("SELECT 1 FROM chats LIMIT 1"))


async def _check_directory_sync(redis: aioredis.Redis) -> None:
    """Chat creation relies on the user/item mirror, which the stream group feeds."""
    await redis.ping()
    groups = await redis.xinfo_groups(settings.MARKETPLACE_EVENTS_STREAM)
    if not any(g["name"] == settings.MARKETPLACE_EVENTS_GROUP for g in groups):
        raise LookupError(
            f"consumer group {settings.MARKETPLACE_EVENTS_GROUP!r} missing "
            f"on {settings.MARKETPLACE_EVENTS_STREAM!r}"
        )


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(request: Request) -> JSONResponse:
    errors: list[str] = []

    try:
        await _check_postgres()
    except Exception as exc:  # noqa: BLE001
        errors.append(f"postgres: {exc}")

    try:
        await _check_directory_sync(request.app.state.redis)
    except Exception as exc:  # noqa: BLE001
        errors.append(f"redis: {exc}")

    if errors:
        logger.warning("Readiness check failed: %s", "; ".join(errors))
        return JSONResponse(
            status_code=503,
            content={"status": "unavailable", "errors": errors},
        )
    return JSONResponse(content={"status": "ready"})
