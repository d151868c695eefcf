"""One-time script: create the Redis Streams consumer group for marketplace events."""
from __future__ import annotations

import asyncio
import logging

import redis.asyncio as aioredis

from garagesale_chat.config import settings
from garagesale_chat.logs import setup_logging

logger = logging.getLogger(__name__)


async def create_group() -> None:
    r = aioredis.from_url(settings.REDIS_URL, decode_responses=True)
    try:
        # "0" so listings published before the chat service existed are mirrored too
        await r.xgroup_create(
            settings.MARKETPLACE_EVENTS_STREAM,
            settings.MARKETPLACE_EVENTS_GROUP,
            id="0",
            mkstream=True,
        )
        logger.info(
            "Created consumer group '%s' on stream '%s'",
            settings.MARKETPLACE_EVENTS_GROUP,
            settings.MARKETPLACE_EVENTS_STREAM,
        )
    except aioredis.ResponseError as e:
        if "BUSYGROUP" in str(e):
            logger.info("Consumer group '%s' already exists", settings.MARKETPLACE_EVENTS_GROUP)
        else:
            raise
    finally:
        await r.aclose()


def main() -> None:
    setup_logging(settings.LOG_LEVEL)
    asyncio.run(create_group())


if __name__ == "__main__":
    main()
