"""Consumer that mirrors marketplace users and listings via Redis Streams."""
from __future__ import annotations

import asyncio
import logging
import socket
from typing import Any

import redis.asyncio as aioredis

from garagesale_chat.config import settings
from garagesale_chat.domain.value_objects.enums import MarketplaceEvent
from garagesale_chat.infrastructure.bus.redis_streams import RedisStreamConsumer
from garagesale_chat.infrastructure.db.session import AsyncSessionLocal
from garagesale_chat.infrastructure.db.uow import SqlAlchemyUoW
from garagesale_chat.logs import setup_logging
from garagesale_chat.services import directory_service

logger = logging.getLogger(__name__)


async def handle_event(event_type: str, fields: dict[str, Any]) -> None:
    """Dispatch a stream event to the appropriate handler."""
    if event_type in (MarketplaceEvent.USER_REGISTERED, MarketplaceEvent.USER_UPDATED):
        async with AsyncSessionLocal() as session:
            user = await directory_service.upsert_user(fields, SqlAlchemyUoW(session))
        logger.info("Synced user %d from %s", user.id, event_type)
    elif event_type in (MarketplaceEvent.ITEM_CREATED, MarketplaceEvent.ITEM_UPDATED):
        async with AsyncSessionLocal() as session:
            item = await directory_service.upsert_item(fields, SqlAlchemyUoW(session))
        logger.info("Synced item %d from %s", item.id, event_type)
    else:
        logger.debug("Ignoring unknown event: %s", event_type)


async def run_consumer() -> None:
    redis = aioredis.from_url(settings.REDIS_URL, decode_responses=True)
    # stable per host so pending entries are replayed after a restart
    consumer_name = f"consumer-{socket.gethostname()}"

    consumer = RedisStreamConsumer(
        redis=redis,
        stream=settings.MARKETPLACE_EVENTS_STREAM,
        group=settings.MARKETPLACE_EVENTS_GROUP,
        consumer=consumer_name,
        callback=handle_event,
    )
    await consumer.start()
    logger.info("Marketplace events consumer started (%s)", consumer_name)

    try:
        while True:
            await asyncio.sleep(3600)
    except asyncio.CancelledError:
        pass
    finally:
        await consumer.stop()
        await redis.aclose()


def main() -> None:
    setup_logging(settings.LOG_LEVEL)
    asyncio.run(run_consumer())


if __name__ == "__main__":
    main()
