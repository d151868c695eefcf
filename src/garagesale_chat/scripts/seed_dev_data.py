"""Seed development data: two students, one listing, and a short chat about it."""
from __future__ import annotations

import asyncio
import logging

from garagesale_chat.config import settings
from garagesale_chat.infrastructure.db.session import AsyncSessionLocal
from garagesale_chat.infrastructure.db.uow import SqlAlchemyUoW
from garagesale_chat.logs import setup_logging
from garagesale_chat.services import (
    chat_service,
    directory_service,
    message_service,
    read_state_service,
)

logger = logging.getLogger(__name__)

BUYER_ID = 1
SELLER_ID = 2
ITEM_ID = 10


async def seed() -> None:
    async with AsyncSessionLocal() as session:
        uow = SqlAlchemyUoW(session)

        await directory_service.upsert_user({"user_id": BUYER_ID, "username": "asha"}, uow)
        await directory_service.upsert_user({"user_id": SELLER_ID, "username": "rohan"}, uow)
        await directory_service.upsert_item(
            {
                "item_id": ITEM_ID,
                "seller_id": SELLER_ID,
                "name": "Engineering Drawing kit",
                "price": "450",
            },
            uow,
        )

        chat, created = await chat_service.get_or_create_chat(ITEM_ID, (BUYER_ID, SELLER_ID), uow)
        if not created:
            logger.info("Chat %s already seeded", chat.id)
            return

        messages_data = [
            (BUYER_ID, "Hi! Is this still available?"),
            (SELLER_ID, "Yes, still available!"),
            (BUYER_ID, "Can I pick it up near the library tomorrow?"),
        ]
        for sender_id, content in messages_data:
            await message_service.append_message(chat.id, sender_id, content, uow)
        await read_state_service.mark_chat_viewed(chat.id, SELLER_ID, uow)

        logger.info("Seeded chat %s with %d messages", chat.id, len(messages_data))


def main() -> None:
    setup_logging(settings.LOG_LEVEL)
    asyncio.run(seed())


if __name__ == "__main__":
    main()
