from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from garagesale_chat.application.exceptions import (
    InvalidItemError,
    InvalidParticipantsError,
)
from garagesale_chat.application.policies.permissions import assert_chat_access
from garagesale_chat.application.uow import UnitOfWork
from garagesale_chat.domain.entities.chat import Chat, participant_pair
from garagesale_chat.services import read_state_service

logger = logging.getLogger(__name__)


async def get_or_create_chat(
    item_id: int,
    participant_ids: tuple[int, int],
    uow: UnitOfWork,
) -> tuple[Chat, bool]:
    """Return the chat for this item and pair of users, creating it if needed.

    The pair is order-independent: (a, b) and (b, a) resolve to the same chat.
    Returns (chat, created) where created=True if a new chat was made.
    """
    a, b = participant_ids
    if a == b:
        raise InvalidParticipantsError("Cannot start a chat with yourself")

    users = await uow.directory.get_users((a, b))
    missing = sorted({a, b} - users.keys())
    if missing:
        raise InvalidParticipantsError(f"Unknown user(s): {', '.join(map(str, missing))}")

    if await uow.directory.get_item(item_id) is None:
        raise InvalidItemError("Item not found")

    pair = participant_pair(a, b)
    existing = await uow.chats.get_by_pair(item_id, pair)
    if existing is not None:
        return existing, False

    now = datetime.now(timezone.utc)
    chat, created = await uow.chats_w.create_if_not_exists(
        Chat(
            id=uuid.uuid4(),
            participants=pair,
            item_id=item_id,
            last_message_at=now,
            created_at=now,
        )
    )
    if created:
        await uow.commit()
        logger.info("Created chat %s for item %d between %d and %d", chat.id, item_id, *pair)
    return chat, created


async def get_chat(
    chat_id: uuid.UUID,
    requester_id: int,
    uow: UnitOfWork,
) -> Chat:
    chat = await uow.chats.get_by_id(chat_id)
    return assert_chat_access(requester_id, chat)


async def list_chats_for_user(
    user_id: int,
    uow: UnitOfWork,
) -> list[Chat]:
    return await uow.chats.list_for_user(user_id)


async def open_chat(
    chat_id: uuid.UUID,
    viewer_id: int,
    uow: UnitOfWork,
) -> Chat:
    """Fetch a chat for display and mark everything in it as seen by the viewer."""
    chat = await get_chat(chat_id, viewer_id, uow)
    if await read_state_service.mark_chat_viewed(chat_id, viewer_id, uow):
        chat = await get_chat(chat_id, viewer_id, uow)
    return chat
