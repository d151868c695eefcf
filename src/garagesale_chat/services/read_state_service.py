from __future__ import annotations

import logging
import uuid

from garagesale_chat.application.uow import UnitOfWork
from garagesale_chat.domain.entities.chat import Chat

logger = logging.getLogger(__name__)


def unread_count_for(chat: Chat, viewer_id: int) -> int:
    """Messages from the other side that the viewer has not seen yet.

    Derived from read_by on every call; there is no stored counter.
    """
    return sum(
        1
        for m in chat.messages
        if m.sender_id != viewer_id and viewer_id not in m.read_by
    )


async def mark_chat_viewed(
    chat_id: uuid.UUID,
    viewer_id: int,
    uow: UnitOfWork,
) -> int:
    """Record that the viewer has seen every message currently in the chat.

    Silently does nothing for a missing chat or a non-participant.
    Returns the number of messages newly marked.
    """
    chat = await uow.chats.get_by_id(chat_id)
    if chat is None or not chat.has_participant(viewer_id):
        logger.debug("Ignoring view of chat %s by non-participant %d", chat_id, viewer_id)
        return 0

    marked = await uow.messages_w.mark_read(chat_id, viewer_id)
    if marked:
        await uow.commit()
    return marked
