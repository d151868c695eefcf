from __future__ import annotations

from garagesale_chat.application.dto.inbox import InboxEntry
from garagesale_chat.application.uow import UnitOfWork
from garagesale_chat.services import chat_service
from garagesale_chat.services.read_state_service import unread_count_for


async def get_inbox(
    user_id: int,
    uow: UnitOfWork,
) -> list[InboxEntry]:
    """Chats for the user, newest activity first, each with its unread count.

    Read-only: listing the inbox never marks anything as read.
    """
    chats = await chat_service.list_chats_for_user(user_id, uow)
    if not chats:
        return []

    others = {c.other_participant(user_id) for c in chats}
    profiles = await uow.directory.get_users(others)
    items = await uow.directory.get_items({c.item_id for c in chats})

    entries: list[InboxEntry] = []
    for chat in chats:
        other = chat.other_participant(user_id)
        entries.append(
            InboxEntry(
                chat=chat,
                other_participant=other,
                last_message=chat.last_message,
                unread_count=unread_count_for(chat, user_id),
                other_participant_profile=profiles.get(other),
                item=items.get(chat.item_id),
            )
        )
    return entries


async def total_unread(
    user_id: int,
    uow: UnitOfWork,
) -> int:
    chats = await chat_service.list_chats_for_user(user_id, uow)
    return sum(unread_count_for(c, user_id) for c in chats)
