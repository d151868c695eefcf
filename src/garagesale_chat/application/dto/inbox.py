from __future__ import annotations

from dataclasses import dataclass

from garagesale_chat.domain.entities.chat import Chat
from garagesale_chat.domain.entities.directory import ItemSummary, UserProfile
from garagesale_chat.domain.entities.message import Message


@dataclass(frozen=True, slots=True)
class InboxEntry:
    chat: Chat
    other_participant: int
    last_message: Message | None
    unread_count: int
    other_participant_profile: UserProfile | None = None
    item: ItemSummary | None = None
