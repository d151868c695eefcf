from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from garagesale_chat.domain.entities.chat import Chat


class ChatReader(Protocol):
    async def get_by_id(self, chat_id: UUID) -> Chat | None:
        """Load a chat with its full message log, oldest message first."""
        ...

    async def get_by_pair(
        self, item_id: int, participants: tuple[int, int],
    ) -> Chat | None: ...

    async def list_for_user(self, user_id: int) -> list[Chat]:
        """All chats the user takes part in, most recent activity first."""
        ...


class ChatWriter(Protocol):
    async def create_if_not_exists(self, chat: Chat) -> tuple[Chat, bool]:
        """Insert chat. Return (chat, created). On a duplicate (item, pair) return the existing one."""
        ...

    async def lock_and_touch(self, chat_id: UUID) -> datetime | None:
        """Row-lock the chat for this transaction and advance last_message_at.

        The timestamp is read once the lock is held and never moves backwards;
        it is returned so the new message can carry it. None if the chat is missing.
        """
        ...
