from __future__ import annotations

from typing import Protocol
from uuid import UUID

from garagesale_chat.domain.entities.message import Message


class MessageWriter(Protocol):
    async def append(self, message: Message) -> Message:
        """Insert message; the returned copy carries the store-assigned seq."""
        ...

    async def mark_read(self, chat_id: UUID, viewer_id: int) -> int:
        """Add viewer to read_by of every message lacking it. Returns rows touched."""
        ...
