from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from garagesale_chat.domain.entities.message import Message


def participant_pair(a: int, b: int) -> tuple[int, int]:
    """Canonical (low, high) ordering used to key a chat."""
    return (a, b) if a <= b else (b, a)


@dataclass(frozen=True, slots=True)
class Chat:
    id: UUID
    participants: tuple[int, int]
    item_id: int
    last_message_at: datetime
    created_at: datetime
    messages: tuple[Message, ...] = ()

    def has_participant(self, user_id: int) -> bool:
        return user_id in self.participants

    def other_participant(self, user_id: int) -> int:
        a, b = self.participants
        return b if user_id == a else a

    @property
    def last_message(self) -> Message | None:
        return self.messages[-1] if self.messages else None
