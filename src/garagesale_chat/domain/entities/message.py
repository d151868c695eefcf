from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class Message:
    id: UUID
    chat_id: UUID
    seq: int
    sender_id: int
    content: str
    created_at: datetime
    read_by: frozenset[int]
