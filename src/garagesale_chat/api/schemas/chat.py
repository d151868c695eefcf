from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field, field_validator


class CreateChatRequest(BaseModel):
    item_id: int = Field(validation_alias=AliasChoices("item_id", "itemId"))
    participant_id: int = Field(validation_alias=AliasChoices("participant_id", "participantId"))


class SendMessageRequest(BaseModel):
    content: str


class UserSummaryResponse(BaseModel):
    id: int
    username: str | None = None
    profile_pic: str | None = None

    model_config = {"from_attributes": True}


class ItemSummaryResponse(BaseModel):
    id: int
    seller_id: int
    name: str
    price: Decimal | None
    image_url: str | None

    model_config = {"from_attributes": True}


class MessageResponse(BaseModel):
    id: UUID
    chat_id: UUID
    seq: int
    sender_id: int
    content: str
    created_at: datetime
    read_by: list[int]

    model_config = {"from_attributes": True}

    @field_validator("read_by", mode="before")
    @classmethod
    def _sorted(cls, v: object) -> object:
        return sorted(v) if isinstance(v, (set, frozenset)) else v


class ChatResponse(BaseModel):
    id: UUID
    item_id: int
    participants: list[int]
    last_message_at: datetime
    created_at: datetime
    messages: list[MessageResponse] = []
    item: ItemSummaryResponse | None = None
    participant_profiles: list[UserSummaryResponse] = []
    unread_count: int = 0


class InboxEntryResponse(BaseModel):
    chat_id: UUID
    item_id: int
    participants: list[int]
    last_message_at: datetime
    created_at: datetime
    other_participant: UserSummaryResponse
    last_message: MessageResponse | None
    unread_count: int
    item: ItemSummaryResponse | None = None


class UnreadCountResponse(BaseModel):
    unread_count: int
