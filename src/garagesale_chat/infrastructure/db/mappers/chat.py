from __future__ import annotations

from typing import Iterable

from garagesale_chat.domain.entities.chat import Chat
from garagesale_chat.infrastructure.db.mappers import message as message_mapper
from garagesale_chat.infrastructure.db.models.chat import ChatModel
from garagesale_chat.infrastructure.db.models.message import ChatMessageModel


def model_to_entity(
    model: ChatModel,
    messages: Iterable[ChatMessageModel] = (),
) -> Chat:
    return Chat(
        id=model.id,
        participants=(model.user_a_id, model.user_b_id),
        item_id=model.item_id,
        last_message_at=model.last_message_at,
        created_at=model.created_at,
        messages=tuple(message_mapper.model_to_entity(m) for m in messages),
    )


def entity_to_values(entity: Chat) -> dict:
    a, b = entity.participants
    return {
        "id": entity.id,
        "item_id": entity.item_id,
        "user_a_id": a,
        "user_b_id": b,
        "last_message_at": entity.last_message_at,
        "created_at": entity.created_at,
    }
