from __future__ import annotations

from garagesale_chat.domain.entities.message import Message
from garagesale_chat.infrastructure.db.models.message import ChatMessageModel


def model_to_entity(model: ChatMessageModel) -> Message:
    return Message(
        id=model.id,
        chat_id=model.chat_id,
        seq=model.seq,
        sender_id=model.sender_id,
        content=model.content,
        created_at=model.created_at,
        read_by=frozenset(model.read_by or ()),
    )


def entity_to_values(entity: Message) -> dict:
    # seq is assigned by the database identity column
    return {
        "id": entity.id,
        "chat_id": entity.chat_id,
        "sender_id": entity.sender_id,
        "content": entity.content,
        "read_by": sorted(entity.read_by),
        "created_at": entity.created_at,
    }
