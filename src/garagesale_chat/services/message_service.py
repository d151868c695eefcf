from __future__ import annotations

import uuid

from garagesale_chat.application.exceptions import InvalidContentError, NotFoundError
from garagesale_chat.application.policies.permissions import assert_chat_access
from garagesale_chat.application.uow import UnitOfWork
from garagesale_chat.config import settings
from garagesale_chat.domain.entities.message import Message


def _validate_content(content: str) -> None:
    if not content or not content.strip():
        raise InvalidContentError("Message content must not be empty")
    if len(content) > settings.MESSAGE_MAX_LENGTH:
        raise InvalidContentError(
            f"Message content exceeds {settings.MESSAGE_MAX_LENGTH} characters"
        )


async def append_message(
    chat_id: uuid.UUID,
    sender_id: int,
    content: str,
    uow: UnitOfWork,
) -> Message:
    """Append a message to a chat's log.

    The chat row is locked and its last_message_at advanced before the
    message is inserted, so concurrent appends to one chat serialize and
    every reader sees a single order.
    """
    chat = await uow.chats.get_by_id(chat_id)
    assert_chat_access(sender_id, chat)
    _validate_content(content)

    # read under the row lock, so never earlier than the previous message
    now = await uow.chats_w.lock_and_touch(chat_id)
    if now is None:
        raise NotFoundError("Chat not found")

    msg = await uow.messages_w.append(
        Message(
            id=uuid.uuid4(),
            chat_id=chat_id,
            seq=0,
            sender_id=sender_id,
            content=content,
            created_at=now,
            read_by=frozenset({sender_id}),
        )
    )
    await uow.commit()
    return msg
