from __future__ import annotations

from garagesale_chat.application.exceptions import ForbiddenError, NotFoundError
from garagesale_chat.domain.entities.chat import Chat


def assert_chat_access(user_id: int, chat: Chat | None) -> Chat:
    """Raise if chat doesn't exist or the user is not one of its participants."""
    if chat is None:
        raise NotFoundError("Chat not found")

    if not chat.has_participant(user_id):
        raise ForbiddenError("Not a participant of this chat")

    return chat
