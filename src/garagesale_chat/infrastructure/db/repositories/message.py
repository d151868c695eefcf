from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from garagesale_chat.domain.entities.message import Message
from garagesale_chat.infrastructure.db.mappers import message as mapper
from garagesale_chat.infrastructure.db.models.message import ChatMessageModel


class MessageWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def append(self, message: Message) -> Message:
        stmt = (
            pg_insert(ChatMessageModel)
            .values(**mapper.entity_to_values(message))
            .returning(ChatMessageModel)
        )
        result = await self._session.execute(stmt)
        return mapper.model_to_entity(result.scalar_one())

    async def mark_read(self, chat_id: UUID, viewer_id: int) -> int:
        stmt = (
            update(ChatMessageModel)
            .where(
                ChatMessageModel.chat_id == chat_id,
                ~ChatMessageModel.read_by.contains([viewer_id]),
            )
            .values(read_by=func.array_append(ChatMessageModel.read_by, viewer_id))
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0
