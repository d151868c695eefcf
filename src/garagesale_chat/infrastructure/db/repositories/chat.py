from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Iterable
from uuid import UUID

from sqlalchemy import func, or_, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from garagesale_chat.domain.entities.chat import Chat
from garagesale_chat.infrastructure.db.mappers import chat as mapper
from garagesale_chat.infrastructure.db.models.chat import ChatModel
from garagesale_chat.infrastructure.db.models.message import ChatMessageModel


async def _load_messages(
    session: AsyncSession,
    chat_ids: Iterable[UUID],
) -> dict[UUID, list[ChatMessageModel]]:
    ids = list(chat_ids)
    grouped: dict[UUID, list[ChatMessageModel]] = defaultdict(list)
    if not ids:
        return grouped
    stmt = (
        select(ChatMessageModel)
        .where(ChatMessageModel.chat_id.in_(ids))
        .order_by(ChatMessageModel.chat_id, ChatMessageModel.seq.asc())
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    for m in result.scalars().all():
        grouped[m.chat_id].append(m)
    return grouped


class ChatReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _hydrate(self, models: list[ChatModel]) -> list[Chat]:
        messages = await _load_messages(self._session, (m.id for m in models))
        return [mapper.model_to_entity(m, messages.get(m.id, ())) for m in models]

    async def get_by_id(self, chat_id: UUID) -> Chat | None:
        model = await self._session.get(ChatModel, chat_id, populate_existing=True)
        if model is None:
            return None
        return (await self._hydrate([model]))[0]

    async def get_by_pair(
        self,
        item_id: int,
        participants: tuple[int, int],
    ) -> Chat | None:
        a, b = participants
        stmt = select(ChatModel).where(
            ChatModel.item_id == item_id,
            ChatModel.user_a_id == a,
            ChatModel.user_b_id == b,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            return None
        return (await self._hydrate([model]))[0]

    async def list_for_user(self, user_id: int) -> list[Chat]:
        stmt = (
            select(ChatModel)
            .where(or_(ChatModel.user_a_id == user_id, ChatModel.user_b_id == user_id))
            .order_by(ChatModel.last_message_at.desc(), ChatModel.id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return await self._hydrate(list(result.scalars().all()))


class ChatWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create_if_not_exists(self, chat: Chat) -> tuple[Chat, bool]:
        """Insert chat idempotently on (item, pair). Returns (chat, created_flag)."""
        stmt = (
            pg_insert(ChatModel)
            .values(**mapper.entity_to_values(chat))
            .on_conflict_do_nothing(constraint="uq_chat_item_pair")
            .returning(ChatModel)
        )
        result = await self._session.execute(stmt)
        row = result.scalar_one_or_none()

        if row is not None:
            return mapper.model_to_entity(row), True

        # Lost the race to a concurrent create; hand back the winner
        existing = await ChatReaderRepo(self._session).get_by_pair(
            chat.item_id, chat.participants,
        )
        assert existing is not None
        return existing, False

    async def lock_and_touch(self, chat_id: UUID) -> datetime | None:
        # clock_timestamp(), unlike now(), is read after the row lock is granted
        stmt = (
            update(ChatModel)
            .where(ChatModel.id == chat_id)
            .values(
                last_message_at=func.greatest(
                    ChatModel.last_message_at, func.clock_timestamp(),
                )
            )
            .returning(ChatModel.last_message_at)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()
