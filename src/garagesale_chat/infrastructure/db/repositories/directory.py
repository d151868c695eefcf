from __future__ import annotations

from typing import Iterable

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from garagesale_chat.domain.entities.directory import ItemSummary, UserProfile
from garagesale_chat.infrastructure.db.mappers import directory as mapper
from garagesale_chat.infrastructure.db.models.directory import ItemModel, UserModel


class DirectoryReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_user(self, user_id: int) -> UserProfile | None:
        model = await self._session.get(UserModel, user_id)
        return mapper.user_to_entity(model) if model else None

    async def get_users(self, user_ids: Iterable[int]) -> dict[int, UserProfile]:
        ids = set(user_ids)
        if not ids:
            return {}
        result = await self._session.execute(select(UserModel).where(UserModel.id.in_(ids)))
        return {m.id: mapper.user_to_entity(m) for m in result.scalars().all()}

    async def get_item(self, item_id: int) -> ItemSummary | None:
        model = await self._session.get(ItemModel, item_id)
        return mapper.item_to_entity(model) if model else None

    async def get_items(self, item_ids: Iterable[int]) -> dict[int, ItemSummary]:
        ids = set(item_ids)
        if not ids:
            return {}
        result = await self._session.execute(select(ItemModel).where(ItemModel.id.in_(ids)))
        return {m.id: mapper.item_to_entity(m) for m in result.scalars().all()}


class DirectoryWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def upsert_user(self, user: UserProfile) -> None:
        values = {
            "username": user.username,
            "profile_pic": user.profile_pic,
            "updated_at": user.updated_at,
        }
        stmt = (
            pg_insert(UserModel)
            .values(id=user.id, **values)
            .on_conflict_do_update(index_elements=[UserModel.id], set_=values)
        )
        await self._session.execute(stmt)

    async def upsert_item(self, item: ItemSummary) -> None:
        values = {
            "seller_id": item.seller_id,
            "name": item.name,
            "price": item.price,
            "image_url": item.image_url,
            "updated_at": item.updated_at,
        }
        stmt = (
            pg_insert(ItemModel)
            .values(id=item.id, **values)
            .on_conflict_do_update(index_elements=[ItemModel.id], set_=values)
        )
        await self._session.execute(stmt)
