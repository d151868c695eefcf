from __future__ import annotations

from typing import Iterable, Protocol

from garagesale_chat.domain.entities.directory import ItemSummary, UserProfile


class DirectoryReader(Protocol):
    async def get_user(self, user_id: int) -> UserProfile | None: ...

    async def get_users(self, user_ids: Iterable[int]) -> dict[int, UserProfile]: ...

    async def get_item(self, item_id: int) -> ItemSummary | None: ...

    async def get_items(self, item_ids: Iterable[int]) -> dict[int, ItemSummary]: ...


class DirectoryWriter(Protocol):
    async def upsert_user(self, user: UserProfile) -> None: ...

    async def upsert_item(self, item: ItemSummary) -> None: ...
