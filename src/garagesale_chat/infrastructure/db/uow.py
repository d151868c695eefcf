from __future__ import annotations

from types import TracebackType
from typing import Self

from sqlalchemy.ext.asyncio import AsyncSession

from garagesale_chat.infrastructure.db.repositories.chat import (
    ChatReaderRepo,
    ChatWriterRepo,
)
from garagesale_chat.infrastructure.db.repositories.directory import (
    DirectoryReaderRepo,
    DirectoryWriterRepo,
)
from garagesale_chat.infrastructure.db.repositories.message import MessageWriterRepo


class SqlAlchemyUoW:
    """Concrete Unit-of-Work backed by a single AsyncSession."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self.chats = ChatReaderRepo(session)
        self.chats_w = ChatWriterRepo(session)
        self.messages_w = MessageWriterRepo(session)
        self.directory = DirectoryReaderRepo(session)
        self.directory_w = DirectoryWriterRepo(session)

    async def flush(self) -> None:
        await self._session.flush()

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            await self.rollback()
