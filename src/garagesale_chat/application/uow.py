from __future__ import annotations

from typing import Protocol

from garagesale_chat.application.repositories.chat import ChatReader, ChatWriter
from garagesale_chat.application.repositories.directory import (
    DirectoryReader,
    DirectoryWriter,
)
from garagesale_chat.application.repositories.message import MessageWriter


class UnitOfWork(Protocol):
    chats: ChatReader
    chats_w: ChatWriter
    messages_w: MessageWriter
    directory: DirectoryReader
    directory_w: DirectoryWriter

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
    async def flush(self) -> None: ...
