"""Shared test fixtures."""
from __future__ import annotations

import itertools
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Iterable
from uuid import UUID

import pytest

from garagesale_chat.application.dto.principal import Principal
from garagesale_chat.domain.entities.chat import Chat, participant_pair
from garagesale_chat.domain.entities.directory import ItemSummary, UserProfile
from garagesale_chat.domain.entities.message import Message

SELLER_ID = 1
BUYER_ID = 2
STRANGER_ID = 3
ITEM_ID = 10


@pytest.fixture
def seller_principal() -> Principal:
    return Principal(user_id=SELLER_ID, roles=[])


@pytest.fixture
def buyer_principal() -> Principal:
    return Principal(user_id=BUYER_ID, roles=[])


def make_chat(
    *,
    chat_id: UUID | None = None,
    participants: tuple[int, int] = (SELLER_ID, BUYER_ID),
    item_id: int = ITEM_ID,
    last_message_at: datetime | None = None,
) -> Chat:
    now = datetime.now(timezone.utc)
    return Chat(
        id=chat_id or uuid.uuid4(),
        participants=participant_pair(*participants),
        item_id=item_id,
        last_message_at=last_message_at or now,
        created_at=now,
    )


def make_message(
    chat: Chat,
    *,
    sender_id: int,
    content: str = "hello",
    seq: int = 0,
    read_by: Iterable[int] | None = None,
    created_at: datetime | None = None,
) -> Message:
    return Message(
        id=uuid.uuid4(),
        chat_id=chat.id,
        seq=seq,
        sender_id=sender_id,
        content=content,
        created_at=created_at or datetime.now(timezone.utc),
        read_by=frozenset(read_by if read_by is not None else {sender_id}),
    )


def make_user(user_id: int, username: str | None = None) -> UserProfile:
    return UserProfile(
        id=user_id,
        username=username or f"user{user_id}",
        profile_pic=None,
        updated_at=datetime.now(timezone.utc),
    )


def make_item(item_id: int = ITEM_ID, seller_id: int = SELLER_ID) -> ItemSummary:
    return ItemSummary(
        id=item_id,
        seller_id=seller_id,
        name="Desk lamp",
        price=Decimal("12.50"),
        image_url=None,
        updated_at=datetime.now(timezone.utc),
    )


@dataclass
class FakeChatReader:
    _chats: dict[UUID, Chat] = field(default_factory=dict)
    _messages: dict[UUID, list[Message]] = field(default_factory=dict)

    def _hydrate(self, chat: Chat) -> Chat:
        return replace(chat, messages=tuple(self._messages.get(chat.id, ())))

    async def get_by_id(self, chat_id: UUID) -> Chat | None:
        chat = self._chats.get(chat_id)
        return self._hydrate(chat) if chat else None

    async def get_by_pair(self, item_id: int, participants: tuple[int, int]) -> Chat | None:
        pair = participant_pair(*participants)
        for chat in self._chats.values():
            if chat.item_id == item_id and chat.participants == pair:
                return self._hydrate(chat)
        return None

    async def list_for_user(self, user_id: int) -> list[Chat]:
        chats = [c for c in self._chats.values() if c.has_participant(user_id)]
        chats.sort(key=lambda c: str(c.id))
        chats.sort(key=lambda c: c.last_message_at, reverse=True)
        return [self._hydrate(c) for c in chats]


@dataclass
class FakeChatWriter:
    _reader: FakeChatReader

    async def create_if_not_exists(self, chat: Chat) -> tuple[Chat, bool]:
        existing = await self._reader.get_by_pair(chat.item_id, chat.participants)
        if existing is not None:
            return existing, False
        self._reader._chats[chat.id] = chat
        return chat, True

    async def lock_and_touch(self, chat_id: UUID) -> datetime | None:
        chat = self._reader._chats.get(chat_id)
        if chat is None:
            return None
        ts = max(chat.last_message_at, datetime.now(timezone.utc))
        self._reader._chats[chat_id] = replace(chat, last_message_at=ts)
        return ts


@dataclass
class FakeMessageWriter:
    _reader: FakeChatReader
    _seq: itertools.count = field(default_factory=lambda: itertools.count(1))

    async def append(self, message: Message) -> Message:
        stored = replace(message, seq=next(self._seq))
        self._reader._messages.setdefault(message.chat_id, []).append(stored)
        return stored

    async def mark_read(self, chat_id: UUID, viewer_id: int) -> int:
        messages = self._reader._messages.get(chat_id, [])
        marked = 0
        for i, m in enumerate(messages):
            if viewer_id not in m.read_by:
                messages[i] = replace(m, read_by=m.read_by | {viewer_id})
                marked += 1
        return marked


@dataclass
class FakeDirectoryReader:
    _users: dict[int, UserProfile] = field(default_factory=dict)
    _items: dict[int, ItemSummary] = field(default_factory=dict)

    async def get_user(self, user_id: int) -> UserProfile | None:
        return self._users.get(user_id)

    async def get_users(self, user_ids: Iterable[int]) -> dict[int, UserProfile]:
        return {i: self._users[i] for i in user_ids if i in self._users}

    async def get_item(self, item_id: int) -> ItemSummary | None:
        return self._items.get(item_id)

    async def get_items(self, item_ids: Iterable[int]) -> dict[int, ItemSummary]:
        return {i: self._items[i] for i in item_ids if i in self._items}


@dataclass
class FakeDirectoryWriter:
    _reader: FakeDirectoryReader

    async def upsert_user(self, user: UserProfile) -> None:
        self._reader._users[user.id] = user

    async def upsert_item(self, item: ItemSummary) -> None:
        self._reader._items[item.id] = item


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests."""
    chats: FakeChatReader = field(default_factory=FakeChatReader)
    chats_w: FakeChatWriter | None = None
    messages_w: FakeMessageWriter | None = None
    directory: FakeDirectoryReader = field(default_factory=FakeDirectoryReader)
    directory_w: FakeDirectoryWriter | None = None
    _committed: bool = False

    def __post_init__(self) -> None:
        if self.chats_w is None:
            self.chats_w = FakeChatWriter(self.chats)
        if self.messages_w is None:
            self.messages_w = FakeMessageWriter(self.chats)
        if self.directory_w is None:
            self.directory_w = FakeDirectoryWriter(self.directory)

    def add_users(self, *user_ids: int) -> None:
        for user_id in user_ids:
            self.directory._users[user_id] = make_user(user_id)

    def add_item(self, item: ItemSummary) -> None:
        self.directory._items[item.id] = item

    def add_chat(self, chat: Chat, *messages: Message) -> Chat:
        self.chats._chats[chat.id] = chat
        self.chats._messages[chat.id] = list(messages)
        return chat

    async def flush(self) -> None:
        pass

    async def commit(self) -> None:
        self._committed = True

    async def rollback(self) -> None:
        pass


@pytest.fixture
def uow() -> FakeUoW:
    """Directory with seller 1, buyer 2, stranger 3 and the seller's item 10."""
    uow = FakeUoW()
    uow.add_users(SELLER_ID, BUYER_ID, STRANGER_ID)
    uow.add_item(make_item())
    return uow


def minutes_ago(n: int) -> datetime:
    return datetime.now(timezone.utc) - timedelta(minutes=n)
