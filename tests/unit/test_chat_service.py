from __future__ import annotations

import uuid

import pytest

from garagesale_chat.application.exceptions import (
    ForbiddenError,
    InvalidItemError,
    InvalidParticipantsError,
    NotFoundError,
)
from garagesale_chat.services import chat_service
from tests.conftest import (
    BUYER_ID,
    ITEM_ID,
    SELLER_ID,
    STRANGER_ID,
    make_chat,
    make_item,
    make_message,
    minutes_ago,
)


@pytest.mark.asyncio
async def test_create_chat(uow):
    chat, created = await chat_service.get_or_create_chat(ITEM_ID, (BUYER_ID, SELLER_ID), uow)

    assert created is True
    assert chat.item_id == ITEM_ID
    assert chat.participants == (SELLER_ID, BUYER_ID)
    assert chat.messages == ()
    assert chat.last_message_at == chat.created_at
    assert uow._committed is True


@pytest.mark.asyncio
async def test_create_chat_is_idempotent_in_either_order(uow):
    first, created1 = await chat_service.get_or_create_chat(ITEM_ID, (BUYER_ID, SELLER_ID), uow)
    uow._committed = False

    second, created2 = await chat_service.get_or_create_chat(ITEM_ID, (SELLER_ID, BUYER_ID), uow)

    assert created1 is True
    assert created2 is False
    assert second.id == first.id
    assert uow._committed is False
    assert len(uow.chats._chats) == 1


@pytest.mark.asyncio
async def test_existing_chat_returned_unchanged(uow):
    chat = make_chat()
    uow.add_chat(chat, make_message(chat, sender_id=BUYER_ID, content="still for sale?"))

    got, created = await chat_service.get_or_create_chat(ITEM_ID, (BUYER_ID, SELLER_ID), uow)

    assert created is False
    assert got.id == chat.id
    assert [m.content for m in got.messages] == ["still for sale?"]


@pytest.mark.asyncio
async def test_same_pair_different_item_gets_new_chat(uow):
    uow.add_item(make_item(item_id=11))
    a, _ = await chat_service.get_or_create_chat(ITEM_ID, (BUYER_ID, SELLER_ID), uow)
    b, created = await chat_service.get_or_create_chat(11, (BUYER_ID, SELLER_ID), uow)

    assert created is True
    assert a.id != b.id


@pytest.mark.asyncio
async def test_chat_with_yourself_rejected(uow):
    with pytest.raises(InvalidParticipantsError):
        await chat_service.get_or_create_chat(ITEM_ID, (BUYER_ID, BUYER_ID), uow)
    assert uow.chats._chats == {}


@pytest.mark.asyncio
async def test_unknown_participant_rejected(uow):
    with pytest.raises(InvalidParticipantsError, match="999"):
        await chat_service.get_or_create_chat(ITEM_ID, (BUYER_ID, 999), uow)


@pytest.mark.asyncio
async def test_unknown_item_rejected(uow):
    with pytest.raises(InvalidItemError):
        await chat_service.get_or_create_chat(404, (BUYER_ID, SELLER_ID), uow)


def test_unknown_item_maps_to_not_found():
    assert issubclass(InvalidItemError, NotFoundError)


@pytest.mark.asyncio
async def test_get_chat_for_participant(uow):
    chat = uow.add_chat(make_chat())

    got = await chat_service.get_chat(chat.id, BUYER_ID, uow)

    assert got.id == chat.id


@pytest.mark.asyncio
async def test_get_chat_missing(uow):
    with pytest.raises(NotFoundError):
        await chat_service.get_chat(uuid.uuid4(), BUYER_ID, uow)


@pytest.mark.asyncio
async def test_get_chat_forbidden_for_non_participant(uow):
    chat = uow.add_chat(make_chat())

    with pytest.raises(ForbiddenError):
        await chat_service.get_chat(chat.id, STRANGER_ID, uow)


@pytest.mark.asyncio
async def test_list_chats_most_recent_first(uow):
    old = uow.add_chat(make_chat(last_message_at=minutes_ago(30)))
    uow.add_item(make_item(item_id=11, seller_id=STRANGER_ID))
    new = uow.add_chat(
        make_chat(participants=(BUYER_ID, STRANGER_ID), item_id=11, last_message_at=minutes_ago(1)),
    )
    uow.add_chat(make_chat(participants=(SELLER_ID, STRANGER_ID), item_id=12))

    chats = await chat_service.list_chats_for_user(BUYER_ID, uow)

    assert [c.id for c in chats] == [new.id, old.id]


@pytest.mark.asyncio
async def test_list_chats_empty(uow):
    assert await chat_service.list_chats_for_user(BUYER_ID, uow) == []


@pytest.mark.asyncio
async def test_open_chat_marks_messages_read(uow):
    chat = make_chat()
    uow.add_chat(
        chat,
        make_message(chat, sender_id=BUYER_ID, seq=1),
        make_message(chat, sender_id=BUYER_ID, seq=2),
    )

    opened = await chat_service.open_chat(chat.id, SELLER_ID, uow)

    assert all(SELLER_ID in m.read_by for m in opened.messages)
    assert uow._committed is True


@pytest.mark.asyncio
async def test_open_chat_forbidden_does_not_mark(uow):
    chat = make_chat()
    uow.add_chat(chat, make_message(chat, sender_id=BUYER_ID))

    with pytest.raises(ForbiddenError):
        await chat_service.open_chat(chat.id, STRANGER_ID, uow)
    assert all(STRANGER_ID not in m.read_by for m in uow.chats._messages[chat.id])
