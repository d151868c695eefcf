from __future__ import annotations

import uuid
from dataclasses import replace

import pytest

from garagesale_chat.application.exceptions import ForbiddenError
from garagesale_chat.services import chat_service, message_service, read_state_service
from garagesale_chat.services.read_state_service import unread_count_for
from tests.conftest import (
    BUYER_ID,
    ITEM_ID,
    SELLER_ID,
    STRANGER_ID,
    FakeUoW,
    make_chat,
    make_item,
    make_message,
)


def test_unread_count_excludes_own_messages():
    chat = make_chat()
    chat = replace(
        chat,
        messages=(
            make_message(chat, sender_id=BUYER_ID, seq=1),
            make_message(chat, sender_id=SELLER_ID, seq=2),
            make_message(chat, sender_id=BUYER_ID, seq=3, read_by={BUYER_ID, SELLER_ID}),
        ),
    )

    assert unread_count_for(chat, SELLER_ID) == 1
    # the seller's reply is the only one the buyer has not seen
    assert unread_count_for(chat, BUYER_ID) == 1


def test_own_messages_never_unread_whatever_read_by_says():
    chat = make_chat()
    chat = replace(
        chat,
        messages=(
            make_message(chat, sender_id=BUYER_ID, seq=1, read_by=()),
            make_message(chat, sender_id=BUYER_ID, seq=2, read_by={SELLER_ID}),
        ),
    )

    assert unread_count_for(chat, BUYER_ID) == 0
    assert unread_count_for(chat, SELLER_ID) == 1


def test_unread_count_empty_chat():
    assert unread_count_for(make_chat(), SELLER_ID) == 0


@pytest.mark.asyncio
async def test_seller_buyer_scenario(uow):
    # buyer 2 asks seller 1 about item 10
    chat, _ = await chat_service.get_or_create_chat(ITEM_ID, (BUYER_ID, SELLER_ID), uow)
    await message_service.append_message(chat.id, BUYER_ID, "Is it available?", uow)
    await message_service.append_message(chat.id, BUYER_ID, "I can pick it up today", uow)

    chat = await uow.chats.get_by_id(chat.id)
    assert unread_count_for(chat, SELLER_ID) == 2
    assert unread_count_for(chat, BUYER_ID) == 0

    marked = await read_state_service.mark_chat_viewed(chat.id, SELLER_ID, uow)
    assert marked == 2

    await message_service.append_message(chat.id, SELLER_ID, "Yes, come by at 5", uow)
    chat = await uow.chats.get_by_id(chat.id)
    assert unread_count_for(chat, SELLER_ID) == 0
    assert unread_count_for(chat, BUYER_ID) == 1

    # a stranger viewing changes nothing
    assert await read_state_service.mark_chat_viewed(chat.id, STRANGER_ID, uow) == 0
    after = await uow.chats.get_by_id(chat.id)
    assert after.messages == chat.messages


@pytest.mark.asyncio
async def test_mark_viewed_is_idempotent(uow):
    chat = make_chat()
    uow.add_chat(chat, make_message(chat, sender_id=BUYER_ID))

    assert await read_state_service.mark_chat_viewed(chat.id, SELLER_ID, uow) == 1
    uow._committed = False
    assert await read_state_service.mark_chat_viewed(chat.id, SELLER_ID, uow) == 0
    assert uow._committed is False


@pytest.mark.asyncio
async def test_mark_viewed_only_touches_that_chat(uow):
    a = make_chat()
    b = make_chat(item_id=11)
    uow.add_chat(a, make_message(a, sender_id=BUYER_ID))
    uow.add_chat(b, make_message(b, sender_id=BUYER_ID))

    await read_state_service.mark_chat_viewed(a.id, SELLER_ID, uow)

    assert unread_count_for(await uow.chats.get_by_id(a.id), SELLER_ID) == 0
    assert unread_count_for(await uow.chats.get_by_id(b.id), SELLER_ID) == 1


@pytest.mark.asyncio
async def test_mark_viewed_missing_chat_is_noop(uow):
    assert await read_state_service.mark_chat_viewed(uuid.uuid4(), SELLER_ID, uow) == 0
    assert uow._committed is False


@pytest.mark.asyncio
async def test_read_by_only_grows(uow):
    chat = make_chat()
    uow.add_chat(chat, make_message(chat, sender_id=BUYER_ID))

    await read_state_service.mark_chat_viewed(chat.id, SELLER_ID, uow)
    await read_state_service.mark_chat_viewed(chat.id, BUYER_ID, uow)

    (msg,) = (await uow.chats.get_by_id(chat.id)).messages
    assert msg.read_by == frozenset({BUYER_ID, SELLER_ID})


@pytest.mark.asyncio
async def test_buyer_asks_seller_about_item():
    u1, u2, u3, it1 = 1, 2, 3, 10
    uow = FakeUoW()
    uow.add_users(u1, u2, u3)
    uow.add_item(make_item(item_id=it1, seller_id=u2))

    c1, _ = await chat_service.get_or_create_chat(it1, (u1, u2), uow)
    assert c1.messages == ()
    same, created = await chat_service.get_or_create_chat(it1, (u2, u1), uow)
    assert same.id == c1.id and created is False

    await message_service.append_message(c1.id, u1, "Is this still available?", uow)
    chat = await uow.chats.get_by_id(c1.id)
    assert len(chat.messages) == 1
    assert unread_count_for(chat, u2) == 1
    assert unread_count_for(chat, u1) == 0

    await read_state_service.mark_chat_viewed(c1.id, u2, uow)
    assert unread_count_for(await uow.chats.get_by_id(c1.id), u2) == 0

    await message_service.append_message(c1.id, u2, "Yes, still available!", uow)
    chat = await uow.chats.get_by_id(c1.id)
    assert unread_count_for(chat, u1) == 1
    assert unread_count_for(chat, u2) == 0

    with pytest.raises(ForbiddenError):
        await message_service.append_message(c1.id, u3, "hi", uow)
