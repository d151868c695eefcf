from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Response, status

from garagesale_chat.api.deps import CurrentPrincipal, UoWDep
from garagesale_chat.api.schemas.chat import (
    ChatResponse,
    CreateChatRequest,
    InboxEntryResponse,
    ItemSummaryResponse,
    MessageResponse,
    SendMessageRequest,
    UnreadCountResponse,
    UserSummaryResponse,
)
from garagesale_chat.application.dto.inbox import InboxEntry
from garagesale_chat.application.uow import UnitOfWork
from garagesale_chat.domain.entities.chat import Chat
from garagesale_chat.services import chat_service, inbox_service, message_service
from garagesale_chat.services.read_state_service import unread_count_for

router = APIRouter(prefix="/api/chats", tags=["chats"])


async def _chat_response(chat: Chat, viewer_id: int, uow: UnitOfWork) -> ChatResponse:
    profiles = await uow.directory.get_users(chat.participants)
    item = await uow.directory.get_item(chat.item_id)
    return ChatResponse(
        id=chat.id,
        item_id=chat.item_id,
        participants=list(chat.participants),
        last_message_at=chat.last_message_at,
        created_at=chat.created_at,
        messages=[MessageResponse.model_validate(m, from_attributes=True) for m in chat.messages],
        item=ItemSummaryResponse.model_validate(item, from_attributes=True) if item else None,
        participant_profiles=[
            UserSummaryResponse.model_validate(profiles[p], from_attributes=True)
            if p in profiles
            else UserSummaryResponse(id=p)
            for p in chat.participants
        ],
        unread_count=unread_count_for(chat, viewer_id),
    )


def _inbox_entry_response(entry: InboxEntry) -> InboxEntryResponse:
    profile = entry.other_participant_profile
    return InboxEntryResponse(
        chat_id=entry.chat.id,
        item_id=entry.chat.item_id,
        participants=list(entry.chat.participants),
        last_message_at=entry.chat.last_message_at,
        created_at=entry.chat.created_at,
        other_participant=(
            UserSummaryResponse.model_validate(profile, from_attributes=True)
            if profile
            else UserSummaryResponse(id=entry.other_participant)
        ),
        last_message=(
            MessageResponse.model_validate(entry.last_message, from_attributes=True)
            if entry.last_message
            else None
        ),
        unread_count=entry.unread_count,
        item=(
            ItemSummaryResponse.model_validate(entry.item, from_attributes=True)
            if entry.item
            else None
        ),
    )


@router.get("", response_model=list[InboxEntryResponse])
async def get_inbox(
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> list[InboxEntryResponse]:
    entries = await inbox_service.get_inbox(principal.user_id, uow)
    return [_inbox_entry_response(e) for e in entries]


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> UnreadCountResponse:
    total = await inbox_service.total_unread(principal.user_id, uow)
    return UnreadCountResponse(unread_count=total)


@router.post("", response_model=ChatResponse, status_code=status.HTTP_201_CREATED)
async def create_chat(
    body: CreateChatRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
    response: Response,
) -> ChatResponse:
    chat, created = await chat_service.get_or_create_chat(
        body.item_id, (principal.user_id, body.participant_id), uow,
    )
    if not created:
        response.status_code = status.HTTP_200_OK
    return await _chat_response(chat, principal.user_id, uow)


@router.get("/{chat_id}", response_model=ChatResponse)
async def get_chat(
    chat_id: UUID,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> ChatResponse:
    chat = await chat_service.open_chat(chat_id, principal.user_id, uow)
    return await _chat_response(chat, principal.user_id, uow)


@router.post("/{chat_id}/messages", response_model=MessageResponse, status_code=201)
async def send_message(
    chat_id: UUID,
    body: SendMessageRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> MessageResponse:
    msg = await message_service.append_message(chat_id, principal.user_id, body.content, uow)
    return MessageResponse.model_validate(msg, from_attributes=True)
