"""Async HTTP client for the chat service."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from types import TracebackType
from typing import Any, Self
from uuid import UUID

import httpx

from garagesale_chat.api.schemas.chat import (
    ChatResponse,
    InboxEntryResponse,
    MessageResponse,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0


class ChatApiError(Exception):
    """Non-success response from the chat service."""

    def __init__(self, status_code: int, detail: str = "") -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"HTTP {status_code}: {detail}")


class ChatUnavailableError(ChatApiError):
    """The chat does not exist or the caller may not see it (404/403)."""


@dataclass(frozen=True, slots=True)
class Credentials:
    """Bearer token for one user, passed explicitly on every call."""

    token: str

    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


class ChatApiClient:
    """Thin wrapper over the /api/chats endpoints.

    The underlying httpx client carries no auth state; credentials are sent
    per request, so one client can safely serve several users concurrently.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._http = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(
        self,
        method: str,
        url: str,
        credentials: Credentials,
        json: dict[str, Any] | None = None,
    ) -> Any:
        response = await self._http.request(method, url, json=json, headers=credentials.headers())
        if response.is_success:
            return response.json()

        try:
            detail = str(response.json().get("detail", ""))
        except ValueError:
            detail = response.text[:200]
        logger.debug("%s %s -> %d %s", method, url, response.status_code, detail)
        if response.status_code in (403, 404):
            raise ChatUnavailableError(response.status_code, detail)
        raise ChatApiError(response.status_code, detail)

    async def list_inbox(self, credentials: Credentials) -> list[InboxEntryResponse]:
        data = await self._request("GET", "/api/chats", credentials)
        return [InboxEntryResponse.model_validate(e) for e in data]

    async def unread_total(self, credentials: Credentials) -> int:
        data = await self._request("GET", "/api/chats/unread-count", credentials)
        return int(data["unread_count"])

    async def get_chat(self, chat_id: UUID, credentials: Credentials) -> ChatResponse:
        data = await self._request("GET", f"/api/chats/{chat_id}", credentials)
        return ChatResponse.model_validate(data)

    async def start_chat(
        self,
        item_id: int,
        participant_id: int,
        credentials: Credentials,
    ) -> ChatResponse:
        data = await self._request(
            "POST",
            "/api/chats",
            credentials,
            json={"item_id": item_id, "participant_id": participant_id},
        )
        return ChatResponse.model_validate(data)

    async def send_message(
        self,
        chat_id: UUID,
        content: str,
        credentials: Credentials,
    ) -> MessageResponse:
        data = await self._request(
            "POST",
            f"/api/chats/{chat_id}/messages",
            credentials,
            json={"content": content},
        )
        return MessageResponse.model_validate(data)
