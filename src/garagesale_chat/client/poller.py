"""Polling-based live view of a chat or an inbox.

There is no push channel, so a view keeps itself current by re-fetching on
a fixed interval. Every fetch replaces the local snapshot wholesale.
The pollers only need a ``ChatSource``; ``ChatApiClient`` is the HTTP one,
and any other transport exposing the same reads can stand in for it.
"""
from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Callable, Generic, Protocol, TypeVar
from uuid import UUID

from garagesale_chat.api.schemas.chat import (
    ChatResponse,
    InboxEntryResponse,
    MessageResponse,
)
from garagesale_chat.client.api import ChatUnavailableError, Credentials

logger = logging.getLogger(__name__)

CHAT_POLL_INTERVAL = 3.0
INBOX_POLL_INTERVAL = 10.0
BADGE_POLL_INTERVAL = 30.0

T = TypeVar("T")


class ChatSource(Protocol):
    async def get_chat(self, chat_id: UUID, credentials: Credentials) -> ChatResponse: ...

    async def list_inbox(self, credentials: Credentials) -> list[InboxEntryResponse]: ...

    async def send_message(
        self, chat_id: UUID, content: str, credentials: Credentials,
    ) -> MessageResponse: ...


class _Poller(ABC, Generic[T]):
    """Fetch once, then keep re-fetching every ``interval`` seconds until stopped.

    A single task runs the ticks and awaits each fetch before sleeping again,
    and out-of-band refreshes share a lock with it, so fetches never overlap.
    A fetch that completes after ``stop()`` is discarded.
    """

    def __init__(
        self,
        *,
        interval: float,
        on_update: Callable[[T], None],
        on_error: Callable[[Exception], None] | None = None,
        name: str,
    ) -> None:
        self._interval = interval
        self._on_update = on_update
        self._on_error = on_error
        self._name = name
        self._lock = asyncio.Lock()
        self._task: asyncio.Task[None] | None = None
        self._active = False
        self.snapshot: T | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @abstractmethod
    async def _fetch(self) -> T: ...

    async def refresh(self) -> T | None:
        async with self._lock:
            result = await self._fetch()
        if not self._active:
            return None
        self.snapshot = result
        self._on_update(result)
        return result

    async def start(self) -> None:
        """Initial fetch; failures propagate. Then schedule the repeating fetch."""
        self._active = True
        try:
            await self.refresh()
        except BaseException:
            self._active = False
            raise
        if not self._active:
            # stopped while the first fetch was in flight
            return
        self._task = asyncio.create_task(self._run(), name=f"poller-{self._name}")
        logger.debug("Polling %s every %.1fs", self._name, self._interval)

    async def stop(self) -> None:
        self._active = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
            logger.debug("Stopped polling %s", self._name)

    def _report(self, exc: Exception) -> None:
        logger.warning("Refresh of %s failed: %s", self._name, exc)
        if self._on_error:
            self._on_error(exc)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                await self.refresh()
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                # retried on the next tick
                self._report(exc)


class ChatPoller(_Poller[ChatResponse]):
    """Keeps one open chat current and sends messages into it."""

    def __init__(
        self,
        source: ChatSource,
        chat_id: UUID,
        credentials: Credentials,
        *,
        on_update: Callable[[ChatResponse], None],
        on_unavailable: Callable[[ChatUnavailableError], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
        interval: float = CHAT_POLL_INTERVAL,
    ) -> None:
        super().__init__(
            interval=interval,
            on_update=on_update,
            on_error=on_error,
            name=f"chat:{chat_id}",
        )
        self._source = source
        self._chat_id = chat_id
        self._credentials = credentials
        self._on_unavailable = on_unavailable

    async def _fetch(self) -> ChatResponse:
        return await self._source.get_chat(self._chat_id, self._credentials)

    async def start(self) -> bool:
        """Returns False when polling was not started.

        That happens when the chat is gone or forbidden, or when ``stop()``
        ran before the first fetch finished.
        """
        try:
            await super().start()
        except ChatUnavailableError as exc:
            if self._on_unavailable is None:
                raise
            logger.info("Chat %s unavailable (%d), leaving view", self._chat_id, exc.status_code)
            self._on_unavailable(exc)
            return False
        return self.running

    async def send(self, content: str) -> MessageResponse | None:
        """Send, then re-fetch at once instead of waiting for the next tick.

        Send failures propagate so the caller can keep the draft and show an
        error. Blank drafts are ignored.
        """
        if not content.strip():
            return None
        msg = await self._source.send_message(self._chat_id, content, self._credentials)
        try:
            await self.refresh()
        except Exception as exc:
            self._report(exc)
        return msg


class InboxPoller(_Poller[list[InboxEntryResponse]]):
    """Keeps the inbox list (or just the unread badge) current."""

    def __init__(
        self,
        source: ChatSource,
        credentials: Credentials,
        *,
        on_update: Callable[[list[InboxEntryResponse]], None],
        on_error: Callable[[Exception], None] | None = None,
        interval: float = INBOX_POLL_INTERVAL,
    ) -> None:
        super().__init__(
            interval=interval,
            on_update=on_update,
            on_error=on_error,
            name="inbox",
        )
        self._source = source
        self._credentials = credentials

    async def _fetch(self) -> list[InboxEntryResponse]:
        return await self._source.list_inbox(self._credentials)

    @property
    def total_unread(self) -> int:
        return sum(e.unread_count for e in self.snapshot or ())
