"""Invalidate-on-mutation cache of conversation reads."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
import logging
import time
from typing import TYPE_CHECKING, Any

from .events.bus import VIEW_INVALIDATED

if TYPE_CHECKING:
    from .events.bus import EventBus
    from .gateway import ConversationGateway
    from .models import Conversation, Message

LOGGER = logging.getLogger(__name__)

CacheKey = tuple[str, ...]

CONVERSATIONS_KEY: CacheKey = ("conversations",)


def messages_key(conversation_id: str) -> CacheKey:
    """Cache key of a conversation's message list."""
    return ("messages", conversation_id)


@dataclass
class CacheEntry:
    """A fetched value and whether it has been marked stale."""

    value: list[Any]
    fetched_at: float
    stale: bool = False


class ConversationViewCache:
    """Cache gateway reads until they are explicitly invalidated.

    There is no time-based expiry. Concurrent reads of a missing or stale key
    share one fetch, and a fetch that completes after its key was invalidated
    is stored as stale so the next read goes back to the gateway.
    """

    def __init__(
        self,
        gateway: ConversationGateway,
        event_bus: EventBus | None = None,
    ) -> None:
        self._gateway = gateway
        self._event_bus = event_bus
        self._entries: dict[CacheKey, CacheEntry] = {}
        self._generations: dict[CacheKey, int] = {}
        self._inflight: dict[CacheKey, tuple[int, asyncio.Future[list[Any]]]] = {}

    async def read_messages(self, conversation_id: str | None) -> list[Message]:
        """Return the message list for ``conversation_id``.

        Without a selected conversation this yields ``[]`` and issues no request.
        """
        if not conversation_id:
            return []
        return await self._read(
            messages_key(conversation_id),
            lambda: self._gateway.get_messages(conversation_id),
        )

    async def read_conversations(self) -> list[Conversation]:
        """Return the conversation list."""
        return await self._read(CONVERSATIONS_KEY, self._gateway.list_conversations)

    def peek(self, key: CacheKey) -> list[Any] | None:
        """Return the fresh cached value for ``key`` without fetching."""
        entry = self._entries.get(key)
        if entry is None or entry.stale:
            return None
        return list(entry.value)

    def is_stale(self, key: CacheKey) -> bool:
        entry = self._entries.get(key)
        return entry is None or entry.stale

    async def invalidate(self, key: CacheKey) -> None:
        """Mark ``key`` stale so its next read re-fetches."""
        self._generations[key] = self._generations.get(key, 0) + 1
        entry = self._entries.get(key)
        if entry is not None:
            entry.stale = True
        LOGGER.debug(
            "view_cache.invalidated",
            extra={"event": "view_cache.invalidated", "key": list(key)},
        )
        if self._event_bus is not None:
            await self._event_bus.publish(VIEW_INVALIDATED, {"key": key}, source="view_cache")

    async def invalidate_messages(self, conversation_id: str) -> None:
        await self.invalidate(messages_key(conversation_id))

    async def invalidate_conversations(self) -> None:
        await self.invalidate(CONVERSATIONS_KEY)

    async def _read(
        self,
        key: CacheKey,
        fetch: Callable[[], Awaitable[list[Any]]],
    ) -> list[Any]:
        entry = self._entries.get(key)
        if entry is not None and not entry.stale:
            return list(entry.value)

        generation = self._generations.get(key, 0)
        inflight = self._inflight.get(key)
        if inflight is not None and inflight[0] == generation and not inflight[1].done():
            future = inflight[1]
        else:
            future = asyncio.ensure_future(self._fetch(key, generation, fetch))
            self._inflight[key] = (generation, future)
            future.add_done_callback(lambda done, k=key: self._forget(k, done))
        return list(await asyncio.shield(future))

    def _forget(self, key: CacheKey, future: asyncio.Future[list[Any]]) -> None:
        current = self._inflight.get(key)
        if current is not None and current[1] is future:
            del self._inflight[key]

    async def _fetch(
        self,
        key: CacheKey,
        generation: int,
        fetch: Callable[[], Awaitable[list[Any]]],
    ) -> list[Any]:
        value = list(await fetch())
        stale = self._generations.get(key, 0) != generation
        self._entries[key] = CacheEntry(value=value, fetched_at=time.time(), stale=stale)
        LOGGER.debug(
            "view_cache.fetched",
            extra={
                "event": "view_cache.fetched",
                "key": list(key),
                "size": len(value),
                "stale": stale,
            },
        )
        return value
