"""Registry of connected clients and broadcast fan-out."""
from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Protocol

from chamber.settings import settings

logger = logging.getLogger(__name__)

# 1011: server could not deliver
EVICTED = 1011
EVICTED_REASON = "message delivery failed"


class Endpoint(Protocol):
    async def send(self, text: str) -> None: ...

    async def close(self, code: int, reason: str) -> None: ...


@dataclass
class ClientHandle:
    identifier: int
    endpoint: Endpoint
    connected_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class Hub:
    """Tracks live clients and delivers every broadcast to all of them.

    The registry lives on the event loop. ``register`` and ``unregister`` never
    suspend, so each one runs to completion before any other task touches the
    mapping, and ``broadcast`` copies it without suspending either. Broadcasts
    themselves are serialized so every recipient sees them in the same order.
    """

    def __init__(self, send_timeout: Optional[float] = None) -> None:
        self.clients: Dict[int, ClientHandle] = {}
        self.send_timeout = settings.SEND_TIMEOUT if send_timeout is None else send_timeout
        self._ids = itertools.count()
        self._dispatch = asyncio.Lock()

    def __len__(self) -> int:
        return len(self.clients)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self.clients

    def identifiers(self) -> List[int]:
        return list(self.clients)

    def next_identifier(self) -> int:
        return next(self._ids)

    def register(self, identifier: int, endpoint: Endpoint) -> ClientHandle:
        if identifier in self.clients:
            logger.warning("Client %s registered twice, replacing previous handle", identifier)
        handle = ClientHandle(identifier, endpoint)
        self.clients[identifier] = handle
        return handle

    def unregister(self, identifier: int) -> bool:
        return self.clients.pop(identifier, None) is not None

    async def _evict(self, handle: ClientHandle) -> None:
        # A newer registration under the same identifier stays.
        if self.clients.get(handle.identifier) is handle:
            del self.clients[handle.identifier]
        # Closing the endpoint ends the owning session's receive loop.
        try:
            await asyncio.wait_for(
                handle.endpoint.close(EVICTED, EVICTED_REASON), self.send_timeout
            )
        except Exception:
            logger.debug("Closing evicted client %s failed", handle.identifier, exc_info=True)

    async def _deliver(self, handle: ClientHandle, text: str) -> bool:
        try:
            await asyncio.wait_for(handle.endpoint.send(text), self.send_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Client %s did not accept a message within %.1fs, evicting",
                handle.identifier,
                self.send_timeout,
            )
            await self._evict(handle)
            return False
        except Exception as exc:
            logger.warning("Delivery to client %s failed (%r), evicting", handle.identifier, exc)
            await self._evict(handle)
            return False
        return True

    async def broadcast(self, text: str) -> int:
        """Send ``text`` to every registered client; return how many got it."""
        async with self._dispatch:
            targets = list(self.clients.values())
            if not targets:
                return 0
            results = await asyncio.gather(*(self._deliver(h, text) for h in targets))
        return sum(results)

    async def close_all(self, code: int = 1001, reason: str = "server shutting down") -> None:
        handles = list(self.clients.values())
        self.clients.clear()
        for handle in handles:
            try:
                await handle.endpoint.close(code, reason)
            except Exception:
                logger.debug("Closing client %s failed", handle.identifier, exc_info=True)
