"""Per-connection session bridging one channel to the hub."""
from __future__ import annotations

import enum
import logging
from typing import Optional

from chamber.channel import UNSUPPORTED_DATA, BinaryFrame, ChannelClosed
from chamber.hub import Hub
from chamber.settings import settings

logger = logging.getLogger(__name__)

BINARY_REJECTED = "only text messages are allowed"


class SessionState(enum.Enum):
    CONNECTING = "connecting"
    ACTIVE = "active"
    CLOSING = "closing"
    TERMINATED = "terminated"


class Session:
    """One client's lifetime: greet, register, relay, unregister."""

    def __init__(self, hub: Hub, channel, announce: Optional[bool] = None) -> None:
        self.hub = hub
        self.channel = channel
        self.announce = settings.ANNOUNCE_PRESENCE if announce is None else announce
        self.identifier = hub.next_identifier()
        self.state = SessionState.CONNECTING

    async def run(self) -> None:
        if self.announce:
            try:
                await self.channel.send(f"You are {self.identifier}")
            except Exception as exc:
                logger.info("Client %s left before the greeting: %r", self.identifier, exc)
                self.state = SessionState.TERMINATED
                return

        self.hub.register(self.identifier, self.channel)
        self.state = SessionState.ACTIVE
        logger.info("Client %s admitted", self.identifier)

        try:
            try:
                await self._relay()
            finally:
                self.state = SessionState.CLOSING
                self.hub.unregister(self.identifier)
                logger.info("Client %s disconnected", self.identifier)
            if self.announce:
                await self.hub.broadcast(f"{self.identifier} disconnected")
        finally:
            self.state = SessionState.TERMINATED

    async def _relay(self) -> None:
        try:
            while True:
                text = await self.channel.receive()
                await self.hub.broadcast(text)
        except ChannelClosed as exc:
            logger.debug("Client %s stream ended: %s", self.identifier, exc)
        except BinaryFrame:
            logger.warning("Client %s sent binary data, closing", self.identifier)
            await self.channel.close(UNSUPPORTED_DATA, BINARY_REJECTED)
