"""Text-only duplex channel over an accepted WebSocket."""
from __future__ import annotations

import logging

from fastapi import WebSocket, WebSocketDisconnect

logger = logging.getLogger(__name__)

# 1003: unsupported data
UNSUPPORTED_DATA = 1003


class ChannelClosed(Exception):
    """The peer went away or the stream failed."""


class BinaryFrame(Exception):
    """The peer sent a frame that is not text."""


class WebSocketChannel:
    def __init__(self, ws: WebSocket) -> None:
        self.ws = ws

    async def receive(self) -> str:
        try:
            message = await self.ws.receive()
        except (WebSocketDisconnect, RuntimeError) as exc:
            raise ChannelClosed(str(exc)) from exc
        if message["type"] == "websocket.disconnect":
            raise ChannelClosed(f"closed with code {message.get('code')}")
        text = message.get("text")
        if text is not None:
            return text
        if message.get("bytes") is not None:
            raise BinaryFrame()
        raise ChannelClosed(f"unexpected message {message['type']}")

    async def send(self, text: str) -> None:
        await self.ws.send_text(text)

    async def close(self, code: int, reason: str) -> None:
        # The socket may already be gone; closing is best effort.
        try:
            await self.ws.close(code=code, reason=reason)
        except Exception:
            logger.debug("Close after disconnect ignored", exc_info=True)
