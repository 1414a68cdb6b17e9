"""FastAPI routes: the chat socket and a health probe."""
from __future__ import annotations

from fastapi import APIRouter, Request, WebSocket

from chamber.channel import WebSocketChannel
from chamber.session import Session
from chamber.settings import settings

router = APIRouter()


@router.get("/health")
async def health(request: Request):
    return {"ok": True, "clients": len(request.app.state.hub)}


@router.websocket(settings.WS_PATH)
async def ws_endpoint(ws: WebSocket):
    await ws.accept()
    session = Session(ws.app.state.hub, WebSocketChannel(ws))
    await session.run()
