import json

from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.websockets import WebSocketState
from loguru import logger

from linkup.core.auth import authenticate_websocket
from linkup.modules.presence.registry import deliver

from . import events
from .router import EventRouter

router = APIRouter(tags=["realtime"])


class WebSocketHandle:
    def __init__(self, websocket: WebSocket):
        self.websocket = websocket

    async def send(self, event: dict) -> None:
        if self.websocket.application_state != WebSocketState.CONNECTED:
            raise RuntimeError("websocket is not connected")
        await self.websocket.send_json(event)


@router.websocket("/realtime")
async def realtime_channel(websocket: WebSocket):
    event_router: EventRouter = websocket.app.state.event_router

    try:
        identity = authenticate_websocket(websocket)
    except HTTPException as exc:
        logger.info(f"[realtime] handshake rejected: {exc.detail}")
        await websocket.close(code=1008)
        return

    await websocket.accept()
    handle = WebSocketHandle(websocket)
    channel = event_router.open(handle, verified_identity=identity)
    logger.debug(f"[realtime] channel opened from {websocket.client}")

    try:
        while True:
            text = await websocket.receive_text()
            try:
                raw = json.loads(text)
            except ValueError:
                await deliver(handle, events.error("Frames must be JSON"))
                continue
            await event_router.dispatch(channel, raw)
    except WebSocketDisconnect:
        logger.debug(f"[realtime] channel closed ({channel.identity or 'anonymous'})")
    finally:
        await event_router.close(channel)
