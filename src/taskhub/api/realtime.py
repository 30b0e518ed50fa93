"""WebSocket endpoint for the real-time push channel."""

import logging

from fastapi import APIRouter, Depends, WebSocket

from taskhub.api.deps import get_gateway
from taskhub.config import settings
from taskhub.realtime.gateway import BroadcastGateway

logger = logging.getLogger("taskhub.realtime")

realtime_router = APIRouter()


@realtime_router.websocket(settings.realtime_path)
async def realtime_channel(
    websocket: WebSocket,
    gateway: BroadcastGateway = Depends(get_gateway),
) -> None:
    """Register the client with the gateway until it goes away.

    The channel is push-only: anything the client sends is read and ignored.
    """
    await websocket.accept()
    connection_id = gateway.connect(websocket)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
    finally:
        await gateway.disconnect(connection_id)
