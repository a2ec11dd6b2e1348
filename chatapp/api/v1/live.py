"""WebSocket endpoint for the live chat channel."""

import logging

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect
from sqlalchemy.orm import Session

from chatapp.api.dependencies import get_user_from_token
from chatapp.core.config import settings
from chatapp.core.database import get_db
from chatapp.services.websocket_manager import connection_manager


logger = logging.getLogger("chatapp.websocket")

router = APIRouter()


@router.websocket("/ws")
async def live_channel(
    websocket: WebSocket,
    token: str | None = Query(default=None),
    db: Session = Depends(get_db),
):
    """
    Live channel for push events.

    Connection URL: ws://localhost:5002/api/ws?token={access_token}
    (the auth cookie is accepted when no token is given)

    Message Format (Server → Client):
    {
        "event": "newMessage" | "getOnlineUsers",
        "data": {...Message...} | ["<user id>", ...]
    }

    Frames sent by the client are ignored; the connection only needs to stay open.
    """
    token = token or websocket.cookies.get(settings.AUTH_COOKIE_NAME)
    user = get_user_from_token(token, db) if token else None
    if not user:
        logger.warning("WebSocket authentication failed")
        await websocket.close(code=1008, reason="Invalid token")
        return

    user_id = str(user.id)
    # the socket may stay open for hours; do not hold a pooled connection
    db.close()
    await connection_manager.connect(websocket, user_id)

    try:
        await connection_manager.broadcast_online_users()
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info("WebSocket closed by client: user_id=%s", user_id)
    finally:
        await connection_manager.disconnect(websocket)
        await connection_manager.broadcast_online_users()
