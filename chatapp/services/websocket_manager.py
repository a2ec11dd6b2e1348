"""WebSocket connection manager for the live chat channel."""

import logging
from typing import Any, Dict, List, Set

from fastapi import WebSocket


logger = logging.getLogger("chatapp.websocket")

NEW_MESSAGE_EVENT = "newMessage"
ONLINE_USERS_EVENT = "getOnlineUsers"


class ConnectionManager:
    """Tracks live connections per user and relays events to them."""

    def __init__(self):
        # user_id -> set of WebSocket connections (one per open tab/device)
        self.user_connections: Dict[str, Set[WebSocket]] = {}
        # websocket -> user_id mapping for cleanup
        self.connection_info: Dict[WebSocket, str] = {}

    async def connect(self, websocket: WebSocket, user_id: str) -> None:
        """Accept WebSocket connection and register it."""
        await websocket.accept()

        if user_id not in self.user_connections:
            self.user_connections[user_id] = set()
        self.user_connections[user_id].add(websocket)
        self.connection_info[websocket] = user_id

        logger.info(
            "WebSocket connected: user_id=%s, user_connections=%d, online_users=%d",
            user_id,
            len(self.user_connections[user_id]),
            len(self.user_connections),
        )

    async def disconnect(self, websocket: WebSocket) -> None:
        """Remove WebSocket connection."""
        if websocket not in self.connection_info:
            return

        user_id = self.connection_info.pop(websocket)

        if user_id in self.user_connections:
            self.user_connections[user_id].discard(websocket)
            if not self.user_connections[user_id]:
                del self.user_connections[user_id]

        logger.info("WebSocket disconnected: user_id=%s", user_id)

    def online_user_ids(self) -> List[str]:
        return list(self.user_connections.keys())

    def is_online(self, user_id: str) -> bool:
        return user_id in self.user_connections

    async def _send(self, connections: Set[WebSocket], frame: dict) -> tuple[int, Set[WebSocket]]:
        disconnected: Set[WebSocket] = set()
        sent_count = 0

        for connection in list(connections):
            try:
                await connection.send_json(frame)
                sent_count += 1
            except Exception as e:
                logger.warning(
                    "Failed to send WebSocket event %s to user %s: %s",
                    frame.get("event"),
                    self.connection_info.get(connection),
                    e,
                )
                disconnected.add(connection)

        return sent_count, disconnected

    async def emit_to_user(self, user_id: str, event: str, data: Any) -> int:
        """
        Send an event to all connections of one user.

        Returns:
            Number of connections that received the event
        """
        if user_id not in self.user_connections:
            return 0

        sent_count, disconnected = await self._send(
            self.user_connections[user_id], {"event": event, "data": data}
        )

        # Clean up disconnected connections
        for conn in disconnected:
            await self.disconnect(conn)

        return sent_count

    async def broadcast(self, event: str, data: Any) -> int:
        """
        Send an event to every connected client.

        Returns:
            Number of connections that received the event
        """
        sent_count, disconnected = await self._send(
            set(self.connection_info.keys()), {"event": event, "data": data}
        )

        for conn in disconnected:
            await self.disconnect(conn)

        return sent_count

    async def broadcast_online_users(self) -> int:
        return await self.broadcast(ONLINE_USERS_EVENT, self.online_user_ids())

    def get_user_connection_count(self, user_id: str) -> int:
        """Get number of active connections for a user."""
        return len(self.user_connections.get(user_id, set()))


# Global connection manager instance
connection_manager = ConnectionManager()
