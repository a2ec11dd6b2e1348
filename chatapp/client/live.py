"""Client side of the live push channel."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Callable, Dict, List

import websockets
from websockets.exceptions import ConnectionClosed


logger = logging.getLogger("chatapp.client.live")

EventHandler = Callable[[Any], None]


class LiveChannel:
    """WebSocket connection with an ``on``/``off`` event listener registry.

    Frames from the server look like ``{"event": "newMessage", "data": {...}}``.
    Handlers run on the event loop, in registration order.
    """

    def __init__(self, url: str) -> None:
        self.url = url
        self.handlers: Dict[str, List[EventHandler]] = {}
        self._ws = None
        self._reader: asyncio.Task | None = None

    @property
    def connected(self) -> bool:
        return self._ws is not None and self._reader is not None and not self._reader.done()

    def on(self, event: str, handler: EventHandler) -> None:
        self.handlers.setdefault(event, []).append(handler)

    def off(self, event: str, handler: EventHandler | None = None) -> None:
        """Remove one handler, or every handler for the event. Unknown ones are ignored."""
        if event not in self.handlers:
            return
        if handler is None:
            del self.handlers[event]
            return
        remaining = [h for h in self.handlers[event] if h != handler]
        if remaining:
            self.handlers[event] = remaining
        else:
            del self.handlers[event]

    def listener_count(self, event: str) -> int:
        return len(self.handlers.get(event, []))

    def dispatch(self, event: str, data: Any) -> None:
        for handler in list(self.handlers.get(event, [])):
            try:
                handler(data)
            except Exception:
                logger.exception("Handler for %s failed", event)

    def _handle_frame(self, raw: str | bytes) -> None:
        try:
            frame = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Ignoring malformed frame: %r", raw[:200])
            return
        if not isinstance(frame, dict) or not isinstance(frame.get("event"), str):
            logger.warning("Ignoring frame without event name")
            return
        self.dispatch(frame["event"], frame.get("data"))

    async def _read_loop(self) -> None:
        try:
            async for raw in self._ws:
                self._handle_frame(raw)
        except ConnectionClosed as e:
            logger.info("Live channel closed: %s", e)

    async def connect(self) -> None:
        if self.connected:
            return
        self._ws = await websockets.connect(self.url)
        self._reader = asyncio.create_task(self._read_loop())
        logger.info("Live channel connected")

    async def disconnect(self) -> None:
        ws, reader = self._ws, self._reader
        self._ws = None
        self._reader = None
        if ws is not None:
            await ws.close()
        if reader is not None:
            try:
                await reader
            except asyncio.CancelledError:
                pass
        logger.info("Live channel disconnected")
