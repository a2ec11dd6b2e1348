from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Protocol


@dataclass
class BotRequest:
    user_id: str | None
    message: str


@dataclass
class BotReply:
    text: str
    model: str | None = None


class BotProvider(Protocol):
    async def reply(self, request: BotRequest) -> BotReply:  # pragma: no cover - interface
        ...


class ScriptedBotProvider:
    """Echoes the user's message back after a fixed delay."""

    def __init__(self, delay_seconds: float = 1.0) -> None:
        self.delay_seconds = delay_seconds

    async def reply(self, request: BotRequest) -> BotReply:
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)
        return BotReply(text=f"🤖 Bot reply: {request.message}")
