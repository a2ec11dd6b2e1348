"""Scripted-reply bot endpoint."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status

from chatapp.api.dependencies import get_bot_provider
from chatapp.chat.schemas import BotChatReply, BotChatRequest
from chatapp.core.messages import BOT_MESSAGE_REQUIRED, BOT_SERVICE_UNAVAILABLE
from chatapp.services.bot_service import BotProvider, BotRequest


logger = logging.getLogger("chatapp.api.bot")

router = APIRouter(prefix="/bot", tags=["bot"])


@router.post("/chat", response_model=BotChatReply)
async def bot_chat(
    payload: BotChatRequest,
    provider: BotProvider = Depends(get_bot_provider),
):
    message = payload.message.strip()
    if not message:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=BOT_MESSAGE_REQUIRED,
        )

    try:
        reply = await provider.reply(BotRequest(user_id=None, message=message))
    except Exception as e:
        logger.error("Bot provider failed: %s", e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=BOT_SERVICE_UNAVAILABLE,
        )

    return BotChatReply(text=reply.text, created_at=datetime.now(timezone.utc))
