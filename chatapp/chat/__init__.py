"""Chat system module for two-party conversations."""

from .models import ChatMessage
from .messages import MessageHandler
from .schemas import BOT_SENDER_ID, MessageOut, PeerOut

__all__ = [
    "ChatMessage",
    "MessageHandler",
    "MessageOut",
    "PeerOut",
    "BOT_SENDER_ID",
]
