"""Chat client: transport, live channel, session and the chat state store."""

from .context import ChatClient
from .live import LiveChannel
from .models import BOT_SENDER_ID, AuthUser, Message, MessagePayload, Peer
from .notifications import Notification, Notifier
from .session import SessionProvider
from .store import BotFailurePolicy, ChatState, ChatStore
from .transport import ApiClient, TransportError

__all__ = [
    "ApiClient",
    "AuthUser",
    "BOT_SENDER_ID",
    "BotFailurePolicy",
    "ChatClient",
    "ChatState",
    "ChatStore",
    "LiveChannel",
    "Message",
    "MessagePayload",
    "Notification",
    "Notifier",
    "Peer",
    "SessionProvider",
    "TransportError",
]
