"""Wiring of the client pieces into one object handed to the presentation layer."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .config import ClientSettings, get_client_settings
from .notifications import Notifier
from .session import SessionProvider
from .store import BotFailurePolicy, ChatStore
from .transport import ApiClient


logger = logging.getLogger("chatapp.client")


@dataclass
class ChatClient:
    api: ApiClient
    notifier: Notifier
    session: SessionProvider
    store: ChatStore

    @classmethod
    def from_settings(cls, settings: ClientSettings | None = None, transport=None) -> "ChatClient":
        settings = settings or get_client_settings()
        api = ApiClient(settings.API_BASE_URL, timeout=settings.REQUEST_TIMEOUT, transport=transport)
        notifier = Notifier()
        session = SessionProvider(api, notifier, socket_url=settings.SOCKET_URL)
        store = ChatStore(
            api,
            session,
            notifier,
            bot_failure_policy=BotFailurePolicy(settings.BOT_FAILURE_POLICY),
        )
        return cls(api=api, notifier=notifier, session=session, store=store)

    async def start(self) -> bool:
        """Restore a previous session if there is one, then load contacts."""
        if not await self.session.check_auth():
            return False
        await self.store.load_contacts()
        return True

    async def shutdown(self) -> None:
        self.store.close()
        try:
            await self.session.disconnect_socket()
        finally:
            await self.api.aclose()
        logger.info("Chat client shut down")
