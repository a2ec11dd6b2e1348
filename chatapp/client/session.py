"""Authenticated identity, live channel handle and online presence."""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Set
from urllib.parse import urlencode

from websockets.exceptions import WebSocketException

from chatapp.core.messages import (
    CLIENT_LOGIN_FAILED,
    CLIENT_LOGIN_SUCCESS,
    CLIENT_LOGOUT_FAILED,
    CLIENT_LOGOUT_SUCCESS,
    CLIENT_SIGNUP_FAILED,
    CLIENT_SIGNUP_SUCCESS,
)

from .live import LiveChannel
from .models import AuthUser
from .notifications import Notifier
from .transport import ApiClient, TransportError, parse_response


logger = logging.getLogger("chatapp.client.session")

ONLINE_USERS_EVENT = "getOnlineUsers"


class SessionProvider:
    """Owns the logged-in user and the live channel for the lifetime of a login."""

    def __init__(
        self,
        api: ApiClient,
        notifier: Notifier,
        socket_url: str,
        channel_factory: Callable[[str], LiveChannel] = LiveChannel,
    ) -> None:
        self.api = api
        self.notifier = notifier
        self.socket_url = socket_url
        self.channel_factory = channel_factory

        self.auth_user: AuthUser | None = None
        self.socket: LiveChannel | None = None
        self.online_user_ids: Set[str] = set()
        self.is_checking_auth = False
        self._socket_listeners: List[Callable[[Optional[LiveChannel]], None]] = []

    def add_socket_listener(self, listener: Callable[[Optional[LiveChannel]], None]) -> Callable[[], None]:
        """Call ``listener`` whenever the live channel is replaced or dropped."""
        self._socket_listeners.append(listener)

        def remove() -> None:
            if listener in self._socket_listeners:
                self._socket_listeners.remove(listener)

        return remove

    def _set_socket(self, channel: Optional[LiveChannel]) -> None:
        self.socket = channel
        for listener in list(self._socket_listeners):
            try:
                listener(channel)
            except Exception:
                logger.exception("Socket listener failed")

    def _apply_auth(self, body: Any) -> None:
        self.auth_user = parse_response(AuthUser, body)
        token = body.get("token")
        if token:
            self.api.set_token(token)

    async def check_auth(self) -> bool:
        """Restore the session from an existing token or cookie."""
        self.is_checking_auth = True
        try:
            self.auth_user = parse_response(AuthUser, await self.api.get("/auth/check"))
        except TransportError as e:
            logger.info("No active session: %s", e.message or e.status_code)
            self.auth_user = None
            return False
        finally:
            self.is_checking_auth = False
        await self.connect_socket()
        return True

    async def signup(self, full_name: str, email: str, password: str) -> bool:
        try:
            body = await self.api.post(
                "/auth/signup",
                {"fullName": full_name, "email": email, "password": password},
            )
            self._apply_auth(body)
        except TransportError as e:
            self.notifier.error(e.message or CLIENT_SIGNUP_FAILED)
            return False
        self.notifier.success(CLIENT_SIGNUP_SUCCESS)
        await self.connect_socket()
        return True

    async def login(self, email: str, password: str) -> bool:
        try:
            body = await self.api.post("/auth/login", {"email": email, "password": password})
            self._apply_auth(body)
        except TransportError as e:
            self.notifier.error(e.message or CLIENT_LOGIN_FAILED)
            return False
        self.notifier.success(CLIENT_LOGIN_SUCCESS)
        await self.connect_socket()
        return True

    async def logout(self) -> None:
        try:
            await self.api.post("/auth/logout")
        except TransportError as e:
            self.notifier.error(e.message or CLIENT_LOGOUT_FAILED)
            return
        self.auth_user = None
        self.api.set_token(None)
        await self.disconnect_socket()
        self.notifier.success(CLIENT_LOGOUT_SUCCESS)

    def _on_online_users(self, data: Any) -> None:
        if isinstance(data, list):
            self.online_user_ids = {str(user_id) for user_id in data}

    async def _detach(self, channel: LiveChannel) -> None:
        channel.off(ONLINE_USERS_EVENT, self._on_online_users)
        await channel.disconnect()

    async def connect_socket(self) -> None:
        """Open the live channel, replacing one whose connection has dropped."""
        if self.auth_user is None:
            return
        stale = self.socket
        if stale is not None:
            if stale.connected:
                return
            self.socket = None
            await self._detach(stale)

        url = self.socket_url
        if self.api.token:
            url = f"{url}?{urlencode({'token': self.api.token})}"

        channel = self.channel_factory(url)
        channel.on(ONLINE_USERS_EVENT, self._on_online_users)
        try:
            await channel.connect()
        except (OSError, WebSocketException) as e:
            logger.warning("Live channel unavailable: %s", e)
            channel.off(ONLINE_USERS_EVENT, self._on_online_users)
            if stale is not None:
                self._set_socket(None)
            return
        self._set_socket(channel)

    async def disconnect_socket(self) -> None:
        socket = self.socket
        self.online_user_ids = set()
        if socket is None:
            return
        self._set_socket(None)
        await self._detach(socket)
