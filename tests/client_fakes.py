"""In-process fakes for exercising the chat client without a server."""

import asyncio
import inspect
from typing import Any, Callable, Dict, List, Tuple

import httpx

from chatapp.client import ApiClient, AuthUser, ChatStore, LiveChannel, Notifier, SessionProvider

BASE_URL = "http://chat.test/api"


class FakeServer:
    """Routes requests from ``httpx.MockTransport`` to canned responses.

    A route is either a JSON-able body (served with 200), an ``httpx.Response``,
    or a callable taking the request and returning one of those, optionally
    as a coroutine.
    """

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], Any] = {}
        self.requests: List[httpx.Request] = []

    def route(self, method: str, path: str, responder: Any) -> None:
        self.routes[(method, "/api" + path)] = responder

    @property
    def paths(self) -> List[str]:
        return [request.url.path for request in self.requests]

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responder = self.routes.get((request.method, request.url.path))
        if responder is None:
            return httpx.Response(404, json={"message": "Not found"})

        result = responder(request) if callable(responder) else responder
        if inspect.isawaitable(result):
            result = await result
        if isinstance(result, httpx.Response):
            return result
        return httpx.Response(200, json=result)

    def api(self) -> ApiClient:
        return ApiClient(BASE_URL, transport=httpx.MockTransport(self.handle))


class FakeChannel(LiveChannel):
    """LiveChannel that never opens a socket; events are injected with dispatch()."""

    def __init__(self, url: str = "ws://chat.test/api/ws") -> None:
        super().__init__(url)
        self.is_open = False

    @property
    def connected(self) -> bool:
        return self.is_open

    async def connect(self) -> None:
        self.is_open = True

    async def disconnect(self) -> None:
        self.is_open = False


class Gate:
    """Holds a response until the test releases it."""

    def __init__(self, body: Any) -> None:
        self.body = body
        self.entered = asyncio.Event()
        self.release = asyncio.Event()

    async def __call__(self, request: httpx.Request) -> Any:
        self.entered.set()
        await self.release.wait()
        return self.body(request) if callable(self.body) else self.body


def message(id: str, sender: str, receiver: str, text: str = "hi") -> dict:
    return {
        "id": id,
        "senderId": sender,
        "receiverId": receiver,
        "text": text,
        "image": None,
        "createdAt": "2026-10-19T10:00:00Z",
    }


def peer(id: str, name: str = "") -> dict:
    return {"id": id, "displayName": name or id.upper(), "profilePicture": None}


def make_store(
    server: FakeServer,
    policy: str = "keep",
    me: str = "me",
    with_socket: bool = True,
    channel_factory: Callable[[str], LiveChannel] = FakeChannel,
) -> ChatStore:
    notifier = Notifier()
    session = SessionProvider(
        server.api(),
        notifier,
        socket_url="ws://chat.test/api/ws",
        channel_factory=channel_factory,
    )
    session.auth_user = AuthUser(id=me, display_name="Me")
    if with_socket:
        session.socket = FakeChannel()
        session.socket.is_open = True
    return ChatStore(session.api, session, notifier, bot_failure_policy=policy)
