"""Client-side chat state: contacts, the selected peer and its message sequence.

The store bridges request/response calls made through :class:`ApiClient` with
``newMessage`` events pushed over the session's live channel. Every mutation
replaces the :class:`ChatState` snapshot and notifies subscribed listeners.

Each call to :meth:`ChatStore.select_peer` starts a new selection generation.
History fetches, sends and bot replies remember the generation they started in
and drop their result if the selection changed while they were in flight, so a
slow response for a previous peer never overwrites the current conversation.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, List, Optional

from pydantic import ValidationError

from chatapp.core.messages import (
    CLIENT_BOT_FAILED,
    CLIENT_MESSAGES_FETCH_FAILED,
    CLIENT_SEND_FAILED,
    CLIENT_USERS_FETCH_FAILED,
)

from .models import BOT_SENDER_ID, LOADING_TEXT, Message, MessagePayload, Peer, client_timestamp
from .notifications import Notifier
from .session import SessionProvider
from .transport import ApiClient, TransportError, parse_response, parse_response_list


logger = logging.getLogger("chatapp.client.store")

NEW_MESSAGE_EVENT = "newMessage"


class BotFailurePolicy(str, Enum):
    """What to do with the user's own message when the bot request fails."""

    KEEP = "keep"
    MARK_FAILED = "mark_failed"
    ROLLBACK = "rollback"


@dataclass(frozen=True)
class ChatState:
    messages: List[Message] = field(default_factory=list)
    users: List[Peer] = field(default_factory=list)
    selected_user: Optional[Peer] = None
    is_users_loading: bool = False
    is_messages_loading: bool = False


StateListener = Callable[[ChatState], None]


class ChatStore:
    def __init__(
        self,
        api: ApiClient,
        session: SessionProvider,
        notifier: Notifier,
        bot_failure_policy: BotFailurePolicy | str = BotFailurePolicy.KEEP,
    ) -> None:
        self.api = api
        self.session = session
        self.notifier = notifier
        self.bot_failure_policy = BotFailurePolicy(bot_failure_policy)

        self._state = ChatState()
        self._listeners: List[StateListener] = []
        self._generation = 0
        self._live_channel = None
        self._live_handler: Optional[Callable[[Any], None]] = None
        # live updates were requested while the session had no channel
        self._resubscribe_pending = False
        self._remove_socket_listener = session.add_socket_listener(self._on_socket_changed)

    # --- Reactive state ---

    @property
    def state(self) -> ChatState:
        return self._state

    @property
    def is_subscribed(self) -> bool:
        return self._live_channel is not None

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call ``listener`` with every new state; returns a function that stops it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, **changes: Any) -> None:
        self._state = replace(self._state, **changes)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                logger.exception("State listener failed")

    def _append(self, message: Message) -> None:
        self._set(messages=[*self._state.messages, message])

    def _without_placeholders(self) -> List[Message]:
        return [m for m in self._state.messages if not m.is_loading]

    # --- Contacts ---

    async def load_contacts(self) -> None:
        self._set(is_users_loading=True)
        try:
            users = parse_response_list(Peer, await self.api.get("/messages/users"))
            self._set(users=users)
        except TransportError as e:
            self.notifier.error(e.message or CLIENT_USERS_FETCH_FAILED)
        finally:
            self._set(is_users_loading=False)

    def is_online(self, peer_id: str) -> bool:
        return peer_id in self.session.online_user_ids

    def visible_contacts(self, online_only: bool = False) -> List[Peer]:
        if not online_only:
            return list(self._state.users)
        return [user for user in self._state.users if self.is_online(user.id)]

    # --- Conversation ---

    def select_peer(self, peer: Optional[Peer]) -> None:
        """Replace the selected peer.

        Does not fetch history, clear messages or touch the live subscription;
        use :meth:`switch_conversation` for that.
        """
        self._generation += 1
        self._set(selected_user=peer, is_messages_loading=False)

    async def switch_conversation(self, peer: Optional[Peer]) -> None:
        """Unsubscribe, select, clear, fetch history and resubscribe in one step."""
        self.unsubscribe_from_live_updates()
        self.select_peer(peer)
        self._set(messages=[])
        if peer is None:
            return

        generation = self._generation
        await self.load_history(peer.id)
        if generation != self._generation:
            return
        self.subscribe_to_live_updates()

    async def load_history(self, peer_id: str) -> None:
        if not peer_id:
            raise ValueError("peer_id must not be empty")

        generation = self._generation
        self._set(is_messages_loading=True)
        try:
            messages = parse_response_list(Message, await self.api.get(f"/messages/{peer_id}"))
        except TransportError as e:
            if generation == self._generation:
                self.notifier.error(e.message or CLIENT_MESSAGES_FETCH_FAILED)
        else:
            if generation != self._generation:
                logger.debug("Discarding history for %s, selection changed", peer_id)
                return
            self._set(messages=messages)
        finally:
            if generation == self._generation:
                self._set(is_messages_loading=False)

    async def send_message(self, payload: MessagePayload | dict) -> None:
        selected = self._state.selected_user
        if selected is None:
            logger.debug("send_message ignored, no peer selected")
            return

        if not isinstance(payload, MessagePayload):
            payload = MessagePayload.model_validate(payload)

        generation = self._generation
        try:
            body = await self.api.post(f"/messages/send/{selected.id}", payload.to_request())
            message = parse_response(Message, body)
        except TransportError as e:
            self.notifier.error(e.message or CLIENT_SEND_FAILED)
            return

        if generation != self._generation:
            logger.debug("Sent message %s belongs to a previous selection", message.id)
            return
        self._append(message)

    # --- Bot ---

    async def send_bot_message(self, text: str) -> None:
        text = (text or "").strip()
        auth_user = self.session.auth_user
        if not text or auth_user is None:
            return

        generation = self._generation
        user_message = Message(sender_id=auth_user.id, text=text, created_at=client_timestamp())
        placeholder = Message(
            sender_id=BOT_SENDER_ID,
            text=LOADING_TEXT,
            created_at=client_timestamp(),
            is_loading=True,
        )
        self._set(messages=[*self._without_placeholders(), user_message, placeholder])

        reply: Optional[Message] = None
        try:
            reply = parse_response(Message, await self.api.post("/bot/chat", {"message": text}))
        except TransportError as e:
            self.notifier.error(e.message or CLIENT_BOT_FAILED)
        finally:
            # every outcome, cancellation included, clears the placeholder
            self._set(messages=self._without_placeholders())

        if generation != self._generation:
            return
        if reply is None:
            self._apply_bot_failure_policy(user_message)
            return
        self._append(reply)

    def _apply_bot_failure_policy(self, user_message: Message) -> None:
        if self.bot_failure_policy is BotFailurePolicy.KEEP:
            return
        if self.bot_failure_policy is BotFailurePolicy.ROLLBACK:
            self._set(messages=[m for m in self._state.messages if m is not user_message])
            return
        failed = user_message.model_copy(update={"is_failed": True})
        self._set(messages=[failed if m is user_message else m for m in self._state.messages])

    # --- Live updates ---

    def _on_new_message(self, data: Any) -> None:
        try:
            message = Message.model_validate(data)
        except ValidationError:
            logger.warning("Dropping malformed newMessage payload")
            return

        selected = self._state.selected_user
        if selected is None or message.sender_id != selected.id:
            logger.debug("Dropping newMessage from %s, not the selected peer", message.sender_id)
            return
        if message.id and any(m.id == message.id for m in self._state.messages):
            return
        self._append(message)

    def subscribe_to_live_updates(self) -> None:
        if self._state.selected_user is None:
            return
        channel = self.session.socket
        if channel is None:
            self._resubscribe_pending = True
            return

        # keep a single listener
        self.unsubscribe_from_live_updates()
        handler = self._on_new_message
        channel.on(NEW_MESSAGE_EVENT, handler)
        self._live_channel = channel
        self._live_handler = handler

    def unsubscribe_from_live_updates(self) -> None:
        self._resubscribe_pending = False
        channel, handler = self._live_channel, self._live_handler
        if channel is None:
            return
        channel.off(NEW_MESSAGE_EVENT, handler)
        self._live_channel = None
        self._live_handler = None

    def _on_socket_changed(self, channel) -> None:
        """Move the live subscription onto the session's new channel."""
        resubscribe = self.is_subscribed or self._resubscribe_pending
        self.unsubscribe_from_live_updates()
        if resubscribe:
            self.subscribe_to_live_updates()

    # --- Export ---

    def export_history(self) -> str:
        """JSON text of the current conversation, without loading placeholders."""
        return json.dumps(
            [
                m.model_dump(by_alias=True, exclude_none=True, exclude={"is_loading", "is_failed"})
                for m in self._state.messages
                if not m.is_loading
            ],
            indent=2,
            ensure_ascii=False,
        )

    def close(self) -> None:
        self.unsubscribe_from_live_updates()
        self._remove_socket_listener()
        self._listeners.clear()
