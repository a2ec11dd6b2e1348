"""Client-side views of peers and messages."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

BOT_SENDER_ID = "bot"
LOADING_TEXT = "Typing..."


class ClientModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class Peer(ClientModel):
    id: str
    display_name: str
    profile_picture: Optional[str] = None


class AuthUser(Peer):
    email: Optional[str] = None
    created_at: Optional[str] = None


class Message(ClientModel):
    """A chat message as held in the client's message sequence.

    Server messages carry an id; locally built ones (the user's own bot prompt,
    the loading placeholder) do not.
    """
    id: Optional[str] = None
    sender_id: str
    receiver_id: Optional[str] = None
    text: Optional[str] = None
    image: Optional[str] = None
    created_at: str
    is_loading: bool = False
    is_failed: bool = False


class MessagePayload(ClientModel):
    text: str = ""
    image: Optional[str] = None

    def to_request(self) -> dict:
        body: dict = {"text": self.text}
        if self.image:
            body["image"] = self.image
        return body


def client_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
