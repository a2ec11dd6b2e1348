"""Pydantic schemas for users, messages and the bot endpoint."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator
from pydantic.alias_generators import to_camel

from chatapp.core.messages import REG_FULL_NAME_REQUIRED, REG_PASSWORD_TOO_SHORT

BOT_SENDER_ID = "bot"


class CamelModel(BaseModel):
    """Base schema serialized with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class PeerOut(CamelModel):
    """Public view of another user, as listed in the sidebar."""
    id: UUID
    display_name: str
    profile_picture: Optional[str] = None

    @classmethod
    def from_user(cls, user) -> "PeerOut":
        return cls(id=user.id, display_name=user.full_name, profile_picture=user.profile_pic)


class AuthUserOut(PeerOut):
    """The authenticated user's own profile."""
    email: str
    created_at: datetime

    @classmethod
    def from_user(cls, user) -> "AuthUserOut":
        return cls(
            id=user.id,
            display_name=user.full_name,
            profile_picture=user.profile_pic,
            email=user.email,
            created_at=user.created_at,
        )


class AuthResponse(AuthUserOut):
    """Auth user plus the access token used for the live channel."""
    token: str


class SignupRequest(CamelModel):
    full_name: str
    email: EmailStr
    password: str

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError(REG_FULL_NAME_REQUIRED)
        if len(v) > 100:
            raise ValueError("Full name must be less than 100 characters")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError(REG_PASSWORD_TOO_SHORT)
        return v


class LoginRequest(CamelModel):
    email: EmailStr
    password: str


class SendMessageRequest(CamelModel):
    text: Optional[str] = None
    image: Optional[str] = None


class MessageOut(CamelModel):
    """Canonical server representation of a persisted message."""
    id: UUID
    sender_id: UUID
    receiver_id: UUID
    text: Optional[str] = None
    image: Optional[str] = None
    created_at: datetime


class BotChatRequest(CamelModel):
    message: str


class BotChatReply(CamelModel):
    sender_id: str = BOT_SENDER_ID
    text: str
    created_at: datetime
