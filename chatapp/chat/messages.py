"""Message handling for two-party conversations."""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from chatapp.models.user import User
from .models import ChatMessage


logger = logging.getLogger("chatapp.chat.messages")


def _between(user_a: uuid.UUID, user_b: uuid.UUID):
    return or_(
        and_(ChatMessage.sender_id == user_a, ChatMessage.receiver_id == user_b),
        and_(ChatMessage.sender_id == user_b, ChatMessage.receiver_id == user_a),
    )


class MessageHandler:
    """Handles message creation and retrieval."""

    @staticmethod
    def list_peers(db: Session, user_id: uuid.UUID) -> List[User]:
        """Every active user except the caller, for the contact list."""
        return (
            db.query(User)
            .filter(
                User.id != user_id,
                User.is_active.is_(True),
                User.is_deleted.is_(False),
            )
            .order_by(User.full_name)
            .all()
        )

    @staticmethod
    def get_user(db: Session, user_id: uuid.UUID) -> Optional[User]:
        return (
            db.query(User)
            .filter(User.id == user_id, User.is_deleted.is_(False))
            .first()
        )

    @staticmethod
    def create_message(
        db: Session,
        sender_id: uuid.UUID,
        receiver_id: uuid.UUID,
        text: Optional[str] = None,
        image: Optional[str] = None,
    ) -> ChatMessage:
        """Persist a new message from sender to receiver."""
        last_sequence = (
            db.query(func.max(ChatMessage.sequence_number))
            .filter(_between(sender_id, receiver_id))
            .scalar()
        )

        message = ChatMessage(
            sender_id=sender_id,
            receiver_id=receiver_id,
            text=text,
            image=image,
            sequence_number=(last_sequence or 0) + 1,
            created_by=str(sender_id),
        )

        db.add(message)
        db.commit()
        db.refresh(message)

        logger.info(
            "Message created: message_id=%s, sender_id=%s, receiver_id=%s, sequence=%d",
            message.id,
            sender_id,
            receiver_id,
            message.sequence_number,
        )

        return message

    @staticmethod
    def get_conversation(
        db: Session,
        user_id: uuid.UUID,
        peer_id: uuid.UUID,
        limit: Optional[int] = None,
    ) -> List[ChatMessage]:
        """Get all messages exchanged between two users, oldest first."""
        query = (
            db.query(ChatMessage)
            .filter(
                _between(user_id, peer_id),
                ChatMessage.is_deleted.is_(False),
            )
            .order_by(ChatMessage.sequence_number)
        )

        if limit:
            query = query.limit(limit)

        return query.all()
