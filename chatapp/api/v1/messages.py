"""Two-party message endpoints: contacts, history and sending."""

import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from chatapp.api.dependencies import get_current_user
from chatapp.chat import MessageHandler, MessageOut, PeerOut
from chatapp.chat.schemas import SendMessageRequest
from chatapp.core.database import get_db
from chatapp.core.messages import (
    MESSAGE_CONTENT_REQUIRED,
    MESSAGE_INVALID_PEER_ID,
    MESSAGE_RECEIVER_NOT_FOUND,
    MESSAGE_SELF_SEND,
)
from chatapp.models.user import User
from chatapp.services.websocket_manager import NEW_MESSAGE_EVENT, connection_manager


logger = logging.getLogger("chatapp.api.messages")

router = APIRouter(prefix="/messages", tags=["messages"])


def _parse_peer_id(peer_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(peer_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=MESSAGE_INVALID_PEER_ID,
        )


@router.get("/users", response_model=List[PeerOut])
def list_contacts(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Everyone the current user can chat with."""
    return [PeerOut.from_user(user) for user in MessageHandler.list_peers(db, current_user.id)]


@router.get("/{peer_id}", response_model=List[MessageOut])
def get_history(
    peer_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Full message history between the current user and a peer, oldest first."""
    peer_uuid = _parse_peer_id(peer_id)
    messages = MessageHandler.get_conversation(db, current_user.id, peer_uuid)
    return [MessageOut.model_validate(message) for message in messages]


@router.post("/send/{peer_id}", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
async def send_message(
    peer_id: str,
    payload: SendMessageRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Persist a message and push it to the receiver's live connections."""
    receiver_id = _parse_peer_id(peer_id)

    text = (payload.text or "").strip() or None
    image = payload.image or None
    if text is None and image is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=MESSAGE_CONTENT_REQUIRED,
        )

    if receiver_id == current_user.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=MESSAGE_SELF_SEND,
        )

    if not MessageHandler.get_user(db, receiver_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=MESSAGE_RECEIVER_NOT_FOUND,
        )

    message = MessageHandler.create_message(
        db,
        sender_id=current_user.id,
        receiver_id=receiver_id,
        text=text,
        image=image,
    )
    message_out = MessageOut.model_validate(message)

    delivered = await connection_manager.emit_to_user(
        str(receiver_id),
        NEW_MESSAGE_EVENT,
        message_out.model_dump(mode="json", by_alias=True),
    )
    logger.debug("newMessage %s delivered to %d connection(s)", message.id, delivered)

    return message_out
