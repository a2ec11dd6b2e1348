from __future__ import annotations

import logging
import uuid
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.orm import Session

from chatapp.core.config import settings
from chatapp.core.database import get_db
from chatapp.core.messages import (
    AUTH_NOT_AUTHENTICATED,
    AUTH_TOKEN_INVALID,
    AUTH_TOO_MANY_ATTEMPTS,
    AUTH_USER_NOT_FOUND,
)
from chatapp.core.redis import get_redis_client
from chatapp.core.security import decode_token
from chatapp.models.user import User
from chatapp.services.bot_service import BotProvider, ScriptedBotProvider


logger = logging.getLogger("chatapp.dependencies")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

LOGIN_ATTEMPT_LIMIT = 5
LOGIN_ATTEMPT_WINDOW_SECONDS = 15 * 60


def get_user_from_token(token: str, db: Session) -> User | None:
    """Resolve an access token to an active user, or None when it is unusable."""
    try:
        payload = decode_token(token, expected_type="access")
    except JWTError:
        return None

    user_id: str | None = payload.get("sub")
    if user_id is None:
        return None

    try:
        user_uuid = uuid.UUID(user_id)
    except (ValueError, TypeError):
        return None

    return (
        db.query(User)
        .filter(User.id == user_uuid, User.is_active.is_(True), User.is_deleted.is_(False))
        .first()
    )


def get_current_user(
    request: Request,
    bearer_token: Annotated[str | None, Depends(oauth2_scheme)],
    db: Session = Depends(get_db),
) -> User:
    token = bearer_token or request.cookies.get(settings.AUTH_COOKIE_NAME)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=AUTH_NOT_AUTHENTICATED,
        )

    try:
        decode_token(token, expected_type="access")
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=AUTH_TOKEN_INVALID,
        )

    user = get_user_from_token(token, db)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=AUTH_USER_NOT_FOUND,
        )
    return user


def enforce_login_attempt_limit(email: str) -> None:
    """Limit login attempts: 5 attempts over rolling 15 minutes."""
    r = get_redis_client()
    if r is None:
        return
    key = f"auth:login_attempts:{email.lower()}"
    attempts = r.incr(key)
    if attempts == 1:
        r.expire(key, LOGIN_ATTEMPT_WINDOW_SECONDS)
    if attempts > LOGIN_ATTEMPT_LIMIT:
        logger.warning("Login attempt limit reached for %s", email)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=AUTH_TOO_MANY_ATTEMPTS,
        )


def reset_login_attempts(email: str) -> None:
    r = get_redis_client()
    if r is None:
        return
    r.delete(f"auth:login_attempts:{email.lower()}")


def get_bot_provider() -> BotProvider:
    """Bot provider selected by settings; scripted echo unless OpenAI is configured."""
    if settings.BOT_PROVIDER == "openai":
        if not settings.OPENAI_API_KEY:
            logger.warning("BOT_PROVIDER=openai but OPENAI_API_KEY is missing, using scripted bot")
        else:
            from chatapp.services.openai_service import OpenAIBotProvider

            return OpenAIBotProvider(api_key=settings.OPENAI_API_KEY, default_model=settings.BOT_MODEL)
    return ScriptedBotProvider(delay_seconds=settings.BOT_REPLY_DELAY_SECONDS)
