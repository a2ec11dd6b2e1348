import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from chatapp.api.dependencies import (
    enforce_login_attempt_limit,
    get_current_user,
    reset_login_attempts,
)
from chatapp.chat.schemas import AuthResponse, AuthUserOut, LoginRequest, SignupRequest
from chatapp.core.config import settings
from chatapp.core.database import get_db
from chatapp.core.messages import (
    AUTH_EMAIL_EXISTS,
    AUTH_INVALID_CREDENTIALS,
    AUTH_LOGOUT_SUCCESS,
    AUTH_USER_INACTIVE,
)
from chatapp.core.security import create_access_token, get_password_hash, verify_password
from chatapp.models.user import User


logger = logging.getLogger("chatapp.auth")

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_auth_cookie(response: Response, token: str) -> None:
    max_age = settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
    # In development, allow insecure cookies (HTTP). In production, use secure=True (HTTPS)
    is_secure = settings.ENVIRONMENT.lower() not in ("development", "dev", "local", "test")
    response.set_cookie(
        settings.AUTH_COOKIE_NAME,
        token,
        httponly=True,
        secure=is_secure,
        samesite="strict",
        max_age=max_age,
    )


def _auth_response(user: User, response: Response) -> AuthResponse:
    token = create_access_token(subject=user.id)
    _set_auth_cookie(response, token)
    return AuthResponse(**AuthUserOut.from_user(user).model_dump(), token=token)


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    payload: SignupRequest,
    response: Response,
    db: Session = Depends(get_db),
):
    email = payload.email.lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=AUTH_EMAIL_EXISTS,
        )

    user = User(
        full_name=payload.full_name,
        email=email,
        password_hash=get_password_hash(payload.password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info("User signed up: user_id=%s", user.id)
    return _auth_response(user, response)


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
):
    email = payload.email.lower()
    enforce_login_attempt_limit(email)

    user = db.query(User).filter(User.email == email, User.is_deleted.is_(False)).first()
    if not user or not verify_password(payload.password, user.password_hash):
        logger.info("Failed login for %s", email)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=AUTH_INVALID_CREDENTIALS,
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=AUTH_USER_INACTIVE,
        )

    reset_login_attempts(email)

    user.last_login = datetime.now(timezone.utc)
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info("User logged in: user_id=%s", user.id)
    return _auth_response(user, response)


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(settings.AUTH_COOKIE_NAME)
    return {"message": AUTH_LOGOUT_SUCCESS}


@router.get("/check", response_model=AuthUserOut)
def check_auth(current_user: User = Depends(get_current_user)):
    return AuthUserOut.from_user(current_user)
