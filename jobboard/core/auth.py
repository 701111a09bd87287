"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt (cost factor from settings)
- JWT token creation/verification
- Cookie helpers for issuing and clearing the auth token
- FastAPI dependency that turns the `token` cookie into a CurrentUser
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from fastapi import Cookie, Response
from jose import JWTError, jwt
from pydantic import BaseModel, ConfigDict

from jobboard.core.config import get_settings
from jobboard.core.errors import NotAuthenticatedError, UnauthorizedError

settings = get_settings()

AUTH_COOKIE_NAME = "token"


class CurrentUser(BaseModel):
    """Identity decoded from the auth token, passed explicitly to handlers."""

    model_config = ConfigDict(frozen=True)

    user_id: str


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Not a bcrypt hash, or a password over 72 bytes
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def set_auth_cookie(response: Response, token: str) -> None:
    """Deliver the token as an http-only, strict same-site cookie."""
    max_age = settings.jwt_expire_minutes * 60
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        max_age=max_age,
        expires=max_age,
        httponly=True,
        samesite="strict",
    )


def clear_auth_cookie(response: Response) -> None:
    """Overwrite the auth cookie with an already-expired empty value."""
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value="",
        max_age=0,
        expires=0,
        httponly=True,
        samesite="strict",
    )


async def get_current_user(token: Optional[str] = Cookie(None, alias=AUTH_COOKIE_NAME)) -> CurrentUser:
    """
    FastAPI dependency - Get current authenticated user from the `token` cookie.

    Usage:
        @router.get("/protected")
        async def route(user: CurrentUser = Depends(get_current_user)):
            return user.user_id
    """
    if not token:
        raise NotAuthenticatedError("User not authenticated")

    payload = decode_token(token)
    if not payload or not payload.get("sub"):
        raise UnauthorizedError("Unauthorized. Invalid Token")

    return CurrentUser(user_id=payload["sub"])
