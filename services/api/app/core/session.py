"""Signed session tokens.

The session is a JWT (HS256) carried in an HTTP-only cookie. It records the
user id and whether first-time signup has been completed.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi import Response
from jose import JWTError, jwt

from ..settings import settings

logger = logging.getLogger("cooklog.auth")


def create_session_token(
    user_id: int,
    *,
    is_complete: bool,
    name: Optional[str] = None,
    email: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(days=settings.session_max_age_days))
    claims = {
        "sub": str(user_id),
        "name": name,
        "email": email,
        "is_complete": bool(is_complete),
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(claims, settings.session_secret, algorithm=settings.session_algorithm)


def decode_session_token(token: str) -> Optional[dict[str, Any]]:
    """Return the claims, or None for a missing, tampered or expired token."""
    if not token:
        return None
    try:
        claims = jwt.decode(token, settings.session_secret, algorithms=[settings.session_algorithm])
    except JWTError as e:
        logger.info("Rejected session token: %s", e)
        return None
    if not str(claims.get("sub", "")).isdigit():
        return None
    return claims


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_max_age_days * 24 * 60 * 60,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(key=settings.session_cookie_name, path="/")
