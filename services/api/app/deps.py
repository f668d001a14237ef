"""FastAPI dependencies for Cooklog API.

Provides:
- Database session dependency (re-exported from db)
- Session resolution (cookie -> claims -> user id)
- Path id parsing for record-scoped routes
"""

from typing import Any, Optional

from fastapi import Depends, Request

from .core.session import decode_session_token
from .db import get_db  # noqa: F401
from .errors import AuthenticationRequired, BadRequest
from .settings import settings


def get_session_claims(request: Request) -> Optional[dict[str, Any]]:
    """Decoded session claims, or None when there is no valid session."""
    token = request.cookies.get(settings.session_cookie_name)
    return decode_session_token(token) if token else None


def require_session(
    claims: Optional[dict[str, Any]] = Depends(get_session_claims),
) -> dict[str, Any]:
    if not claims:
        raise AuthenticationRequired()
    return claims


def require_user_id(claims: dict[str, Any] = Depends(require_session)) -> int:
    return int(claims["sub"])


def parse_positive_id(raw: str, name: str) -> int:
    """Path ids must be positive integers; anything else is a 400."""
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise BadRequest(f"Invalid {name}.")
    if value <= 0:
        raise BadRequest(f"Invalid {name}.")
    return value
