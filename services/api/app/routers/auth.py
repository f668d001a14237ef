"""Auth API router.

Endpoints:
- GET /api/auth/check - Session status
- POST /api/auth/signin/{provider} - Exchange a provider access token for a session
- POST /api/auth/signup - Complete first-time signup (nickname + terms)
- POST /api/auth/signout - Clear the session cookie
"""

import logging
from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from .. import models, schemas
from ..core.session import clear_session_cookie, create_session_token, set_session_cookie
from ..deps import get_db, get_session_claims, require_session
from ..errors import NotFound
from ..services.social_auth import fetch_profile, get_or_create_user

router = APIRouter()
logger = logging.getLogger("cooklog.auth")


def _issue_session(response: Response, user: models.User) -> schemas.SessionUserOut:
    token = create_session_token(
        user.user_id,
        is_complete=user.terms_agreements,
        name=user.nickname,
        email=user.email,
    )
    set_session_cookie(response, token)
    return schemas.SessionUserOut(
        user_id=user.user_id,
        nickname=user.nickname,
        email=user.email,
        is_complete=user.terms_agreements,
    )


@router.get("/auth/check")
def check_session(claims: Optional[dict[str, Any]] = Depends(get_session_claims)):
    if not claims:
        return JSONResponse(
            status_code=401,
            content={"success": False, "authenticated": False, "message": "Not authenticated."},
        )

    user = schemas.SessionUserOut(
        user_id=int(claims["sub"]),
        nickname=claims.get("name"),
        email=claims.get("email"),
        is_complete=bool(claims.get("is_complete")),
    )
    return {"success": True, "authenticated": True, "user": user.model_dump()}


@router.post("/auth/signin/{provider}", response_model=schemas.DataResponse[schemas.SessionUserOut])
def signin(
    provider: str,
    body: schemas.SocialSignInRequest,
    response: Response,
    db: Session = Depends(get_db),
):
    profile = fetch_profile(provider.lower(), body.access_token)
    user = get_or_create_user(db, profile)
    logger.info("User %s signed in with %s", user.user_id, profile.provider)
    return {"success": True, "data": _issue_session(response, user)}


@router.post("/auth/signup", response_model=schemas.MessageDataResponse[schemas.SessionUserOut])
def signup(
    body: schemas.SignupRequest,
    response: Response,
    claims: dict[str, Any] = Depends(require_session),
    db: Session = Depends(get_db),
):
    user = db.get(models.User, int(claims["sub"]))
    if not user:
        raise NotFound("User does not exist.")

    user.nickname = body.nickname
    user.terms_agreements = body.terms_agreements
    user.terms_agreed_at = datetime.now()
    db.commit()
    db.refresh(user)

    return {
        "success": True,
        "message": "Signup completed successfully.",
        "data": _issue_session(response, user),
    }


@router.post("/auth/signout", response_model=schemas.MessageResponse)
def signout(response: Response):
    clear_session_cookie(response)
    return {"success": True, "message": "Signed out."}
