"""User profile, settings and withdrawal."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from .. import models, schemas
from ..core.session import clear_session_cookie
from ..deps import get_db, require_user_id
from ..errors import NotFound

router = APIRouter()
logger = logging.getLogger("cooklog.user")

PROFILE_FIELDS = ("nickname", "profile_image")
SETTINGS_FIELDS = ("alert_timer", "alert_expiry", "auto_export_enabled", "external_link")


def _get_user(db: Session, user_id: int) -> models.User:
    user = db.get(models.User, user_id)
    if not user:
        raise NotFound("User does not exist.")
    return user


def _settings_out(user_settings: Optional[models.UserSettings]) -> schemas.UserSettingsOut:
    if user_settings is None:
        return schemas.UserSettingsOut()
    return schemas.UserSettingsOut.model_validate(user_settings)


def _profile_out(user: models.User) -> schemas.UserProfileOut:
    return schemas.UserProfileOut(
        user_id=user.user_id,
        nickname=user.nickname,
        email=user.email,
        profile_image=user.profile_image,
        social_provider=user.social_provider,
        terms_agreements=user.terms_agreements,
        terms_agreed_at=user.terms_agreed_at,
        created_at=user.created_at,
        settings=_settings_out(user.settings),
    )


def _apply_update(db: Session, user: models.User, body: schemas.ProfileUpdate) -> None:
    """Only fields present in the body are written. Settings are upserted with defaults."""
    changes = body.model_dump(exclude_unset=True)

    for field in PROFILE_FIELDS:
        if field in changes:
            setattr(user, field, changes[field])

    settings_changes = {k: v for k, v in changes.items() if k in SETTINGS_FIELDS}
    if settings_changes:
        if user.settings is None:
            user.settings = models.UserSettings(
                alert_timer=True, alert_expiry=True, auto_export_enabled=False
            )
        for field, value in settings_changes.items():
            # Flags are non-nullable; an explicit null leaves them unchanged
            if value is None and field != "external_link":
                continue
            setattr(user.settings, field, value)

    db.commit()
    db.refresh(user)


@router.get("/user/profile", response_model=schemas.DataResponse[schemas.UserProfileOut])
def get_profile(user_id: int = Depends(require_user_id), db: Session = Depends(get_db)):
    return {"success": True, "data": _profile_out(_get_user(db, user_id))}


@router.put("/user/profile", response_model=schemas.MessageDataResponse[schemas.UserProfileOut])
def update_profile(
    body: schemas.ProfileUpdate,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    user = _get_user(db, user_id)
    _apply_update(db, user, body)
    return {"success": True, "message": "Profile updated.", "data": _profile_out(user)}


@router.get("/user/settings", response_model=schemas.DataResponse[schemas.UserSettingsOut])
def get_settings(user_id: int = Depends(require_user_id), db: Session = Depends(get_db)):
    user = _get_user(db, user_id)
    return {"success": True, "data": _settings_out(user.settings)}


@router.put("/user/settings", response_model=schemas.MessageDataResponse[schemas.UserProfileOut])
def update_settings(
    body: schemas.SettingsUpdate,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    user = _get_user(db, user_id)
    _apply_update(db, user, body)
    return {"success": True, "message": "Settings updated.", "data": _profile_out(user)}


@router.delete("/user", response_model=schemas.MessageResponse)
def withdraw(
    response: Response,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    user = _get_user(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("User %s withdrew", user_id)
    clear_session_cookie(response)
    return {"success": True, "message": "Account deleted."}
