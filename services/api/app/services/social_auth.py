"""Social sign-in.

The client completes the provider OAuth flow and hands us the provider access
token. We read the profile from the provider userinfo endpoint and map it onto
a local user, creating an incomplete account (terms not yet agreed) on first
sign-in.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx
from sqlalchemy.orm import Session

from .. import models
from ..errors import AuthenticationRequired, BadRequest
from ..settings import settings

logger = logging.getLogger("cooklog.auth")

PLACEHOLDER_NICKNAME = "New cook"


@dataclass
class SocialProfile:
    provider: str
    social_id: str
    name: Optional[str]
    email: Optional[str]
    image: Optional[str]


def _google(payload: dict) -> SocialProfile:
    return SocialProfile(
        provider="google",
        social_id=str(payload.get("sub") or ""),
        name=payload.get("name"),
        email=payload.get("email"),
        image=payload.get("picture"),
    )


def _kakao(payload: dict) -> SocialProfile:
    account = payload.get("kakao_account") or {}
    profile = account.get("profile") or {}
    properties = payload.get("properties") or {}
    return SocialProfile(
        provider="kakao",
        social_id=str(payload.get("id") or ""),
        name=profile.get("nickname") or properties.get("nickname"),
        email=account.get("email"),
        image=profile.get("profile_image_url") or properties.get("profile_image"),
    )


def _naver(payload: dict) -> SocialProfile:
    response = payload.get("response") or {}
    return SocialProfile(
        provider="naver",
        social_id=str(response.get("id") or ""),
        name=response.get("nickname") or response.get("name"),
        email=response.get("email"),
        image=response.get("profile_image"),
    )


PROVIDERS = {
    "google": (lambda: settings.google_userinfo_url, _google),
    "kakao": (lambda: settings.kakao_userinfo_url, _kakao),
    "naver": (lambda: settings.naver_userinfo_url, _naver),
}


def fetch_profile(provider: str, access_token: str) -> SocialProfile:
    if provider not in PROVIDERS:
        raise BadRequest(f"Unsupported provider: {provider}.")
    url_for, mapper = PROVIDERS[provider]

    try:
        with httpx.Client(timeout=settings.http_timeout_seconds) as client:
            response = client.get(url_for(), headers={"Authorization": f"Bearer {access_token}"})
            response.raise_for_status()
            payload = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Profile lookup failed for %s: %s", provider, e)
        raise AuthenticationRequired("Social sign-in failed.") from e

    profile = mapper(payload)
    if not profile.social_id:
        raise AuthenticationRequired("Social sign-in failed.")
    return profile


def get_or_create_user(db: Session, profile: SocialProfile) -> models.User:
    user = db.query(models.User).filter(models.User.social_id == profile.social_id).first()
    if user:
        return user

    user = models.User(
        social_provider=profile.provider,
        social_id=profile.social_id,
        nickname=(profile.name or "").strip()[:50] or PLACEHOLDER_NICKNAME,
        email=profile.email,
        profile_image=profile.image,
        terms_agreements=False,
        settings=models.UserSettings(alert_timer=True, alert_expiry=True, auto_export_enabled=False),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Created %s user %s", profile.provider, user.user_id)
    return user
