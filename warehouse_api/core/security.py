from __future__ import annotations

import base64
import binascii
import hmac
from typing import Optional

import jwt
from fastapi import HTTPException, status

from warehouse_api.config import get_settings


def _load_api_keys() -> set[str]:
    settings = get_settings()
    keys = set()
    if settings.API_KEYS:
        for value in settings.API_KEYS.split(","):
            value = value.strip()
            if value:
                keys.add(value)
    return keys


def _basic_auth_enabled() -> bool:
    settings = get_settings()
    return bool(settings.BASIC_AUTH_USERNAME and settings.BASIC_AUTH_PASSWORD)


def auth_configured() -> bool:
    settings = get_settings()
    return bool(
        _load_api_keys() or settings.JWT_SECRET or settings.JWT_REQUIRED or _basic_auth_enabled()
    )


def _split_authorization(authorization: Optional[str]) -> tuple[Optional[str], Optional[str]]:
    if not authorization:
        return None, None
    parts = authorization.split()
    if len(parts) != 2:
        return None, None
    return parts[0].lower(), parts[1]


def _decode_jwt(token: str) -> dict:
    settings = get_settings()
    if not settings.JWT_SECRET:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="JWT auth is not configured",
        )

    options = {"verify_aud": bool(settings.JWT_AUDIENCE)}
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
            options=options,
        )
    except jwt.PyJWTError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid JWT",
        ) from exc


def _decode_basic(credentials: str) -> Optional[tuple[str, str]]:
    try:
        decoded = base64.b64decode(credentials, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    username, sep, password = decoded.partition(":")
    if not sep:
        return None
    return username, password


def verify_basic_credentials(username: str, password: str) -> bool:
    settings = get_settings()
    if not _basic_auth_enabled():
        return False
    return hmac.compare_digest(username, settings.BASIC_AUTH_USERNAME) and hmac.compare_digest(
        password, settings.BASIC_AUTH_PASSWORD
    )


def authenticate_request(
    api_key: Optional[str],
    authorization: Optional[str],
) -> Optional[dict]:
    """
    Resolve the caller from an API key, a bearer JWT or HTTP Basic credentials.

    Returns the principal as ``{"auth_type", "user_id"}``, or ``None`` when no
    credential source is configured and the API is open.
    """
    settings = get_settings()
    keys = _load_api_keys()

    if api_key and not settings.JWT_REQUIRED:
        for key in keys:
            if hmac.compare_digest(api_key, key):
                return {"auth_type": "api_key", "user_id": "api-key"}

    scheme, credentials = _split_authorization(authorization)
    if scheme == "bearer" and credentials:
        try:
            payload = _decode_jwt(credentials)
            return {
                "auth_type": "jwt",
                "user_id": str(payload.get("sub") or settings.DEFAULT_USER_ID),
                "payload": payload,
            }
        except HTTPException:
            if settings.JWT_REQUIRED or not (keys or _basic_auth_enabled()):
                raise

    if scheme == "basic" and credentials and not settings.JWT_REQUIRED:
        decoded = _decode_basic(credentials)
        if decoded and verify_basic_credentials(*decoded):
            return {"auth_type": "basic", "user_id": decoded[0]}

    if auth_configured():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer" if settings.JWT_SECRET else "Basic"},
        )
    return None


__all__ = ["auth_configured", "authenticate_request", "verify_basic_credentials"]
