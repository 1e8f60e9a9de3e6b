# app/core/security.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from app.core.config import settings


# -------------------------
# JWT helpers
# -------------------------
def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _require_jwt_secret() -> None:
    if not settings.JWT_SECRET or not settings.JWT_SECRET.strip():
        raise RuntimeError("JWT_SECRET must be set (auth is required).")


def create_identity_token(
    subject: str,
    *,
    email: str | None = None,
    name: str | None = None,
    expires_minutes: int = 15,
) -> str:
    """
    Mint a token shaped like the ones the auth provider issues.

    Token issuance belongs to the auth provider; this exists for local
    development and tests.
    """
    _require_jwt_secret()

    now = _now_utc()
    exp = now + timedelta(minutes=expires_minutes)

    payload: dict[str, Any] = {
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    if email:
        payload["email"] = email
    if name:
        payload["name"] = name
    if settings.JWT_ISSUER:
        payload["iss"] = settings.JWT_ISSUER
    if settings.JWT_AUDIENCE:
        payload["aud"] = settings.JWT_AUDIENCE

    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    _require_jwt_secret()
    # Let callers decide how to handle JWTError
    return jwt.decode(
        token,
        settings.JWT_SECRET,
        algorithms=[settings.JWT_ALGORITHM],
        audience=settings.JWT_AUDIENCE,
        issuer=settings.JWT_ISSUER,
        options={"verify_aud": bool(settings.JWT_AUDIENCE)},
    )


def verify_identity_token(token: str) -> dict[str, Any]:
    """
    Verify signature/exp (and iss/aud when configured) and require a subject.

    Raises ValueError for any token that cannot be trusted.
    """
    try:
        payload = decode_token(token)
    except JWTError:
        raise ValueError("Invalid or expired token")

    sub = str(payload.get("sub") or "").strip()
    if not sub:
        raise ValueError("Token missing subject")

    return payload
