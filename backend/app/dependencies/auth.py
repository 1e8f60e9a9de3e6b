# app/dependencies/auth.py
from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.auth.identity import Identity
from app.core.security import verify_identity_token

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_identity(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Identity:
    """
    Resolve the caller's identity without ever rejecting the request.

    Returns an unauthenticated Identity when:
      - the Authorization header is missing or not a Bearer token
      - the token fails signature/exp/iss/aud verification
    List queries depend on this so anonymous callers get empty results.
    """
    if not creds or creds.scheme.lower() != "bearer" or not creds.credentials:
        return Identity.unauthenticated()

    try:
        claims = verify_identity_token(creds.credentials)
        return Identity.from_claims(claims)
    except ValueError as exc:
        logger.info("Rejected identity token: %s", exc)
        return Identity.unauthenticated()


def require_identity(identity: Identity = Depends(get_identity)) -> Identity:
    """Mutations: an unauthenticated caller is a hard 401."""
    if not identity.is_authenticated or not identity.subject:
        raise _unauthorized("Authentication required")
    return identity
