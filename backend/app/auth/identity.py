# app/auth/identity.py
"""
Canonical authenticated identity model.

The auth provider owns sign-in and token issuance. By the time a request reaches
this backend we only need to know "who is this?", which is the token's ``sub``
claim. That value is the same opaque external id stored on users
(``User.external_id``) and referenced by interviews (``candidate_id`` /
``interviewer_ids``).

The Identity object is INTERNAL ONLY and should not be returned directly
to clients. It's used for authorization decisions and audit logging.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Identity:
    """
    Canonical representation of an authenticated (or unauthenticated) caller.

    Attributes:
        subject: External identity string (token ``sub``). ``None`` when unauthenticated.
        email: Email claim if the provider included one.
        name: Display name claim if present.
        is_authenticated: True if the token was successfully verified.
        raw_claims: Raw token claims for debugging/audit.
                    Should NOT be used for authorization decisions.
    """

    subject: str | None = None
    email: str | None = None
    name: str | None = None
    is_authenticated: bool = False
    raw_claims: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def unauthenticated(cls) -> Identity:
        """Create an identity representing an unauthenticated request."""
        return cls(subject=None, email=None, name=None, is_authenticated=False, raw_claims={})

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> Identity:
        """
        Build an identity from verified token claims.

        Raises ValueError if the claims carry no subject.
        """
        sub = str(claims.get("sub") or "").strip()
        if not sub:
            raise ValueError("Token missing subject")

        email = claims.get("email")
        name = claims.get("name")
        return cls(
            subject=sub,
            email=email.strip().lower() if isinstance(email, str) and email.strip() else None,
            name=name.strip() if isinstance(name, str) and name.strip() else None,
            is_authenticated=True,
            raw_claims=dict(claims),
        )

    @classmethod
    def for_subject(cls, subject: str) -> Identity:
        """Authenticated identity with only a subject (internal callers, tests)."""
        return cls(subject=subject, is_authenticated=True)

    def to_debug_dict(self) -> dict[str, Any]:
        """
        Return a safe subset of identity info for debug endpoints.

        Does NOT include raw_claims to avoid leaking sensitive data.
        """
        return {
            "subject": self.subject,
            "email": self.email,
            "name": self.name,
            "is_authenticated": self.is_authenticated,
        }
