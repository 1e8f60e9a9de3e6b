# app/services/users.py
"""
User directory.

Responsibilities:
- Sign-in sync (create-if-missing with the default ``candidate`` role)
- Onboarding upsert that sets/overwrites the role
- Lookup by external id, singly or as a batch map for enrichment
- Normalizing profile fields before persisting
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from app.models.user import User

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "candidate"
ROLES = frozenset({"candidate", "interviewer"})
DEFAULT_NAME = "Unnamed User"


def get_user_by_external_id(db: Session, external_id: str) -> Optional[User]:
    """Look up a user by their auth-provider subject."""
    if not external_id:
        return None
    return db.query(User).filter(User.external_id == external_id).first()


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.id.asc()).all()


def get_users_by_external_ids(db: Session, external_ids: Iterable[str]) -> dict[str, User]:
    """
    Resolve many external ids with a single query.

    Unknown ids are simply absent from the returned map.
    """
    wanted = {eid for eid in external_ids if eid}
    if not wanted:
        return {}
    rows = db.query(User).filter(User.external_id.in_(wanted)).all()
    return {u.external_id: u for u in rows}


def sync_user(
    db: Session,
    *,
    external_id: str,
    email: str,
    name: str | None = None,
    image: str | None = None,
) -> Optional[User]:
    """
    Create the user on first sign-in.

    Idempotent: returns None without touching the row if the user already
    exists (profile changes are not synced back).

    Raises:
        ValueError: If external_id or email is empty
    """
    if not external_id:
        raise ValueError("external_id is required")
    if not email:
        raise ValueError("email is required")

    if get_user_by_external_id(db, external_id):
        return None

    normalized_email = email.strip().lower()
    user = User(
        external_id=external_id,
        email=normalized_email,
        name=normalize_name(name, fallback=normalized_email),
        image=(image or "").strip() or None,
        role=DEFAULT_ROLE,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info("Synced new user: id=%s, external_id=%s, email=%s", user.id, external_id, normalized_email)
    return user


def upsert_user_with_role(
    db: Session,
    *,
    external_id: str,
    email: str,
    role: str,
    name: str | None = None,
    image: str | None = None,
) -> User:
    """
    Onboarding: create the user with ``role``, or overwrite the role of an
    existing user. Other profile fields of an existing user are left alone.
    """
    if not external_id:
        raise ValueError("external_id is required")
    if not email:
        raise ValueError("email is required")

    normalized_role = (role or "").strip().lower()
    if normalized_role not in ROLES:
        raise ValueError(f"Unsupported role: {role}")

    user = get_user_by_external_id(db, external_id)
    if user:
        previous = user.role
        user.role = normalized_role
        db.add(user)
        db.commit()
        db.refresh(user)
        if previous != normalized_role:
            logger.info("Changed user role: external_id=%s, %s -> %s", external_id, previous, normalized_role)
        return user

    normalized_email = email.strip().lower()
    user = User(
        external_id=external_id,
        email=normalized_email,
        name=normalize_name(name, fallback=normalized_email),
        image=(image or "").strip() or None,
        role=normalized_role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info("Onboarded new user: id=%s, external_id=%s, role=%s", user.id, external_id, normalized_role)
    return user


def normalize_name(name: str | None, fallback: str) -> str:
    """Normalize name, falling back to email/localpart if needed."""
    if name:
        clean = name.strip()
        if clean:
            return clean[:100]

    if fallback and "@" in fallback:
        local = fallback.split("@", 1)[0]
        if local:
            return local[:100]
    return DEFAULT_NAME
