# app/services/interviews.py
"""
Interview store lookups and the viewer-scoped query layer.

Reads never raise for auth problems: an unauthenticated or unrelated viewer just
gets nothing back (empty list / None), so existence is not leaked.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Optional

from sqlalchemy.orm import Session

from app.auth.identity import Identity
from app.core import clock
from app.models.interview import Interview
from app.models.user import User
from app.services import interview_guard as guard
from app.services.early_start import has_started_early, started_early
from app.services.interview_lifecycle import display_status
from app.services.interview_status import InterviewStatus, parse_status
from app.services.users import get_user_by_external_id, get_users_by_external_ids

CATEGORIES: tuple[str, ...] = ("upcoming", "live", "completed", "succeeded", "failed")


# -------------------------
# Store
# -------------------------
def get_interview(db: Session, interview_id: int) -> Optional[Interview]:
    return db.get(Interview, interview_id)


def get_interview_by_stream_call_id(db: Session, stream_call_id: str) -> Optional[Interview]:
    if not stream_call_id:
        return None
    return db.query(Interview).filter(Interview.stream_call_id == stream_call_id).first()


def list_interviews(db: Session) -> list[Interview]:
    return db.query(Interview).order_by(Interview.start_time.asc(), Interview.id.asc()).all()


# -------------------------
# Viewer scoping
# -------------------------
def visible_interviews(db: Session, identity: Identity) -> list[Interview]:
    if not identity.is_authenticated:
        return []
    return [iv for iv in list_interviews(db) if guard.can_view(identity, iv)]


def my_interviews(db: Session, identity: Identity) -> list[Interview]:
    """
    Role-scoped listing: candidates see the interviews they sit, interviewers
    the ones they run. Viewers without a directory entry fall back to
    ``can_view``.
    """
    visible = visible_interviews(db, identity)
    if not visible:
        return []

    me = get_user_by_external_id(db, identity.subject or "")
    if me is None:
        return visible
    if me.role == "interviewer":
        return [iv for iv in visible if identity.subject in (iv.interviewer_ids or [])]
    return [iv for iv in visible if iv.candidate_id == identity.subject]


# -------------------------
# Enrichment
# -------------------------
def _user_summary(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "external_id": user.external_id,
        "name": user.name,
        "email": user.email,
        "image": user.image,
        "role": user.role,
    }


def _participant_ids(interviews: Iterable[Interview]) -> set[str]:
    ids: set[str] = set()
    for iv in interviews:
        ids.add(iv.candidate_id)
        ids.update(iv.interviewer_ids or [])
    return ids


def interview_payload(
    interview: Interview,
    *,
    users: dict[str, User] | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    """
    Flatten one interview for responses. Participants missing from ``users``
    are dropped (candidate becomes None) rather than failing the read.
    """
    now = now or clock.utcnow()
    users = users or {}
    candidate = users.get(interview.candidate_id)
    interviewers = [users[i] for i in (interview.interviewer_ids or []) if i in users]

    return {
        "id": interview.id,
        "title": interview.title,
        "description": interview.description,
        "start_time": clock.as_utc(interview.start_time),
        "actual_start_time": clock.as_utc(interview.actual_start_time),
        "end_time": clock.as_utc(interview.end_time),
        "status": interview.status,
        "is_started": bool(interview.is_started),
        "stream_call_id": interview.stream_call_id,
        "candidate_id": interview.candidate_id,
        "interviewer_ids": list(interview.interviewer_ids or []),
        "created_at": clock.as_utc(interview.created_at),
        "updated_at": clock.as_utc(interview.updated_at),
        "display_status": display_status(interview, now),
        "started_early": started_early(interview),
        "has_started_early": has_started_early(interview, now),
        "candidate": _user_summary(candidate) if candidate else None,
        "interviewers": [_user_summary(u) for u in interviewers],
    }


def enrich_interviews(
    db: Session,
    interviews: list[Interview],
    *,
    now: datetime | None = None,
) -> list[dict[str, Any]]:
    """Resolve all participants with one directory query; output keeps input order."""
    now = now or clock.utcnow()
    users = get_users_by_external_ids(db, _participant_ids(interviews))
    return [interview_payload(iv, users=users, now=now) for iv in interviews]


def list_for_viewer(db: Session, identity: Identity, *, now: datetime | None = None) -> list[dict[str, Any]]:
    return enrich_interviews(db, visible_interviews(db, identity), now=now)


def list_mine(db: Session, identity: Identity, *, now: datetime | None = None) -> list[dict[str, Any]]:
    return enrich_interviews(db, my_interviews(db, identity), now=now)


def find_by_session_token(db: Session, stream_call_id: str, identity: Identity) -> Optional[Interview]:
    """None both when the token is unknown and when the viewer may not see it."""
    interview = get_interview_by_stream_call_id(db, stream_call_id)
    if interview is None or not guard.can_view(identity, interview):
        return None
    return interview


# -------------------------
# Grouping
# -------------------------
def categorize(interview: Any, now: datetime | None = None) -> str:
    status = parse_status(interview.status)
    if status == InterviewStatus.SUCCEEDED:
        return "succeeded"
    if status == InterviewStatus.FAILED:
        return "failed"
    return display_status(interview, now)


def group_by_category(interviews: Iterable[Any], now: datetime | None = None) -> dict[str, list[Any]]:
    """
    Partition into CATEGORIES. Every interview lands in exactly one bucket and
    every bucket key is present, even when empty.
    """
    now = now or clock.utcnow()
    buckets: dict[str, list[Any]] = {c: [] for c in CATEGORIES}
    for iv in interviews:
        buckets[categorize(iv, now)].append(iv)
    return buckets


def grouped_for_viewer(
    db: Session,
    identity: Identity,
    *,
    mine: bool = False,
    now: datetime | None = None,
) -> dict[str, list[dict[str, Any]]]:
    now = now or clock.utcnow()
    interviews = my_interviews(db, identity) if mine else visible_interviews(db, identity)
    users = get_users_by_external_ids(db, _participant_ids(interviews))
    return {
        category: [interview_payload(iv, users=users, now=now) for iv in bucket]
        for category, bucket in group_by_category(interviews, now).items()
    }
