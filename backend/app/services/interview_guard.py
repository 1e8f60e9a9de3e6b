# app/services/interview_guard.py
"""
Authorization decisions for interviews.

Pure functions, no I/O. Every check fails closed: a missing identity, an
unauthenticated identity or a missing interview is always ``False``.

Membership rules:
- view / update status: the candidate or any interviewer
- start / delete / judge outcome: interviewers only
"""
from __future__ import annotations

from typing import Any

from app.auth.identity import Identity


def _subject(identity: Identity | None) -> str | None:
    if identity is None or not identity.is_authenticated:
        return None
    return identity.subject or None


def _is_candidate(subject: str, interview: Any) -> bool:
    return bool(interview.candidate_id) and interview.candidate_id == subject


def _is_interviewer(subject: str, interview: Any) -> bool:
    return subject in (interview.interviewer_ids or [])


def can_view(identity: Identity | None, interview: Any | None) -> bool:
    subject = _subject(identity)
    if subject is None or interview is None:
        return False
    return _is_candidate(subject, interview) or _is_interviewer(subject, interview)


def can_update_status(identity: Identity | None, interview: Any | None) -> bool:
    return can_view(identity, interview)


def can_start(identity: Identity | None, interview: Any | None) -> bool:
    subject = _subject(identity)
    if subject is None or interview is None:
        return False
    return _is_interviewer(subject, interview)


def can_delete(identity: Identity | None, interview: Any | None) -> bool:
    return can_start(identity, interview)


def can_judge_outcome(identity: Identity | None, interview: Any | None) -> bool:
    """succeeded/failed are set by interviewers, even though status writes are otherwise open to the candidate."""
    return can_start(identity, interview)
