# app/services/interview_lifecycle.py
"""
Interview lifecycle: create / start / update status / delete.

Each mutation reads one row, checks the guard, writes and commits. There is no
compare-and-swap: two interviewers racing to start (or complete) the same
interview both succeed and the last write wins.

Status writes only check the actor by default. ``status`` and
``is_started``/``actual_start_time`` are tracked independently, so an interview
can be marked completed without ever being started. Set
``STRICT_STATUS_TRANSITIONS`` to enforce ``TRANSITIONS`` as well.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Iterable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.auth.identity import Identity
from app.core import clock
from app.core.config import settings
from app.models.interview import Interview
from app.services import interview_guard as guard
from app.services.interview_status import (
    OUTCOME_STATUSES,
    InterviewStatus,
    is_allowed_transition,
    is_finished,
    parse_status,
)

logger = logging.getLogger(__name__)

DISPLAY_LIVE = "live"
DISPLAY_UPCOMING = "upcoming"
DISPLAY_COMPLETED = "completed"


class InterviewLifecycleError(Exception):
    """Base class; ``str(exc)`` is a human-readable reason for the caller."""


class InterviewUnauthenticatedError(InterviewLifecycleError):
    pass


class InterviewForbiddenError(InterviewLifecycleError):
    pass


class InterviewNotFoundError(InterviewLifecycleError):
    pass


class InterviewConflictError(InterviewLifecycleError):
    pass


def display_status(interview: Any, now: datetime | None = None) -> str:
    """
    live / upcoming / completed, as shown on interview cards.

    A never-started interview stays "live" (joinable) for LIVE_WINDOW_MINUTES
    after its scheduled start, then counts as completed.
    """
    if is_finished(interview.status):
        return DISPLAY_COMPLETED
    if interview.is_started or parse_status(interview.status) == InterviewStatus.IN_PROGRESS:
        return DISPLAY_LIVE

    current = clock.as_utc(now) if now is not None else clock.utcnow()
    scheduled = clock.as_utc(interview.start_time)
    if current < scheduled:
        return DISPLAY_UPCOMING
    if current < scheduled + timedelta(minutes=settings.LIVE_WINDOW_MINUTES):
        return DISPLAY_LIVE
    return DISPLAY_COMPLETED


def normalize_interviewer_ids(raw: Iterable[str] | None) -> list[str]:
    out: list[str] = []
    seen: set[str] = set()
    for value in raw or []:
        s = str(value or "").strip()
        if not s or s in seen:
            continue
        seen.add(s)
        out.append(s)
    return out


class InterviewLifecycle:
    def __init__(self, db: Session, identity: Identity):
        self.db = db
        self.identity = identity

    # -------------------------
    # internals
    # -------------------------
    def _require_authenticated(self) -> str:
        if not self.identity.is_authenticated or not self.identity.subject:
            raise InterviewUnauthenticatedError("Unauthorized")
        return self.identity.subject

    def _load(self, interview_id: int) -> Interview:
        interview = self.db.get(Interview, interview_id)
        if interview is None:
            raise InterviewNotFoundError("Interview not found")
        return interview

    def _reject(self, action: str, interview: Interview, reason: str) -> InterviewForbiddenError:
        logger.warning(
            "Rejected interview %s: interview_id=%s, subject=%s",
            action,
            interview.id,
            self.identity.subject,
        )
        return InterviewForbiddenError(reason)

    def _commit(self, interview: Interview) -> Interview:
        self.db.add(interview)
        self.db.commit()
        self.db.refresh(interview)
        return interview

    # -------------------------
    # operations
    # -------------------------
    def create(
        self,
        *,
        title: str,
        start_time: datetime,
        stream_call_id: str,
        candidate_id: str,
        interviewer_ids: Iterable[str],
        description: str | None = None,
        status: str | InterviewStatus = InterviewStatus.SCHEDULED,
    ) -> Interview:
        """
        Any authenticated caller may schedule an interview. ``status`` defaults to
        scheduled; ``is_started`` always starts false. Creating straight into an
        outcome status is an interviewer judgment, so the actor must be one of
        ``interviewer_ids``. Creating as completed stamps ``end_time``.
        """
        actor = self._require_authenticated()

        parsed = parse_status(status)
        if parsed is None:
            raise ValueError(f"Unsupported status: {status}")

        title = (title or "").strip()
        if not title:
            raise ValueError("title is required")
        token = (stream_call_id or "").strip()
        if not token:
            raise ValueError("stream_call_id is required")
        candidate = (candidate_id or "").strip()
        if not candidate:
            raise ValueError("candidate_id is required")

        interviewers = normalize_interviewer_ids(interviewer_ids)
        if not interviewers:
            raise ValueError("At least one interviewer is required")
        if candidate in interviewers:
            raise ValueError("The candidate cannot also be an interviewer")

        if parsed in OUTCOME_STATUSES and actor not in interviewers:
            logger.warning(
                "Rejected interview create: status=%s, subject=%s (not an interviewer)",
                parsed.value,
                actor,
            )
            raise InterviewForbiddenError("Only an interviewer can record an outcome")

        if self.db.query(Interview.id).filter(Interview.stream_call_id == token).first():
            raise InterviewConflictError("An interview with this stream_call_id already exists")

        interview = Interview(
            title=title,
            description=(description or "").strip() or None,
            start_time=clock.as_utc(start_time),
            status=parsed.value,
            is_started=False,
            end_time=clock.utcnow() if parsed == InterviewStatus.COMPLETED else None,
            stream_call_id=token,
            candidate_id=candidate,
            interviewer_ids=interviewers,
        )
        self.db.add(interview)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise InterviewConflictError("An interview with this stream_call_id already exists") from None
        self.db.refresh(interview)

        logger.info(
            "Interview created: id=%s, by=%s, candidate=%s, interviewers=%s, status=%s",
            interview.id,
            actor,
            candidate,
            len(interviewers),
            interview.status,
        )
        return interview

    def start(self, interview_id: int) -> Interview:
        """
        Interviewers only. Marks the interview started and in progress.

        Already-started interviews are returned untouched so the first
        ``actual_start_time`` is kept.
        """
        self._require_authenticated()
        interview = self._load(interview_id)
        if not guard.can_start(self.identity, interview):
            raise self._reject("start", interview, "Only interviewers can start an interview")

        if interview.is_started:
            logger.info("Interview already started: id=%s", interview.id)
            return interview
        if (
            settings.STRICT_STATUS_TRANSITIONS
            and parse_status(interview.status) != InterviewStatus.IN_PROGRESS
            and not is_allowed_transition(interview.status, InterviewStatus.IN_PROGRESS)
        ):
            raise InterviewConflictError(f"Cannot start an interview that is {interview.status}")

        now = clock.utcnow()
        interview.is_started = True
        interview.status = InterviewStatus.IN_PROGRESS.value
        interview.actual_start_time = now
        self._commit(interview)

        logger.info(
            "Interview started: id=%s, by=%s, early=%s",
            interview.id,
            self.identity.subject,
            now < clock.as_utc(interview.start_time),
        )
        return interview

    def update_status(self, interview_id: int, status: str | InterviewStatus) -> Interview:
        """
        Candidate or interviewer may write status; succeeded/failed are
        interviewer-only. Every write of "completed" re-stamps ``end_time``.
        """
        target = parse_status(status)
        if target is None:
            raise ValueError(f"Unsupported status: {status}")

        self._require_authenticated()
        interview = self._load(interview_id)
        if not guard.can_update_status(self.identity, interview):
            raise self._reject("status update", interview, "Unauthorized to update this interview")
        if target in OUTCOME_STATUSES and not guard.can_judge_outcome(self.identity, interview):
            raise self._reject("outcome", interview, "Only interviewers can record an interview outcome")

        previous = interview.status
        if settings.STRICT_STATUS_TRANSITIONS and not is_allowed_transition(previous, target):
            raise InterviewConflictError(f"Cannot move interview from {previous} to {target.value}")

        interview.status = target.value
        if target == InterviewStatus.COMPLETED:
            interview.end_time = clock.utcnow()
        self._commit(interview)

        logger.info(
            "Interview status changed: id=%s, by=%s, %s -> %s",
            interview.id,
            self.identity.subject,
            previous,
            interview.status,
        )
        return interview

    def delete(self, interview_id: int) -> None:
        """Interviewers only; removes the record whatever its status."""
        self._require_authenticated()
        interview = self._load(interview_id)
        if not guard.can_delete(self.identity, interview):
            raise self._reject("delete", interview, "Only interviewers can delete interviews")

        status = interview.status
        self.db.delete(interview)
        self.db.commit()

        logger.info(
            "Interview deleted: id=%s, by=%s, status=%s",
            interview_id,
            self.identity.subject,
            status,
        )
