# app/services/early_start.py
"""
Early-start detection.

Two separate facts, both derived on read and never stored:

- ``started_early``: the interview was actually started before its scheduled
  time (historical; stays true forever once it happened).
- ``has_started_early``: the interview is running and the scheduled time has not
  arrived yet (live; flips to false once the wall clock passes ``start_time``,
  regardless of when it actually started).
"""
from __future__ import annotations

from datetime import datetime
from typing import Any

from app.core import clock
from app.services.interview_status import InterviewStatus, parse_status


def started_early(interview: Any) -> bool:
    if not interview.is_started:
        return False
    actual = clock.as_utc(interview.actual_start_time)
    scheduled = clock.as_utc(interview.start_time)
    if actual is None or scheduled is None:
        return False
    return actual < scheduled


def has_started_early(interview: Any, now: datetime | None = None) -> bool:
    if not interview.is_started:
        return False
    if parse_status(interview.status) == InterviewStatus.COMPLETED:
        return False
    scheduled = clock.as_utc(interview.start_time)
    if scheduled is None:
        return False
    current = clock.as_utc(now) if now is not None else clock.utcnow()
    return current < scheduled
