# app/services/interview_status.py
"""
Interview status values and the transition table.

Statuses are persisted as plain strings; this enum is the closed set the API
accepts. The table lists every edge the lifecycle knows about, including the
loose entry edges (``scheduled -> completed`` etc.) that let callers move status
without going through ``start()`` first.
"""
from __future__ import annotations

from enum import Enum


class InterviewStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


# Outcome statuses are an interviewer judgment.
OUTCOME_STATUSES = frozenset({InterviewStatus.SUCCEEDED, InterviewStatus.FAILED})

# Anything here renders as "completed" for display purposes.
FINISHED_STATUSES = frozenset({InterviewStatus.COMPLETED, *OUTCOME_STATUSES})

TRANSITIONS: dict[InterviewStatus, frozenset[InterviewStatus]] = {
    InterviewStatus.SCHEDULED: frozenset({InterviewStatus.IN_PROGRESS, InterviewStatus.COMPLETED}),
    InterviewStatus.IN_PROGRESS: frozenset({InterviewStatus.COMPLETED}),
    # Re-completing re-stamps end_time.
    InterviewStatus.COMPLETED: frozenset(
        {InterviewStatus.COMPLETED, InterviewStatus.SUCCEEDED, InterviewStatus.FAILED}
    ),
    InterviewStatus.SUCCEEDED: frozenset(),
    InterviewStatus.FAILED: frozenset(),
}


def parse_status(value: str | InterviewStatus | None) -> InterviewStatus | None:
    """Map a stored string to the enum; unknown legacy values map to None."""
    if value is None:
        return None
    if isinstance(value, InterviewStatus):
        return value
    try:
        return InterviewStatus(str(value).strip().lower())
    except ValueError:
        return None


def is_allowed_transition(current: str | InterviewStatus | None, target: str | InterviewStatus) -> bool:
    src = parse_status(current)
    dst = parse_status(target)
    if dst is None:
        return False
    if src is None:
        # Unknown source strings can only be reset to the start of the lifecycle.
        return dst in (InterviewStatus.SCHEDULED, InterviewStatus.IN_PROGRESS)
    return dst in TRANSITIONS[src]


def is_finished(value: str | InterviewStatus | None) -> bool:
    return parse_status(value) in FINISHED_STATUSES
