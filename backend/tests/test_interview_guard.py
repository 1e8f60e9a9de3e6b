# tests/test_interview_guard.py
"""
Unit tests for the interview authorization guard.

Tests do NOT require database access; interviews are plain namespaces.
"""
from __future__ import annotations

from types import SimpleNamespace

import pytest

from app.auth.identity import Identity
from app.services import interview_guard as guard


def _interview(candidate_id="user_c1", interviewer_ids=("user_i1", "user_i2")):
    return SimpleNamespace(candidate_id=candidate_id, interviewer_ids=list(interviewer_ids))


CANDIDATE = Identity.for_subject("user_c1")
INTERVIEWER = Identity.for_subject("user_i1")
OUTSIDER = Identity.for_subject("user_x")
ANONYMOUS = Identity.unauthenticated()


@pytest.mark.parametrize(
    "identity, expected",
    [
        (CANDIDATE, True),
        (INTERVIEWER, True),
        (Identity.for_subject("user_i2"), True),
        (OUTSIDER, False),
        (ANONYMOUS, False),
        (None, False),
    ],
)
def test_can_view_is_candidate_or_interviewer(identity, expected):
    assert guard.can_view(identity, _interview()) is expected
    assert guard.can_update_status(identity, _interview()) is expected


@pytest.mark.parametrize(
    "identity, expected",
    [
        (CANDIDATE, False),
        (INTERVIEWER, True),
        (OUTSIDER, False),
        (ANONYMOUS, False),
    ],
)
def test_start_delete_and_outcome_are_interviewer_only(identity, expected):
    iv = _interview()
    assert guard.can_start(identity, iv) is expected
    assert guard.can_delete(identity, iv) is expected
    assert guard.can_judge_outcome(identity, iv) is expected


def test_missing_interview_fails_closed():
    assert guard.can_view(INTERVIEWER, None) is False
    assert guard.can_start(INTERVIEWER, None) is False
    assert guard.can_delete(INTERVIEWER, None) is False


def test_unauthenticated_identity_with_subject_is_still_rejected():
    # A subject without verification must never count.
    spoofed = Identity(subject="user_i1", is_authenticated=False)
    assert guard.can_view(spoofed, _interview()) is False
    assert guard.can_start(spoofed, _interview()) is False


def test_empty_interviewer_list_only_candidate_can_view():
    iv = _interview(interviewer_ids=())
    assert guard.can_view(CANDIDATE, iv) is True
    assert guard.can_view(INTERVIEWER, iv) is False
    assert guard.can_start(CANDIDATE, iv) is False
