from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.auth.identity import Identity
from app.core import clock
from app.core.database import get_db
from app.dependencies.auth import get_identity, require_identity
from app.schemas.auth import MessageOut
from app.schemas.interview import (
    EarlyStartOut,
    InterviewCreate,
    InterviewCreatedOut,
    InterviewDetailOut,
    InterviewGroupsOut,
    InterviewOut,
    InterviewStatusUpdate,
)
from app.services import interview_guard as guard
from app.services import interviews as interview_queries
from app.services.early_start import has_started_early, started_early
from app.services.interview_lifecycle import (
    InterviewConflictError,
    InterviewForbiddenError,
    InterviewLifecycle,
    InterviewLifecycleError,
    InterviewNotFoundError,
    InterviewUnauthenticatedError,
)


router = APIRouter(prefix="/interviews", tags=["interviews"])


def _http_error(exc: InterviewLifecycleError) -> HTTPException:
    if isinstance(exc, InterviewUnauthenticatedError):
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        )
    if isinstance(exc, InterviewForbiddenError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
    if isinstance(exc, InterviewNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, InterviewConflictError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.get("", response_model=list[InterviewDetailOut])
def list_all_interviews(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_identity),
):
    return interview_queries.list_for_viewer(db, identity)


@router.get("/mine", response_model=list[InterviewDetailOut])
def list_my_interviews(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_identity),
):
    return interview_queries.list_mine(db, identity)


@router.get("/grouped", response_model=InterviewGroupsOut)
def list_grouped_interviews(
    scope: Literal["all", "mine"] = "all",
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_identity),
):
    return interview_queries.grouped_for_viewer(db, identity, mine=(scope == "mine"))


@router.get("/by-call/{stream_call_id}", response_model=Optional[InterviewOut])
def get_interview_by_stream_call_id(
    stream_call_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_identity),
):
    # Unknown and not-yours look the same on purpose.
    return interview_queries.find_by_session_token(db, stream_call_id, identity)


@router.get("/{interview_id}/early-start", response_model=EarlyStartOut)
def get_early_start(
    interview_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_identity),
):
    iv = interview_queries.get_interview(db, interview_id)
    if iv is None:
        raise HTTPException(status_code=404, detail="Interview not found")
    if not guard.can_view(identity, iv):
        raise HTTPException(status_code=403, detail="Unauthorized to view this interview")

    return {
        "interview_id": iv.id,
        "started_early": started_early(iv),
        "has_started_early": has_started_early(iv),
        "actual_start_time": clock.as_utc(iv.actual_start_time),
        "start_time": clock.as_utc(iv.start_time),
    }


@router.post("", response_model=InterviewCreatedOut)
def create_interview(
    payload: InterviewCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_identity),
):
    try:
        iv = InterviewLifecycle(db, identity).create(
            title=payload.title,
            description=payload.description,
            start_time=payload.start_time,
            status=payload.status,
            stream_call_id=payload.stream_call_id,
            candidate_id=payload.candidate_id,
            interviewer_ids=payload.interviewer_ids,
        )
    except InterviewLifecycleError as exc:
        raise _http_error(exc) from None
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return {"id": iv.id}


@router.post("/{interview_id}/start", response_model=InterviewOut)
def start_interview(
    interview_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_identity),
):
    try:
        return InterviewLifecycle(db, identity).start(interview_id)
    except InterviewLifecycleError as exc:
        raise _http_error(exc) from None


@router.patch("/{interview_id}/status", response_model=InterviewOut)
def update_interview_status(
    interview_id: int,
    payload: InterviewStatusUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_identity),
):
    try:
        return InterviewLifecycle(db, identity).update_status(interview_id, payload.status)
    except InterviewLifecycleError as exc:
        raise _http_error(exc) from None


@router.delete("/{interview_id}", response_model=MessageOut)
def delete_interview(
    interview_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_identity),
):
    try:
        InterviewLifecycle(db, identity).delete(interview_id)
    except InterviewLifecycleError as exc:
        raise _http_error(exc) from None
    return {"message": "Interview deleted"}
