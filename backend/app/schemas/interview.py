from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.core.clock import as_utc
from app.schemas.user import UserSummaryOut
from app.services.interview_status import InterviewStatus


class InterviewCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    start_time: datetime
    status: InterviewStatus = InterviewStatus.SCHEDULED
    stream_call_id: str = Field(min_length=1, max_length=255)
    candidate_id: str = Field(min_length=1, max_length=255)
    interviewer_ids: list[str] = Field(min_length=1)

    @field_validator("start_time")
    @classmethod
    def _start_time_utc(cls, v: datetime) -> datetime:
        return as_utc(v)

    @model_validator(mode="after")
    def _candidate_not_interviewer(self):
        if self.candidate_id.strip() in {i.strip() for i in self.interviewer_ids}:
            raise ValueError("candidate_id must not appear in interviewer_ids")
        return self


class InterviewStatusUpdate(BaseModel):
    status: InterviewStatus


class InterviewCreatedOut(BaseModel):
    id: int


class InterviewOut(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    start_time: datetime
    actual_start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    status: str
    is_started: bool
    stream_call_id: str
    candidate_id: str
    interviewer_ids: list[str]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("start_time", "actual_start_time", "end_time", "created_at", "updated_at")
    @classmethod
    def _as_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)


class InterviewDetailOut(InterviewOut):
    display_status: str
    started_early: bool
    has_started_early: bool
    candidate: Optional[UserSummaryOut] = None
    interviewers: list[UserSummaryOut] = []


class InterviewGroupsOut(BaseModel):
    upcoming: list[InterviewDetailOut] = []
    live: list[InterviewDetailOut] = []
    completed: list[InterviewDetailOut] = []
    succeeded: list[InterviewDetailOut] = []
    failed: list[InterviewDetailOut] = []


class EarlyStartOut(BaseModel):
    interview_id: int
    started_early: bool
    has_started_early: bool
    actual_start_time: Optional[datetime] = None
    start_time: datetime
