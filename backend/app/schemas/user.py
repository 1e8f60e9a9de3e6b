from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field

Role = Literal["candidate", "interviewer"]


class UserSyncIn(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    external_id: str = Field(min_length=1, max_length=255)
    image: str | None = Field(default=None, max_length=1024)


class UserOnboardIn(UserSyncIn):
    role: Role


class UserIdOut(BaseModel):
    id: int | None = None


class UserSummaryOut(BaseModel):
    id: int
    external_id: str
    name: str
    email: str
    image: str | None = None
    role: str

    model_config = ConfigDict(from_attributes=True)


class UserOut(UserSummaryOut):
    created_at: datetime
    updated_at: datetime
