# app/models/interview.py
from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, false, func
from sqlalchemy.types import JSON

from app.core.base import Base


class Interview(Base):
    __tablename__ = "interviews"

    id = Column(Integer, primary_key=True, index=True)

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)

    start_time = Column(DateTime(timezone=True), nullable=False, index=True)
    # Set by start(); end_time is stamped whenever status becomes "completed".
    actual_start_time = Column(DateTime(timezone=True), nullable=True)
    end_time = Column(DateTime(timezone=True), nullable=True)

    status = Column(String(20), nullable=False, server_default="scheduled")  # see app.services.interview_status
    is_started = Column(Boolean, nullable=False, default=False, server_default=false())

    # Conferencing session token; immutable once created.
    stream_call_id = Column(String(255), unique=True, index=True, nullable=False)

    # By-value references to users.external_id (no FKs: either side can change independently).
    candidate_id = Column(String(255), nullable=False, index=True)
    interviewer_ids = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
