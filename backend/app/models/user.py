# app/models/user.py
from sqlalchemy import Column, DateTime, Integer, String, func

from app.core.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    # Auth provider subject. Interviews reference users by this value, not by `id`.
    external_id = Column(String(255), unique=True, index=True, nullable=False)

    name = Column(String(100), nullable=False)
    email = Column(String(255), index=True, nullable=False)
    image = Column(String(1024), nullable=True)
    role = Column(String(20), nullable=False, server_default="candidate")  # candidate|interviewer

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
