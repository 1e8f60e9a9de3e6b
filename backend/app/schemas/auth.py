# app/schemas/auth.py
from pydantic import BaseModel


class MessageOut(BaseModel):
    message: str


class IdentityOut(BaseModel):
    subject: str | None = None
    email: str | None = None
    name: str | None = None
    is_authenticated: bool
