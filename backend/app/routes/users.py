from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.user import UserIdOut, UserOnboardIn, UserOut, UserSyncIn
from app.services import users as user_directory

# Called by the frontend right after the auth provider signs someone in; no token required.
router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserOut])
def get_users(db: Session = Depends(get_db)):
    return user_directory.list_users(db)


@router.get("/{external_id}", response_model=Optional[UserOut])
def get_user_by_external_id(external_id: str, db: Session = Depends(get_db)):
    return user_directory.get_user_by_external_id(db, external_id)


@router.post("/sync", response_model=UserIdOut)
def sync_user(payload: UserSyncIn, db: Session = Depends(get_db)):
    try:
        user = user_directory.sync_user(
            db,
            external_id=payload.external_id,
            email=payload.email,
            name=payload.name,
            image=payload.image,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return {"id": user.id if user else None}


@router.post("/onboard", response_model=UserIdOut)
def upsert_user_with_role(payload: UserOnboardIn, db: Session = Depends(get_db)):
    try:
        user = user_directory.upsert_user_with_role(
            db,
            external_id=payload.external_id,
            email=payload.email,
            name=payload.name,
            image=payload.image,
            role=payload.role,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return {"id": user.id}
