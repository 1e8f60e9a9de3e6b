from __future__ import annotations

from fastapi import APIRouter, Depends

from app.auth.identity import Identity
from app.dependencies.auth import require_identity
from app.schemas.auth import IdentityOut

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me", response_model=IdentityOut)
def whoami(identity: Identity = Depends(require_identity)):
    return identity.to_debug_dict()
