from __future__ import annotations

from fastapi import APIRouter, Depends

from marketing_studio.auth import get_current_user
from marketing_studio.db import User
from marketing_studio.schemas.records import UserRecord

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.get("/me", response_model=UserRecord, response_model_by_alias=True)
def me(user: User = Depends(get_current_user)) -> UserRecord:
    return UserRecord.model_validate(user)
