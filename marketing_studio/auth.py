"""Caller resolution from the identity headers set by the trusted gateway."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from marketing_studio.config import Settings, get_settings
from marketing_studio.db import User, UsersRepository, get_session
from marketing_studio.dependencies import raise_http
from marketing_studio.errors import AuthorizationFailure

logger = logging.getLogger(__name__)


def get_current_user(
    x_open_id: Optional[str] = Header(default=None),
    x_user_name: Optional[str] = Header(default=None),
    x_user_email: Optional[str] = Header(default=None),
    x_login_method: Optional[str] = Header(default=None),
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> User:
    open_id = (x_open_id or "").strip()
    if not open_id:
        raise_http(AuthorizationFailure("Not authenticated"), "auth")

    user = UsersRepository(session).upsert(
        open_id,
        owner_open_id=settings.owner_open_id,
        name=x_user_name,
        email=x_user_email,
        login_method=x_login_method,
    )
    logger.debug("resolved caller", extra={"user_id": user.id, "role": user.role})
    return user


__all__ = ["get_current_user"]
