"""Repository classes over the SQLAlchemy session.

Every lookup of a user-owned row goes through ``get_owned`` which yields
``None`` for both a missing id and a row owned by somebody else.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from marketing_studio.db.models import BrandAsset, GenerationHistory, User, utcnow


def _apply(row: Any, values: dict[str, Any], allowed: Iterable[str]) -> bool:
    changed = False
    for field in allowed:
        if field in values:
            setattr(row, field, values[field])
            changed = True
    return changed


class UsersRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_open_id(self, open_id: str) -> Optional[User]:
        return self.session.scalars(select(User).where(User.open_id == open_id)).first()

    def upsert(
        self,
        open_id: str,
        *,
        owner_open_id: str | None = None,
        name: str | None = None,
        email: str | None = None,
        login_method: str | None = None,
        role: str | None = None,
        last_signed_in: datetime | None = None,
    ) -> User:
        if not open_id:
            raise ValueError("open_id is required for upsert")

        now = utcnow()
        user = self.get_by_open_id(open_id)
        if user is None:
            user = User(
                open_id=open_id,
                name=name,
                email=email,
                login_method=login_method,
                role=role or ("admin" if owner_open_id and open_id == owner_open_id else "user"),
                created_at=now,
                updated_at=now,
                last_signed_in=last_signed_in or now,
            )
            self.session.add(user)
        else:
            if name is not None:
                user.name = name
            if email is not None:
                user.email = email
            if login_method is not None:
                user.login_method = login_method
            if role is not None:
                user.role = role
            user.last_signed_in = last_signed_in or now
            user.updated_at = now

        self.session.commit()
        self.session.refresh(user)
        return user


class HistoryRepository:
    UPDATABLE_FIELDS = ("prospectus_content", "video_script_content", "poster_elements")

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(
        self,
        *,
        user_id: int,
        prompt: str,
        style: str,
        prospectus_content: dict[str, Any],
        video_script_content: dict[str, Any],
        poster_elements: dict[str, Any],
    ) -> GenerationHistory:
        row = GenerationHistory(
            user_id=user_id,
            prompt=prompt,
            style=style,
            prospectus_content=prospectus_content,
            video_script_content=video_script_content,
            poster_elements=poster_elements,
        )
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return row

    def list_for_user(self, user_id: int, limit: int = 20) -> list[GenerationHistory]:
        stmt = (
            select(GenerationHistory)
            .where(GenerationHistory.user_id == user_id)
            .order_by(GenerationHistory.created_at.desc(), GenerationHistory.id.desc())
            .limit(limit)
        )
        return list(self.session.scalars(stmt))

    def get(self, history_id: int) -> Optional[GenerationHistory]:
        return self.session.get(GenerationHistory, history_id)

    def get_owned(self, user_id: int, history_id: int) -> Optional[GenerationHistory]:
        row = self.get(history_id)
        if row is None or row.user_id != user_id:
            return None
        return row

    def update(self, row: GenerationHistory, values: dict[str, Any]) -> GenerationHistory:
        if _apply(row, values, self.UPDATABLE_FIELDS):
            self.session.commit()
            self.session.refresh(row)
        return row

    def set_poster_url(self, row: GenerationHistory, url: str) -> GenerationHistory:
        row.poster_url = url
        self.session.commit()
        self.session.refresh(row)
        return row

    def set_platform_contents(self, row: GenerationHistory, contents: dict[str, Any]) -> GenerationHistory:
        row.platform_contents = contents
        self.session.commit()
        self.session.refresh(row)
        return row

    def delete(self, row: GenerationHistory) -> None:
        self.session.delete(row)
        self.session.commit()


class BrandAssetsRepository:
    UPDATABLE_FIELDS = ("name", "value", "description")

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(
        self,
        *,
        user_id: int,
        name: str,
        type: str,
        url: str | None = None,
        value: str | None = None,
        description: str | None = None,
    ) -> BrandAsset:
        row = BrandAsset(
            user_id=user_id,
            name=name,
            type=type,
            url=url,
            value=value,
            description=description,
        )
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return row

    def list_for_user(self, user_id: int) -> list[BrandAsset]:
        stmt = (
            select(BrandAsset)
            .where(BrandAsset.user_id == user_id)
            .order_by(BrandAsset.created_at.desc(), BrandAsset.id.desc())
        )
        return list(self.session.scalars(stmt))

    def get(self, asset_id: int) -> Optional[BrandAsset]:
        return self.session.get(BrandAsset, asset_id)

    def get_owned(self, user_id: int, asset_id: int) -> Optional[BrandAsset]:
        row = self.get(asset_id)
        if row is None or row.user_id != user_id:
            return None
        return row

    def update(self, row: BrandAsset, values: dict[str, Any]) -> BrandAsset:
        if _apply(row, values, self.UPDATABLE_FIELDS):
            row.updated_at = utcnow()
            self.session.commit()
            self.session.refresh(row)
        return row

    def delete(self, row: BrandAsset) -> None:
        self.session.delete(row)
        self.session.commit()


__all__ = ["BrandAssetsRepository", "HistoryRepository", "UsersRepository"]
