"""Persisted record views and the CRUD request bodies for history and assets."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import ConfigDict, Field, constr, model_validator
from pydantic.alias_generators import to_camel

from marketing_studio.schemas import AssetType, _CompatModel
from marketing_studio.schemas.content import PosterElements, Prospectus, VideoScript


class _RecordModel(_CompatModel):
    model_config = ConfigDict(
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class UserRecord(_RecordModel):
    id: int
    open_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    login_method: Optional[str] = None
    role: Literal["user", "admin"]
    created_at: datetime
    updated_at: datetime
    last_signed_in: datetime


class HistoryRecord(_RecordModel):
    id: int
    user_id: int
    prompt: str
    style: str
    prospectus_content: Optional[dict[str, Any]] = None
    video_script_content: Optional[dict[str, Any]] = None
    poster_elements: Optional[dict[str, Any]] = None
    poster_url: Optional[str] = None
    video_url: Optional[str] = None
    platform_contents: Optional[dict[str, Any]] = None
    created_at: datetime


class HistoryUpdateRequest(_CompatModel):
    """Edits made in the result view; only the fields sent are written."""

    prospectus_content: Optional[Prospectus] = None
    video_script_content: Optional[VideoScript] = None
    poster_elements: Optional[PosterElements] = None

    def changes(self) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for field in self.model_fields_set:
            model = getattr(self, field)
            if model is not None:
                values[field] = model.model_dump(by_alias=True, mode="json")
        return values


class AssetRecord(_RecordModel):
    id: int
    user_id: int
    name: str
    type: AssetType
    url: Optional[str] = None
    value: Optional[str] = None
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class AssetCreateRequest(_CompatModel):
    name: constr(strip_whitespace=True, min_length=1, max_length=255)
    type: AssetType
    url: Optional[constr(strip_whitespace=True, max_length=512)] = None
    value: Optional[constr(strip_whitespace=True, max_length=255)] = None
    description: Optional[str] = None

    @model_validator(mode="after")
    def _check_payload_for_type(self) -> "AssetCreateRequest":
        if self.type is AssetType.COLOR:
            if not self.value:
                raise ValueError("color assets require a value")
        elif not self.url:
            raise ValueError(f"{self.type.value} assets require a url")
        return self


class AssetUploadRequest(_CompatModel):
    name: constr(strip_whitespace=True, min_length=1, max_length=255)
    type: Literal["logo", "image"]
    file_data: str = Field(..., description="Base64 encoded file content.")
    mime_type: constr(strip_whitespace=True, min_length=1, max_length=127)
    description: Optional[str] = None


class AssetUpdateRequest(_CompatModel):
    name: Optional[constr(strip_whitespace=True, min_length=1, max_length=255)] = None
    value: Optional[constr(strip_whitespace=True, max_length=255)] = None
    description: Optional[str] = None

    def changes(self) -> dict[str, Any]:
        values = self.model_dump(include=self.model_fields_set, by_alias=False)
        # name is NOT NULL; an explicit null leaves it unchanged
        if values.get("name", "") is None:
            values.pop("name")
        return values


class IdResponse(_CompatModel):
    id: int


class AssetUploadResponse(_CompatModel):
    id: int
    url: str


class SuccessResponse(_CompatModel):
    success: bool = True


__all__ = [
    "AssetCreateRequest",
    "AssetRecord",
    "AssetUpdateRequest",
    "AssetUploadRequest",
    "AssetUploadResponse",
    "HistoryRecord",
    "HistoryUpdateRequest",
    "IdResponse",
    "SuccessResponse",
    "UserRecord",
]
