from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from marketing_studio.auth import get_current_user
from marketing_studio.config import Settings, get_settings
from marketing_studio.db import BrandAsset, BrandAssetsRepository, User
from marketing_studio.dependencies import get_assets_repo, raise_http
from marketing_studio.errors import ServiceError
from marketing_studio.schemas.records import (
    AssetCreateRequest,
    AssetRecord,
    AssetUpdateRequest,
    AssetUploadRequest,
    AssetUploadResponse,
    IdResponse,
    SuccessResponse,
)
from marketing_studio.services.assets import upload_brand_asset
from marketing_studio.services.storage import StorageError

logger = logging.getLogger("marketing-studio")

router = APIRouter(prefix="/api/assets", tags=["assets"])


def _get_asset_or_404(repo: BrandAssetsRepository, user: User, asset_id: int) -> BrandAsset:
    row = repo.get_owned(user.id, asset_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Asset not found")
    return row


@router.get("", response_model=List[AssetRecord], response_model_by_alias=True)
def list_assets(
    user: User = Depends(get_current_user),
    repo: BrandAssetsRepository = Depends(get_assets_repo),
) -> List[AssetRecord]:
    return [AssetRecord.model_validate(row) for row in repo.list_for_user(user.id)]


@router.post("", response_model=IdResponse)
def create_asset(
    payload: AssetCreateRequest,
    user: User = Depends(get_current_user),
    repo: BrandAssetsRepository = Depends(get_assets_repo),
) -> IdResponse:
    row = repo.create(
        user_id=user.id,
        name=payload.name,
        type=payload.type.value,
        url=payload.url,
        value=payload.value,
        description=payload.description,
    )
    return IdResponse(id=row.id)


@router.post("/upload", response_model=AssetUploadResponse)
def upload_asset(
    payload: AssetUploadRequest,
    user: User = Depends(get_current_user),
    repo: BrandAssetsRepository = Depends(get_assets_repo),
    settings: Settings = Depends(get_settings),
) -> AssetUploadResponse:
    try:
        row = upload_brand_asset(
            repo,
            user_id=user.id,
            request=payload,
            max_bytes=settings.guard.upload_max_bytes,
        )
    except ServiceError as exc:
        raise_http(exc, "assets.upload")
    except StorageError as exc:
        raise HTTPException(status_code=502, detail="文件上传失败，请稍后重试。") from exc
    return AssetUploadResponse(id=row.id, url=row.url or "")


@router.patch("/{asset_id}", response_model=SuccessResponse)
def update_asset(
    asset_id: int,
    payload: AssetUpdateRequest,
    user: User = Depends(get_current_user),
    repo: BrandAssetsRepository = Depends(get_assets_repo),
) -> SuccessResponse:
    row = _get_asset_or_404(repo, user, asset_id)
    repo.update(row, payload.changes())
    return SuccessResponse()


@router.delete("/{asset_id}", response_model=SuccessResponse)
def delete_asset(
    asset_id: int,
    user: User = Depends(get_current_user),
    repo: BrandAssetsRepository = Depends(get_assets_repo),
) -> SuccessResponse:
    repo.delete(_get_asset_or_404(repo, user, asset_id))
    logger.info("asset deleted", extra={"asset_id": asset_id, "user_id": user.id})
    return SuccessResponse()
