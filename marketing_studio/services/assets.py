"""Brand asset upload: decode, guard, inspect, store, record."""

from __future__ import annotations

import base64
import binascii
import logging
from io import BytesIO

from PIL import Image, UnidentifiedImageError

from marketing_studio.db import BrandAsset, BrandAssetsRepository
from marketing_studio.errors import PayloadTooLarge, ValidationFailure
from marketing_studio.schemas.records import AssetUploadRequest
from marketing_studio.services.storage import StorageError, brand_asset_key, storage_put

logger = logging.getLogger(__name__)

RASTER_MIME_TYPES = {"image/png", "image/jpeg", "image/jpg", "image/webp", "image/gif"}


def decode_file_data(file_data: str) -> bytes:
    """Decode base64 content; a leading ``data:<mime>;base64,`` header is tolerated."""

    payload = (file_data or "").strip()
    if payload.startswith("data:") and "," in payload:
        payload = payload.split(",", 1)[1]
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationFailure("fileData is not valid base64") from exc


def ensure_within_limit(data: bytes, max_bytes: int) -> None:
    if len(data) > max_bytes:
        raise PayloadTooLarge(
            "File exceeds the upload size limit",
            detail={"limit_bytes": max_bytes, "size_bytes": len(data)},
        )


def ensure_decodable_image(data: bytes, mime_type: str) -> None:
    if mime_type.lower() not in RASTER_MIME_TYPES:
        return
    try:
        with Image.open(BytesIO(data)) as image:
            image.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        logger.warning("[assets] rejected undecodable %s upload: %s", mime_type, exc)
        raise ValidationFailure("File is not a valid image", detail={"mime_type": mime_type}) from exc


def upload_brand_asset(
    repo: BrandAssetsRepository,
    *,
    user_id: int,
    request: AssetUploadRequest,
    max_bytes: int,
) -> BrandAsset:
    data = decode_file_data(request.file_data)
    ensure_within_limit(data, max_bytes)
    ensure_decodable_image(data, request.mime_type)

    key = brand_asset_key(user_id, request.mime_type)
    try:
        stored = storage_put(key, data, request.mime_type)
    except StorageError:
        logger.exception("[assets] storage upload failed", extra={"key": key})
        raise

    logger.info("[assets] uploaded", extra={"key": key, "bytes": len(data), "user_id": user_id})
    return repo.create(
        user_id=user_id,
        name=request.name,
        type=request.type,
        url=stored["url"],
        description=request.description,
    )


__all__ = [
    "decode_file_data",
    "ensure_decodable_image",
    "ensure_within_limit",
    "upload_brand_asset",
]
