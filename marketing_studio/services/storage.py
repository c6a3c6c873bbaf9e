"""S3-compatible object storage (Cloudflare R2 in production)."""
from __future__ import annotations

import datetime as _dt
import logging
import mimetypes
import uuid
from functools import lru_cache
from typing import Any, Dict

import boto3
from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError

from marketing_studio.config import StorageConfig, get_settings

logger = logging.getLogger(__name__)

_DEFAULT_EXT = "png"


class StorageError(RuntimeError):
    """Raised when an object cannot be written to the bucket."""


def _config() -> StorageConfig:
    return get_settings().storage


@lru_cache(maxsize=1)
def _client() -> BaseClient:
    cfg = _config()
    if not cfg.is_configured:
        raise StorageError("Object storage is not configured")
    try:
        return boto3.session.Session().client(
            "s3",
            endpoint_url=cfg.endpoint,
            aws_access_key_id=cfg.access_key,
            aws_secret_access_key=cfg.secret_key,
            region_name=cfg.region,
        )
    except (BotoCoreError, ValueError) as exc:
        # boto3 rejects a malformed endpoint with a plain ValueError
        raise StorageError(f"Invalid object storage configuration: {exc}") from exc


def get_client() -> BaseClient:
    """Return the cached boto3 client for the configured bucket."""

    return _client()


def public_url_for(key: str) -> str | None:
    base = _config().public_base
    if not base:
        return None
    return f"{base.rstrip('/')}/{key.lstrip('/')}"


def extension_for(mime_type: str | None, default: str = _DEFAULT_EXT) -> str:
    """``image/jpeg`` -> ``jpeg``; anything without a subtype yields *default*."""

    if not mime_type or "/" not in mime_type:
        return default
    subtype = mime_type.split("/", 1)[1].split(";", 1)[0].strip().lower()
    return subtype or default


def generated_key(ext: str = _DEFAULT_EXT) -> str:
    stamp = _dt.datetime.now(_dt.timezone.utc).strftime("%Y%m%d%H%M%S%f")
    safe_ext = ext.lstrip(".") or _DEFAULT_EXT
    return f"generated/{stamp}-{uuid.uuid4().hex[:8]}.{safe_ext}"


def brand_asset_key(user_id: int, mime_type: str | None) -> str:
    return f"brand-assets/{user_id}/{uuid.uuid4().hex}.{extension_for(mime_type)}"


def storage_put(key: str, data: bytes, content_type: str | None = None) -> Dict[str, Any]:
    """Write *data* under *key* and return ``{"key", "url", "content_type"}``."""

    if not isinstance(data, (bytes, bytearray)):
        raise TypeError("payload must be bytes")

    storage_key = key.lstrip("/")
    ct = content_type or mimetypes.guess_type(storage_key)[0] or "application/octet-stream"
    bucket = _config().bucket
    if not bucket:
        raise StorageError("Object storage bucket is not configured")

    try:
        get_client().put_object(Bucket=bucket, Key=storage_key, Body=bytes(data), ContentType=ct)
    except (ClientError, BotoCoreError) as exc:
        logger.warning("storage put failed: bucket=%s key=%s err=%s", bucket, storage_key, exc)
        raise StorageError(f"Failed to upload object {storage_key}") from exc

    url = public_url_for(storage_key)
    if not url:
        url = _presign_get_url(bucket, storage_key)
    return {"key": storage_key, "url": url, "content_type": ct}


def _presign_get_url(bucket: str, key: str, expires: int = 7 * 24 * 3600) -> str:
    try:
        return get_client().generate_presigned_url(
            ClientMethod="get_object",
            Params={"Bucket": bucket, "Key": key},
            ExpiresIn=expires,
            HttpMethod="GET",
        )
    except (ClientError, BotoCoreError) as exc:
        raise StorageError("Failed to generate download URL") from exc


__all__ = [
    "StorageError",
    "brand_asset_key",
    "extension_for",
    "generated_key",
    "get_client",
    "public_url_for",
    "storage_put",
]
