"""
统一图片生成适配层：
  - Zhipu CogView (primary):   POST {model, prompt, size} -> {data: [{url}]}
  - Forge ImageService (secondary): POST {prompt, original_images} -> {image: {b64Json, mimeType}}
  - 主通道失败时返回占位图 URL，保证后续流程不被阻塞

The provider is chosen once, by configuration presence, when the client is
built. The secondary provider is never a retry target for the primary one.
"""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence
from urllib.parse import quote

import httpx

from marketing_studio.config import ForgeConfig, Settings, ZhipuConfig
from marketing_studio.errors import ImageGenerationFailure, ServiceError
from marketing_studio.services.storage import StorageError, extension_for, generated_key, storage_put

logger = logging.getLogger(__name__)

IMAGE_SIZE = "1024x1024"
PLACEHOLDER_MESSAGE = "Image Generation Failed\n(Check API Balance)"
_TIMEOUT = httpx.Timeout(60.0, connect=10.0)


def placeholder_url(message: str = PLACEHOLDER_MESSAGE) -> str:
    return f"https://placehold.co/{IMAGE_SIZE}/png?text={quote(message, safe='()')}"


@dataclass
class ReferenceImage:
    """Optional reference image for image-to-image providers."""

    url: Optional[str] = None
    b64_json: Optional[str] = None
    mime_type: Optional[str] = None

    def to_payload(self) -> Dict[str, str]:
        payload: Dict[str, str] = {}
        if self.url:
            payload["url"] = self.url
        if self.b64_json:
            payload["b64Json"] = self.b64_json
        if self.mime_type:
            payload["mimeType"] = self.mime_type
        return payload


class ImageProvider(Protocol):
    name: str
    degrade_to_placeholder: bool

    def is_available(self) -> bool:
        ...

    def generate(self, prompt: str, original_images: Sequence[ReferenceImage] = ()) -> str:
        ...


class ZhipuImageProvider:
    name = "zhipu"
    degrade_to_placeholder = True

    def __init__(self, config: ZhipuConfig) -> None:
        self.config = config

    def is_available(self) -> bool:
        return self.config.is_configured

    def generate(self, prompt: str, original_images: Sequence[ReferenceImage] = ()) -> str:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.config.api_key}",
        }
        payload = {"model": self.config.model, "prompt": prompt, "size": IMAGE_SIZE}

        with httpx.Client(timeout=_TIMEOUT) as client:
            r = client.post(self.config.api_url, json=payload, headers=headers)
            if r.status_code >= 400:
                raise ImageGenerationFailure(
                    f"Zhipu image generation request failed ({r.status_code}): {r.text[:200]}"
                )
            try:
                image_url = r.json()["data"][0]["url"]
            except (KeyError, IndexError, TypeError, ValueError) as exc:
                raise ImageGenerationFailure("No image URL returned from Zhipu") from exc
            if not image_url:
                raise ImageGenerationFailure("No image URL returned from Zhipu")

            logger.info("[image.zhipu] generated url=%s", image_url)
            # Provider URLs expire; keep a copy in our own bucket when possible.
            try:
                download = client.get(image_url)
                download.raise_for_status()
                stored = storage_put(generated_key("png"), download.content, "image/png")
            except Exception as exc:  # noqa: BLE001 - the image exists, keep its provider url
                logger.warning("[image.zhipu] re-upload failed, returning provider url: %s", exc)
                return image_url
            return stored["url"]


class ForgeImageProvider:
    name = "forge"
    degrade_to_placeholder = False

    def __init__(self, config: ForgeConfig) -> None:
        self.config = config

    def is_available(self) -> bool:
        return self.config.is_configured

    def _endpoint(self) -> str:
        base = (self.config.api_url or "").rstrip("/")
        return f"{base}/images.v1.ImageService/GenerateImage"

    def generate(self, prompt: str, original_images: Sequence[ReferenceImage] = ()) -> str:
        headers = {
            "accept": "application/json",
            "content-type": "application/json",
            "connect-protocol-version": "1",
            "authorization": f"Bearer {self.config.api_key}",
        }
        payload: Dict[str, Any] = {
            "prompt": prompt,
            "original_images": [image.to_payload() for image in original_images],
        }

        try:
            with httpx.Client(timeout=_TIMEOUT) as client:
                r = client.post(self._endpoint(), json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise ImageGenerationFailure(f"Image generation request failed: {exc}") from exc

        if r.status_code >= 400:
            raise ImageGenerationFailure(
                f"Image generation request failed ({r.status_code}): {r.text[:200]}"
            )
        try:
            image = r.json()["image"]
            b64 = image["b64Json"]
            mime_type = image.get("mimeType") or "image/png"
            data = base64.b64decode(b64)
        except (KeyError, TypeError, ValueError, binascii.Error) as exc:
            raise ImageGenerationFailure("Image service returned an invalid payload") from exc

        try:
            stored = storage_put(generated_key(extension_for(mime_type)), data, mime_type)
        except StorageError as exc:
            raise ImageGenerationFailure(f"Failed to store generated image: {exc}") from exc
        return stored["url"]


class ImageGenerationClient:
    def __init__(self, provider: ImageProvider | None) -> None:
        self.provider = provider

    @property
    def provider_name(self) -> str | None:
        return getattr(self.provider, "name", None)

    def generate_image(
        self,
        prompt: str,
        original_images: Optional[Sequence[ReferenceImage]] = None,
    ) -> str:
        provider = self.provider
        if provider is None:
            raise ImageGenerationFailure("Image provider is not configured")

        try:
            url = provider.generate(prompt, tuple(original_images or ()))
        except Exception as exc:  # noqa: BLE001 - primary provider degrades to a placeholder
            if not provider.degrade_to_placeholder:
                if isinstance(exc, ServiceError):
                    raise
                raise ImageGenerationFailure(f"Image generation failed: {exc}") from exc
            logger.warning(
                "[image] %s generation failed, falling back to placeholder: %s", provider.name, exc
            )
            return placeholder_url()

        if not url:
            raise ImageGenerationFailure("Image provider returned no URL")
        return url


def image_provider_chain(settings: Settings) -> List[ImageProvider]:
    """Providers in priority order."""

    return [ZhipuImageProvider(settings.zhipu), ForgeImageProvider(settings.forge)]


def build_image_client(settings: Settings) -> ImageGenerationClient:
    selected = next((p for p in image_provider_chain(settings) if p.is_available()), None)
    if selected is None:
        logger.warning("No image provider configured; poster generation will fail")
    else:
        logger.info("Using %s image provider", selected.name)
    return ImageGenerationClient(selected)


__all__ = [
    "ForgeImageProvider",
    "ImageGenerationClient",
    "ImageProvider",
    "ReferenceImage",
    "ZhipuImageProvider",
    "build_image_client",
    "image_provider_chain",
    "placeholder_url",
]
