"""FastAPI dependency providers shared by the routers."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import NoReturn

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from marketing_studio.config import get_settings
from marketing_studio.db import BrandAssetsRepository, HistoryRepository, get_session
from marketing_studio.errors import ServiceError
from marketing_studio.services.generation import ContentGenerator
from marketing_studio.services.image_provider import ImageGenerationClient, build_image_client
from marketing_studio.services.llm_client import TextGenerationClient

logger = logging.getLogger("marketing-studio")


@lru_cache(maxsize=1)
def get_text_client() -> TextGenerationClient:
    return TextGenerationClient(get_settings().llm)


@lru_cache(maxsize=1)
def get_image_client() -> ImageGenerationClient:
    return build_image_client(get_settings())


def get_history_repo(session: Session = Depends(get_session)) -> HistoryRepository:
    return HistoryRepository(session)


def get_assets_repo(session: Session = Depends(get_session)) -> BrandAssetsRepository:
    return BrandAssetsRepository(session)


def get_generator(
    history: HistoryRepository = Depends(get_history_repo),
    text_client: TextGenerationClient = Depends(get_text_client),
    image_client: ImageGenerationClient = Depends(get_image_client),
) -> ContentGenerator:
    return ContentGenerator(history, text_client, image_client)


def raise_http(exc: ServiceError, operation: str) -> NoReturn:
    """Translate a service failure into the HTTP error the client sees."""

    logger.warning(
        "%s failed: %s",
        operation,
        exc.message,
        extra={"status_code": exc.status_code, "error_type": type(exc).__name__},
    )
    raise HTTPException(status_code=exc.status_code, detail=exc.to_detail()) from exc


__all__ = [
    "get_assets_repo",
    "get_generator",
    "get_history_repo",
    "get_image_client",
    "get_text_client",
    "raise_http",
]
