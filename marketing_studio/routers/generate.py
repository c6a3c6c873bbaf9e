from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from marketing_studio.auth import get_current_user
from marketing_studio.db import User
from marketing_studio.dependencies import get_generator, raise_http
from marketing_studio.errors import ServiceError
from marketing_studio.schemas.content import (
    GenerateContentRequest,
    GenerateContentResponse,
    GeneratePlatformContentRequest,
    GeneratePosterRequest,
    GeneratePosterResponse,
    PlatformContentResult,
)
from marketing_studio.services.generation import ContentGenerator

logger = logging.getLogger("marketing-studio")

router = APIRouter(prefix="/api/generate", tags=["generate"])


@router.post("/content", response_model=GenerateContentResponse, response_model_by_alias=True)
def generate_content(
    payload: GenerateContentRequest,
    user: User = Depends(get_current_user),
    generator: ContentGenerator = Depends(get_generator),
) -> GenerateContentResponse:
    try:
        return generator.generate_content(user, payload.prompt, payload.style)
    except ServiceError as exc:
        raise_http(exc, "generate.content")
    except Exception as exc:
        logger.exception("generate.content crashed", extra={"user_id": user.id})
        raise HTTPException(status_code=500, detail="服务器内部错误，请稍后重试。") from exc


@router.post("/poster", response_model=GeneratePosterResponse, response_model_by_alias=True)
def generate_poster(
    payload: GeneratePosterRequest,
    user: User = Depends(get_current_user),
    generator: ContentGenerator = Depends(get_generator),
) -> GeneratePosterResponse:
    try:
        url = generator.generate_poster(
            user,
            payload.history_id,
            payload.main_headline,
            payload.sub_headline,
            payload.body_text,
            payload.style,
        )
    except ServiceError as exc:
        raise_http(exc, "generate.poster")
    except Exception as exc:
        logger.exception("generate.poster crashed", extra={"history_id": payload.history_id})
        raise HTTPException(status_code=500, detail="服务器内部错误，请稍后重试。") from exc
    return GeneratePosterResponse(poster_url=url)


@router.post("/platform-content", response_model=PlatformContentResult, response_model_by_alias=True)
def generate_platform_content(
    payload: GeneratePlatformContentRequest,
    user: User = Depends(get_current_user),
    generator: ContentGenerator = Depends(get_generator),
) -> PlatformContentResult:
    try:
        return generator.generate_platform_content(
            user,
            payload.history_id,
            payload.original_content,
            payload.platforms,
            payload.style,
        )
    except ServiceError as exc:
        raise_http(exc, "generate.platformContent")
    except Exception as exc:
        logger.exception("generate.platformContent crashed", extra={"history_id": payload.history_id})
        raise HTTPException(status_code=500, detail="服务器内部错误，请稍后重试。") from exc
