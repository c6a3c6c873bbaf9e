"""Generation orchestrator: prompt -> provider -> decode -> persist."""

from __future__ import annotations

import logging
from typing import Iterable, List

from marketing_studio.db import GenerationHistory, HistoryRepository, User
from marketing_studio.errors import ParseFailure, ResourceNotFound
from marketing_studio.schemas import Platform, Style
from marketing_studio.schemas.content import (
    GenerateContentResponse,
    MarketingContent,
    PlatformContentResult,
)
from marketing_studio.services.image_provider import ImageGenerationClient
from marketing_studio.services.json_decode import decode_llm_json
from marketing_studio.services.llm_client import TextGenerationClient
from marketing_studio.services.prompts import (
    build_content_messages,
    build_platform_messages,
    build_poster_prompt,
    marketing_content_response_format,
)

logger = logging.getLogger("marketing-studio")


class ContentGenerator:
    """Runs the three generation flows for one caller."""

    def __init__(
        self,
        history: HistoryRepository,
        text_client: TextGenerationClient,
        image_client: ImageGenerationClient,
    ) -> None:
        self.history = history
        self.text_client = text_client
        self.image_client = image_client

    def _owned_history(self, user: User, history_id: int) -> GenerationHistory:
        row = self.history.get_owned(user.id, history_id)
        if row is None:
            raise ResourceNotFound("History not found")
        return row

    def generate_content(self, user: User, prompt: str, style: Style) -> GenerateContentResponse:
        logger.info("[generate.content] start", extra={"user_id": user.id, "style": style.value})
        raw = self.text_client.complete(
            build_content_messages(prompt, style),
            response_format=marketing_content_response_format(),
        )
        content = decode_llm_json(raw, MarketingContent)

        payloads = content.payloads()
        row = self.history.create(
            user_id=user.id,
            prompt=prompt,
            style=style.value,
            prospectus_content=payloads["prospectus"],
            video_script_content=payloads["video_script"],
            poster_elements=payloads["poster_elements"],
        )
        logger.info("[generate.content] saved history", extra={"history_id": row.id})
        return GenerateContentResponse(id=row.id, **content.model_dump())

    def generate_poster(
        self,
        user: User,
        history_id: int,
        main_headline: str,
        sub_headline: str,
        body_text: str,
        style: Style,
    ) -> str:
        row = self._owned_history(user, history_id)
        prompt = build_poster_prompt(main_headline, sub_headline, body_text, style)
        url = self.image_client.generate_image(prompt)
        self.history.set_poster_url(row, url)
        logger.info("[generate.poster] saved poster", extra={"history_id": row.id})
        return url

    def generate_platform_content(
        self,
        user: User,
        history_id: int,
        original_content: str,
        platforms: Iterable[Platform],
        style: Style,
    ) -> PlatformContentResult:
        row = self._owned_history(user, history_id)
        requested: List[Platform] = list(platforms)

        raw = self.text_client.complete(build_platform_messages(original_content, requested, style))
        result = decode_llm_json(raw, PlatformContentResult)

        names = [platform.value for platform in requested]
        missing = [name for name in names if name not in result.platforms]
        if missing:
            raise ParseFailure(
                "模型返回的内容缺少部分平台",
                detail={"reason": "missing_platforms", "missing": missing},
            )
        result = PlatformContentResult(platforms={name: result.platforms[name] for name in names})

        self.history.set_platform_contents(row, result.model_dump(by_alias=True, mode="json")["platforms"])
        logger.info(
            "[generate.platform] saved platform contents",
            extra={"history_id": row.id, "platforms": names},
        )
        return result


__all__ = ["ContentGenerator"]
