"""Payloads exchanged by the generation endpoints and returned by the LLM."""

from __future__ import annotations

from typing import Any, Union

from pydantic import Field, field_validator

from marketing_studio.schemas import Platform, Style, _CompatModel

Number = Union[int, float]


class ProspectusSection(_CompatModel):
    subtitle: str
    text: str


class Prospectus(_CompatModel):
    title: str
    sections: list[ProspectusSection] = Field(..., description="Ordered document sections.")


class VideoScene(_CompatModel):
    scene_number: Number
    duration: Number = Field(..., description="Scene length in seconds.")
    visuals: str
    voiceover: str
    bgm_suggestion: str


class VideoScript(_CompatModel):
    title: str
    # Not required to equal the sum of scene durations.
    total_duration: Number = Field(..., description="Total length in seconds.")
    scenes: list[VideoScene]


class PosterElements(_CompatModel):
    main_headline: str
    sub_headline: str
    body_text: str
    call_to_action: str


class MarketingContent(_CompatModel):
    """Top-level shape the content generation prompt asks the model for."""

    prospectus: Prospectus
    video_script: VideoScript
    poster_elements: PosterElements

    def payloads(self) -> dict[str, dict[str, Any]]:
        """Return the three artifacts in their stored (camelCase) JSON form."""

        return {
            "prospectus": self.prospectus.model_dump(by_alias=True, mode="json"),
            "video_script": self.video_script.model_dump(by_alias=True, mode="json"),
            "poster_elements": self.poster_elements.model_dump(by_alias=True, mode="json"),
        }


class GenerateContentRequest(_CompatModel):
    prompt: str = Field(..., description="客户核心需求")
    style: Style

    @field_validator("prompt")
    @classmethod
    def _check_prompt(cls, value: str) -> str:
        # bounds apply to the trimmed text; the prompt is kept as typed
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("prompt must not be blank")
        if len(trimmed) > 2000:
            raise ValueError("prompt must be at most 2000 characters")
        return value


class GenerateContentResponse(MarketingContent):
    id: int


class GeneratePosterRequest(_CompatModel):
    history_id: int
    main_headline: str
    sub_headline: str
    body_text: str
    style: Style


class GeneratePosterResponse(_CompatModel):
    poster_url: str


class GeneratePlatformContentRequest(_CompatModel):
    history_id: int
    original_content: str
    platforms: list[Platform] = Field(..., min_length=1)
    style: Style

    @field_validator("platforms")
    @classmethod
    def _dedupe_platforms(cls, value: list[Platform]) -> list[Platform]:
        seen: list[Platform] = []
        for item in value:
            if item not in seen:
                seen.append(item)
        return seen


class PlatformCopy(_CompatModel):
    title: str
    content: str
    hashtags: list[str] = Field(default_factory=list)


class PlatformContentResult(_CompatModel):
    platforms: dict[str, PlatformCopy]


__all__ = [
    "GenerateContentRequest",
    "GenerateContentResponse",
    "GeneratePlatformContentRequest",
    "GeneratePosterRequest",
    "GeneratePosterResponse",
    "MarketingContent",
    "PlatformContentResult",
    "PlatformCopy",
    "PosterElements",
    "Prospectus",
    "ProspectusSection",
    "VideoScene",
    "VideoScript",
]
