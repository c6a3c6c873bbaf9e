"""Turn raw LLM text into validated pydantic payloads.

String munging (code-fence stripping) is kept apart from JSON parsing and
schema validation so each step can fail with its own reason.
"""

from __future__ import annotations

import json
import re
from typing import Type, TypeVar

from pydantic import BaseModel, ValidationError

from marketing_studio.errors import ParseFailure

ModelT = TypeVar("ModelT", bound=BaseModel)

_OPENING_FENCE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_CLOSING_FENCE = re.compile(r"\s*```$")


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence; clean text comes back unchanged."""

    cleaned = (text or "").strip()
    cleaned = _OPENING_FENCE.sub("", cleaned, count=1)
    cleaned = _CLOSING_FENCE.sub("", cleaned, count=1)
    return cleaned


def _preview(text: str, limit: int = 200) -> str:
    if len(text) <= limit:
        return text
    return f"{text[:limit]}…(+{len(text) - limit} chars)"


def decode_llm_json(text: str, model: Type[ModelT]) -> ModelT:
    cleaned = strip_code_fence(text)
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ParseFailure(
            "模型返回的内容不是有效的 JSON",
            detail={"reason": "invalid_json", "error": str(exc), "preview": _preview(cleaned)},
        ) from exc

    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise ParseFailure(
            "模型返回的 JSON 结构不符合要求",
            detail={
                "reason": "schema_mismatch",
                "errors": exc.errors(include_url=False, include_context=False, include_input=False),
                "preview": _preview(cleaned),
            },
        ) from exc


__all__ = ["decode_llm_json", "strip_code_fence"]
