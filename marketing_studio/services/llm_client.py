# -*- coding: utf-8 -*-
"""
Chat-completion client for an OpenAI-compatible text generation endpoint.
- Proxy goes through an injected httpx.Client (never as an SDK kwarg).
- No automatic retries: a failed call surfaces as GenerationFailure.
"""

from __future__ import annotations

import json
import logging
from contextlib import ExitStack
from typing import Any, Dict, List, Optional

import httpx
from openai import OpenAI, OpenAIError

from marketing_studio.config import LLMConfig
from marketing_studio.errors import GenerationFailure

logger = logging.getLogger(__name__)

# 仅允许传给 OpenAI SDK 的关键字
_ALLOWED_OPENAI_KWARGS = {"api_key", "base_url", "timeout", "max_retries", "http_client"}


def _sanitize_openai_kwargs(kw: dict[str, Any]) -> dict[str, Any]:
    cleaned = {k: v for k, v in kw.items() if k in _ALLOWED_OPENAI_KWARGS}
    for k in set(kw) - _ALLOWED_OPENAI_KWARGS:
        logger.debug("Removed unsupported OpenAI kwarg '%s' from client kwargs", k)
    return cleaned


def _build_openai_client(config: LLMConfig) -> tuple[OpenAI, Optional[httpx.Client]]:
    """Return ``(client, http_client)``; the caller closes ``http_client``."""

    if not config.is_configured:
        raise GenerationFailure("LLM_API_KEY 未配置。")

    kw: dict[str, Any] = {"api_key": config.api_key, "max_retries": 0, "timeout": config.timeout}
    if config.base_url:
        kw["base_url"] = config.base_url

    http_client: httpx.Client | None = None
    if config.proxy:
        timeout = httpx.Timeout(config.timeout, connect=10.0)
        http_client = httpx.Client(proxy=config.proxy, timeout=timeout)
        kw["http_client"] = http_client

    return OpenAI(**_sanitize_openai_kwargs(kw)), http_client


def _message_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    if content is None:
        return "{}"
    return json.dumps(content, ensure_ascii=False)


class TextGenerationClient:
    """Sends system + user messages and returns the first choice's text."""

    def __init__(self, config: LLMConfig) -> None:
        self.config = config

    def complete(
        self,
        messages: List[Dict[str, str]],
        *,
        response_format: Dict[str, Any] | None = None,
    ) -> str:
        params: dict[str, Any] = {"model": self.config.model, "messages": messages}
        if response_format is not None:
            params["response_format"] = response_format

        logger.info(
            "[llm] request model=%s messages=%s schema=%s",
            self.config.model,
            len(messages),
            (response_format or {}).get("json_schema", {}).get("name"),
        )
        try:
            with ExitStack() as stack:
                client, http_client = _build_openai_client(self.config)
                if http_client is not None:
                    stack.callback(http_client.close)
                response = client.chat.completions.create(**params)
        except GenerationFailure:
            raise
        except OpenAIError as exc:
            logger.warning("[llm] provider call failed: %s", exc)
            raise GenerationFailure(f"文本生成服务调用失败：{exc}") from exc

        choices = getattr(response, "choices", None) or []
        if not choices:
            raise GenerationFailure("文本生成服务返回了空结果")
        text = _message_text(choices[0].message.content)
        logger.info("[llm] response chars=%s", len(text))
        return text


__all__ = ["TextGenerationClient"]
