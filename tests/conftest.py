from __future__ import annotations

import copy
import os
from typing import Any

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite://")

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from marketing_studio.config import get_settings  # noqa: E402
from marketing_studio.db import get_session, init_db  # noqa: E402
from marketing_studio.dependencies import get_image_client, get_text_client  # noqa: E402
from marketing_studio.main import app  # noqa: E402

SAMPLE_CONTENT: dict[str, Any] = {
    "prospectus": {
        "title": "滨江科技园招商手册",
        "sections": [
            {"subtitle": "一、项目概览", "text": "园区位于滨江核心区。"},
            {"subtitle": "二、核心优势", "text": "政策支持力度大。"},
        ],
    },
    "videoScript": {
        "title": "一分钟看懂滨江科技园",
        "totalDuration": 60,
        "scenes": [
            {
                "sceneNumber": 1,
                "duration": 5,
                "visuals": "航拍园区全景",
                "voiceover": "欢迎来到滨江科技园",
                "bgmSuggestion": "轻快电子乐",
            }
        ],
    },
    "posterElements": {
        "mainHeadline": "滨江科技园",
        "subHeadline": "创新从这里开始",
        "bodyText": "首年租金减免",
        "callToAction": "立即预约参观",
    },
}


def sample_content() -> dict[str, Any]:
    return copy.deepcopy(SAMPLE_CONTENT)


class FakeTextClient:
    """Returns queued responses in order; queued exceptions are raised."""

    def __init__(self) -> None:
        self.responses: list[Any] = []
        self.calls: list[dict[str, Any]] = []

    def complete(self, messages, *, response_format=None) -> str:
        self.calls.append({"messages": messages, "response_format": response_format})
        if not self.responses:
            raise AssertionError("unexpected text generation call")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class FakeImageClient:
    def __init__(self, url: str = "https://assets.example.com/generated/poster.png") -> None:
        self.url = url
        self.error: Exception | None = None
        self.prompts: list[str] = []

    def generate_image(self, prompt: str, original_images=None) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.url


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture()
def session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def text_client() -> FakeTextClient:
    return FakeTextClient()


@pytest.fixture()
def image_client() -> FakeImageClient:
    return FakeImageClient()


@pytest.fixture()
def client(session_factory, text_client, image_client):
    def _session():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_text_client] = lambda: text_client
    app.dependency_overrides[get_image_client] = lambda: image_client
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def auth_headers(open_id: str = "user-alice", **extra: str) -> dict[str, str]:
    headers = {"X-Open-Id": open_id}
    headers.update(extra)
    return headers
