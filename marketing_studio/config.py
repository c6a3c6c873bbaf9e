from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import List
from urllib.parse import urlparse

DEFAULT_UPLOAD_MAX_BYTES = 5 * 1024 * 1024
DEFAULT_BODY_MAX_BYTES = 8 * 1024 * 1024
ZHIPU_IMAGE_URL = "https://open.bigmodel.cn/api/paas/v4/images/generations"


def _env(*names: str, default: str | None = None) -> str | None:
    """Return the first non-empty environment value among *names*."""

    for name in names:
        value = os.getenv(name)
        if value is None:
            continue
        text = value.strip()
        if text:
            return text
    return default


def _as_int(value: str | None, default: int) -> int:
    try:
        return max(int(value), 0) if value is not None else default
    except (TypeError, ValueError):
        return default


def _as_float(value: str | None, default: float) -> float:
    try:
        return float(value) if value is not None else default
    except (TypeError, ValueError):
        return default


def _parse_allowed_origins(raw: str | None) -> List[str]:
    """Normalise comma-separated origins into values accepted by CORSMiddleware."""

    if not raw:
        return ["*"]

    cleaned: List[str] = []
    for origin in raw.split(","):
        value = origin.strip()
        if not value:
            continue
        if value == "*":
            return ["*"]

        parsed = urlparse(value)
        if parsed.scheme and parsed.netloc:
            normalised = f"{parsed.scheme}://{parsed.netloc}"
        else:
            normalised = value.rstrip("/")

        if normalised not in cleaned:
            cleaned.append(normalised)

    return cleaned or ["*"]


@dataclass
class DatabaseConfig:
    url: str = "sqlite:///./marketing_studio.db"
    echo: bool = False


@dataclass
class LLMConfig:
    api_key: str | None = None
    base_url: str | None = None
    model: str = "gpt-4o-mini"
    proxy: str | None = None
    timeout: float = 120.0

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls) -> "LLMConfig":
        return cls(
            api_key=_env("LLM_API_KEY", "OPENAI_API_KEY"),
            base_url=_env("LLM_BASE_URL", "OPENAI_BASE_URL"),
            model=_env("LLM_MODEL", "OPENAI_MODEL", default="gpt-4o-mini") or "gpt-4o-mini",
            proxy=_env("LLM_PROXY", "OPENAI_PROXY"),
            timeout=_as_float(_env("LLM_TIMEOUT"), 120.0),
        )


@dataclass
class ZhipuConfig:
    """Primary image provider (Zhipu CogView)."""

    api_key: str | None = None
    api_url: str = ZHIPU_IMAGE_URL
    model: str = "cogview-3-flash"

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


@dataclass
class ForgeConfig:
    """Secondary image provider (Forge image service)."""

    api_url: str | None = None
    api_key: str | None = None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_url and self.api_key)


@dataclass
class StorageConfig:
    endpoint: str | None = None
    access_key: str | None = None
    secret_key: str | None = None
    region: str = "auto"
    bucket: str | None = None
    public_base: str | None = None

    @property
    def is_configured(self) -> bool:
        return bool(self.endpoint and self.access_key and self.secret_key and self.bucket)

    @classmethod
    def from_env(cls) -> "StorageConfig":
        return cls(
            endpoint=_env("R2_ENDPOINT", "S3_ENDPOINT"),
            access_key=_env("R2_ACCESS_KEY_ID", "S3_ACCESS_KEY"),
            secret_key=_env("R2_SECRET_ACCESS_KEY", "S3_SECRET_KEY"),
            region=_env("R2_REGION", "S3_REGION", default="auto") or "auto",
            bucket=_env("R2_BUCKET", "S3_BUCKET"),
            public_base=_env("R2_PUBLIC_BASE", "S3_PUBLIC_BASE"),
        )


@dataclass
class GuardConfig:
    upload_max_bytes: int = DEFAULT_UPLOAD_MAX_BYTES
    max_body_bytes: int = DEFAULT_BODY_MAX_BYTES

    @classmethod
    def from_env(cls) -> "GuardConfig":
        return cls(
            upload_max_bytes=_as_int(_env("ASSET_UPLOAD_MAX_BYTES"), DEFAULT_UPLOAD_MAX_BYTES),
            max_body_bytes=_as_int(_env("MAX_BODY_BYTES"), DEFAULT_BODY_MAX_BYTES),
        )


@dataclass
class Settings:
    environment: str
    log_level: str
    allowed_origins: List[str]
    owner_open_id: str | None
    database: DatabaseConfig
    llm: LLMConfig
    zhipu: ZhipuConfig
    forge: ForgeConfig
    storage: StorageConfig
    guard: GuardConfig


@lru_cache()
def get_settings() -> Settings:
    database = DatabaseConfig(
        url=_env("DATABASE_URL", default="sqlite:///./marketing_studio.db")
        or "sqlite:///./marketing_studio.db",
        echo=(_env("DATABASE_ECHO", default="0") or "0").lower() in {"1", "true", "yes", "on"},
    )

    zhipu = ZhipuConfig(
        api_key=_env("ZHIPU_API_KEY"),
        api_url=_env("ZHIPU_IMAGE_URL", default=ZHIPU_IMAGE_URL) or ZHIPU_IMAGE_URL,
        model=_env("ZHIPU_IMAGE_MODEL", default="cogview-3-flash") or "cogview-3-flash",
    )

    forge = ForgeConfig(
        api_url=_env("FORGE_API_URL", "BUILT_IN_FORGE_API_URL"),
        api_key=_env("FORGE_API_KEY", "BUILT_IN_FORGE_API_KEY"),
    )

    return Settings(
        environment=_env("ENVIRONMENT", default="development") or "development",
        log_level=(_env("LOG_LEVEL", default="INFO") or "INFO").upper(),
        allowed_origins=_parse_allowed_origins(_env("ALLOWED_ORIGINS", "CORS_ALLOW_ORIGINS")),
        owner_open_id=_env("OWNER_OPEN_ID"),
        database=database,
        llm=LLMConfig.from_env(),
        zhipu=zhipu,
        forge=forge,
        storage=StorageConfig.from_env(),
        guard=GuardConfig.from_env(),
    )


__all__ = [
    "DatabaseConfig",
    "ForgeConfig",
    "GuardConfig",
    "LLMConfig",
    "Settings",
    "StorageConfig",
    "ZhipuConfig",
    "get_settings",
]
