from marketing_studio.config import _parse_allowed_origins, get_settings


def test_parse_allowed_origins_with_paths() -> None:
    raw = "https://studio.example.com/app, https://admin.example.com/sub"
    assert _parse_allowed_origins(raw) == [
        "https://studio.example.com",
        "https://admin.example.com",
    ]


def test_parse_allowed_origins_with_wildcard() -> None:
    assert _parse_allowed_origins("https://studio.example.com,*") == ["*"]


def test_parse_allowed_origins_deduplicates_and_defaults() -> None:
    assert _parse_allowed_origins(" https://a.example/ , https://a.example ,") == ["https://a.example"]
    assert _parse_allowed_origins("") == ["*"]


def test_settings_read_provider_aliases(monkeypatch) -> None:
    monkeypatch.delenv("LLM_API_KEY", raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-alias")
    monkeypatch.setenv("BUILT_IN_FORGE_API_URL", "https://forge.example")
    monkeypatch.setenv("BUILT_IN_FORGE_API_KEY", "fk")
    monkeypatch.delenv("FORGE_API_URL", raising=False)
    monkeypatch.delenv("FORGE_API_KEY", raising=False)
    monkeypatch.setenv("ASSET_UPLOAD_MAX_BYTES", "1024")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = get_settings()

    assert settings.llm.api_key == "sk-alias"
    assert settings.llm.is_configured
    assert settings.forge.is_configured
    assert settings.guard.upload_max_bytes == 1024
    assert settings.guard.max_body_bytes == 8 * 1024 * 1024
    assert settings.log_level == "DEBUG"


def test_settings_defaults(monkeypatch) -> None:
    for name in ("ZHIPU_API_KEY", "ZHIPU_IMAGE_MODEL", "LLM_MODEL", "OPENAI_MODEL", "ASSET_UPLOAD_MAX_BYTES"):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.zhipu.model == "cogview-3-flash"
    assert settings.zhipu.api_url == "https://open.bigmodel.cn/api/paas/v4/images/generations"
    assert not settings.zhipu.is_configured
    assert settings.llm.model == "gpt-4o-mini"
    assert settings.guard.upload_max_bytes == 5 * 1024 * 1024
