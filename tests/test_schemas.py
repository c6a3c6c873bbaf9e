import pytest
from pydantic import ValidationError

from conftest import sample_content
from marketing_studio.schemas import Platform
from marketing_studio.schemas.content import GeneratePlatformContentRequest, GenerateContentRequest
from marketing_studio.schemas.records import (
    AssetCreateRequest,
    AssetUpdateRequest,
    AssetUploadRequest,
    HistoryUpdateRequest,
)


def test_content_request_bounds_trimmed_prompt_but_keeps_it_as_typed() -> None:
    assert GenerateContentRequest.model_validate({"prompt": "  卖咖啡  ", "style": "科技感"}).prompt == "  卖咖啡  "
    padded = " " + "x" * 2000 + " "
    assert GenerateContentRequest.model_validate({"prompt": padded, "style": "科技感"}).prompt == padded
    with pytest.raises(ValidationError):
        GenerateContentRequest.model_validate({"prompt": "x" * 2001, "style": "科技感"})
    with pytest.raises(ValidationError):
        GenerateContentRequest.model_validate({"prompt": " \n ", "style": "科技感"})


def test_platform_request_accepts_snake_and_camel_and_dedupes() -> None:
    camel = GeneratePlatformContentRequest.model_validate(
        {"historyId": 1, "originalContent": "原文", "platforms": ["微博", "抖音", "微博"], "style": "科技感"}
    )
    snake = GeneratePlatformContentRequest.model_validate(
        {"history_id": 1, "original_content": "原文", "platforms": ["微博"], "style": "科技感"}
    )
    assert camel.platforms == [Platform.WEIBO, Platform.DOUYIN]
    assert snake.history_id == 1


def test_history_update_only_reports_sent_fields() -> None:
    update = HistoryUpdateRequest.model_validate(
        {"posterElements": sample_content()["posterElements"], "prospectusContent": None}
    )
    changes = update.changes()
    assert set(changes) == {"poster_elements"}
    assert changes["poster_elements"]["mainHeadline"] == "滨江科技园"


def test_asset_create_rules() -> None:
    assert AssetCreateRequest.model_validate({"name": "主色", "type": "color", "value": "#fff"}).url is None
    AssetCreateRequest.model_validate({"name": "字体", "type": "font", "url": "https://cdn.example/f.ttf"})
    with pytest.raises(ValidationError):
        AssetCreateRequest.model_validate({"name": "主色", "type": "color", "url": "https://cdn.example/x"})
    with pytest.raises(ValidationError):
        AssetCreateRequest.model_validate({"name": "", "type": "logo", "url": "https://cdn.example/x"})


def test_asset_upload_limits_type() -> None:
    with pytest.raises(ValidationError):
        AssetUploadRequest.model_validate(
            {"name": "x", "type": "color", "fileData": "AAAA", "mimeType": "image/png"}
        )


def test_asset_update_ignores_null_name() -> None:
    update = AssetUpdateRequest.model_validate({"name": None, "description": None})
    assert update.changes() == {"description": None}
