from marketing_studio.schemas import Platform, Style
from marketing_studio.services.prompts import (
    DEFAULT_POSTER_STYLE,
    PLATFORM_RULES,
    POSTER_STYLE_PHRASES,
    build_content_messages,
    build_platform_messages,
    build_poster_prompt,
    marketing_content_response_format,
    poster_style_phrase,
)


def test_every_style_and_platform_is_mapped():
    assert set(POSTER_STYLE_PHRASES) == set(Style)
    assert set(PLATFORM_RULES) == set(Platform)


def test_unknown_style_uses_default_phrase():
    assert poster_style_phrase("赛博朋克") == DEFAULT_POSTER_STYLE
    assert poster_style_phrase(Style.TECH).startswith("futuristic tech style")


def test_poster_prompt_layout():
    prompt = build_poster_prompt("主标题", "副标题", "正文", Style.WARM)
    lines = prompt.split("\n")
    assert lines[0] == (
        "Professional marketing poster design, "
        "warm friendly style, soft colors, rounded shapes, inviting atmosphere."
    )
    assert lines[1] == 'Main headline: "主标题"'
    assert lines[2] == 'Subtitle: "副标题"'
    assert lines[3] == 'Body text: "正文"'
    assert lines[4].startswith("Requirements: clean typography")


def test_content_messages_embed_style_and_prompt():
    system, user = build_content_messages("卖咖啡", Style.CREATIVE)
    assert '"活泼创意"' in system["content"]
    assert '"videoScript"' in system["content"]
    assert user == {"role": "user", "content": "客户核心需求：卖咖啡"}


def test_response_format_is_strict():
    fmt = marketing_content_response_format()
    schema = fmt["json_schema"]["schema"]
    assert fmt["json_schema"]["strict"] is True
    assert schema["required"] == ["prospectus", "videoScript", "posterElements"]
    scene = schema["properties"]["videoScript"]["properties"]["scenes"]["items"]
    assert scene["additionalProperties"] is False
    assert set(scene["required"]) == {"sceneNumber", "duration", "visuals", "voiceover", "bgmSuggestion"}


def test_platform_messages_list_only_requested_platforms():
    system, user = build_platform_messages("原文", [Platform.DOUYIN, Platform.ZHIHU], Style.PROFESSIONAL)
    assert f"- 抖音：{PLATFORM_RULES[Platform.DOUYIN]}" in system["content"]
    assert "- 知乎：" in system["content"]
    assert "- 微博：" not in system["content"]
    assert "风格要求：专业稳重" in system["content"]
    assert user["content"] == "原始内容：原文"
