from __future__ import annotations

import textwrap
from typing import Any, Dict, Iterable, List

from marketing_studio.schemas import Platform, Style

POSTER_STYLE_PHRASES: Dict[Style, str] = {
    Style.PROFESSIONAL: "professional corporate style, clean layout, blue and white color scheme",
    Style.CREATIVE: "vibrant creative style, colorful, dynamic composition, playful elements",
    Style.TECH: "futuristic tech style, dark background, neon accents, geometric shapes",
    Style.MINIMAL: "minimalist elegant style, lots of white space, subtle colors",
    Style.WARM: "warm friendly style, soft colors, rounded shapes, inviting atmosphere",
}
DEFAULT_POSTER_STYLE = "modern style"

PLATFORM_RULES: Dict[Platform, str] = {
    Platform.WECHAT: "适合深度阅读，可以较长，需要有吸引人的开头和结尾，适当使用emoji，段落清晰",
    Platform.XIAOHONGSHU: "简短精炼，使用大量emoji，分点列出，标题要吸睛，适合种草风格，控制在500字以内",
    Platform.DOUYIN: "极简文案，适合配合短视频，突出重点，使用流行语，控制在100字以内",
    Platform.WEIBO: "简洁有力，适合快速传播，可以使用话题标签#，控制在140字以内",
    Platform.ZHIHU: "专业深度，逻辑清晰，可以较长，适合问答形式，引用数据和案例",
}

POSTER_REQUIREMENTS = (
    "clean typography, professional layout, high contrast text, modern design, "
    "8k quality, no text distortion"
)

CONTENT_SYSTEM_TEMPLATE = textwrap.dedent(
    """\
    你是一名顶级的营销策划专家和内容创作者，尤其擅长根据简单的客户需求，快速构思并撰写适用于多个营销渠道的全套宣传物料。

    现在，请根据以下客户需求，为我生成一套完整的营销内容。请严格按照下面指定的JSON格式输出，确保每个字段都内容详实且符合渠道调性。

    **输出风格要求**："{style}"

    **重要内容要求**：
    1. 输出的文本内容（如text、voiceover等）必须是纯文本，**严禁使用Markdown格式符号**（如 **加粗**、## 标题、- 列表符等）。
    2. 请直接使用自然的段落和标点符号来组织内容。

    **请按以下JSON格式输出**：
    {{
      "prospectus": {{
        "title": "招商文案标题",
        "sections": [
          {{"subtitle": "一、项目概览", "text": "项目背景、定位和核心价值的详细介绍"}},
          {{"subtitle": "二、核心优势", "text": "分点阐述项目的地理位置、政策支持、产业生态、人才资源等核心优势"}},
          {{"subtitle": "三、合作模式与入驻流程", "text": "说明合作方式、优惠政策以及详细的入驻申请流程"}},
          {{"subtitle": "四、联系我们", "text": "提供联系方式和地址"}}
        ]
      }},
      "videoScript": {{
        "title": "短视频标题",
        "totalDuration": 60,
        "scenes": [
          {{
            "sceneNumber": 1,
            "duration": 5,
            "visuals": "镜头画面描述",
            "voiceover": "旁白或台词",
            "bgmSuggestion": "背景音乐风格建议"
          }}
        ]
      }},
      "posterElements": {{
        "mainHeadline": "海报主标题",
        "subHeadline": "副标题",
        "bodyText": "核心宣传语或活动详情",
        "callToAction": "引导用户行动的文字"
      }}
    }}"""
)

PLATFORM_SYSTEM_TEMPLATE = textwrap.dedent(
    """\
    你是一名资深的新媒体运营专家，擅长将营销内容适配到不同平台。请根据原始内容，为指定的平台生成适配版本。

    风格要求：{style}

    **重要内容要求**：
    1. 输出的文本内容必须是纯文本，**严禁使用Markdown格式符号**（如 **加粗**、## 标题、- 列表符等）。
    2. 即使是列点，也请使用数字序号或直接分行，不要使用Markdown的列表符号。
    3. 表情符号（emoji）可以使用。

    请为以下平台生成适配内容，严格按照JSON格式输出：
    {platform_rules}

    输出格式：
    {{
      "platforms": {{
        "平台名称": {{
          "title": "标题",
          "content": "正文内容",
          "hashtags": ["标签1", "标签2"]
        }}
      }}
    }}"""
)


def _strict_object(properties: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": properties,
        "required": list(properties),
        "additionalProperties": False,
    }


def marketing_content_schema() -> Dict[str, Any]:
    """JSON schema mirroring :class:`MarketingContent`; every field required."""

    section = _strict_object({"subtitle": {"type": "string"}, "text": {"type": "string"}})
    scene = _strict_object(
        {
            "sceneNumber": {"type": "number"},
            "duration": {"type": "number"},
            "visuals": {"type": "string"},
            "voiceover": {"type": "string"},
            "bgmSuggestion": {"type": "string"},
        }
    )
    return _strict_object(
        {
            "prospectus": _strict_object(
                {"title": {"type": "string"}, "sections": {"type": "array", "items": section}}
            ),
            "videoScript": _strict_object(
                {
                    "title": {"type": "string"},
                    "totalDuration": {"type": "number"},
                    "scenes": {"type": "array", "items": scene},
                }
            ),
            "posterElements": _strict_object(
                {
                    "mainHeadline": {"type": "string"},
                    "subHeadline": {"type": "string"},
                    "bodyText": {"type": "string"},
                    "callToAction": {"type": "string"},
                }
            ),
        }
    )


def marketing_content_response_format() -> Dict[str, Any]:
    return {
        "type": "json_schema",
        "json_schema": {
            "name": "marketing_content",
            "strict": True,
            "schema": marketing_content_schema(),
        },
    }


def build_content_messages(prompt: str, style: Style) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": CONTENT_SYSTEM_TEMPLATE.format(style=style.value)},
        {"role": "user", "content": f"客户核心需求：{prompt}"},
    ]


def poster_style_phrase(style: Style | str) -> str:
    try:
        return POSTER_STYLE_PHRASES[Style(style)]
    except (KeyError, ValueError):
        return DEFAULT_POSTER_STYLE


def build_poster_prompt(main_headline: str, sub_headline: str, body_text: str, style: Style | str) -> str:
    return "\n".join(
        [
            f"Professional marketing poster design, {poster_style_phrase(style)}.",
            f'Main headline: "{main_headline}"',
            f'Subtitle: "{sub_headline}"',
            f'Body text: "{body_text}"',
            f"Requirements: {POSTER_REQUIREMENTS}",
        ]
    )


def build_platform_messages(
    original_content: str, platforms: Iterable[Platform], style: Style
) -> List[Dict[str, str]]:
    rules = "\n".join(f"- {platform.value}：{PLATFORM_RULES[platform]}" for platform in platforms)
    system = PLATFORM_SYSTEM_TEMPLATE.format(style=style.value, platform_rules=rules)
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": f"原始内容：{original_content}"},
    ]


__all__ = [
    "DEFAULT_POSTER_STYLE",
    "PLATFORM_RULES",
    "POSTER_STYLE_PHRASES",
    "build_content_messages",
    "build_platform_messages",
    "build_poster_prompt",
    "marketing_content_response_format",
    "marketing_content_schema",
    "poster_style_phrase",
]
