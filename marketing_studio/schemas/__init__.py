from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CompatModel(BaseModel):
    """Base model: camelCase on the wire, snake_case in Python, unknown keys ignored."""

    model_config = ConfigDict(
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Style(str, Enum):
    """Copywriting tone selected by the user."""

    PROFESSIONAL = "专业稳重"
    CREATIVE = "活泼创意"
    TECH = "科技感"
    MINIMAL = "简约大气"
    WARM = "温馨亲切"


class Platform(str, Enum):
    """Social platforms supported for content adaptation."""

    WECHAT = "微信公众号"
    XIAOHONGSHU = "小红书"
    DOUYIN = "抖音"
    WEIBO = "微博"
    ZHIHU = "知乎"


class AssetType(str, Enum):
    LOGO = "logo"
    COLOR = "color"
    IMAGE = "image"
    FONT = "font"


__all__ = ["AssetType", "Platform", "Style", "_CompatModel"]
