"""
Pollinations 图片生成地址构建
只负责拼接请求地址，图片由前端（如 <img> 标签）直接加载
"""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote, urlencode

from storyshop.core.config import Settings, settings as default_settings

# 与 JavaScript encodeURIComponent 保持一致的不转义字符
URI_COMPONENT_SAFE_CHARS = "-_.!~*'()"


@dataclass(frozen=True)
class ImageUrlProfile:
    """生成图片的尺寸和增强参数"""
    width: int
    height: int
    enhance: bool = False
    nologo: bool = True

    def to_query(self) -> str:
        params = {"width": self.width, "height": self.height}
        if self.nologo:
            params["nologo"] = "true"
        if self.enhance:
            params["enhance"] = "true"
        return urlencode(params)


def character_profile(settings: Optional[Settings] = None) -> ImageUrlProfile:
    """单张角色插画使用的尺寸"""
    settings = settings or default_settings
    return ImageUrlProfile(
        width=settings.character_image_width,
        height=settings.character_image_height,
        enhance=settings.character_image_enhance
    )


def template_profile(settings: Optional[Settings] = None) -> ImageUrlProfile:
    """模板替换使用的高分辨率尺寸"""
    settings = settings or default_settings
    return ImageUrlProfile(
        width=settings.template_image_width,
        height=settings.template_image_height,
        enhance=settings.template_image_enhance
    )


def encode_prompt(prompt: str) -> str:
    """按 encodeURIComponent 的规则编码提示词"""
    return quote(prompt, safe=URI_COMPONENT_SAFE_CHARS)


def build_image_url(prompt: str, profile: ImageUrlProfile, base_url: Optional[str] = None) -> str:
    """
    构建图片生成地址

    Args:
        prompt: 图片生成提示词
        profile: 尺寸和增强参数
        base_url: 生成服务地址，默认使用配置

    Returns:
        形如 {base_url}/{encoded_prompt}?width=..&height=.. 的地址
    """
    base_url = (base_url or default_settings.pollinations_base_url).rstrip("/")
    return f"{base_url}/{encode_prompt(prompt)}?{profile.to_query()}"
