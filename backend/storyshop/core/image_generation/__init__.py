"""
图片生成模块
"""

from .pollinations import (
    ImageUrlProfile,
    build_image_url,
    character_profile,
    encode_prompt,
    template_profile,
)

__all__ = [
    "ImageUrlProfile",
    "build_image_url",
    "character_profile",
    "encode_prompt",
    "template_profile",
]
