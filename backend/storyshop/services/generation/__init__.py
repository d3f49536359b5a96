"""
AI生成服务
"""

from .character_service import CharacterGenerationService, QUOTA_EXCEEDED_MESSAGE
from .exceptions import InvalidInputError
from .text_service import TextGenerationService

__all__ = [
    "CharacterGenerationService",
    "TextGenerationService",
    "QUOTA_EXCEEDED_MESSAGE",
    "InvalidInputError",
]
