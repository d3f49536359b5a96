"""
Gemini Provider
"""

from .chat import GeminiChatProvider
from .client import create_genai_client
from .vision import GeminiVisionProvider

__all__ = [
    "GeminiChatProvider",
    "GeminiVisionProvider",
    "create_genai_client",
]
