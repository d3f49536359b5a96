"""
AI模型交互统一模块
提供Provider接口、Gemini实现和限流重试
"""

from .base import BaseAIProvider
from .config import ModelConfig
from .exceptions import AIError, AIConfigurationError, EmptyResponseError
from .models import ChatTurn, ImagePayload, ModelCapability
from .retry import BackoffExecutor, RateLimited, Terminal, classify_error, retry_with_backoff

__all__ = [
    "BaseAIProvider",
    "ModelConfig",
    "AIError",
    "AIConfigurationError",
    "EmptyResponseError",
    "ChatTurn",
    "ImagePayload",
    "ModelCapability",
    "BackoffExecutor",
    "RateLimited",
    "Terminal",
    "classify_error",
    "retry_with_backoff",
]
