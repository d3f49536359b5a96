"""
Provider基类
"""

from .chat import BaseChatProvider
from .vision import BaseVisionProvider

__all__ = [
    "BaseChatProvider",
    "BaseVisionProvider",
]
