"""
AI模型交互的数据模型
"""

from enum import Enum
from dataclasses import dataclass
from typing import Optional


class ModelCapability(str, Enum):
    """模型能力枚举"""
    CHAT = "chat"
    VISION = "vision"


@dataclass(frozen=True)
class ImagePayload:
    """已下载的图片数据，作为多模态输入提交给模型"""
    data: bytes
    mime_type: str = "image/jpeg"
    source_url: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class ChatTurn:
    """一轮历史对话，role 为 "user" 或 "model" """
    role: str
    content: str
