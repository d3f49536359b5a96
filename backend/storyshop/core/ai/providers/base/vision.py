"""
多模态能力Provider基类
"""

from abc import abstractmethod
from typing import List, Optional, Set

from storyshop.core.ai.base import BaseAIProvider
from storyshop.core.ai.models import ImagePayload, ModelCapability


class BaseVisionProvider(BaseAIProvider):
    """多模态Provider基类"""

    def get_capabilities(self) -> Set[ModelCapability]:
        """获取支持的能力"""
        return {ModelCapability.VISION}

    @abstractmethod
    async def describe(
        self,
        prompt: str,
        images: List[ImagePayload],
        model: Optional[str] = None
    ) -> str:
        """
        将文本指令和一张或多张图片一起提交给模型

        Args:
            prompt: 文本指令
            images: 图片列表，按提交顺序排列
            model: 模型名称，默认使用配置中的模型

        Returns:
            模型返回的文本
        """
        pass
