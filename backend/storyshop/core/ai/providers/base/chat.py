"""
对话能力Provider基类
"""

from abc import abstractmethod
from typing import List, Optional, Set

from storyshop.core.ai.base import BaseAIProvider
from storyshop.core.ai.models import ChatTurn, ModelCapability


class BaseChatProvider(BaseAIProvider):
    """对话Provider基类"""

    def get_capabilities(self) -> Set[ModelCapability]:
        """获取支持的能力"""
        return {ModelCapability.CHAT}

    @abstractmethod
    async def generate_text(
        self,
        prompt: str,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None
    ) -> str:
        """
        单轮文本生成

        Args:
            prompt: 提示词
            model: 模型名称
            temperature: 温度参数
            max_output_tokens: 最大输出token数

        Returns:
            生成的文本
        """
        pass

    @abstractmethod
    async def chat(
        self,
        message: str,
        history: List[ChatTurn],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None
    ) -> str:
        """
        带历史记录的多轮对话

        Args:
            message: 本轮用户消息
            history: 历史对话，按时间顺序排列
            model: 模型名称
            temperature: 温度参数
            max_output_tokens: 最大输出token数

        Returns:
            模型回复文本
        """
        pass
