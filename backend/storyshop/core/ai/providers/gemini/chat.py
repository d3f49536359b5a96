"""
Gemini Chat Provider
基于 Google GenAI SDK 的文本生成与多轮对话
"""

from typing import List, Optional

from google import genai
from google.genai import types

from storyshop.core.ai.config import ModelConfig
from storyshop.core.ai.exceptions import EmptyResponseError
from storyshop.core.ai.models import ChatTurn
from storyshop.core.ai.providers.base.chat import BaseChatProvider
from storyshop.core.ai.providers.gemini.client import create_genai_client
from storyshop.core.log_messages import log_messages
from storyshop.core.log_utils import get_logger

logger = get_logger(__name__)


class GeminiChatProvider(BaseChatProvider):
    """Gemini对话Provider"""

    def __init__(self, model_config: ModelConfig, client: Optional[genai.Client] = None):
        self._client = client
        super().__init__(model_config)

    def _initialize(self):
        if self._client is None:
            self._client = create_genai_client(self.model_config)

    @property
    def client(self) -> genai.Client:
        return self._client

    def get_provider_name(self) -> str:
        """获取Provider名称"""
        return "gemini"

    @staticmethod
    def _build_config(
        temperature: Optional[float],
        max_output_tokens: Optional[int]
    ) -> Optional[types.GenerateContentConfig]:
        """只有指定了生成参数时才构建配置，否则使用模型默认值"""
        if temperature is None and max_output_tokens is None:
            return None
        return types.GenerateContentConfig(
            temperature=temperature,
            max_output_tokens=max_output_tokens
        )

    @staticmethod
    def _build_history(history: List[ChatTurn]) -> List[types.Content]:
        return [
            types.Content(role=turn.role, parts=[types.Part.from_text(text=turn.content)])
            for turn in history
        ]

    @staticmethod
    def _extract_text(response, model_name: str) -> str:
        text = response.text
        if not text:
            raise EmptyResponseError(details={"model": model_name})
        return text

    async def generate_text(
        self,
        prompt: str,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None
    ) -> str:
        model_name = self.resolve_model(model)
        logger.info(
            log_messages.AI_CALL_START,
            operation="gemini_text_call_start",
            model_name=model_name,
            prompt_length=len(prompt)
        )

        response = await self.client.aio.models.generate_content(
            model=model_name,
            contents=prompt,
            config=self._build_config(temperature, max_output_tokens)
        )
        text = self._extract_text(response, model_name)

        logger.info(
            log_messages.AI_CALL_SUCCESS,
            operation="gemini_text_call_completed",
            model_name=model_name,
            response_length=len(text)
        )
        return text

    async def chat(
        self,
        message: str,
        history: List[ChatTurn],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None
    ) -> str:
        model_name = self.resolve_model(model)
        logger.info(
            log_messages.AI_CALL_START,
            operation="gemini_chat_call_start",
            model_name=model_name,
            history_length=len(history)
        )

        session = self.client.aio.chats.create(
            model=model_name,
            config=self._build_config(temperature, max_output_tokens),
            history=self._build_history(history)
        )
        response = await session.send_message(message)
        text = self._extract_text(response, model_name)

        logger.info(
            log_messages.AI_CALL_SUCCESS,
            operation="gemini_chat_call_completed",
            model_name=model_name,
            response_length=len(text)
        )
        return text
