"""
Gemini Vision Provider
基于 Google GenAI SDK 的多模态理解
"""

from typing import List, Optional

from google import genai
from google.genai import types

from storyshop.core.ai.config import ModelConfig
from storyshop.core.ai.exceptions import EmptyResponseError
from storyshop.core.ai.models import ImagePayload
from storyshop.core.ai.providers.base.vision import BaseVisionProvider
from storyshop.core.ai.providers.gemini.client import create_genai_client
from storyshop.core.log_messages import log_messages
from storyshop.core.log_utils import get_logger

logger = get_logger(__name__)


class GeminiVisionProvider(BaseVisionProvider):
    """Gemini多模态Provider"""

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
    def build_contents(prompt: str, images: List[ImagePayload]) -> list:
        """构建请求内容：文本指令在前，图片按顺序在后"""
        contents = [prompt]
        for image in images:
            contents.append(types.Part.from_bytes(data=image.data, mime_type=image.mime_type))
        return contents

    async def describe(
        self,
        prompt: str,
        images: List[ImagePayload],
        model: Optional[str] = None
    ) -> str:
        model_name = self.resolve_model(model)
        logger.info(
            log_messages.AI_CALL_START,
            operation="gemini_vision_call_start",
            model_name=model_name,
            image_count=len(images),
            image_bytes=sum(image.size for image in images)
        )

        response = await self.client.aio.models.generate_content(
            model=model_name,
            contents=self.build_contents(prompt, images)
        )

        text = response.text
        if not text or not text.strip():
            raise EmptyResponseError(details={"model": model_name})

        logger.info(
            log_messages.AI_CALL_SUCCESS,
            operation="gemini_vision_call_completed",
            model_name=model_name,
            response_length=len(text)
        )
        return text
