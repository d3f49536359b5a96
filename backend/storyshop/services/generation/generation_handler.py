"""
AI生成处理器
处理网络请求、日志记录和异常处理
"""

from typing import Any, Dict, NoReturn

from fastapi import HTTPException, status

from storyshop.core.log_utils import get_logger
from storyshop.schemas.generation import (
    CharacterBatchRequest,
    ChatRequest,
    CompletionRequest,
    TemplateReplacementRequest,
    TextGenerationRequest,
)
from storyshop.services.generation.character_service import CharacterGenerationService
from storyshop.services.generation.exceptions import InvalidInputError
from storyshop.services.generation.text_service import TextGenerationService

logger = get_logger(__name__)


def _raise_http_error(e: Exception, operation: str, fallback_message: str) -> NoReturn:
    """将服务层异常转换为HTTP异常"""
    if isinstance(e, InvalidInputError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    logger.error("AI生成请求失败", operation=operation, exception=e)
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(e) or fallback_message
    ) from e


class TextGenerationHandler:
    """文本生成处理器"""

    def __init__(self, service: TextGenerationService):
        self.service = service

    async def handle_generate(self, request: TextGenerationRequest) -> Dict[str, Any]:
        try:
            result = await self.service.generate_text(
                request.prompt,
                model=request.model,
                temperature=request.temperature,
                max_output_tokens=request.max_output_tokens
            )
            return result.model_dump()
        except Exception as e:
            _raise_http_error(e, "ai_generate_failed", "Failed to generate text")

    async def handle_chat(self, request: ChatRequest) -> Dict[str, Any]:
        try:
            result = await self.service.chat(
                request.message,
                history=request.history,
                model=request.model,
                temperature=request.temperature,
                max_output_tokens=request.max_output_tokens
            )
            return result.model_dump()
        except Exception as e:
            _raise_http_error(e, "ai_chat_failed", "Failed to chat with AI")

    async def handle_complete(self, request: CompletionRequest) -> Dict[str, Any]:
        try:
            result = await self.service.complete(request.text)
            return result.model_dump()
        except Exception as e:
            _raise_http_error(e, "ai_complete_failed", "Failed to complete text")


class CharacterGenerationHandler:
    """角色生成处理器"""

    def __init__(self, service: CharacterGenerationService):
        self.service = service

    async def handle_fairy_tale_characters(self, request: CharacterBatchRequest) -> Dict[str, Any]:
        """批量生成；单项失败已在服务层收敛，这里只处理整体异常"""
        try:
            result = await self.service.generate_batch(request.image_urls, model=request.model)
            return result.model_dump()
        except Exception as e:
            _raise_http_error(e, "fairy_tale_characters_failed", "Failed to generate fairy tale characters")

    async def handle_replace_child(self, request: TemplateReplacementRequest) -> Dict[str, Any]:
        try:
            result = await self.service.replace_subject_in_template(
                request.child_image_url,
                request.template_image_url,
                model=request.model,
                template_description=request.template_description
            )
            return result.model_dump()
        except Exception as e:
            _raise_http_error(e, "replace_child_failed", "Failed to replace child in template")
