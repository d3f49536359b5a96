"""
AI生成API端点
提供文本生成、对话、续写、童话角色生成和模板替换接口
"""

from fastapi import APIRouter, Depends

from storyshop.api.v1.deps import get_character_service, get_text_service
from storyshop.schemas.common import SuccessResponse
from storyshop.schemas.generation import (
    BatchGenerationResult,
    CharacterBatchRequest,
    ChatRequest,
    CompletionRequest,
    CompletionResult,
    TemplateReplacementRequest,
    TemplateReplacementResult,
    TextGenerationRequest,
    TextGenerationResult,
)
from storyshop.services.generation.character_service import CharacterGenerationService
from storyshop.services.generation.generation_handler import (
    CharacterGenerationHandler,
    TextGenerationHandler,
)
from storyshop.services.generation.text_service import TextGenerationService

router = APIRouter()


@router.post(
    "/generate",
    response_model=SuccessResponse[TextGenerationResult],
    summary="文本生成",
    description="使用Gemini根据提示词生成文本"
)
async def generate_text(
    request: TextGenerationRequest,
    service: TextGenerationService = Depends(get_text_service)
) -> SuccessResponse[TextGenerationResult]:
    data = await TextGenerationHandler(service).handle_generate(request)
    return SuccessResponse[TextGenerationResult](data=data)


@router.post(
    "/chat",
    response_model=SuccessResponse[TextGenerationResult],
    summary="多轮对话",
    description="携带历史记录与Gemini对话"
)
async def chat(
    request: ChatRequest,
    service: TextGenerationService = Depends(get_text_service)
) -> SuccessResponse[TextGenerationResult]:
    data = await TextGenerationHandler(service).handle_chat(request)
    return SuccessResponse[TextGenerationResult](data=data)


@router.post(
    "/complete",
    response_model=CompletionResult,
    summary="文本续写"
)
async def complete(
    request: CompletionRequest,
    service: TextGenerationService = Depends(get_text_service)
) -> CompletionResult:
    data = await TextGenerationHandler(service).handle_complete(request)
    return CompletionResult(**data)


@router.post(
    "/fairy-tale-characters",
    response_model=SuccessResponse[BatchGenerationResult],
    summary="童话角色生成",
    description=(
        "根据上传的照片逐张生成童话角色插画，单张失败不影响其他图片。"
        "background_image_url 为保留字段，当前版本会被忽略"
    )
)
async def generate_fairy_tale_characters(
    request: CharacterBatchRequest,
    service: CharacterGenerationService = Depends(get_character_service)
) -> SuccessResponse[BatchGenerationResult]:
    """
    批量生成童话角色

    Returns:
        data 中的 characters 与 image_urls 一一对应，需逐项检查 success
    """
    data = await CharacterGenerationHandler(service).handle_fairy_tale_characters(request)
    return SuccessResponse[BatchGenerationResult](data=data)


@router.post(
    "/replace-child",
    response_model=SuccessResponse[TemplateReplacementResult],
    summary="模板替换",
    description="将照片中的孩子放入模板插画的场景中，可选 template_description 简要说明模板画面"
)
async def replace_child(
    request: TemplateReplacementRequest,
    service: CharacterGenerationService = Depends(get_character_service)
) -> SuccessResponse[TemplateReplacementResult]:
    data = await CharacterGenerationHandler(service).handle_replace_child(request)
    return SuccessResponse[TemplateReplacementResult](data=data)
