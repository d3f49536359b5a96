"""
API依赖注入
服务实例在应用启动时创建一次，挂载在 app.state 上
"""

from fastapi import HTTPException, Request, status

from storyshop.services.generation.character_service import CharacterGenerationService
from storyshop.services.generation.text_service import TextGenerationService


def _get_state_service(request: Request, name: str):
    service = getattr(request.app.state, name, None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="AI service is not configured"
        )
    return service


def get_character_service(request: Request) -> CharacterGenerationService:
    """获取角色生成服务"""
    return _get_state_service(request, "character_service")


def get_text_service(request: Request) -> TextGenerationService:
    """获取文本生成服务"""
    return _get_state_service(request, "text_service")
