"""
Storyshop - FastAPI主应用
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storyshop.api.v1.router import api_router
from storyshop.core.ai.config import ModelConfig
from storyshop.core.ai.providers.gemini import (
    GeminiChatProvider,
    GeminiVisionProvider,
    create_genai_client,
)
from storyshop.core.ai.retry import BackoffExecutor
from storyshop.core.config import settings
from storyshop.core.log_utils import setup_logging, get_logger
from storyshop.core.storage.utils.image import ImageFetcher
from storyshop.services.generation import CharacterGenerationService, TextGenerationService

# 初始化日志系统
setup_logging()

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理：AI客户端和HTTP连接池只创建一次，关闭时统一释放"""
    logger.info("应用启动中...")

    fetcher = ImageFetcher(timeout=settings.image_fetch_timeout)
    app.state.character_service = None
    app.state.text_service = None

    if settings.google_ai_enabled:
        model_config = ModelConfig.from_settings(settings)
        client = create_genai_client(model_config)
        executor = BackoffExecutor(
            max_retries=settings.ai_max_retries,
            initial_delay_ms=settings.ai_retry_initial_delay_ms
        )
        app.state.character_service = CharacterGenerationService(
            fetcher=fetcher,
            vision_provider=GeminiVisionProvider(model_config, client=client),
            executor=executor,
            settings=settings
        )
        app.state.text_service = TextGenerationService(
            chat_provider=GeminiChatProvider(model_config, client=client),
            executor=executor
        )
        logger.info("Google AI服务已启用", operation="google_ai_enabled", model=settings.gemini_model)
    else:
        logger.warning("未配置GOOGLE_API_KEY，AI接口将返回503", operation="google_ai_disabled")

    logger.info("应用启动完成")

    yield

    await fetcher.close()
    logger.info("应用关闭")


# 创建FastAPI应用实例
app = FastAPI(
    title=settings.project_name,
    version=settings.app_version,
    description="童话角色插画生成与文本生成服务",
    openapi_url=f"{settings.api_v1_str}/openapi.json",
    docs_url=f"{settings.api_v1_str}/docs",
    redoc_url=f"{settings.api_v1_str}/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)

# 注册API路由
app.include_router(api_router, prefix=settings.api_v1_str)


@app.get("/")
def read_root():
    """根路径"""
    return {
        "message": "Storyshop API",
        "version": settings.app_version,
        "docs": f"{settings.api_v1_str}/docs"
    }


@app.get("/health")
def health_check():
    """健康检查"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_debug,
        log_level=settings.log_level.lower()
    )
