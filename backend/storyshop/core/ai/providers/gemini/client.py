"""
Google GenAI 客户端构建
"""

from google import genai

from storyshop.core.ai.config import ModelConfig
from storyshop.core.ai.exceptions import AIConfigurationError
from storyshop.core.log_utils import get_logger

logger = get_logger(__name__)


def create_genai_client(model_config: ModelConfig) -> genai.Client:
    """
    根据模型配置创建 Google GenAI 客户端

    Args:
        model_config: 模型配置

    Returns:
        genai.Client

    Raises:
        AIConfigurationError: 未配置API Key
    """
    if not model_config.api_key:
        raise AIConfigurationError("GOOGLE_API_KEY is not configured")

    http_options = None
    if model_config.base_url:
        http_options = {"base_url": model_config.base_url}

    client = genai.Client(api_key=model_config.api_key, http_options=http_options)
    logger.info(
        "Google GenAI客户端初始化成功",
        operation="genai_client_init_success",
        model=model_config.model_name,
        has_api_base=bool(model_config.base_url)
    )
    return client
