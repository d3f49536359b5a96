"""
AI模型配置管理
"""

from typing import Optional

from storyshop.core.config import Settings, settings as default_settings


class ModelConfig:
    """AI模型配置类"""

    def __init__(self, model_name: str, api_key: str, base_url: Optional[str] = None):
        """
        初始化模型配置

        Args:
            model_name: 默认模型名称（如 "gemini-2.5-flash"）
            api_key: API密钥
            base_url: API基础URL（可选，用于代理）
        """
        self.model_name = model_name
        self.api_key = api_key
        self.base_url = base_url

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> 'ModelConfig':
        """从应用配置创建Gemini模型配置"""
        settings = settings or default_settings
        return cls(
            model_name=settings.gemini_model,
            api_key=settings.google_api_key,
            base_url=settings.google_api_base_url or None
        )

    def __repr__(self) -> str:
        return f"ModelConfig(model_name={self.model_name!r}, base_url={self.base_url!r})"
