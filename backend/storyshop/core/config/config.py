"""
应用配置管理模块
统一管理所有配置信息，包括环境变量和文件配置
"""

import json
from pathlib import Path
from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import field_validator, ConfigDict

# 仓库根目录（backend 的上一级）
PROJECT_ROOT = Path(__file__).resolve().parents[4]
WORKSPACE_DIR = PROJECT_ROOT / "workspace"
ENV_FILE = PROJECT_ROOT / "config" / ".env"


class Settings(BaseSettings):
    """应用配置类 - 统一管理所有配置信息"""

    # ==================== 基础配置 ====================
    app_name: str = "Storyshop"
    app_version: str = "1.0.0"
    app_debug: bool = True
    app_env: str = "development"

    # ==================== API配置 ====================
    api_v1_str: str = "/api/v1"
    project_name: str = "Storyshop API"

    # ==================== 日志配置 ====================
    log_level: str = "INFO"
    log_dir: str = "log"
    log_file: str = "backend.log"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # ==================== 应用服务配置 ====================
    app_port: int = 3000
    app_host: str = "0.0.0.0"

    # ==================== Google AI配置 ====================
    google_api_key: str = ""
    google_api_base_url: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash"

    # ==================== AI调用重试配置 ====================
    ai_max_retries: int = 3
    ai_retry_initial_delay_ms: int = 1000

    # ==================== 角色生成配置 ====================
    # 批量生成时两次请求之间的间隔，避免触发上游每分钟限额
    character_batch_interval_ms: int = 2000
    image_fetch_timeout: float = 60.0

    # ==================== 图片生成地址配置 ====================
    pollinations_base_url: str = "https://image.pollinations.ai/prompt"

    character_image_width: int = 512
    character_image_height: int = 512
    character_image_enhance: bool = False

    template_image_width: int = 1024
    template_image_height: int = 1024
    template_image_enhance: bool = True

    # ==================== CORS配置 ====================
    cors_origins: str = '["*"]'

    # ==================== 验证器 ====================
    @field_validator("cors_origins")
    @classmethod
    def parse_cors_origins(cls, value: str) -> List[str]:
        """解析CORS origins配置：JSON数组或逗号分隔的字符串"""
        value = value.strip()
        if not value:
            return []
        if value.startswith("["):
            try:
                return json.loads(value)
            except json.JSONDecodeError as e:
                raise ValueError(f"cors_origins is not a valid JSON array: {value}") from e
        return [origin.strip() for origin in value.split(",") if origin.strip()]

    @field_validator("ai_max_retries")
    @classmethod
    def validate_max_retries(cls, value: int) -> int:
        """重试次数至少为1"""
        if value < 1:
            raise ValueError("ai_max_retries must be >= 1")
        return value

    # ==================== 计算属性 ====================
    @property
    def google_ai_enabled(self) -> bool:
        """检查Google AI是否已配置"""
        return bool(self.google_api_key)

    @property
    def absolute_log_dir(self) -> str:
        """日志目录，相对路径按 workspace 目录解析"""
        return str(WORKSPACE_DIR / self.log_dir)

    @property
    def absolute_log_file(self) -> str:
        """日志文件完整路径"""
        return str(Path(self.absolute_log_dir) / self.log_file)

    model_config = ConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
        validate_default=True
    )


def get_settings() -> Settings:
    """获取应用配置实例"""
    # 环境变量文件加载由外部环境控制（Docker Compose、launch.json等）
    return Settings()


# 全局配置实例
settings = get_settings()
