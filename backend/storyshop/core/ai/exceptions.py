"""
AI调用异常定义
"""

from typing import Any, Dict, Optional


class AIError(Exception):
    """AI调用基础异常"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


class AIConfigurationError(AIError):
    """AI服务配置错误（如缺少API Key）"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code="AI_CONFIG_ERROR", details=details)


class EmptyResponseError(AIError):
    """模型没有返回任何文本"""

    def __init__(self, message: str = "Model returned an empty response", details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code="EMPTY_RESPONSE", details=details)


__all__ = [
    "AIError",
    "AIConfigurationError",
    "EmptyResponseError",
]
