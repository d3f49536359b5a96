"""
图片获取异常定义
定义远程图片获取过程中使用的所有异常类型
"""

from typing import Any, Dict, Optional


class StorageError(Exception):
    """
    图片获取基础异常

    Attributes:
        message: 错误消息
        code: 错误码
        details: 错误详情
    """

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

    def __str__(self) -> str:
        return self.message


class FetchError(StorageError):
    """远程图片返回了非成功的HTTP状态码"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message, code="FETCH_ERROR", details=details)
        self.status_code = status_code


class NetworkError(StorageError):
    """网络请求错误（连接失败、超时等）"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code="NETWORK_ERROR", details=details)


__all__ = [
    'StorageError',
    'FetchError',
    'NetworkError',
]
