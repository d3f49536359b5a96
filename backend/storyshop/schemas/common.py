"""
API响应包装
AI接口统一返回 {"success": true, "data": ...}，data 的结构由具体接口决定
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

DataT = TypeVar("DataT")


class SuccessResponse(BaseModel, Generic[DataT]):
    """
    成功响应

    按接口参数化使用，例如 SuccessResponse[TextGenerationResult]，
    OpenAPI 文档中会展示 data 的具体结构。
    """
    success: bool = Field(True, description="请求是否成功")
    data: DataT = Field(..., description="接口返回的数据")
