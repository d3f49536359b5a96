"""
AI生成相关的Pydantic数据模型
包括角色生成、模板替换和文本生成的请求与结果
"""

from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# 角色生成
# ============================================================================

class CharacterResult(BaseModel):
    """
    单张图片的角色生成结果

    成功时包含 generated_image_url 和 description；
    失败时包含 error 和源图片地址 image_url。
    """
    model_config = ConfigDict(frozen=True)

    success: bool = Field(..., description="是否生成成功")
    generated_image_url: Optional[str] = Field(None, description="生成的插画地址")
    description: Optional[str] = Field(None, description="模型给出的角色描述")
    error: Optional[str] = Field(None, description="失败原因")
    image_url: Optional[str] = Field(None, description="失败时对应的源图片地址")

    @classmethod
    def succeeded(cls, generated_image_url: str, description: Optional[str] = None) -> "CharacterResult":
        return cls(success=True, generated_image_url=generated_image_url, description=description)

    @classmethod
    def failed(cls, error: str, image_url: str) -> "CharacterResult":
        return cls(success=False, error=error, image_url=image_url)


class BatchGenerationResult(BaseModel):
    """批量角色生成结果，characters 与输入一一对应且顺序一致"""
    model_config = ConfigDict(frozen=True)

    success: bool = Field(True, description="批量调用本身总是成功，需逐项检查")
    characters: List[CharacterResult] = Field(default_factory=list, description="逐项生成结果")

    @property
    def succeeded_count(self) -> int:
        return sum(1 for item in self.characters if item.success)


class TemplateReplacementResult(BaseModel):
    """模板替换结果"""
    model_config = ConfigDict(frozen=True)

    success: bool = Field(True, description="是否成功")
    generated_image_url: str = Field(..., description="生成的插画地址")
    prompt: str = Field(..., description="模型生成的图片提示词")


class CharacterBatchRequest(BaseModel):
    """批量角色生成请求"""
    image_urls: List[str] = Field(..., min_length=1, description="源图片地址列表")
    model: Optional[str] = Field(None, description="模型名称，默认使用配置")
    background_image_url: Optional[str] = Field(
        None, description="背景图片地址（保留字段，当前版本忽略，不参与生成）"
    )


class TemplateReplacementRequest(BaseModel):
    """模板替换请求"""
    child_image_url: str = Field(..., min_length=1, description="孩子照片地址")
    template_image_url: str = Field(..., min_length=1, description="模板插画地址")
    model: Optional[str] = Field(None, description="模型名称，默认使用配置")
    template_description: Optional[str] = Field(None, description="模板画面的简要说明，会写入分析提示词")


# ============================================================================
# 文本生成
# ============================================================================

class ChatMessage(BaseModel):
    """一条历史对话消息"""
    role: Literal["user", "model"] = Field(..., description="消息角色")
    content: str = Field(..., description="消息内容")


class TextGenerationRequest(BaseModel):
    """文本生成请求"""
    prompt: str = Field(..., description="提示词")
    model: Optional[str] = Field(None, description="模型名称")
    temperature: Optional[float] = Field(None, ge=0, le=2, description="温度参数")
    max_output_tokens: Optional[int] = Field(None, gt=0, description="最大输出token数")


class ChatRequest(BaseModel):
    """多轮对话请求"""
    message: str = Field(..., description="本轮用户消息")
    history: List[ChatMessage] = Field(default_factory=list, description="历史对话")
    model: Optional[str] = Field(None, description="模型名称")
    temperature: Optional[float] = Field(None, ge=0, le=2, description="温度参数")
    max_output_tokens: Optional[int] = Field(None, gt=0, description="最大输出token数")


class CompletionRequest(BaseModel):
    """文本续写请求"""
    text: str = Field(..., description="待续写的文本")


class TextGenerationResult(BaseModel):
    """文本生成结果"""
    text: str = Field(..., description="生成的文本")
    model: str = Field(..., description="实际使用的模型")


class CompletionResult(BaseModel):
    """文本续写结果"""
    success: bool = True
    original: str = Field(..., description="原始文本")
    completion: str = Field(..., description="续写结果")
