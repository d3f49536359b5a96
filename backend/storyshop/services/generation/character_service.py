"""
童话角色生成服务
两阶段流程：多模态模型描述照片 -> 构建插画生成地址
"""

import asyncio
from typing import Awaitable, Callable, List, Optional

from storyshop.core.ai.models import ImagePayload
from storyshop.core.ai.providers.base.vision import BaseVisionProvider
from storyshop.core.ai.retry import BackoffExecutor
from storyshop.core.config import Settings, settings as default_settings
from storyshop.core.image_generation import build_image_url, character_profile, template_profile
from storyshop.core.log_messages import log_messages
from storyshop.core.log_utils import get_logger
from storyshop.core.storage.utils.image import ImageFetcher
from storyshop.prompts import PromptManager, get_prompt_manager
from storyshop.schemas.generation import (
    BatchGenerationResult,
    CharacterResult,
    TemplateReplacementResult,
)
from storyshop.services.generation.exceptions import InvalidInputError

logger = get_logger(__name__)

QUOTA_EXCEEDED_MESSAGE = "API quota exceeded. Please try again later or upgrade your plan."
UNKNOWN_ERROR_MESSAGE = "Unknown error"


def is_quota_exceeded(error: BaseException) -> bool:
    """批量生成中需要替换为统一提示的配额类错误"""
    message = str(error).lower()
    return "quota" in message or "429" in message


def batch_error_message(error: BaseException) -> str:
    """批量生成中单项失败对外展示的错误消息"""
    if is_quota_exceeded(error):
        return QUOTA_EXCEEDED_MESSAGE
    return str(error) or UNKNOWN_ERROR_MESSAGE


class CharacterGenerationService:
    """
    童话角色生成服务

    所有外部依赖（图片获取器、多模态模型、重试执行器）都由调用方注入，
    服务本身不保存跨调用的状态。
    """

    def __init__(
        self,
        fetcher: ImageFetcher,
        vision_provider: BaseVisionProvider,
        executor: Optional[BackoffExecutor] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        settings: Optional[Settings] = None,
        prompts: Optional[PromptManager] = None
    ):
        self.settings = settings or default_settings
        self.fetcher = fetcher
        self.vision_provider = vision_provider
        self.executor = executor or BackoffExecutor(
            max_retries=self.settings.ai_max_retries,
            initial_delay_ms=self.settings.ai_retry_initial_delay_ms
        )
        self.prompts = prompts or get_prompt_manager()
        self._sleep = sleep

    async def _describe(self, prompt: str, images: List[ImagePayload], model: Optional[str]) -> str:
        """调用多模态模型（限流时退避重试），返回去掉首尾空白的文本"""
        text = await self.executor.run(
            lambda: self.vision_provider.describe(prompt, images, model=model)
        )
        return text.strip()

    async def generate_single(self, image_url: str, model: Optional[str] = None) -> CharacterResult:
        """
        为一张照片生成童话角色插画地址

        Args:
            image_url: 照片地址
            model: 模型名称，默认使用配置

        Returns:
            CharacterResult: 成功结果，包含插画地址和角色描述

        Raises:
            FetchError: 照片获取失败（不重试）
            Exception: 模型调用的最终失败
        """
        image = await self.fetcher.fetch(image_url)

        description = await self._describe(
            self.prompts.render_user_prompt("character", "describe_subject"),
            [image],
            model
        )
        logger.info(
            "收到角色描述",
            operation="character_description_received",
            description_preview=description[:100]
        )

        illustration_prompt = self.prompts.render_user_prompt(
            "character", "illustration", description=description
        )
        generated_image_url = build_image_url(
            illustration_prompt,
            character_profile(self.settings),
            self.settings.pollinations_base_url
        )
        logger.info(
            "角色插画地址已生成",
            operation="character_image_url_built",
            generated_image_url=generated_image_url
        )
        return CharacterResult.succeeded(generated_image_url, description=description)

    async def generate_batch(self, image_urls: List[str], model: Optional[str] = None) -> BatchGenerationResult:
        """
        按顺序逐张生成角色

        单张失败不会中断批处理：失败项记录错误消息和源图片地址，
        配额类错误替换为统一提示。两次请求之间固定等待，避免触发上游限流。

        Args:
            image_urls: 照片地址列表（不能为空）
            model: 模型名称

        Returns:
            BatchGenerationResult: 与输入等长、顺序一致的结果

        Raises:
            InvalidInputError: 图片地址列表为空
        """
        if not image_urls:
            raise InvalidInputError("Image URLs array is required")

        total = len(image_urls)
        interval_seconds = self.settings.character_batch_interval_ms / 1000
        characters: List[CharacterResult] = []

        logger.info(log_messages.CHARACTER_BATCH_START, operation="character_batch_start", total=total)

        for index, url in enumerate(image_urls):
            if index > 0:
                logger.info(
                    log_messages.CHARACTER_BATCH_PACING,
                    operation="character_batch_pacing",
                    delay_seconds=interval_seconds
                )
                await self._sleep(interval_seconds)

            logger.info(
                log_messages.CHARACTER_BATCH_ITEM,
                operation="character_batch_item",
                index=index + 1,
                total=total,
                url=url
            )
            try:
                characters.append(await self.generate_single(url, model=model))
            except Exception as e:
                logger.error(
                    log_messages.CHARACTER_BATCH_ITEM_FAILED,
                    operation="character_batch_item_failed",
                    exception=e,
                    index=index + 1,
                    url=url
                )
                characters.append(CharacterResult.failed(batch_error_message(e), url))

        result = BatchGenerationResult(success=True, characters=characters)
        logger.info(
            log_messages.CHARACTER_BATCH_DONE,
            operation="character_batch_done",
            succeeded=result.succeeded_count,
            total=total
        )
        return result

    async def replace_subject_in_template(
        self,
        subject_url: str,
        template_url: str,
        model: Optional[str] = None,
        template_description: Optional[str] = None
    ) -> TemplateReplacementResult:
        """
        将照片中的孩子替换进模板插画

        两张图片一起提交给模型，模型返回的文本直接作为图片生成提示词，
        使用高分辨率尺寸构建生成地址。

        Args:
            subject_url: 孩子照片地址
            template_url: 模板插画地址
            model: 模型名称
            template_description: 模板画面的简要说明（可选）

        Returns:
            TemplateReplacementResult
        """
        subject = await self.fetcher.fetch(subject_url, label="subject image")
        template = await self.fetcher.fetch(template_url, label="template image")

        prompt = await self._describe(
            self.prompts.render_user_prompt(
                "character",
                "template_replacement",
                template_description=template_description
            ),
            [template, subject],
            model
        )
        logger.info(
            "模板替换提示词已生成",
            operation="template_prompt_generated",
            prompt_preview=prompt[:200]
        )

        generated_image_url = build_image_url(
            prompt,
            template_profile(self.settings),
            self.settings.pollinations_base_url
        )
        return TemplateReplacementResult(
            success=True,
            generated_image_url=generated_image_url,
            prompt=prompt
        )
