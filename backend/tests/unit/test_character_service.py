"""
童话角色生成服务单元测试
使用mock的图片获取器和多模态模型，不访问外部服务
"""

import httpx
import pytest
from unittest.mock import AsyncMock

from storyshop.core.ai.retry import BackoffExecutor
from storyshop.core.image_generation import encode_prompt
from storyshop.core.storage.exceptions import FetchError
from storyshop.core.storage.utils.image import ImageFetcher
from storyshop.services.generation.exceptions import InvalidInputError
from storyshop.services.generation.character_service import (
    CharacterGenerationService,
    QUOTA_EXCEEDED_MESSAGE,
    batch_error_message,
)
from tests.utils.mock_utils import MockBuilder, SleepRecorder

U1 = "https://cdn.example.com/kids/1.jpg"
U2 = "https://cdn.example.com/kids/2.jpg"
U3 = "https://cdn.example.com/kids/3.jpg"


def build_service(fetcher, vision, settings, pacing_sleep=None, retry_sleep=None):
    """创建服务实例，重试和批量间隔都不真正等待"""
    executor = BackoffExecutor(
        max_retries=settings.ai_max_retries,
        initial_delay_ms=settings.ai_retry_initial_delay_ms,
        sleep=retry_sleep or SleepRecorder()
    )
    return CharacterGenerationService(
        fetcher=fetcher,
        vision_provider=vision,
        executor=executor,
        sleep=pacing_sleep or SleepRecorder(),
        settings=settings
    )


@pytest.mark.unit
@pytest.mark.character
class TestGenerateSingle:
    """单张图片生成测试"""

    @pytest.mark.asyncio
    async def test_generate_single_success(self, mock_fetcher, mock_vision_provider, test_settings):
        """成功生成时返回插画地址和描述"""
        mock_vision_provider.describe.return_value = "  a girl with red braids and a yellow raincoat \n"
        service = build_service(mock_fetcher, mock_vision_provider, test_settings)

        result = await service.generate_single(U1)

        assert result.success is True
        assert result.description == "a girl with red braids and a yellow raincoat"
        assert result.generated_image_url.startswith("https://image.pollinations.ai/prompt/")
        assert encode_prompt(result.description) in result.generated_image_url
        assert result.generated_image_url.endswith("?width=512&height=512&nologo=true")
        assert result.error is None

    @pytest.mark.asyncio
    async def test_description_prompt_and_image_are_submitted(
        self, mock_fetcher, mock_vision_provider, test_settings
    ):
        """照片和固定的描述指令一起提交给模型"""
        service = build_service(mock_fetcher, mock_vision_provider, test_settings)

        await service.generate_single(U1, model="gemini-2.5-pro")

        mock_fetcher.fetch.assert_awaited_once_with(U1)
        args, kwargs = mock_vision_provider.describe.call_args
        prompt, images = args
        assert "fairy tale illustration" in prompt
        assert "Do NOT include name or story" in prompt
        assert [image.source_url for image in images] == [U1]
        assert kwargs["model"] == "gemini-2.5-pro"

    @pytest.mark.asyncio
    async def test_illustration_prompt_contains_description(
        self, mock_fetcher, mock_vision_provider, test_settings
    ):
        """插画提示词包含原样的角色描述和安全要求"""
        mock_vision_provider.describe.return_value = "a boy & his dog, 5 years old"
        service = build_service(mock_fetcher, mock_vision_provider, test_settings)

        result = await service.generate_single(U1)

        prompt = service.prompts.render_user_prompt(
            "character", "illustration", description="a boy & his dog, 5 years old"
        )
        assert "inspired by: a boy & his dog, 5 years old" in prompt
        assert "safe for children" in prompt
        assert encode_prompt(prompt) in result.generated_image_url
        assert "&" not in result.generated_image_url.split("?")[0]

    @pytest.mark.asyncio
    async def test_fetch_failure_propagates(self, mock_fetcher, mock_vision_provider, test_settings):
        """图片获取失败直接抛出，不调用模型"""
        mock_fetcher.fetch.side_effect = FetchError("Failed to fetch image: 404 Not Found", status_code=404)
        service = build_service(mock_fetcher, mock_vision_provider, test_settings)

        with pytest.raises(FetchError, match="404"):
            await service.generate_single(U1)

        mock_vision_provider.describe.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_fetch_404_with_real_fetcher(self, mock_vision_provider, test_settings):
        """真实获取器遇到404时错误消息包含状态码"""
        transport = httpx.MockTransport(lambda request: httpx.Response(404))
        async with httpx.AsyncClient(transport=transport) as client:
            service = build_service(ImageFetcher(client=client), mock_vision_provider, test_settings)

            with pytest.raises(FetchError) as exc_info:
                await service.generate_single("https://x/test.jpg")

        assert "404" in str(exc_info.value)
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_rate_limited_model_call_is_retried(self, mock_fetcher, mock_vision_provider, test_settings):
        """模型调用前两次限流、第三次成功"""
        mock_vision_provider.describe.side_effect = [
            Exception("429 Too Many Requests"),
            Exception("429 Too Many Requests"),
            "a toddler with a teddy bear",
        ]
        retry_sleep = SleepRecorder()
        service = build_service(mock_fetcher, mock_vision_provider, test_settings, retry_sleep=retry_sleep)

        result = await service.generate_single(U1)

        assert result.success is True
        assert result.description == "a toddler with a teddy bear"
        assert retry_sleep.calls == [1.0, 2.0]
        # 重试只包裹模型调用，图片只获取一次
        assert mock_fetcher.fetch.await_count == 1

    @pytest.mark.asyncio
    async def test_terminal_model_error_propagates(self, mock_fetcher, mock_vision_provider, test_settings):
        mock_vision_provider.describe.side_effect = RuntimeError("safety filter blocked the request")
        retry_sleep = SleepRecorder()
        service = build_service(mock_fetcher, mock_vision_provider, test_settings, retry_sleep=retry_sleep)

        with pytest.raises(RuntimeError, match="safety filter"):
            await service.generate_single(U1)

        assert mock_vision_provider.describe.await_count == 1
        assert retry_sleep.calls == []


@pytest.mark.unit
@pytest.mark.character
class TestGenerateBatch:
    """批量生成测试"""

    @pytest.mark.asyncio
    async def test_failure_does_not_abort_batch(self, mock_fetcher, mock_vision_provider, test_settings):
        """第二张失败时，第一张和第三张不受影响"""
        async def describe(prompt, images, model=None):
            if images[0].source_url == U2:
                raise RuntimeError("image could not be processed")
            return f"child from {images[0].source_url}"

        mock_vision_provider.describe.side_effect = describe
        service = build_service(mock_fetcher, mock_vision_provider, test_settings)

        result = await service.generate_batch([U1, U2, U3])

        assert result.success is True
        assert len(result.characters) == 3
        first, second, third = result.characters
        assert first.success is True and first.description == f"child from {U1}"
        assert second.success is False
        assert second.image_url == U2
        assert second.error == "image could not be processed"
        assert third.success is True and third.description == f"child from {U3}"
        assert result.succeeded_count == 2

    @pytest.mark.asyncio
    async def test_fetch_failure_is_contained(self, mock_fetcher, mock_vision_provider, test_settings):
        original_fetch = mock_fetcher.fetch.side_effect

        async def fetch(url, label="image"):
            if url == U1:
                raise FetchError("Failed to fetch image: 404 Not Found", status_code=404)
            return await original_fetch(url, label)

        mock_fetcher.fetch.side_effect = fetch
        service = build_service(mock_fetcher, mock_vision_provider, test_settings)

        result = await service.generate_batch([U1, U2])

        assert [item.success for item in result.characters] == [False, True]
        assert result.characters[0].error == "Failed to fetch image: 404 Not Found"
        assert result.characters[0].image_url == U1

    @pytest.mark.asyncio
    async def test_pacing_between_items(self, image_payload, mock_vision_provider, test_settings, events):
        """每两张图片之间等待2秒，等待发生在上一张完成之后、下一张获取之前"""
        fetcher = MockBuilder.create_mock_fetcher(image_payload, events=events)
        pacing_sleep = SleepRecorder(events)
        service = build_service(fetcher, mock_vision_provider, test_settings, pacing_sleep=pacing_sleep)

        await service.generate_batch([U1, U2, U3])

        assert events == [
            ("fetch", U1),
            ("sleep", 2.0),
            ("fetch", U2),
            ("sleep", 2.0),
            ("fetch", U3),
        ]

    @pytest.mark.asyncio
    async def test_single_item_has_no_pacing(self, mock_fetcher, mock_vision_provider, test_settings):
        pacing_sleep = SleepRecorder()
        service = build_service(mock_fetcher, mock_vision_provider, test_settings, pacing_sleep=pacing_sleep)

        result = await service.generate_batch([U1])

        assert len(result.characters) == 1
        assert pacing_sleep.calls == []

    @pytest.mark.asyncio
    async def test_pacing_applies_after_failures(self, mock_fetcher, mock_vision_provider, test_settings):
        mock_vision_provider.describe.side_effect = RuntimeError("bad image")
        pacing_sleep = SleepRecorder()
        service = build_service(mock_fetcher, mock_vision_provider, test_settings, pacing_sleep=pacing_sleep)

        result = await service.generate_batch([U1, U2, U3])

        assert [item.success for item in result.characters] == [False, False, False]
        assert pacing_sleep.calls == [2.0, 2.0]

    @pytest.mark.asyncio
    async def test_quota_error_is_normalized(self, mock_fetcher, mock_vision_provider, test_settings):
        """每次都配额不足时，重试用尽后返回统一的配额提示"""
        mock_vision_provider.describe.side_effect = Exception(
            "quota exceeded for metric generativelanguage.googleapis.com/generate_content_free_tier_requests"
        )
        retry_sleep = SleepRecorder()
        service = build_service(mock_fetcher, mock_vision_provider, test_settings, retry_sleep=retry_sleep)

        result = await service.generate_batch([U1])

        entry = result.characters[0]
        assert entry.success is False
        assert entry.error == QUOTA_EXCEEDED_MESSAGE
        assert entry.image_url == U1
        assert mock_vision_provider.describe.await_count == 3
        assert retry_sleep.calls == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_empty_batch_is_rejected(self, mock_fetcher, mock_vision_provider, test_settings):
        service = build_service(mock_fetcher, mock_vision_provider, test_settings)

        with pytest.raises(InvalidInputError, match="Image URLs array is required"):
            await service.generate_batch([])
        mock_fetcher.fetch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_uses_configured_interval(self, mock_fetcher, mock_vision_provider, test_settings):
        settings = test_settings.model_copy(update={"character_batch_interval_ms": 500})
        pacing_sleep = SleepRecorder()
        service = build_service(mock_fetcher, mock_vision_provider, settings, pacing_sleep=pacing_sleep)

        await service.generate_batch([U1, U2])

        assert pacing_sleep.calls == [0.5]

    @pytest.mark.parametrize("error,expected", [
        (Exception("Quota exceeded"), QUOTA_EXCEEDED_MESSAGE),
        (Exception("429 RESOURCE_EXHAUSTED"), QUOTA_EXCEEDED_MESSAGE),
        (Exception("connection reset"), "connection reset"),
        (Exception(""), "Unknown error"),
    ])
    def test_batch_error_message(self, error, expected):
        assert batch_error_message(error) == expected


@pytest.mark.unit
@pytest.mark.character
class TestReplaceSubjectInTemplate:
    """模板替换测试"""

    @pytest.mark.asyncio
    async def test_replace_success(self, mock_fetcher, mock_vision_provider, test_settings):
        """两张图片一起提交，模型返回的文本直接作为提示词"""
        mock_vision_provider.describe.return_value = "\nA storybook forest scene with a girl in a red dress\n"
        service = build_service(mock_fetcher, mock_vision_provider, test_settings)

        result = await service.replace_subject_in_template(U1, U2)

        assert result.success is True
        assert result.prompt == "A storybook forest scene with a girl in a red dress"
        assert result.generated_image_url == (
            "https://image.pollinations.ai/prompt/"
            + encode_prompt(result.prompt)
            + "?width=1024&height=1024&nologo=true&enhance=true"
        )

        assert mock_vision_provider.describe.await_count == 1
        prompt, images = mock_vision_provider.describe.call_args.args
        assert "two images" in prompt
        # 模板在前，孩子照片在后
        assert [image.source_url for image in images] == [U2, U1]

    @pytest.mark.asyncio
    async def test_images_are_fetched_with_labels(self, mock_fetcher, mock_vision_provider, test_settings):
        service = build_service(mock_fetcher, mock_vision_provider, test_settings)

        await service.replace_subject_in_template(U1, U2)

        calls = [(c.args[0], c.kwargs["label"]) for c in mock_fetcher.fetch.call_args_list]
        assert calls == [(U1, "subject image"), (U2, "template image")]

    @pytest.mark.asyncio
    async def test_subject_fetch_failure(self, mock_fetcher, mock_vision_provider, test_settings):
        mock_fetcher.fetch.side_effect = FetchError(
            "Failed to fetch subject image: 403 Forbidden", status_code=403
        )
        service = build_service(mock_fetcher, mock_vision_provider, test_settings)

        with pytest.raises(FetchError, match="subject image"):
            await service.replace_subject_in_template(U1, U2)

        assert mock_fetcher.fetch.await_count == 1
        mock_vision_provider.describe.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_template_fetch_failure(self, mock_vision_provider, test_settings):
        """模板获取失败时报告模板相关的错误"""
        def handler(request):
            if request.url.path.endswith("template.png"):
                return httpx.Response(500)
            return httpx.Response(200, content=b"\xff\xd8\xff", headers={"content-type": "image/jpeg"})

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            service = build_service(ImageFetcher(client=client), mock_vision_provider, test_settings)

            with pytest.raises(FetchError) as exc_info:
                await service.replace_subject_in_template(
                    "https://x/child.jpg", "https://x/template.png"
                )

        assert str(exc_info.value) == "Failed to fetch template image: 500 Internal Server Error"
        mock_vision_provider.describe.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_model_failure_propagates(self, mock_fetcher, mock_vision_provider, test_settings):
        mock_vision_provider.describe = AsyncMock(side_effect=Exception("429 Too Many Requests"))
        retry_sleep = SleepRecorder()
        service = build_service(mock_fetcher, mock_vision_provider, test_settings, retry_sleep=retry_sleep)

        with pytest.raises(Exception, match="429"):
            await service.replace_subject_in_template(U1, U2)

        assert retry_sleep.calls == [1.0, 2.0]
