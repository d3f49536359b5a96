"""
测试配置和fixtures
为所有测试提供共享的配置和fixtures
"""

import io

import pytest
from PIL import Image

from storyshop.core.ai.models import ImagePayload
from storyshop.core.config import Settings
from tests.utils.mock_utils import MockBuilder


@pytest.fixture
def test_settings():
    """测试用配置（不读取环境变量中的API Key）"""
    return Settings(
        google_api_key="test-api-key",
        gemini_model="gemini-2.5-flash",
        ai_max_retries=3,
        ai_retry_initial_delay_ms=1000,
        character_batch_interval_ms=2000,
        pollinations_base_url="https://image.pollinations.ai/prompt",
    )


@pytest.fixture
def png_bytes():
    """一张真实的1x1 PNG图片"""
    buffer = io.BytesIO()
    Image.new("RGB", (1, 1), color=(255, 200, 200)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def image_payload(png_bytes):
    """测试图片数据"""
    return ImagePayload(data=png_bytes, mime_type="image/png", source_url="https://x/test.png")


@pytest.fixture
def events():
    """记录调用顺序的事件列表"""
    return []


@pytest.fixture
def mock_fetcher(image_payload):
    """图片获取器mock"""
    return MockBuilder.create_mock_fetcher(image_payload)


@pytest.fixture
def mock_vision_provider():
    """多模态Provider mock"""
    return MockBuilder.create_mock_vision_provider()


@pytest.fixture
def mock_chat_provider():
    """对话Provider mock"""
    return MockBuilder.create_mock_chat_provider()


# 测试标记配置
def pytest_configure(config):
    """配置pytest标记"""
    config.addinivalue_line("markers", "unit: 单元测试")
    config.addinivalue_line("markers", "interface: 接口测试")
    config.addinivalue_line("markers", "retry: 限流重试测试")
    config.addinivalue_line("markers", "character: 角色生成测试")
    config.addinivalue_line("markers", "logging: 日志测试")
    config.addinivalue_line("markers", "imports: 模块导入测试")
    config.addinivalue_line("markers", "config: 配置测试")
