"""
AI调用重试模块
对上游生成式模型的限流错误进行指数退避重试
"""

import asyncio
import math
import re
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar, Union

from storyshop.core.config import settings
from storyshop.core.log_messages import log_messages
from storyshop.core.log_utils import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# 判定为限流错误的关键字（不区分大小写）
RATE_LIMIT_MARKERS = ("429", "quota", "rate limit", "too many requests")

# 上游错误消息中建议的等待时间，如 "Please retry in 37.2s"
RETRY_AFTER_PATTERN = re.compile(r"retry.*?(\d+(?:\.\d+)?)\s*s", re.IGNORECASE)


@dataclass(frozen=True)
class RateLimited:
    """限流错误，可以等待后重试"""
    retry_after_secs: Optional[int] = None


@dataclass(frozen=True)
class Terminal:
    """不可重试的错误"""


ErrorClass = Union[RateLimited, Terminal]


def parse_retry_after(message: str) -> Optional[int]:
    """
    从错误消息中解析服务端建议的重试等待秒数，解析不到返回None

    小数提示向上取整，"retry in 37.2s" 得到 38 秒。
    """
    match = RETRY_AFTER_PATTERN.search(message or "")
    if not match:
        return None
    return math.ceil(float(match.group(1)))


def classify_error(error: BaseException) -> ErrorClass:
    """
    对异常进行分类

    Args:
        error: 上游调用抛出的异常

    Returns:
        RateLimited: 限流错误（带可选的服务端建议等待时间）
        Terminal: 其他错误
    """
    message = str(error)
    lowered = message.lower()
    is_rate_limited = (
        getattr(error, "code", None) == 429
        or any(marker in lowered for marker in RATE_LIMIT_MARKERS)
    )
    if not is_rate_limited:
        return Terminal()
    return RateLimited(retry_after_secs=parse_retry_after(message))


class BackoffExecutor:
    """
    指数退避执行器

    执行一个可能失败的异步操作。遇到限流错误时按
    initial_delay_ms * 2^attempt 等待后重试；如果错误消息中包含
    服务端建议的等待时间，则改为等待 N*1000+1000 毫秒。
    其他错误直接抛出，不做重试。执行器本身不保存任何跨调用的状态。
    """

    def __init__(
        self,
        max_retries: Optional[int] = None,
        initial_delay_ms: Optional[int] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        self.max_retries = max_retries if max_retries is not None else settings.ai_max_retries
        self.initial_delay_ms = (
            initial_delay_ms if initial_delay_ms is not None else settings.ai_retry_initial_delay_ms
        )
        self._sleep = sleep

    def compute_delay_ms(self, attempt: int, classification: RateLimited, initial_delay_ms: int) -> int:
        """计算第 attempt 次（从0开始）失败后的等待时间（毫秒）"""
        if classification.retry_after_secs is not None:
            return classification.retry_after_secs * 1000 + 1000
        return initial_delay_ms * (2 ** attempt)

    async def run(
        self,
        operation: Callable[[], Awaitable[T]],
        max_retries: Optional[int] = None,
        initial_delay_ms: Optional[int] = None
    ) -> T:
        """
        执行操作，限流时退避重试

        Args:
            operation: 无参数、返回awaitable的可调用对象
            max_retries: 最大尝试次数，默认使用执行器配置
            initial_delay_ms: 初始等待时间（毫秒），默认使用执行器配置

        Returns:
            操作的返回值

        Raises:
            ValueError: max_retries 小于1
            Exception: 非限流错误，或最后一次尝试仍然限流时的原始异常
        """
        max_retries = self.max_retries if max_retries is None else max_retries
        initial_delay_ms = self.initial_delay_ms if initial_delay_ms is None else initial_delay_ms
        if max_retries < 1:
            raise ValueError("max_retries must be >= 1")

        attempt = 0
        while True:
            try:
                return await operation()
            except Exception as e:
                classification = classify_error(e)
                if isinstance(classification, Terminal) or attempt >= max_retries - 1:
                    raise

                delay_ms = self.compute_delay_ms(attempt, classification, initial_delay_ms)
                logger.warning(
                    log_messages.AI_RATE_LIMIT_RETRY,
                    operation="ai_rate_limit_retry",
                    delay_seconds=delay_ms / 1000,
                    attempt=attempt + 1,
                    max_retries=max_retries
                )
                await self._sleep(delay_ms / 1000)
                attempt += 1


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    max_retries: Optional[int] = None,
    initial_delay_ms: Optional[int] = None
) -> T:
    """使用新建的执行器执行一次带退避的调用"""
    return await BackoffExecutor().run(operation, max_retries, initial_delay_ms)
