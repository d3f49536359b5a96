"""
图片下载工具
从远程地址获取图片字节和MIME类型，供多模态模型使用
"""

import io
from typing import Optional

import httpx
from PIL import Image, UnidentifiedImageError

from storyshop.core.ai.models import ImagePayload
from storyshop.core.config import settings
from storyshop.core.log_messages import log_messages
from storyshop.core.log_utils import get_logger
from storyshop.core.storage.exceptions import FetchError, NetworkError

logger = get_logger(__name__)

DEFAULT_MIME_TYPE = "image/jpeg"


def detect_mime_type(data: bytes, content_type: Optional[str] = None) -> str:
    """
    确定图片的MIME类型

    优先使用响应头中的 image/* 类型，否则尝试用 Pillow 识别图片格式，
    都失败时回退为 image/jpeg。
    """
    if content_type:
        mime_type = content_type.split(";", 1)[0].strip().lower()
        if mime_type.startswith("image/"):
            return mime_type

    try:
        with Image.open(io.BytesIO(data)) as image:
            return Image.MIME.get(image.format, DEFAULT_MIME_TYPE)
    except (UnidentifiedImageError, OSError):
        return DEFAULT_MIME_TYPE


class ImageFetcher:
    """
    远程图片获取器

    可以传入外部创建的 httpx.AsyncClient 共享连接池；
    未传入时自行创建，并在 close() 时释放。
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: Optional[float] = None):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout if timeout is not None else settings.image_fetch_timeout,
            follow_redirects=True
        )

    async def fetch(self, url: str, label: str = "image") -> ImagePayload:
        """
        下载图片

        Args:
            url: 图片地址
            label: 错误消息中使用的图片描述（如 "subject image"）

        Returns:
            ImagePayload: 图片数据和MIME类型

        Raises:
            FetchError: 返回非成功状态码
            NetworkError: 网络错误
        """
        logger.info(log_messages.IMAGE_FETCH_START, operation="image_fetch_start", url=url)

        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.error(
                log_messages.IMAGE_FETCH_FAILED,
                operation="image_fetch_http_error",
                url=url,
                status_code=status_code
            )
            raise FetchError(
                f"Failed to fetch {label}: {status_code} {e.response.reason_phrase}".rstrip(),
                status_code=status_code,
                details={"url": url}
            ) from e
        except httpx.RequestError as e:
            logger.error(
                log_messages.IMAGE_FETCH_FAILED,
                operation="image_fetch_network_error",
                url=url,
                error=str(e)
            )
            raise NetworkError(f"Failed to fetch {label}: {e}", details={"url": url}) from e

        data = response.content
        mime_type = detect_mime_type(data, response.headers.get("content-type"))
        logger.info(
            log_messages.IMAGE_FETCH_SUCCESS,
            operation="image_fetch_success",
            size_bytes=len(data),
            mime_type=mime_type
        )
        return ImagePayload(data=data, mime_type=mime_type, source_url=url)

    async def close(self) -> None:
        """释放自行创建的HTTP客户端"""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "ImageFetcher":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


__all__ = ['ImageFetcher', 'detect_mime_type', 'DEFAULT_MIME_TYPE']
