"""
远程图片获取模块
"""

from .exceptions import StorageError, FetchError, NetworkError
from .utils import ImageFetcher, detect_mime_type

__all__ = [
    'StorageError',
    'FetchError',
    'NetworkError',
    'ImageFetcher',
    'detect_mime_type',
]
