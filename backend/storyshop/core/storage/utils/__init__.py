"""
存储工具模块
"""

from .image import ImageFetcher, detect_mime_type, DEFAULT_MIME_TYPE

__all__ = ['ImageFetcher', 'detect_mime_type', 'DEFAULT_MIME_TYPE']
