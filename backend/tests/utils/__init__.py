"""
测试工具模块
"""

from .mock_utils import MockBuilder, SleepRecorder

__all__ = ["MockBuilder", "SleepRecorder"]
