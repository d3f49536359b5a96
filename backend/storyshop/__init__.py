"""
Storyshop 后端
童话角色插画生成与文本生成服务
"""

__version__ = "1.0.0"
