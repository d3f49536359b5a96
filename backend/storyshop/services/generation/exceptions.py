"""
生成服务异常定义
"""


class InvalidInputError(ValueError):
    """调用方传入的参数不合法（空提示词、空图片列表等），对应HTTP 400"""


__all__ = ["InvalidInputError"]
