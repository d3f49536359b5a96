"""
日志消息模板模块
统一管理所有业务日志消息模板，便于维护和国际化
"""

from typing import Dict, Any


class LogMessages:
    """日志消息模板类"""

    # ==================== 通用日志消息 ====================
    OPERATION_SUCCESS = "操作成功完成: {operation_name}"

    # ==================== 图片获取相关 ====================
    IMAGE_FETCH_START = "开始获取图片: {url}"
    IMAGE_FETCH_SUCCESS = "图片获取成功，大小: {size_bytes} 字节"
    IMAGE_FETCH_FAILED = "图片获取失败: {url}"

    # ==================== AI调用相关 ====================
    AI_CALL_START = "开始调用AI模型: {model_name}"
    AI_CALL_SUCCESS = "AI模型调用完成: {model_name}"
    AI_RATE_LIMIT_RETRY = "触发限流，等待 {delay_seconds}s 后进行第 {attempt}/{max_retries} 次重试"

    # ==================== 角色生成相关 ====================
    CHARACTER_BATCH_START = "开始为 {total} 张图片生成角色"
    CHARACTER_BATCH_ITEM = "处理第 {index}/{total} 张图片: {url}"
    CHARACTER_BATCH_PACING = "等待 {delay_seconds}s 后处理下一张图片，避免触发限流"
    CHARACTER_BATCH_ITEM_FAILED = "第 {index} 个角色生成失败"
    CHARACTER_BATCH_DONE = "角色生成完成: {succeeded}/{total} 成功"

    @classmethod
    def format_message(cls, message_template: str, **kwargs: Any) -> str:
        """格式化日志消息模板"""
        return message_template.format(**kwargs)

    @classmethod
    def get_structured_data(cls, **kwargs: Any) -> Dict[str, Any]:
        """获取结构化日志数据"""
        return kwargs


# 全局实例
log_messages = LogMessages()
