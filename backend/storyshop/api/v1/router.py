"""
API路由聚合模块
将所有v1版本的路由统一注册，前缀统一在这里管理
"""

from fastapi import APIRouter

from storyshop.api.v1.endpoints import ai

api_router = APIRouter()

# ==================== AI生成路由 ====================
api_router.include_router(ai.router, prefix="/ai", tags=["AI生成"])
