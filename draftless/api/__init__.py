"""
API包 - 提供所有API路由
"""
from .routes import api_router

__all__ = ["api_router"]
