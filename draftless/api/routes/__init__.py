"""
API路由模块
"""
from fastapi import APIRouter

from . import checkpoints, codex, documents, manuscript, weave

# 创建主路由器
api_router = APIRouter()

# 包含各个模块的路由
api_router.include_router(checkpoints.router)
api_router.include_router(codex.router)
api_router.include_router(documents.router)
api_router.include_router(manuscript.router)
api_router.include_router(weave.router)


# 健康检查路由
@api_router.get("/api/health")
async def api_health():
    """API健康检查"""
    return {"status": "ok", "message": "API正常运行"}


__all__ = ["api_router"]
