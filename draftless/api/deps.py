"""
API依赖 - 定义API路由需要的依赖
统一的依赖注入入口，避免重复定义
"""
from typing import Optional, TypeVar

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.constants import APIConstants
from ..core.database import get_session
from ..core.logging import get_logger
from ..domain.models.checkpoint import HistoryHead
from ..domain.schemas.base import ApiResponse
from ..services.checkpoint import CheckpointService
from ..services.codex import CodexService
from ..services.document import DocumentService
from ..services.manuscript import ManuscriptService
from ..services.weave import WeaveService

logger = get_logger(__name__)
T = TypeVar('T')

# 客户端通过该请求头传递当前历史游标
HEAD_HEADER = "X-Checkpoint-Head"


def api_response(data: Optional[T] = None, code: int = APIConstants.HTTP_OK, message: str = "操作成功") -> ApiResponse[T]:
    """创建标准API响应"""
    return ApiResponse(
        success=code < 400,
        code=code,
        message=message,
        data=data
    )


# ============================================================================
# 服务层依赖 - 统一入口
# ============================================================================

async def get_checkpoint_service(session: AsyncSession = Depends(get_session)) -> CheckpointService:
    """获取检查点服务"""
    return CheckpointService(session)


async def get_codex_service(session: AsyncSession = Depends(get_session)) -> CodexService:
    """获取设定集服务"""
    return CodexService(session)


async def get_document_service(session: AsyncSession = Depends(get_session)) -> DocumentService:
    """获取文档服务"""
    return DocumentService(session)


async def get_manuscript_service(session: AsyncSession = Depends(get_session)) -> ManuscriptService:
    """获取书稿服务"""
    return ManuscriptService(session)


async def get_weave_service(session: AsyncSession = Depends(get_session)) -> WeaveService:
    """获取融合服务"""
    return WeaveService(session)


def get_history_head(
    document_id: str,
    head: Optional[str] = Header(None, alias=HEAD_HEADER),
) -> HistoryHead:
    """从请求头构建当前会话的历史游标"""
    return HistoryHead(document_id=document_id, current_checkpoint_id=head or None)
