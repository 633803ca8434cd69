"""
检查点API路由
"""
from typing import List

from fastapi import APIRouter, Depends, status

from ...core.constants import APIConstants
from ...core.logging import get_logger
from ...domain.models.checkpoint import Checkpoint, CheckpointTreeNode, HistoryHead
from ...domain.schemas.base import ApiResponse
from ...domain.schemas.checkpoint import (
    CheckpointCreate,
    CheckpointDeleted,
    CheckpointRename,
    CheckpointRestored,
    CheckpointSaved,
    CheckpointSummary,
)
from ...lib.compiler import dump_tree
from ...services.checkpoint import CheckpointService
from ..deps import api_response, get_checkpoint_service, get_history_head

logger = get_logger(__name__)

router = APIRouter(prefix="/api/documents/{document_id}/checkpoints", tags=["checkpoints"])


@router.get("", response_model=ApiResponse[List[CheckpointSummary]])
async def list_checkpoints(
    document_id: str,
    checkpoint_service: CheckpointService = Depends(get_checkpoint_service),
):
    """获取文档的检查点列表（最新的在前）"""
    checkpoints = await checkpoint_service.list(document_id)
    return api_response([CheckpointSummary.from_checkpoint(c) for c in checkpoints])


@router.post("", response_model=ApiResponse[CheckpointSaved], status_code=status.HTTP_201_CREATED)
async def save_checkpoint(
    document_id: str,
    checkpoint_create: CheckpointCreate,
    head: HistoryHead = Depends(get_history_head),
    checkpoint_service: CheckpointService = Depends(get_checkpoint_service),
):
    """
    保存检查点

    未显式给出 parent_id 时以请求头中的历史游标作为父节点。
    """
    if checkpoint_create.parent_id is not None:
        head.move_to(checkpoint_create.parent_id)

    checkpoint = await checkpoint_service.save_from_head(
        head, checkpoint_create.content, checkpoint_create.label
    )
    return api_response(
        CheckpointSaved(checkpoint=checkpoint, head=head.current_checkpoint_id),
        code=APIConstants.HTTP_CREATED,
        message="检查点已保存",
    )


@router.get("/tree", response_model=ApiResponse[List[CheckpointTreeNode]])
async def get_checkpoint_tree(
    document_id: str,
    checkpoint_service: CheckpointService = Depends(get_checkpoint_service),
):
    """获取检查点历史树"""
    return api_response(await checkpoint_service.tree(document_id))


@router.get("/{checkpoint_id}", response_model=ApiResponse[Checkpoint])
async def get_checkpoint(
    document_id: str,
    checkpoint_id: str,
    checkpoint_service: CheckpointService = Depends(get_checkpoint_service),
):
    """获取检查点详情（含内容）"""
    return api_response(await checkpoint_service.get(document_id, checkpoint_id))


@router.patch("/{checkpoint_id}", response_model=ApiResponse[CheckpointSummary])
async def rename_checkpoint(
    document_id: str,
    checkpoint_id: str,
    checkpoint_rename: CheckpointRename,
    checkpoint_service: CheckpointService = Depends(get_checkpoint_service),
):
    """重命名检查点"""
    checkpoint = await checkpoint_service.rename(document_id, checkpoint_id, checkpoint_rename.label)
    return api_response(CheckpointSummary.from_checkpoint(checkpoint), message="检查点已重命名")


@router.delete("/{checkpoint_id}", response_model=ApiResponse[CheckpointDeleted])
async def delete_checkpoint(
    document_id: str,
    checkpoint_id: str,
    head: HistoryHead = Depends(get_history_head),
    checkpoint_service: CheckpointService = Depends(get_checkpoint_service),
):
    """删除检查点（不存在时为空操作）"""
    deleted = await checkpoint_service.delete(document_id, checkpoint_id, head)
    return api_response(CheckpointDeleted(deleted=deleted, head=head.current_checkpoint_id))


@router.post("/{checkpoint_id}/restore", response_model=ApiResponse[CheckpointRestored])
async def restore_checkpoint(
    document_id: str,
    checkpoint_id: str,
    head: HistoryHead = Depends(get_history_head),
    checkpoint_service: CheckpointService = Depends(get_checkpoint_service),
):
    """恢复检查点内容，并把历史游标移动到该检查点"""
    content = await checkpoint_service.restore_into_head(head, checkpoint_id)
    return api_response(CheckpointRestored(content=dump_tree(content), head=head.current_checkpoint_id))


@router.get("/{checkpoint_id}/lineage", response_model=ApiResponse[List[CheckpointSummary]])
async def get_checkpoint_lineage(
    document_id: str,
    checkpoint_id: str,
    checkpoint_service: CheckpointService = Depends(get_checkpoint_service),
):
    """获取检查点到最早祖先的谱系"""
    chain = await checkpoint_service.lineage(document_id, checkpoint_id)
    return api_response([CheckpointSummary.from_checkpoint(c) for c in chain])
