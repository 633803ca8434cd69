"""
检查点相关的请求与响应模型
"""
from typing import Any, Dict, List, Optional, Union

from pydantic import Field

from ..models.checkpoint import Checkpoint
from .base import BaseSchema


class CheckpointCreate(BaseSchema):
    """保存检查点请求"""
    label: str = Field(..., description="检查点名称")
    content: Union[Dict[str, Any], List[Any]] = Field(..., description="文档内容树")
    parent_id: Optional[str] = Field(None, description="父检查点ID（通常为当前历史游标）")


class CheckpointRename(BaseSchema):
    """重命名检查点请求"""
    label: str = Field(..., description="新的检查点名称")


class CheckpointSummary(BaseSchema):
    """检查点摘要（不含内容）"""
    id: str
    document_id: str
    label: str
    parent_id: Optional[str] = None
    created_at: str

    @classmethod
    def from_checkpoint(cls, checkpoint: Checkpoint) -> "CheckpointSummary":
        return cls(
            id=checkpoint.id,
            document_id=checkpoint.document_id,
            label=checkpoint.label,
            parent_id=checkpoint.parent_id,
            created_at=checkpoint.created_at.isoformat(),
        )


class CheckpointSaved(BaseSchema):
    """保存结果：新检查点与更新后的历史游标"""
    checkpoint: Checkpoint
    head: Optional[str] = Field(None, description="当前历史游标")


class CheckpointRestored(BaseSchema):
    """恢复结果：检查点内容与更新后的历史游标"""
    content: Dict[str, Any]
    head: str = Field(..., description="当前历史游标")


class CheckpointDeleted(BaseSchema):
    """删除结果"""
    deleted: bool
    head: Optional[str] = Field(None, description="删除后的历史游标")
