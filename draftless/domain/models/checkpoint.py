"""
检查点模型
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import Column, String, DateTime, JSON, Index

from ...core.constants import CheckpointConstants, DatabaseConstants
from ...core.database import BaseModel as SQLAlchemyBaseModel


# === Pydantic模型 (用于API与服务层) ===

class Checkpoint(BaseModel):
    """检查点：某一文档内容树的不可变命名快照"""
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="检查点ID")
    document_id: str = Field(..., description="所属文档ID")
    label: str = Field(..., description="显示名称")
    content: Dict[str, Any] = Field(..., description="文档内容树")
    parent_id: Optional[str] = Field(default=None, description="父检查点ID")
    created_at: datetime = Field(..., description="创建时间")


class CheckpointTreeNode(BaseModel):
    """历史图中的一个节点（不含内容）"""
    id: str
    label: str
    parent_id: Optional[str] = None
    created_at: datetime
    children: List["CheckpointTreeNode"] = Field(default_factory=list)


CheckpointTreeNode.model_rebuild()


@dataclass
class HistoryHead:
    """编辑会话的历史游标

    由调用方持有并在服务调用之间传递：保存成功后指向新检查点，
    恢复后指向被恢复的检查点，所指检查点被删除时清空。
    """
    document_id: str
    current_checkpoint_id: Optional[str] = None

    def move_to(self, checkpoint_id: Optional[str]) -> None:
        self.current_checkpoint_id = checkpoint_id

    def clear(self) -> None:
        self.current_checkpoint_id = None


# === SQLAlchemy模型 (用于数据库) ===

class CheckpointModel(SQLAlchemyBaseModel):
    """检查点数据库模型

    parent_id 不设外键：删除检查点不级联，子检查点保留悬空的 parent_id。
    """
    __tablename__ = "checkpoints"

    document_id = Column(String(DatabaseConstants.ID_LENGTH), nullable=False, index=True)
    label = Column(String(CheckpointConstants.LABEL_MAX_LENGTH), nullable=False)
    content = Column(JSON, nullable=False)
    parent_id = Column(String(DatabaseConstants.ID_LENGTH), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    __table_args__ = (
        Index("ix_checkpoints_document_created", "document_id", "created_at"),
    )

    def to_pydantic(self) -> Checkpoint:
        """转换为Pydantic模型"""
        return Checkpoint.model_validate(self)
