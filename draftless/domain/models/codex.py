"""
设定集（Codex）模型 - 项目中的角色、地点、物品与背景设定
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import Column, String, DateTime, Text, Index

from ...core.constants import CodexConstants, DatabaseConstants
from ...core.database import BaseModel as SQLAlchemyBaseModel


class EntityType(str, Enum):
    """设定条目类型"""
    CHARACTER = "character"
    LOCATION = "location"
    ITEM = "item"
    LORE = "lore"


# 编辑器中高亮下划线的颜色
ENTITY_COLORS = {
    EntityType.CHARACTER: "#3b82f6",
    EntityType.LOCATION: "#10b981",
    EntityType.ITEM: "#f59e0b",
    EntityType.LORE: "#8b5cf6",
}


def color_for(entity_type: EntityType) -> str:
    return ENTITY_COLORS.get(EntityType(entity_type), CodexConstants.DEFAULT_COLOR)


# === Pydantic模型 ===

class CodexEntity(BaseModel):
    """设定条目"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    project_id: str
    name: str
    entity_type: EntityType = EntityType.CHARACTER
    description: str = ""
    color: str = CodexConstants.DEFAULT_COLOR
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# === SQLAlchemy模型 ===

class CodexEntityModel(SQLAlchemyBaseModel):
    """设定条目数据库模型"""
    __tablename__ = "codex_entities"

    project_id = Column(String(DatabaseConstants.ID_LENGTH), nullable=False, index=True)
    name = Column(String(CodexConstants.NAME_MAX_LENGTH), nullable=False)
    entity_type = Column(String(DatabaseConstants.FILE_TYPE_MAX_LENGTH), nullable=False,
                         default=EntityType.CHARACTER.value)
    description = Column(Text, nullable=False, default="")
    color = Column(String(CodexConstants.COLOR_MAX_LENGTH), nullable=False, default=CodexConstants.DEFAULT_COLOR)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    __table_args__ = (
        Index("ix_codex_entities_project_name", "project_id", "name"),
    )

    def to_pydantic(self) -> CodexEntity:
        """转换为Pydantic模型"""
        return CodexEntity.model_validate(self)
