"""
项目文件模型（章节、笔记、文件夹）
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import Column, String, DateTime, Integer, JSON, Index

from ...core.constants import DatabaseConstants
from ...core.database import BaseModel as SQLAlchemyBaseModel


class FileType(str, Enum):
    """项目文件类型"""
    CHAPTER = "chapter"
    NOTE = "note"
    FOLDER = "folder"


# === Pydantic模型 ===

class ProjectFile(BaseModel):
    """项目文件"""
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="文件ID（即文档ID）")
    project_id: str = Field(..., description="项目ID")
    title: str = Field(..., description="标题")
    file_type: FileType = Field(FileType.CHAPTER, description="文件类型")
    order: int = Field(0, description="排序")
    content: Optional[Dict[str, Any]] = Field(default=None, description="文档内容树")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# === SQLAlchemy模型 ===

class ProjectFileModel(SQLAlchemyBaseModel):
    """项目文件数据库模型"""
    __tablename__ = "project_files"

    project_id = Column(String(DatabaseConstants.ID_LENGTH), nullable=False, index=True)
    title = Column(String(DatabaseConstants.TITLE_MAX_LENGTH), nullable=False)
    file_type = Column(String(DatabaseConstants.FILE_TYPE_MAX_LENGTH), nullable=False, default=FileType.CHAPTER.value)
    order = Column(Integer, nullable=False, default=0)
    content = Column(JSON, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    __table_args__ = (
        Index("ix_project_files_project_order", "project_id", "order"),
    )

    def to_pydantic(self) -> ProjectFile:
        """转换为Pydantic模型"""
        return ProjectFile.model_validate(self)
