"""
文档相关的请求模型
"""
from typing import Any, Dict, List, Optional, Union

from pydantic import Field

from ..models.project import FileType
from .base import BaseSchema


class DocumentCreate(BaseSchema):
    """创建项目文件请求"""
    title: str = Field(..., description="标题")
    file_type: FileType = Field(FileType.CHAPTER, description="文件类型")
    order: Optional[int] = Field(None, description="排序，缺省时追加到末尾")
    content: Optional[Union[Dict[str, Any], List[Any]]] = Field(None, description="初始内容树")


class DocumentContentUpdate(BaseSchema):
    """替换文档内容请求"""
    content: Union[Dict[str, Any], List[Any]] = Field(..., description="新的内容树")


class DocumentUpdate(BaseSchema):
    """重命名或移动项目文件请求"""
    title: Optional[str] = Field(None, description="新标题")
    order: Optional[int] = Field(None, ge=0, description="新的排序")


class DocumentReorder(BaseSchema):
    """重排项目文件请求"""
    file_ids: List[str] = Field(..., description="按新顺序排列的全部文件ID")


class DocumentDeleted(BaseSchema):
    """删除结果"""
    deleted: bool
