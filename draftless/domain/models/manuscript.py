"""
书稿导出模型
"""
from enum import Enum

from pydantic import BaseModel, Field


class ExportFormat(str, Enum):
    """导出格式：只影响外壳与媒体类型，不影响正文"""
    DOCX = "docx"
    HTML = "html"
    EPUB = "epub"


class DocumentRef(BaseModel):
    """书稿中的一个文档引用（顺序由调用方决定）"""
    id: str = Field(..., description="文档ID")
    title: str = Field(..., description="章节标题")


class ExportArtifact(BaseModel):
    """可下载的导出结果"""
    filename: str
    media_type: str
    content: str
