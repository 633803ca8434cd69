"""
编译与书稿导出相关的请求与响应模型
"""
from typing import Any, Dict, List, Optional, Union

from pydantic import Field

from ..models.document import CompileMode
from ..models.manuscript import DocumentRef, ExportFormat
from .base import BaseSchema


class CompileRequest(BaseSchema):
    """编译单个文档请求；未提供 content 时使用文档当前内容"""
    mode: CompileMode = Field(CompileMode.FINAL, description="编译模式")
    content: Optional[Union[Dict[str, Any], List[Any]]] = Field(None, description="待编译的内容树")


class CompileResult(BaseSchema):
    """编译结果"""
    mode: CompileMode
    html: str


class ManuscriptRequest(BaseSchema):
    """书稿导出请求"""
    mode: CompileMode = Field(CompileMode.FINAL, description="编译模式")
    format: ExportFormat = Field(ExportFormat.DOCX, description="导出格式")


class AssembleRequest(BaseSchema):
    """按给定顺序编译一组文档"""
    mode: CompileMode = Field(CompileMode.FINAL, description="编译模式")
    documents: List[DocumentRef] = Field(..., description="有序的文档引用")


class PlainTextResult(BaseSchema):
    """文档纯文本"""
    document_id: str
    text: str
