"""
设定集相关的请求与响应模型
"""
from typing import List, Optional

from pydantic import Field, model_validator

from ..models.codex import CodexEntity, EntityType
from .base import BaseSchema


class CodexEntityCreate(BaseSchema):
    """新增设定条目请求"""
    name: str = Field(..., description="名称")
    entity_type: EntityType = Field(EntityType.CHARACTER, description="类型")
    description: str = Field("", description="描述")
    color: Optional[str] = Field(None, description="高亮颜色，缺省时按类型取色")


class CodexEntityUpdate(BaseSchema):
    """部分更新设定条目请求"""
    name: Optional[str] = None
    entity_type: Optional[EntityType] = None
    description: Optional[str] = None
    color: Optional[str] = None


class CodexScanRequest(BaseSchema):
    """查找提及请求：直接给出文本，或给出文档ID"""
    text: Optional[str] = Field(None, description="待扫描的文本")
    document_id: Optional[str] = Field(None, description="待扫描的文档")

    @model_validator(mode="after")
    def check_source(self) -> "CodexScanRequest":
        if (self.text is None) == (self.document_id is None):
            raise ValueError("text 与 document_id 必须且只能提供一个")
        return self


class CodexScanResult(BaseSchema):
    """查找提及结果"""
    matches: List[CodexEntity]


class CodexEntityDeleted(BaseSchema):
    """删除结果"""
    deleted: bool
