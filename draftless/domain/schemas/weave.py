"""
融合相关的请求与响应模型
"""
from pydantic import Field

from ..models.weave import MergeStrategy
from .base import BaseSchema


class WeaveRequest(BaseSchema):
    """直接融合两段文本"""
    text_a: str = Field(..., description="当前草稿（A）")
    text_b: str = Field(..., description="检查点文本（B）")
    strategy: MergeStrategy = Field(MergeStrategy.BLEND, description="融合策略")


class CheckpointWeaveRequest(BaseSchema):
    """以文档当前内容与某个检查点进行融合"""
    checkpoint_id: str = Field(..., description="检查点ID")
    strategy: MergeStrategy = Field(MergeStrategy.BLEND, description="融合策略")


class WeaveResult(BaseSchema):
    """融合结果（尚未写入文档）"""
    strategy: MergeStrategy
    text: str


class WeaveAccept(BaseSchema):
    """确认融合结果并写入文档"""
    text: str = Field(..., min_length=1, description="确认后的文本")
