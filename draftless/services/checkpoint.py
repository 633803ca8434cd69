"""
检查点服务 - 每个文档可分支的不可变快照历史

检查点一旦创建，其内容、ID、父节点与时间戳都不再改变；
从祖先恢复后再保存会产生一个兄弟分支，而不是改写历史。
"""
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.constants import CheckpointConstants
from ..core.errors import CheckpointNotFoundException, CompileException, ValidationException
from ..core.logging import StructuredLogger
from ..core.service import BaseService
from ..domain.models.checkpoint import (
    Checkpoint,
    CheckpointModel,
    CheckpointTreeNode,
    HistoryHead,
)
from ..domain.models.document import ElementNode
from ..lib.compiler import dump_tree, parse_tree
from ..repositories.checkpoint import CheckpointRepository

business_logger = StructuredLogger("services.checkpoint")


class CheckpointService(BaseService[CheckpointModel, CheckpointRepository]):
    """检查点服务"""

    def __init__(self, session: AsyncSession):
        super().__init__(CheckpointRepository(session))
        self.session = session

    def get_entity_name(self) -> str:
        return "检查点"

    def _validate_label(self, label: Optional[str]) -> str:
        label = (label or "").strip()
        if not label:
            raise ValidationException("检查点名称不能为空", field="label")
        if len(label) > CheckpointConstants.LABEL_MAX_LENGTH:
            raise ValidationException(
                f"检查点名称不能超过{CheckpointConstants.LABEL_MAX_LENGTH}个字符", field="label"
            )
        return label

    async def _next_timestamp(self, document_id: str) -> datetime:
        """同一文档内创建时间严格递增（仅用于显示排序）"""
        now = datetime.now()
        latest = await self.repository.latest_created_at(document_id)
        if latest is not None and latest >= now:
            return latest + timedelta(microseconds=1)
        return now

    # === 基本操作 ===

    async def save(
        self,
        document_id: str,
        content: Union[ElementNode, Dict[str, Any], List[Any]],
        label: str,
        parent_id: Optional[str] = None,
    ) -> Checkpoint:
        """保存一个新检查点，父节点由调用方提供"""
        document_id = self._validate_id(document_id, "document_id")
        label = self._validate_label(label)

        try:
            tree = content if isinstance(content, ElementNode) else parse_tree(content)
        except CompileException as e:
            raise ValidationException(f"检查点内容无效: {e.message}", field="content", details=e.details) from e

        if parent_id:
            parent = await self.repository.get_by_id(parent_id)
            if parent is not None and parent.document_id != document_id:
                raise ValidationException("父检查点属于其他文档，不支持跨文档的历史", field="parent_id")
            if parent is None:
                self.logger.warning(f"父检查点 {parent_id} 已不存在，保留悬空引用")

        try:
            model = await self.repository.create_checkpoint(
                document_id=document_id,
                label=label,
                content=dump_tree(tree),
                parent_id=parent_id or None,
                created_at=await self._next_timestamp(document_id),
            )
            await self.repository.commit()
        except Exception:
            await self.repository.rollback()
            raise

        business_logger.log_business_event(
            "checkpoint_saved", "checkpoint", model.id,
            document_id=document_id, parent_id=parent_id,
        )
        return model.to_pydantic()

    async def list(self, document_id: str) -> List[Checkpoint]:
        """列出文档的全部检查点，最新的在前"""
        document_id = self._validate_id(document_id, "document_id")
        models = await self.repository.list_for_document(document_id)
        return [model.to_pydantic() for model in models]

    async def get(self, document_id: str, checkpoint_id: str) -> Checkpoint:
        """获取单个检查点"""
        model = await self.repository.get_for_document(document_id, checkpoint_id)
        if model is None:
            raise CheckpointNotFoundException(checkpoint_id)
        return model.to_pydantic()

    async def delete(self, document_id: str, checkpoint_id: str, head: Optional[HistoryHead] = None) -> bool:
        """删除单个检查点；不存在时为空操作，不级联删除子检查点"""
        document_id = self._validate_id(document_id, "document_id")
        try:
            deleted = await self.repository.delete_for_document(document_id, checkpoint_id)
            await self.repository.commit()
        except Exception:
            await self.repository.rollback()
            raise

        if head is not None and head.document_id == document_id and head.current_checkpoint_id == checkpoint_id:
            head.clear()

        if deleted:
            business_logger.log_business_event(
                "checkpoint_deleted", "checkpoint", checkpoint_id, document_id=document_id
            )
        return deleted

    async def restore(self, document_id: str, checkpoint_id: str) -> ElementNode:
        """返回检查点保存的内容（每次调用都是新的副本）"""
        model = await self.repository.get_for_document(document_id, checkpoint_id)
        if model is None:
            raise CheckpointNotFoundException(checkpoint_id)

        business_logger.log_business_event(
            "checkpoint_restored", "checkpoint", checkpoint_id, document_id=document_id
        )
        return parse_tree(model.content)

    async def rename(self, document_id: str, checkpoint_id: str, label: str) -> Checkpoint:
        """修改检查点的显示名称；内容、谱系与时间戳保持不变"""
        label = self._validate_label(label)
        try:
            model = await self.repository.update_label(document_id, checkpoint_id, label)
            await self.repository.commit()
        except Exception:
            await self.repository.rollback()
            raise
        if model is None:
            raise CheckpointNotFoundException(checkpoint_id)
        return model.to_pydantic()

    # === 谱系 ===

    async def _index(self, document_id: str) -> Dict[str, CheckpointModel]:
        models = await self.repository.list_for_document(document_id)
        return {model.id: model for model in models}

    async def lineage(self, document_id: str, checkpoint_id: str) -> List[Checkpoint]:
        """从检查点回溯到最早的可达祖先

        父节点缺失时视为根；遇到环时停止。
        """
        index = await self._index(document_id)
        if checkpoint_id not in index:
            raise CheckpointNotFoundException(checkpoint_id)

        chain: List[Checkpoint] = []
        seen = set()
        current = index.get(checkpoint_id)
        while current is not None and len(chain) < CheckpointConstants.MAX_LINEAGE_DEPTH:
            if current.id in seen:
                self.logger.warning(f"检查点谱系存在环: {current.id}")
                break
            seen.add(current.id)
            chain.append(current.to_pydantic())
            current = index.get(current.parent_id) if current.parent_id else None
        return chain

    async def tree(self, document_id: str) -> List[CheckpointTreeNode]:
        """构建历史树：根为父节点为空或已不存在的检查点，兄弟节点最新的在前"""
        index = await self._index(document_id)
        children: Dict[str, List[CheckpointModel]] = {}
        roots: List[CheckpointModel] = []
        for model in index.values():
            if model.parent_id and model.parent_id in index and model.parent_id != model.id:
                children.setdefault(model.parent_id, []).append(model)
            else:
                roots.append(model)

        visited = set()

        def build(model: CheckpointModel) -> CheckpointTreeNode:
            visited.add(model.id)
            return CheckpointTreeNode(
                id=model.id,
                label=model.label,
                parent_id=model.parent_id,
                created_at=model.created_at,
                children=[build(child) for child in children.get(model.id, []) if child.id not in visited],
            )

        result = [build(root) for root in roots]

        # 环中的节点不可从任何根到达
        for model in index.values():
            if model.id not in visited:
                self.logger.warning(f"检查点 {model.id} 位于环中，作为根节点展示")
                result.append(build(model))
        return result

    # === 会话游标 ===

    async def save_from_head(
        self,
        head: HistoryHead,
        content: Union[ElementNode, Dict[str, Any], List[Any]],
        label: str,
    ) -> Checkpoint:
        """以游标为父节点保存，成功后游标指向新检查点"""
        checkpoint = await self.save(head.document_id, content, label, head.current_checkpoint_id)
        head.move_to(checkpoint.id)
        return checkpoint

    async def restore_into_head(self, head: HistoryHead, checkpoint_id: str) -> ElementNode:
        """恢复检查点，成功后游标指向该检查点"""
        content = await self.restore(head.document_id, checkpoint_id)
        head.move_to(checkpoint_id)
        return content
