"""
检查点Repository - 检查点数据访问层

检查点表按 id 索引；谱系只通过 parent_id 建立，不依赖对象引用。
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select, delete, desc, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.logging import get_logger
from ..core.repository import BaseRepository, storage_guard
from ..domain.models.checkpoint import CheckpointModel

logger = get_logger(__name__)


class CheckpointRepository(BaseRepository[CheckpointModel]):
    """检查点Repository"""

    def __init__(self, session: AsyncSession):
        super().__init__(CheckpointModel, session)

    def get_table_name(self) -> str:
        return "checkpoints"

    async def create_checkpoint(
        self,
        document_id: str,
        label: str,
        content: Dict[str, Any],
        parent_id: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> CheckpointModel:
        """插入一条新的检查点"""
        data = {
            "document_id": document_id,
            "label": label,
            "content": content,
            "parent_id": parent_id,
        }
        if created_at is not None:
            data["created_at"] = created_at
        return await self.create(data)

    async def get_for_document(self, document_id: str, checkpoint_id: str) -> Optional[CheckpointModel]:
        """获取属于指定文档的检查点"""
        stmt = select(CheckpointModel).where(
            CheckpointModel.id == checkpoint_id,
            CheckpointModel.document_id == document_id,
        )
        async with storage_guard("get checkpoint"):
            result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_document(self, document_id: str) -> List[CheckpointModel]:
        """获取文档的全部检查点，按创建时间倒序"""
        stmt = (
            select(CheckpointModel)
            .where(CheckpointModel.document_id == document_id)
            .order_by(desc(CheckpointModel.created_at), desc(CheckpointModel.id))
        )
        async with storage_guard("list checkpoints"):
            result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def latest_created_at(self, document_id: str) -> Optional[datetime]:
        """文档最近一个检查点的创建时间"""
        stmt = select(func.max(CheckpointModel.created_at)).where(
            CheckpointModel.document_id == document_id
        )
        async with storage_guard("latest checkpoint"):
            result = await self._session.execute(stmt)
        return result.scalar()

    async def delete_for_document(self, document_id: str, checkpoint_id: str) -> bool:
        """删除单个检查点，不级联"""
        stmt = delete(CheckpointModel).where(
            CheckpointModel.id == checkpoint_id,
            CheckpointModel.document_id == document_id,
        )
        async with storage_guard("delete checkpoint"):
            result = await self._session.execute(stmt)
            await self._session.flush()
        return result.rowcount > 0

    async def delete_all_for_document(self, document_id: str) -> int:
        """删除文档的全部检查点（文档本身被删除时使用）"""
        stmt = delete(CheckpointModel).where(CheckpointModel.document_id == document_id)
        async with storage_guard("delete document checkpoints"):
            result = await self._session.execute(stmt)
            await self._session.flush()
        return result.rowcount

    async def update_label(self, document_id: str, checkpoint_id: str, label: str) -> Optional[CheckpointModel]:
        """只更新显示名称"""
        stmt = (
            update(CheckpointModel)
            .where(
                CheckpointModel.id == checkpoint_id,
                CheckpointModel.document_id == document_id,
            )
            .values(label=label)
            .execution_options(synchronize_session="fetch")
        )
        async with storage_guard("rename checkpoint"):
            result = await self._session.execute(stmt)
            await self._session.flush()
        if result.rowcount == 0:
            return None
        entity = await self.get_for_document(document_id, checkpoint_id)
        if entity is not None:
            await self._session.refresh(entity)
        return entity
