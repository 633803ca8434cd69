"""
项目文件Repository - 章节、笔记与文件夹的数据访问层
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import asc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.logging import get_logger
from ..core.repository import BaseRepository, storage_guard
from ..domain.models.project import FileType, ProjectFileModel

logger = get_logger(__name__)


class ProjectFileRepository(BaseRepository[ProjectFileModel]):
    """项目文件Repository"""

    def __init__(self, session: AsyncSession):
        super().__init__(ProjectFileModel, session)

    def get_table_name(self) -> str:
        return "project_files"

    async def create_file(
        self,
        project_id: str,
        title: str,
        file_type: FileType = FileType.CHAPTER,
        order: int = 0,
        content: Optional[Dict[str, Any]] = None,
        file_id: Optional[str] = None,
    ) -> ProjectFileModel:
        """创建项目文件"""
        now = datetime.now()
        return await self.create({
            "id": file_id,
            "project_id": project_id,
            "title": title,
            "file_type": file_type,
            "order": order,
            "content": content,
            "created_at": now,
            "updated_at": now,
        })

    async def list_files(self, project_id: str, file_type: Optional[FileType] = None) -> List[ProjectFileModel]:
        """按 order 排序列出项目文件"""
        stmt = select(ProjectFileModel).where(ProjectFileModel.project_id == project_id)
        if file_type is not None:
            stmt = stmt.where(ProjectFileModel.file_type == FileType(file_type).value)
        stmt = stmt.order_by(asc(ProjectFileModel.order), asc(ProjectFileModel.created_at))

        async with storage_guard("list project files"):
            result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def update_content(self, file_id: str, content: Dict[str, Any]) -> Optional[ProjectFileModel]:
        """替换文档内容"""
        stmt = (
            update(ProjectFileModel)
            .where(ProjectFileModel.id == file_id)
            .values(content=content, updated_at=datetime.now())
            .execution_options(synchronize_session="fetch")
        )
        async with storage_guard("update content"):
            result = await self._session.execute(stmt)
            await self._session.flush()
        if result.rowcount == 0:
            return None
        entity = await self.get_by_id(file_id)
        if entity is not None:
            await self._session.refresh(entity)
        return entity

    async def update_file(self, file_id: str, **values: Any) -> Optional[ProjectFileModel]:
        """更新标题、排序等元数据（None 值忽略）"""
        values["updated_at"] = datetime.now()
        entity = await self.update(file_id, values)
        if entity is not None:
            await self._session.refresh(entity)
        return entity

    async def next_order(self, project_id: str) -> int:
        """追加到末尾时使用的排序值"""
        stmt = select(func.max(ProjectFileModel.order)).where(ProjectFileModel.project_id == project_id)
        async with storage_guard("next file order"):
            result = await self._session.execute(stmt)
        current = result.scalar()
        return 0 if current is None else current + 1

    async def set_order(self, project_id: str, file_ids: List[str]) -> None:
        """按给定顺序重写 order（0, 1, 2, ...）"""
        now = datetime.now()
        async with storage_guard("reorder project files"):
            for position, file_id in enumerate(file_ids):
                await self._session.execute(
                    update(ProjectFileModel)
                    .where(ProjectFileModel.project_id == project_id, ProjectFileModel.id == file_id)
                    .values(order=position, updated_at=now)
                    .execution_options(synchronize_session="fetch")
                )
            await self._session.flush()
