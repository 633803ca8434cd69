"""
设定集Repository
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy import asc, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.repository import BaseRepository, storage_guard
from ..domain.models.codex import CodexEntityModel, EntityType


class CodexRepository(BaseRepository[CodexEntityModel]):
    """设定条目Repository，所有查询都限定在单个项目内"""

    def __init__(self, session: AsyncSession):
        super().__init__(CodexEntityModel, session)

    def get_table_name(self) -> str:
        return "codex_entities"

    async def create_entity(
        self,
        project_id: str,
        name: str,
        entity_type: EntityType,
        description: str,
        color: str,
    ) -> CodexEntityModel:
        now = datetime.now()
        return await self.create({
            "project_id": project_id,
            "name": name,
            "entity_type": entity_type,
            "description": description,
            "color": color,
            "created_at": now,
            "updated_at": now,
        })

    async def get_for_project(self, project_id: str, entity_id: str) -> Optional[CodexEntityModel]:
        stmt = select(CodexEntityModel).where(
            CodexEntityModel.id == entity_id,
            CodexEntityModel.project_id == project_id,
        )
        async with storage_guard("get codex entity"):
            result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_project(self, project_id: str) -> List[CodexEntityModel]:
        """按创建时间列出项目的设定条目"""
        stmt = (
            select(CodexEntityModel)
            .where(CodexEntityModel.project_id == project_id)
            .order_by(asc(CodexEntityModel.created_at), asc(CodexEntityModel.name))
        )
        async with storage_guard("list codex entities"):
            result = await self._session.execute(stmt)
        return list(result.scalars().all())
