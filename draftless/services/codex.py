"""
设定集服务 - 维护项目的角色、地点、物品与背景设定，并在正文中查找提及
"""
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.constants import CodexConstants
from ..core.errors import CodexEntityNotFoundException, ValidationException
from ..core.logging import StructuredLogger
from ..core.service import BaseService
from ..domain.models.codex import CodexEntity, CodexEntityModel, EntityType, color_for
from ..repositories.codex import CodexRepository
from .document import DocumentService

business_logger = StructuredLogger("services.codex")


def find_mentions(entities: Iterable[CodexEntity], text: str) -> List[CodexEntity]:
    """返回名称（忽略大小写）出现在文本中的条目，保持条目原有顺序"""
    haystack = text.casefold()
    return [entity for entity in entities if entity.name and entity.name.casefold() in haystack]


class CodexService(BaseService[CodexEntityModel, CodexRepository]):
    """设定集服务"""

    def __init__(self, session: AsyncSession):
        super().__init__(CodexRepository(session))
        self.session = session

    def get_entity_name(self) -> str:
        return "设定条目"

    def _validate_name(self, name: Optional[str]) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationException("名称不能为空", field="name")
        if len(name) > CodexConstants.NAME_MAX_LENGTH:
            raise ValidationException(f"名称不能超过{CodexConstants.NAME_MAX_LENGTH}个字符", field="name")
        return name

    def _validate_type(self, entity_type: Any) -> EntityType:
        try:
            return EntityType(entity_type)
        except ValueError as e:
            raise ValidationException(f"未知的条目类型: {entity_type}", field="entity_type") from e

    async def _get_model(self, project_id: str, entity_id: str) -> CodexEntityModel:
        project_id = self._validate_id(project_id, "project_id")
        entity_id = self._validate_id(entity_id, "entity_id")
        model = await self.repository.get_for_project(project_id, entity_id)
        if model is None:
            raise CodexEntityNotFoundException(entity_id)
        return model

    async def add(
        self,
        project_id: str,
        name: str,
        entity_type: EntityType = EntityType.CHARACTER,
        description: str = "",
        color: Optional[str] = None,
    ) -> CodexEntity:
        """新增条目，未指定颜色时按类型取色"""
        project_id = self._validate_id(project_id, "project_id")
        name = self._validate_name(name)
        entity_type = self._validate_type(entity_type)

        try:
            model = await self.repository.create_entity(
                project_id=project_id,
                name=name,
                entity_type=entity_type,
                description=description or "",
                color=color or color_for(entity_type),
            )
            await self.repository.commit()
        except Exception:
            await self.repository.rollback()
            raise

        business_logger.log_business_event("codex_entity_added", "codex_entity", model.id, project_id=project_id)
        return model.to_pydantic()

    async def get(self, project_id: str, entity_id: str) -> CodexEntity:
        return (await self._get_model(project_id, entity_id)).to_pydantic()

    async def get_all(self, project_id: str) -> List[CodexEntity]:
        """列出项目的全部条目"""
        project_id = self._validate_id(project_id, "project_id")
        return [model.to_pydantic() for model in await self.repository.list_for_project(project_id)]

    async def update(self, project_id: str, entity_id: str, **updates: Any) -> CodexEntity:
        """
        部分更新条目

        类型改变而未显式给出颜色时，颜色随类型更新。
        """
        model = await self._get_model(project_id, entity_id)
        values: Dict[str, Any] = {}

        if updates.get("name") is not None:
            values["name"] = self._validate_name(updates["name"])
        if updates.get("description") is not None:
            values["description"] = updates["description"]
        if updates.get("entity_type") is not None:
            values["entity_type"] = self._validate_type(updates["entity_type"])
            if updates.get("color") is None:
                values["color"] = color_for(values["entity_type"])
        if updates.get("color") is not None:
            values["color"] = updates["color"]
        if not values:
            return model.to_pydantic()
        values["updated_at"] = datetime.now()

        try:
            updated = await self.repository.update(model.id, values)
            await self.repository.commit()
        except Exception:
            await self.repository.rollback()
            raise
        await self.session.refresh(updated)

        business_logger.log_business_event(
            "codex_entity_updated", "codex_entity", model.id,
            fields=sorted(key for key in values if key != "updated_at"),
        )
        return updated.to_pydantic()

    async def delete(self, project_id: str, entity_id: str) -> bool:
        """删除条目；不存在时不做任何事"""
        project_id = self._validate_id(project_id, "project_id")
        entity_id = self._validate_id(entity_id, "entity_id")
        if await self.repository.get_for_project(project_id, entity_id) is None:
            return False

        try:
            deleted = await self.repository.delete(entity_id)
            await self.repository.commit()
        except Exception:
            await self.repository.rollback()
            raise

        business_logger.log_business_event("codex_entity_deleted", "codex_entity", entity_id, project_id=project_id)
        return deleted

    async def scan(self, project_id: str, text: str) -> List[CodexEntity]:
        """在文本中查找已知条目"""
        return find_mentions(await self.get_all(project_id), text or "")

    async def scan_document(self, project_id: str, document_id: str) -> List[CodexEntity]:
        """在文档的纯文本中查找已知条目"""
        text = await DocumentService(self.session).get_plain_text(document_id)
        return await self.scan(project_id, text)
