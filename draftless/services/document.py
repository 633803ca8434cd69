"""
文档服务 - 项目文件（章节、笔记、文件夹）的持久化与内容读取
"""
from typing import Any, Dict, List, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import CompileException, DocumentNotFoundException, ValidationException
from ..core.constants import DatabaseConstants
from ..core.logging import StructuredLogger
from ..core.service import BaseService
from ..domain.models.document import ElementNode, empty_document
from ..domain.models.project import FileType, ProjectFile, ProjectFileModel
from ..lib.compiler import dump_tree, extract_plain_text, parse_tree
from ..repositories.checkpoint import CheckpointRepository
from ..repositories.project_file import ProjectFileRepository

business_logger = StructuredLogger("services.document")


class DocumentService(BaseService[ProjectFileModel, ProjectFileRepository]):
    """文档服务（文档存储）"""

    def __init__(self, session: AsyncSession):
        super().__init__(ProjectFileRepository(session))
        self.checkpoints = CheckpointRepository(session)
        self.session = session

    def get_entity_name(self) -> str:
        return "文档"

    def _normalize_content(self, content: Union[ElementNode, Dict[str, Any], List[Any], None]) -> Dict[str, Any]:
        if content is None:
            return dump_tree(empty_document())
        if isinstance(content, ElementNode):
            return dump_tree(content)
        try:
            return dump_tree(parse_tree(content))
        except CompileException as e:
            raise ValidationException(f"文档内容无效: {e.message}", field="content", details=e.details) from e

    def _validate_title(self, title: Optional[str]) -> str:
        title = (title or "").strip()
        if not title:
            raise ValidationException("标题不能为空", field="title")
        if len(title) > DatabaseConstants.TITLE_MAX_LENGTH:
            raise ValidationException(f"标题不能超过{DatabaseConstants.TITLE_MAX_LENGTH}个字符", field="title")
        return title

    async def _get_model(self, document_id: str) -> ProjectFileModel:
        document_id = self._validate_id(document_id, "document_id")
        model = await self.repository.get_by_id(document_id)
        if model is None:
            raise DocumentNotFoundException(document_id)
        return model

    async def get_file(self, document_id: str) -> ProjectFile:
        """获取项目文件"""
        return (await self._get_model(document_id)).to_pydantic()

    async def get_content(self, document_id: str) -> Dict[str, Any]:
        """获取文档内容树（存储形式），未写入内容的文档返回空文档"""
        model = await self._get_model(document_id)
        if model.content is None:
            return dump_tree(empty_document())
        return model.content

    async def get_plain_text(self, document_id: str) -> str:
        """扁平化为纯文本：块之间以段落分隔符连接"""
        content = await self.get_content(document_id)
        return extract_plain_text(parse_tree(content))

    async def replace_content(
        self,
        document_id: str,
        content: Union[ElementNode, Dict[str, Any], List[Any]],
    ) -> ProjectFile:
        """替换文档内容"""
        await self._get_model(document_id)
        normalized = self._normalize_content(content)
        try:
            model = await self.repository.update_content(document_id, normalized)
            await self.repository.commit()
        except Exception:
            await self.repository.rollback()
            raise
        if model is None:
            raise DocumentNotFoundException(document_id)

        business_logger.log_business_event("document_content_replaced", "document", document_id)
        return model.to_pydantic()

    async def create_file(
        self,
        project_id: str,
        title: str,
        file_type: FileType = FileType.CHAPTER,
        order: Optional[int] = None,
        content: Optional[Union[ElementNode, Dict[str, Any], List[Any]]] = None,
        file_id: Optional[str] = None,
    ) -> ProjectFile:
        """创建项目文件，未指定 order 时追加到末尾"""
        project_id = self._validate_id(project_id, "project_id")
        title = self._validate_title(title)

        normalized = None
        if FileType(file_type) != FileType.FOLDER:
            normalized = self._normalize_content(content)

        try:
            if order is None:
                order = await self.repository.next_order(project_id)
            model = await self.repository.create_file(
                project_id=project_id,
                title=title,
                file_type=FileType(file_type),
                order=order,
                content=normalized,
                file_id=file_id,
            )
            await self.repository.commit()
        except Exception:
            await self.repository.rollback()
            raise

        self.logger.info(f"创建{self.get_entity_name()}成功: {model.id}, 标题: {title}")
        return model.to_pydantic()

    async def list_files(self, project_id: str, file_type: Optional[FileType] = None) -> List[ProjectFile]:
        """列出项目文件，按 order 排序"""
        project_id = self._validate_id(project_id, "project_id")
        models = await self.repository.list_files(project_id, file_type)
        return [model.to_pydantic() for model in models]

    async def list_chapters(self, project_id: str) -> List[ProjectFile]:
        """列出项目的章节，按 order 排序"""
        return await self.list_files(project_id, FileType.CHAPTER)

    async def update_file(
        self,
        document_id: str,
        title: Optional[str] = None,
        order: Optional[int] = None,
    ) -> ProjectFile:
        """重命名或移动项目文件，只修改给出的字段"""
        document_id = (await self._get_model(document_id)).id
        values: Dict[str, Any] = {}
        if title is not None:
            values["title"] = self._validate_title(title)
        if order is not None:
            values["order"] = order

        try:
            model = await self.repository.update_file(document_id, **values)
            await self.repository.commit()
        except Exception:
            await self.repository.rollback()
            raise
        if model is None:
            raise DocumentNotFoundException(document_id)

        business_logger.log_business_event("document_updated", "document", model.id, fields=sorted(values))
        return model.to_pydantic()

    async def reorder_files(self, project_id: str, file_ids: List[str]) -> List[ProjectFile]:
        """按给定顺序重排项目文件；必须恰好列出项目的全部文件"""
        project_id = self._validate_id(project_id, "project_id")
        existing = {model.id for model in await self.repository.list_files(project_id)}

        if len(set(file_ids)) != len(file_ids):
            raise ValidationException("文件ID重复", field="file_ids")
        if set(file_ids) != existing:
            raise ValidationException(
                "重排必须包含项目的全部文件",
                field="file_ids",
                details={
                    "unknown": sorted(set(file_ids) - existing),
                    "missing": sorted(existing - set(file_ids)),
                },
            )

        try:
            await self.repository.set_order(project_id, file_ids)
            await self.repository.commit()
        except Exception:
            await self.repository.rollback()
            raise

        business_logger.log_business_event("project_files_reordered", "project", project_id, count=len(file_ids))
        return await self.list_files(project_id)

    async def delete_file(self, document_id: str) -> bool:
        """删除项目文件及其检查点历史；文件不存在时不做任何事"""
        document_id = self._validate_id(document_id, "document_id")
        try:
            deleted = await self.repository.delete(document_id)
            removed = await self.checkpoints.delete_all_for_document(document_id)
            await self.repository.commit()
        except Exception:
            await self.repository.rollback()
            raise

        if deleted:
            business_logger.log_business_event("document_deleted", "document", document_id, checkpoints_removed=removed)
        return deleted
