"""
书稿服务 - 将有序的一组文档编译并包裹为一个导出文件
"""
import inspect
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.constants import CompileConstants
from ..core.errors import BaseAppException, StorageUnavailableException, ValidationException
from ..core.logging import StructuredLogger, get_logger, log_operation
from ..domain.models.document import CompileMode
from ..domain.models.manuscript import DocumentRef, ExportArtifact, ExportFormat
from ..lib.compiler import compile_document
from .document import DocumentService

logger = get_logger(__name__)
business_logger = StructuredLogger("services.manuscript")

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

ProgressCallback = Callable[[float], Union[None, Awaitable[None]]]

# 导出格式 -> (是否使用 Office 外壳, 媒体类型, 扩展名)
_FORMATS = {
    ExportFormat.DOCX: (True, "application/msword", "doc"),
    ExportFormat.HTML: (False, "text/html", "html"),
    # EPUB 目前导出为可导入 Calibre/Kindle 的 HTML
    ExportFormat.EPUB: (False, "text/html", "html"),
}


@dataclass
class Section:
    title: str
    body: Markup


class ManuscriptService:
    """书稿编译服务"""

    def __init__(self, session: Optional[AsyncSession] = None, document_service: Optional[DocumentService] = None):
        self.documents = document_service or DocumentService(session)
        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATES_DIR)),
            autoescape=select_autoescape(["html"]),
        )

    def render(self, sections: Sequence[Section], export_format: ExportFormat = ExportFormat.HTML,
               title: str = "Manuscript") -> str:
        """用输出外壳包裹已编译的章节"""
        office = _FORMATS[ExportFormat(export_format)][0]
        template = self.env.get_template("manuscript.html")
        return template.render(sections=sections, office=office, title=title, lang="en")

    async def _compile_section(self, ref: DocumentRef, mode: CompileMode) -> Section:
        try:
            content = await self.documents.get_content(ref.id)
        except StorageUnavailableException:
            raise
        except BaseAppException as e:
            logger.error(f"加载章节失败 {ref.title} ({ref.id}): {e.message}")
            return Section(ref.title, Markup(CompileConstants.LOAD_ERROR_FRAGMENT))
        return Section(ref.title, Markup(compile_document(content, mode)))

    async def assemble(
        self,
        documents: Sequence[Union[DocumentRef, Any]],
        mode: CompileMode,
        progress: Optional[ProgressCallback] = None,
        export_format: ExportFormat = ExportFormat.HTML,
    ) -> str:
        """按调用方给定的顺序编译文档并包裹一次外壳

        无法加载的文档输出标题与错误标记，编译继续；
        持久层不可用会中止整个编译。
        """
        mode = CompileMode(mode)
        refs = [doc if isinstance(doc, DocumentRef) else DocumentRef.model_validate(doc) for doc in documents]
        total = len(refs)
        sections: List[Section] = []

        with log_operation(business_logger, "assemble_manuscript", mode=mode.value, documents=total):
            for index, ref in enumerate(refs, start=1):
                sections.append(await self._compile_section(ref, mode))
                if progress is not None:
                    result = progress(index / total)
                    if inspect.isawaitable(result):
                        await result

        return self.render(sections, export_format)

    async def assemble_project(
        self,
        project_id: str,
        mode: CompileMode,
        export_format: ExportFormat = ExportFormat.DOCX,
        progress: Optional[ProgressCallback] = None,
    ) -> ExportArtifact:
        """编译项目的全部章节（按 order 排序）为可下载文件"""
        mode = CompileMode(mode)
        export_format = ExportFormat(export_format)
        chapters = await self.documents.list_chapters(project_id)
        if not chapters:
            raise ValidationException("项目中没有可编译的章节", field="project_id")

        html = await self.assemble(
            [DocumentRef(id=chapter.id, title=chapter.title) for chapter in chapters],
            mode,
            progress=progress,
            export_format=export_format,
        )

        office, media_type, extension = _FORMATS[export_format]
        if office:
            html = "\ufeff" + html

        business_logger.log_business_event(
            "manuscript_exported", "project", project_id,
            mode=mode.value, export_format=export_format.value, chapters=len(chapters),
        )
        return ExportArtifact(
            filename=f"Manuscript_{mode.value}.{extension}",
            media_type=media_type,
            content=html,
        )
