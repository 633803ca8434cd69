"""
测试数据工厂 - 用于生成测试数据
"""
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

import factory

from draftless.domain.models.checkpoint import Checkpoint
from draftless.domain.models.codex import CodexEntity, EntityType, color_for
from draftless.domain.models.project import FileType, ProjectFile


class TestDataBuilder:
    """测试数据构建器"""

    # === 文档树（规范形式） ===

    @staticmethod
    def text(value: str, *marks: Any) -> Dict[str, Any]:
        """文本叶子；marks 可以是标记名或完整的标记字典"""
        return {
            "kind": "text",
            "value": value,
            "marks": [m if isinstance(m, dict) else {"kind": m, "attributes": {}} for m in marks],
        }

    @staticmethod
    def element(kind: str, *children: Dict[str, Any], **attributes: Any) -> Dict[str, Any]:
        return {"kind": kind, "children": list(children), "attributes": attributes}

    @staticmethod
    def paragraph(*children: Dict[str, Any]) -> Dict[str, Any]:
        return TestDataBuilder.element("paragraph", *children)

    @staticmethod
    def doc(*children: Dict[str, Any]) -> Dict[str, Any]:
        return TestDataBuilder.element("doc", *children)

    @staticmethod
    def comment(comment_id: str = "c1", text: str = "check this") -> Dict[str, Any]:
        return {"kind": "comment", "attributes": {"id": comment_id, "text": text}}

    @staticmethod
    def hello_world_doc() -> Dict[str, Any]:
        """段落 "Hello" + 被删除的 " world" """
        b = TestDataBuilder
        return b.doc(b.paragraph(b.text("Hello"), b.text(" world", "deletion")))

    @staticmethod
    def simple_doc(*lines: str) -> Dict[str, Any]:
        """每行一个段落的简单文档"""
        b = TestDataBuilder
        return b.doc(*[b.paragraph(b.text(line)) for line in (lines or ("Once upon a time.",))])

    # === 编辑器 JSON（type/text/content/attrs） ===

    @staticmethod
    def editor_doc() -> Dict[str, Any]:
        return {
            "type": "doc",
            "content": [
                {
                    "type": "heading",
                    "attrs": {"level": 2},
                    "content": [{"type": "text", "text": "Chapter One"}],
                },
                {
                    "type": "paragraph",
                    "content": [
                        {"type": "text", "text": "The door was "},
                        {"type": "text", "text": "open", "marks": [{"type": "suggestionDel"}]},
                        {"type": "text", "text": "locked", "marks": [{"type": "suggestionAdd"}]},
                        # 同步层省略了 type 的文本叶子
                        {"text": "."},
                    ],
                },
            ],
        }

    # === 领域对象 ===

    @staticmethod
    def create_checkpoint(
        id: Optional[str] = None,
        document_id: str = "doc-1",
        label: str = "Draft 1",
        content: Optional[Dict[str, Any]] = None,
        parent_id: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> Checkpoint:
        """创建测试检查点"""
        return Checkpoint(
            id=id or str(uuid.uuid4()),
            document_id=document_id,
            label=label,
            content=content or TestDataBuilder.simple_doc(),
            parent_id=parent_id,
            created_at=created_at or datetime.now(),
        )

    @staticmethod
    def create_project_file(
        id: str = "doc-1",
        project_id: str = "project-1",
        title: str = "Chapter 1",
        file_type: FileType = FileType.CHAPTER,
        order: int = 0,
        content: Optional[Dict[str, Any]] = None,
    ) -> ProjectFile:
        """创建测试项目文件"""
        return ProjectFile(
            id=id,
            project_id=project_id,
            title=title,
            file_type=file_type,
            order=order,
            content=content,
            created_at=datetime.now(),
            updated_at=datetime.now(),
        )

    @staticmethod
    def create_codex_entity(
        id: str = "entity-1",
        project_id: str = "project-1",
        name: str = "Mara",
        entity_type: EntityType = EntityType.CHARACTER,
        description: str = "",
    ) -> CodexEntity:
        """创建测试设定条目"""
        return CodexEntity(
            id=id,
            project_id=project_id,
            name=name,
            entity_type=entity_type,
            description=description,
            color=color_for(entity_type),
            created_at=datetime.now(),
            updated_at=datetime.now(),
        )


class CheckpointFactory(factory.Factory):
    """检查点工厂"""

    class Meta:
        model = Checkpoint

    id = factory.LazyFunction(lambda: str(uuid.uuid4()))
    document_id = "doc-1"
    label = factory.Sequence(lambda n: f"Checkpoint {n}")
    content = factory.LazyFunction(TestDataBuilder.simple_doc)
    parent_id = None
    created_at = factory.LazyFunction(datetime.now)


class ProjectFileFactory(factory.Factory):
    """项目文件工厂"""

    class Meta:
        model = ProjectFile

    id = factory.LazyFunction(lambda: str(uuid.uuid4()))
    project_id = "project-1"
    title = factory.Faker("sentence", nb_words=3)
    file_type = FileType.CHAPTER
    order = factory.Sequence(lambda n: n)
    content = factory.LazyFunction(TestDataBuilder.simple_doc)
    created_at = factory.LazyFunction(datetime.now)
    updated_at = factory.LazyFunction(datetime.now)


def chapter_refs(files: List[ProjectFile]) -> List[Dict[str, str]]:
    """把项目文件转换为书稿的文档引用"""
    return [{"id": f.id, "title": f.title} for f in files]
