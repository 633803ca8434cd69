"""
文档Service单元测试（内存数据库）
"""
import pytest

from draftless.core.errors import DocumentNotFoundException, ValidationException
from draftless.domain.models.project import FileType
from draftless.services.checkpoint import CheckpointService
from draftless.services.document import DocumentService
from tests.factories import TestDataBuilder


@pytest.mark.unit
class TestDocumentService:
    """文档Service测试"""

    @pytest.fixture
    def service(self, async_session):
        return DocumentService(async_session)

    @pytest.mark.asyncio
    async def test_create_chapter_with_default_content(self, service):
        created = await service.create_file("project-1", "Chapter 1")

        assert created.file_type == FileType.CHAPTER
        assert created.content == {"kind": "doc", "children": [], "attributes": {}}

    @pytest.mark.asyncio
    async def test_create_folder_has_no_content(self, service):
        created = await service.create_file("project-1", "Part One", file_type=FileType.FOLDER)
        assert created.content is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("title", ["", "   ", "t" * 256])
    async def test_create_rejects_bad_title(self, service, title):
        with pytest.raises(ValidationException):
            await service.create_file("project-1", title)

    @pytest.mark.asyncio
    async def test_create_rejects_invalid_content(self, service):
        with pytest.raises(ValidationException):
            await service.create_file("project-1", "Broken", content={"type": "doc", "content": [{"type": "x"}]})

    @pytest.mark.asyncio
    async def test_get_missing(self, service):
        with pytest.raises(DocumentNotFoundException):
            await service.get_file("missing")

    @pytest.mark.asyncio
    async def test_blank_id_rejected(self, service):
        with pytest.raises(ValidationException):
            await service.get_content("  ")

    @pytest.mark.asyncio
    async def test_get_content_of_folder_is_empty_document(self, service):
        folder = await service.create_file("project-1", "Part One", file_type=FileType.FOLDER)
        assert await service.get_content(folder.id) == {"kind": "doc", "children": [], "attributes": {}}

    @pytest.mark.asyncio
    async def test_replace_content_normalizes(self, service):
        created = await service.create_file("project-1", "Chapter 1")

        updated = await service.replace_content(created.id, TestDataBuilder.editor_doc())

        assert updated.content["children"][0]["kind"] == "heading"
        assert await service.get_content(created.id) == updated.content

    @pytest.mark.asyncio
    async def test_replace_content_missing_document(self, service):
        with pytest.raises(DocumentNotFoundException):
            await service.replace_content("missing", TestDataBuilder.simple_doc())

    @pytest.mark.asyncio
    async def test_plain_text(self, service):
        created = await service.create_file(
            "project-1", "Chapter 1", content=TestDataBuilder.simple_doc("First.", "Second.")
        )
        assert await service.get_plain_text(created.id) == "First.\n\nSecond."

    @pytest.mark.asyncio
    async def test_list_chapters_in_order(self, service):
        await service.create_file("project-1", "Two", order=2)
        await service.create_file("project-1", "Scratch", file_type=FileType.NOTE, order=0)
        await service.create_file("project-1", "One", order=1)

        chapters = await service.list_chapters("project-1")
        files = await service.list_files("project-1")

        assert [c.title for c in chapters] == ["One", "Two"]
        assert [f.title for f in files] == ["Scratch", "One", "Two"]

    @pytest.mark.asyncio
    async def test_create_without_order_appends_to_end(self, service):
        first = await service.create_file("project-1", "One")
        second = await service.create_file("project-1", "Two")
        other = await service.create_file("project-2", "Elsewhere")

        assert (first.order, second.order, other.order) == (0, 1, 0)

    @pytest.mark.asyncio
    async def test_rename_file(self, service):
        created = await service.create_file("project-1", "Untitled", content=TestDataBuilder.simple_doc("Kept."))

        renamed = await service.update_file(created.id, title="  The Harbour  ")

        assert renamed.title == "The Harbour"
        assert renamed.order == created.order
        assert await service.get_plain_text(created.id) == "Kept."

    @pytest.mark.asyncio
    async def test_rename_rejects_blank_title(self, service):
        created = await service.create_file("project-1", "Untitled")
        with pytest.raises(ValidationException):
            await service.update_file(created.id, title="   ")

    @pytest.mark.asyncio
    async def test_update_missing_file(self, service):
        with pytest.raises(DocumentNotFoundException):
            await service.update_file("missing", title="Nope")

    @pytest.mark.asyncio
    async def test_reorder_files(self, service):
        one = await service.create_file("project-1", "One")
        two = await service.create_file("project-1", "Two")
        three = await service.create_file("project-1", "Three")

        files = await service.reorder_files("project-1", [three.id, one.id, two.id])

        assert [f.title for f in files] == ["Three", "One", "Two"]
        assert [f.order for f in files] == [0, 1, 2]
        assert [c.title for c in await service.list_chapters("project-1")] == ["Three", "One", "Two"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("ids", [
        lambda a, b: [a],
        lambda a, b: [a, b, "stranger"],
        lambda a, b: [a, a, b],
    ])
    async def test_reorder_requires_exact_file_set(self, service, ids):
        one = await service.create_file("project-1", "One")
        two = await service.create_file("project-1", "Two")

        with pytest.raises(ValidationException):
            await service.reorder_files("project-1", ids(one.id, two.id))

        assert [f.title for f in await service.list_files("project-1")] == ["One", "Two"]

    @pytest.mark.asyncio
    async def test_delete_file_removes_its_checkpoints(self, service, async_session):
        keep = await service.create_file("project-1", "Keep")
        doomed = await service.create_file("project-1", "Doomed")
        checkpoints = CheckpointService(async_session)
        await checkpoints.save(doomed.id, TestDataBuilder.simple_doc(), "Draft")
        await checkpoints.save(keep.id, TestDataBuilder.simple_doc(), "Draft")

        assert await service.delete_file(doomed.id) is True

        with pytest.raises(DocumentNotFoundException):
            await service.get_file(doomed.id)
        assert await checkpoints.list(doomed.id) == []
        assert len(await checkpoints.list(keep.id)) == 1
        assert [f.title for f in await service.list_files("project-1")] == ["Keep"]

    @pytest.mark.asyncio
    async def test_delete_missing_file_is_noop(self, service):
        assert await service.delete_file("missing") is False
