"""
项目文件Repository单元测试（内存数据库）
"""
import pytest

from draftless.domain.models.project import FileType
from draftless.repositories.project_file import ProjectFileRepository
from tests.factories import TestDataBuilder


@pytest.mark.unit
class TestProjectFileRepository:
    """项目文件Repository测试"""

    @pytest.fixture
    def repository(self, async_session):
        return ProjectFileRepository(async_session)

    @pytest.mark.asyncio
    async def test_create_with_explicit_id(self, repository):
        created = await repository.create_file("project-1", "Chapter 1", file_id="chapter-1")

        assert created.id == "chapter-1"
        assert created.file_type == FileType.CHAPTER.value
        assert created.content is None

    @pytest.mark.asyncio
    async def test_list_ordered_and_filtered(self, repository):
        await repository.create_file("project-1", "Third", order=3)
        await repository.create_file("project-1", "First", order=1)
        await repository.create_file("project-1", "Notes", file_type=FileType.NOTE, order=2)
        await repository.create_file("project-2", "Elsewhere", order=0)

        all_titles = [f.title for f in await repository.list_files("project-1")]
        chapter_titles = [f.title for f in await repository.list_files("project-1", FileType.CHAPTER)]

        assert all_titles == ["First", "Notes", "Third"]
        assert chapter_titles == ["First", "Third"]

    @pytest.mark.asyncio
    async def test_update_content(self, repository):
        created = await repository.create_file("project-1", "Chapter 1")
        content = TestDataBuilder.simple_doc("new text")

        updated = await repository.update_content(created.id, content)

        assert updated.content == content

    @pytest.mark.asyncio
    async def test_update_content_missing(self, repository):
        assert await repository.update_content("missing", TestDataBuilder.simple_doc()) is None

    @pytest.mark.asyncio
    async def test_next_order(self, repository):
        assert await repository.next_order("project-1") == 0

        await repository.create_file("project-1", "Late", order=7)
        await repository.create_file("project-2", "Elsewhere", order=20)

        assert await repository.next_order("project-1") == 8

    @pytest.mark.asyncio
    async def test_set_order_stays_in_project(self, repository):
        a = await repository.create_file("project-1", "A", order=0)
        b = await repository.create_file("project-1", "B", order=1)
        stranger = await repository.create_file("project-2", "C", order=5)

        await repository.set_order("project-1", [b.id, a.id, stranger.id])

        assert [f.title for f in await repository.list_files("project-1")] == ["B", "A"]
        assert (await repository.get_by_id(stranger.id)).order == 5
