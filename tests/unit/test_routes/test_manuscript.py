"""
书稿导出路由单元测试
"""
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi import status

from draftless.api.deps import get_manuscript_service
from draftless.core.errors import ValidationException
from draftless.domain.models.manuscript import ExportArtifact
from draftless.main import app


@pytest.mark.unit
class TestManuscriptRoutes:
    """书稿导出路由测试"""

    @pytest.fixture
    def manuscript_service(self, client):
        service = Mock()
        app.dependency_overrides[get_manuscript_service] = lambda: service
        return service

    def test_export_download(self, client, manuscript_service):
        manuscript_service.assemble_project = AsyncMock(return_value=ExportArtifact(
            filename="Manuscript_final.doc",
            media_type="application/msword",
            content="\ufeff<html></html>",
        ))

        response = client.post("/api/projects/project-1/manuscript", json={"mode": "final", "format": "docx"})

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["content-type"].startswith("application/msword")
        assert response.headers["content-disposition"] == "attachment; filename*=UTF-8''Manuscript_final.doc"
        assert response.content.startswith(b"\xef\xbb\xbf<html>")
        manuscript_service.assemble_project.assert_called_once_with("project-1", "final", "docx")

    def test_export_empty_project(self, client, manuscript_service):
        manuscript_service.assemble_project = AsyncMock(
            side_effect=ValidationException("项目中没有可编译的章节", field="project_id")
        )

        response = client.post("/api/projects/project-1/manuscript", json={})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_assemble(self, client, manuscript_service):
        manuscript_service.assemble = AsyncMock(return_value="<!DOCTYPE html><html></html>")

        response = client.post(
            "/api/manuscripts/assemble",
            json={"mode": "review", "documents": [{"id": "ch-1", "title": "One"}]},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["html"].startswith("<!DOCTYPE html>")
        documents, mode = manuscript_service.assemble.call_args.args
        assert [d.id for d in documents] == ["ch-1"]
        assert mode == "review"
