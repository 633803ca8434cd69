"""
API端到端集成测试（内存数据库，完整生命周期）
"""
import pytest
from fastapi import status

from draftless.api.deps import HEAD_HEADER
from tests.factories import TestDataBuilder


@pytest.mark.integration
class TestApiFlow:
    """API流程测试"""

    def _create_chapter(self, client, title, order, content):
        response = client.post(
            "/api/projects/project-1/documents",
            json={"title": title, "order": order, "content": content},
        )
        assert response.status_code == status.HTTP_201_CREATED
        return response.json()["data"]["id"]

    def test_health(self, live_client):
        response = live_client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["storage_ready"] is True

    def test_branching_history_over_http(self, live_client):
        doc_id = self._create_chapter(live_client, "Chapter 1", 0, TestDataBuilder.simple_doc("A"))
        base = f"/api/documents/{doc_id}/checkpoints"

        a = live_client.post(base, json={"label": "A", "content": TestDataBuilder.simple_doc("A")}).json()["data"]
        head = a["head"]
        b = live_client.post(
            base, json={"label": "B", "content": TestDataBuilder.simple_doc("B")}, headers={HEAD_HEADER: head}
        ).json()["data"]
        assert b["checkpoint"]["parent_id"] == a["checkpoint"]["id"]

        restored = live_client.post(
            f"{base}/{a['checkpoint']['id']}/restore", headers={HEAD_HEADER: b["head"]}
        ).json()["data"]
        assert restored["head"] == a["checkpoint"]["id"]
        assert restored["content"]["children"][0]["children"][0]["value"] == "A"

        c = live_client.post(
            base, json={"label": "C", "content": TestDataBuilder.simple_doc("C")},
            headers={HEAD_HEADER: restored["head"]},
        ).json()["data"]
        assert c["checkpoint"]["parent_id"] == a["checkpoint"]["id"]

        listed = live_client.get(base).json()["data"]
        assert [cp["label"] for cp in listed] == ["C", "B", "A"]

        deleted = live_client.delete(f"{base}/{c['head']}", headers={HEAD_HEADER: c["head"]}).json()["data"]
        assert deleted == {"deleted": True, "head": None}

        missing = live_client.get(f"{base}/{c['head']}")
        assert missing.status_code == status.HTTP_404_NOT_FOUND

    def test_compile_and_export(self, live_client):
        self._create_chapter(live_client, "Second", 2, TestDataBuilder.simple_doc("Later."))
        self._create_chapter(live_client, "First", 1, TestDataBuilder.hello_world_doc())

        response = live_client.post(
            "/api/projects/project-1/manuscript", json={"mode": "review", "format": "html"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert "Manuscript_review.html" in response.headers["content-disposition"]
        html = response.text
        assert html.index("First") < html.index("Second")
        assert '<span class="suggestion-del"> world</span>' in html

    def test_export_empty_project(self, live_client):
        response = live_client.post("/api/projects/empty-project/manuscript", json={"mode": "final"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_weave_without_credentials(self, live_client, monkeypatch):
        monkeypatch.setenv("LLM_PROVIDER", "openai")
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        from draftless.core.config import get_settings
        get_settings.cache_clear()
        try:
            response = live_client.post("/api/weave", json={"text_a": "a", "text_b": "b"})
        finally:
            get_settings.cache_clear()

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE

    def test_project_files_and_codex(self, live_client):
        base = "/api/projects/harbour"
        ids = []
        for title in ("Arrival", "Storm", "Departure"):
            response = live_client.post(
                f"{base}/documents", json={"title": title, "content": TestDataBuilder.simple_doc(f"{title}.")}
            )
            ids.append(response.json()["data"]["id"])
        arrival, storm, departure = ids

        live_client.patch(f"/api/documents/{storm}", json={"title": "The Storm"})
        reordered = live_client.put(f"{base}/documents/order", json={"file_ids": [departure, arrival, storm]})
        assert [f["title"] for f in reordered.json()["data"]] == ["Departure", "Arrival", "The Storm"]

        live_client.post(
            f"/api/documents/{storm}/checkpoints", json={"label": "v1", "content": TestDataBuilder.simple_doc("x")}
        )
        assert live_client.delete(f"/api/documents/{storm}").json()["data"] == {"deleted": True}
        assert live_client.get(f"/api/documents/{storm}/checkpoints").json()["data"] == []
        assert [f["title"] for f in live_client.get(f"{base}/documents").json()["data"]] == ["Departure", "Arrival"]

        created = live_client.post(f"{base}/codex", json={"name": "Arrival", "entity_type": "lore"})
        assert created.status_code == status.HTTP_201_CREATED
        live_client.post(f"{base}/codex", json={"name": "Mara"})

        scan = live_client.post(f"{base}/codex/scan", json={"document_id": arrival}).json()["data"]
        assert [e["name"] for e in scan["matches"]] == ["Arrival"]
