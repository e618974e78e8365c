"""Smoke tests for FastAPI endpoints."""
import pytest
from httpx import AsyncClient, ASGITransport

from branchwrite.dependencies import get_store
from branchwrite.main import app


@pytest.fixture
async def client(store):
    app.dependency_overrides[get_store] = lambda: store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["storage_accessible"] is True


@pytest.mark.asyncio
async def test_list_projects_empty(client):
    resp = await client.get("/projects")
    assert resp.status_code == 200
    assert resp.json() == []


@pytest.mark.asyncio
async def test_unknown_route_404(client):
    resp = await client.get("/api/nonexistent")
    assert resp.status_code in (404, 405)


@pytest.mark.asyncio
async def test_missing_project_is_404(client):
    resp = await client.get("/projects/__nonexistent__")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Project not found: __nonexistent__"


@pytest.mark.asyncio
async def test_project_lifecycle(client):
    resp = await client.post("/api/projects", json={"name": "API novel", "author": "Ann"})
    assert resp.status_code == 200
    project_id = resp.json()["config"]["id"]

    resp = await client.put(f"/projects/{project_id}/content", json={"content": "hello   world\n\nfoo"})
    assert resp.status_code == 200
    assert resp.json()["document_metadata"]["character_count"] == 18

    resp = await client.get(f"/projects/{project_id}/status")
    assert resp.json() == {"has_unsaved_changes": True, "should_auto_commit": False}

    resp = await client.post(f"/projects/{project_id}/commits", json={"message": "c1"})
    assert resp.status_code == 200
    commit_id = resp.json()["id"]

    resp = await client.get(f"/projects/{project_id}/status")
    assert resp.json()["has_unsaved_changes"] is False

    resp = await client.get(f"/projects/{project_id}/commits/{commit_id}")
    assert resp.json()["content"] == "hello   world\n\nfoo"

    resp = await client.get(f"/projects/{project_id}/stats")
    assert resp.json()["total_commits"] == 1
    assert resp.json()["manual_commits"] == 1

    resp = await client.get(f"/projects/{project_id}/diff", params={"from": commit_id, "to": commit_id})
    assert resp.status_code == 200
    assert {c["type"] for c in resp.json()["changes"]} == {"unchanged"}

    resp = await client.post(f"/projects/{project_id}/commits/{commit_id}/rollback")
    assert resp.status_code == 200
    assert resp.json()["commits"][0]["message"] == "Rollback to c1"

    resp = await client.get("/projects")
    assert [p["id"] for p in resp.json()] == [project_id]

    resp = await client.delete(f"/projects/{project_id}")
    assert resp.json()["success"] is True
    resp = await client.delete(f"/projects/{project_id}")
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_save_project_id_mismatch(client):
    created = (await client.post("/projects", json={"name": "Mismatch"})).json()
    created["config"]["id"] = "someone-else"
    resp = await client.put("/projects/other-id", json=created)
    assert resp.status_code == 400
    assert resp.json() == {"detail": "Project id mismatch: someone-else != other-id"}


@pytest.mark.asyncio
async def test_export_endpoint(client, tmp_path):
    project_id = (await client.post("/projects", json={"name": "Export"})).json()["config"]["id"]
    destination = tmp_path / "exported"
    resp = await client.post(f"/projects/{project_id}/export", json={"destination": str(destination)})
    assert resp.status_code == 200
    assert (destination / "document.md").exists()


@pytest.mark.asyncio
async def test_export_to_file_is_400(client, tmp_path):
    project_id = (await client.post("/projects", json={"name": "Export"})).json()["config"]["id"]
    occupied = tmp_path / "occupied.txt"
    occupied.write_text("x", encoding="utf-8")
    resp = await client.post(f"/projects/{project_id}/export", json={"destination": str(occupied)})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_corrupt_project_is_422(client, data_dir):
    project_id = (await client.post("/projects", json={"name": "Corrupt"})).json()["config"]["id"]
    (data_dir / "projects" / project_id / "metadata.json").write_text("{", encoding="utf-8")
    resp = await client.get(f"/projects/{project_id}")
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_missing_required_artifact_is_500(client, data_dir):
    project_id = (await client.post("/projects", json={"name": "Partial"})).json()["config"]["id"]
    (data_dir / "projects" / project_id / "metadata.json").unlink()
    resp = await client.get(f"/projects/{project_id}")
    assert resp.status_code == 500
    assert "metadata" in resp.json()["detail"]


@pytest.mark.asyncio
async def test_book_and_documents(client):
    resp = await client.post("/books", json={"name": "Saga", "genre": "fantasy"})
    assert resp.status_code == 200
    book_id = resp.json()["config"]["id"]

    doc = (await client.post(f"/books/{book_id}/documents", json={"title": "Chapter 1"})).json()
    assert doc["order"] == 1

    resp = await client.put(
        f"/books/{book_id}/documents/{doc['id']}/content",
        json={"content": "hello   world\n\nfoo"},
    )
    assert resp.json()["metadata"]["word_count"] == 3

    resp = await client.get(f"/books/{book_id}/documents/{doc['id']}/content")
    assert resp.json()["content"] == "hello   world\n\nfoo"

    resp = await client.put(f"/books/{book_id}/current-document", json={"document_id": doc["id"]})
    assert resp.json()["current_document_id"] == doc["id"]

    resp = await client.put(f"/books/{book_id}/current-document", json={"document_id": "ghost"})
    assert resp.status_code == 404

    resp = await client.delete(f"/books/{book_id}/documents/{doc['id']}")
    assert resp.status_code == 200

    book = (await client.get(f"/api/books/{book_id}")).json()
    assert book["documents"] == []
    assert book["current_document_id"] is None

    assert [b["id"] for b in (await client.get("/books")).json()] == [book_id]
    assert (await client.delete(f"/books/{book_id}")).status_code == 200
    assert (await client.get(f"/books/{book_id}")).status_code == 404


@pytest.mark.asyncio
async def test_save_book_id_mismatch(client):
    created = (await client.post("/books", json={"name": "Mismatch"})).json()
    resp = await client.put("/api/books/other-id", json=created)
    assert resp.status_code == 400
    assert resp.json() == {"detail": f"Book id mismatch: {created['config']['id']} != other-id"}
