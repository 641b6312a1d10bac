"""Tests for the web API."""

import shutil

import pytest
from pathlib import Path

# Only run if fastapi/httpx are installed
try:
    from fastapi.testclient import TestClient
    from find_unused.web import create_app
    from find_unused.web.state import state
    HAS_WEB = True
except ImportError:
    HAS_WEB = False

pytestmark = pytest.mark.skipif(not HAS_WEB, reason="web dependencies not installed")

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def client():
    app = create_app()
    return TestClient(app)


@pytest.fixture
def project(tmp_path):
    target = tmp_path / "project"
    shutil.copytree(FIXTURES / "project", target)
    return target


def test_analyze(client, project):
    res = client.post("/api/analyze", json={"path": str(project)})
    assert res.status_code == 200
    data = res.json()
    assert data["total_files"] == 14
    assert data["unused"] == ["src/components/Widget.ts", "src/main.ts", "src/orphan.ts"]
    assert data["failed"] is False
    assert data["deleted"] == []
    assert "id" in data


def test_analyze_never_deletes(client, project):
    (project / "find-unused.json").write_text('{"dryRun": false}')
    res = client.post("/api/analyze", json={"path": str(project)})
    assert res.status_code == 200
    assert res.json()["deleted"] == []
    assert (project / "src/orphan.ts").exists()


def test_analyze_entry_rooted(client, project):
    res = client.post("/api/analyze", json={
        "path": str(project),
        "entries": ["src/main.ts"],
        "policy": "entry-rooted",
    })
    assert res.status_code == 200
    assert "src/cycle/b.ts" in res.json()["unused"]


def test_analyze_fail_on_unused_marks_failed(client, project):
    res = client.post("/api/analyze", json={"path": str(project), "fail_on_unused": True})
    assert res.status_code == 200
    assert res.json()["failed"] is True


def test_analyze_nonexistent_path(client):
    res = client.post("/api/analyze", json={"path": "/nonexistent/path"})
    assert res.status_code == 404


def test_analyze_file_path(client, project):
    res = client.post("/api/analyze", json={"path": str(project / "src/main.ts")})
    assert res.status_code == 400


def test_analyze_invalid_policy(client, project):
    res = client.post("/api/analyze", json={"path": str(project), "policy": "all"})
    assert res.status_code == 422


def test_analyze_invalid_config_file(client, project):
    (project / "find-unused.json").write_text('{"bogus": true}')
    res = client.post("/api/analyze", json={"path": str(project)})
    assert res.status_code == 422


def test_get_analysis_and_unresolved(client, project):
    analysis_id = client.post("/api/analyze", json={"path": str(project)}).json()["id"]

    res = client.get(f"/api/analysis/{analysis_id}")
    assert res.status_code == 200
    assert res.json()["id"] == analysis_id

    res = client.get(f"/api/analysis/{analysis_id}/unresolved")
    assert res.status_code == 200
    unresolved = res.json()["unresolved"]
    assert [(u["specifier"], u["file"]) for u in unresolved] == [("./missing", "src/orphan.ts")]


def test_delete_analysis(client, project):
    analysis_id = client.post("/api/analyze", json={"path": str(project)}).json()["id"]
    count = len(state)
    assert client.delete(f"/api/analysis/{analysis_id}").status_code == 200
    assert len(state) == count - 1
    assert client.get(f"/api/analysis/{analysis_id}").status_code == 404
    assert client.delete(f"/api/analysis/{analysis_id}").status_code == 404


def test_analysis_not_found(client):
    assert client.get("/api/analysis/nonexistent").status_code == 404
    assert client.get("/api/analysis/nonexistent/unresolved").status_code == 404
