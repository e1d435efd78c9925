import httpx
import pytest
from conftest import FakeJira, issue_json
from fastapi.testclient import TestClient

from src.api.dependencies import get_issue_downloader
from src.api.main import app
from src.clients.jira_client import DownloaderConfig, IssueDownloader
from src.core.config import get_settings

client = TestClient(app)
HEADERS = {"X-API-Key": "test-key"}


@pytest.fixture
def fake_jira():
    jira = FakeJira(issues=[issue_json("PROJ-1"), issue_json("PROJ-2", created="not a date")])

    def override(version: str | None = None) -> IssueDownloader:
        config = DownloaderConfig.from_settings(get_settings(), version=version)
        return IssueDownloader(config, transport=httpx.MockTransport(jira))

    app.dependency_overrides[get_issue_downloader] = override
    yield jira
    app.dependency_overrides.clear()


def test_auth_missing_key(fake_jira):
    r = client.get("/api/v1/jira/issues")
    assert r.status_code == 401
    assert fake_jira.requests == []


def test_list_issues(fake_jira):
    r = client.get("/api/v1/jira/issues", headers=HEADERS)
    assert r.status_code == 200
    data = r.json()
    assert data["count"] == 2
    assert data["jql"] == "project=PROJ AND status IN (Resolved,Done) AND resolution IN (Done) ORDER BY priority DESC,created DESC"
    first, second = data["issues"]
    assert first["key"] == "PROJ-1"
    assert first["fixVersions"] == ["1.0"]
    assert first["created"].startswith("2024-09-01T10:00:00")
    assert second["created"] is None
    assert second["summary"] == "Crash on start"


def test_version_parameter_adds_fix_version_clause(fake_jira):
    r = client.get("/api/v1/jira/issues", params={"version": "1.0-SNAPSHOT"}, headers=HEADERS)
    assert r.status_code == 200
    assert r.json()["jql"].startswith('project=PROJ AND fixVersion="1.0" AND ')


def test_query_failure_is_reported(fake_jira):
    fake_jira.search_status = 400
    fake_jira.search_json = {"errorMessages": ["bad jql"]}
    r = client.get("/api/v1/jira/issues", headers=HEADERS)
    assert r.status_code == 502
    data = r.json()
    assert data["error"] == "QueryFailed"
    assert data["details"]["upstream_status"] == 400
    assert data["details"]["messages"] == ["bad jql"]


def test_unsupported_server_is_reported(fake_jira):
    fake_jira.probe_status = 404
    r = client.get("/api/v1/jira/issues", headers=HEADERS)
    assert r.status_code == 502
    assert r.json()["error"] == "UnsupportedServer"


def test_lenient_mode_returns_empty_list(fake_jira):
    fake_jira.probe_status = 404
    r = client.get("/api/v1/jira/issues", params={"lenient": "true"}, headers=HEADERS)
    assert r.status_code == 200
    assert r.json()["count"] == 0
    assert r.json()["issues"] == []
