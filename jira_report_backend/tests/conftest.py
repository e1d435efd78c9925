"""Shared test setup: environment for settings and a mock JIRA server."""

from __future__ import annotations

import os
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

os.environ["API_KEY_HEADER_NAME"] = "X-API-Key"
os.environ["API_KEYS"] = '["test-key"]'
os.environ["JIRA_BROWSE_URL"] = "https://jira.example.com/browse/PROJ"
os.environ["JIRA_USER"] = "reporter"
os.environ["JIRA_PASSWORD"] = "secret"

from src.clients.jira_client import DownloaderConfig, IssueDownloader  # noqa: E402
from src.clients.transport import Credentials  # noqa: E402
from src.models.query import FacetSettings  # noqa: E402

BROWSE_URL = "https://jira.example.com/browse/PROJ"


def issue_json(key: str = "PROJ-1", **fields: Any) -> Dict[str, Any]:
    base_fields: Dict[str, Any] = {
        "summary": "Crash on start",
        "created": "2024-09-01T10:00:00.000+0000",
        "updated": "2024-09-02T10:00:00.000+0000",
        "assignee": {"displayName": "Alice", "name": "alice"},
        "reporter": {"name": "bob"},
        "issuetype": {"name": "Bug"},
        "priority": {"name": "High"},
        "status": {"name": "Done"},
        "resolution": {"name": "Fixed"},
        "components": [{"name": "core"}, {"name": "ui"}],
        "fixVersions": [{"name": "1.0"}],
        "versions": [{"name": "0.9"}, {"name": "0.9.1"}],
        "comment": {"comments": [{"body": "first"}, {"body": "second"}]},
    }
    base_fields.update(fields)
    return {"id": "10001", "key": key, "fields": base_fields}


class FakeJira:
    """Answers the probe and search endpoints; records every request."""

    def __init__(
        self,
        issues: Optional[List[Dict[str, Any]]] = None,
        probe_status: int = 200,
        search_status: int = 200,
        search_json: Any = None,
        search_text: Optional[str] = None,
        search_content_type: str = "application/json;charset=UTF-8",
    ) -> None:
        self.issues = issues if issues is not None else [issue_json()]
        self.probe_status = probe_status
        self.search_status = search_status
        self.search_json = search_json
        self.search_text = search_text
        self.search_content_type = search_content_type
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.endswith("/rest/api/3/serverInfo"):
            return httpx.Response(self.probe_status, json={"version": "9.0.0"})
        if request.url.path.endswith("/rest/api/3/search"):
            if self.search_text is not None:
                return httpx.Response(
                    self.search_status,
                    text=self.search_text,
                    headers={"Content-Type": self.search_content_type},
                )
            payload = self.search_json if self.search_json is not None else {"total": len(self.issues), "issues": self.issues}
            return httpx.Response(self.search_status, json=payload)
        return httpx.Response(404)

    @property
    def search_request(self) -> httpx.Request:
        return [r for r in self.requests if r.url.path.endswith("/search")][-1]


@pytest.fixture
def make_downloader() -> Callable[..., IssueDownloader]:
    def factory(
        handler: Callable[[httpx.Request], httpx.Response],
        browse_url: str = BROWSE_URL,
        credentials: Optional[Credentials] = None,
        facets: Optional[FacetSettings] = None,
        max_entries: int = 100,
    ) -> IssueDownloader:
        config = DownloaderConfig(
            browse_url=browse_url,
            max_entries=max_entries,
            credentials=credentials or Credentials(user="reporter", password="secret"),
            facets=facets or FacetSettings(statuses="Resolved,Done", sort_column_names="Priority DESC"),
        )
        return IssueDownloader(config, transport=httpx.MockTransport(handler))

    return factory
