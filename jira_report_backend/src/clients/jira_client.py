from __future__ import annotations

import logging
from typing import List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..core.config import Settings
from ..core.errors import (
    ConnectivityError,
    InvalidInputError,
    MalformedResponseError,
    QueryFailedError,
    UnsupportedServerError,
)
from ..core.jql import build_jql
from ..core.urls import parse_browse_url
from ..models.issue import Issue
from ..models.jira import ErrorPayload, SearchRequest, SearchResponse
from ..models.query import FacetSettings
from ..services.issue_mapper import map_issues
from .transport import Credentials, ProxySettings, TransportConfig, resolve_proxy

logger = logging.getLogger(__name__)

SERVER_INFO_PATH = "/rest/api/3/serverInfo"
SEARCH_PATH = "/rest/api/3/search"
JSON_MEDIA_TYPE = "application/json"


class DownloaderConfig(BaseModel):
    """Everything one issue download needs; built per call, never shared."""
    model_config = ConfigDict(frozen=True)

    browse_url: str = Field(..., description="Browse URL of the project, e.g. https://host/browse/PROJ")
    max_entries: int = Field(default=100, ge=1, description="Upper bound of fetched issues")
    credentials: Credentials = Field(default_factory=Credentials)
    transport: TransportConfig = Field(default_factory=TransportConfig)
    facets: FacetSettings = Field(default_factory=FacetSettings)

    @classmethod
    def from_settings(cls, settings: Settings, version: Optional[str] = None) -> "DownloaderConfig":
        proxy = None
        if settings.PROXY_HOST:
            proxy = ProxySettings(
                host=settings.PROXY_HOST,
                port=settings.PROXY_PORT,
                user=settings.PROXY_USER,
                password=settings.PROXY_PASSWORD,
                non_proxy_hosts=settings.PROXY_NON_PROXY_HOSTS,
            )
        return cls(
            browse_url=settings.JIRA_BROWSE_URL or "",
            max_entries=settings.JIRA_MAX_ENTRIES,
            credentials=Credentials(user=settings.JIRA_USER, password=settings.JIRA_PASSWORD),
            transport=TransportConfig(
                connection_timeout=settings.JIRA_CONNECTION_TIMEOUT_SECONDS,
                response_timeout=settings.JIRA_RESPONSE_TIMEOUT_SECONDS,
                locale=settings.JIRA_LOCALE,
                proxy=proxy,
            ),
            facets=FacetSettings(
                statuses=settings.JIRA_STATUSES,
                resolutions=settings.JIRA_RESOLUTIONS,
                priorities=settings.JIRA_PRIORITIES,
                component_ids=settings.JIRA_COMPONENT_IDS,
                fix_version_ids=settings.JIRA_FIX_VERSION_IDS,
                types=settings.JIRA_TYPES,
                filter=settings.JIRA_FILTER,
                sort_column_names=settings.JIRA_SORT_COLUMN_NAMES,
                version_prefix=settings.JIRA_VERSION_PREFIX,
                version=version if version is not None else settings.PROJECT_VERSION,
            ),
        )


def _is_json(response: httpx.Response) -> bool:
    media_type = response.headers.get("Content-Type", "").split(";", 1)[0].strip().lower()
    return media_type == JSON_MEDIA_TYPE


class IssueDownloader:
    """
    PUBLIC_INTERFACE
    Fetches issues of one project with a single JQL search (REST API 3).

    One call of :meth:`fetch_issues` performs the server-info probe and the search,
    sequentially, on an HTTP client that lives only for that call. ``transport`` replaces
    the network layer, e.g. with ``httpx.MockTransport`` in tests.
    """

    def __init__(self, config: DownloaderConfig, transport: Optional[httpx.BaseTransport] = None) -> None:
        self.config = config
        self._transport = transport
        self.last_jql: Optional[str] = None

    def _open_client(self, base_url: str) -> httpx.Client:
        transport_config = self.config.transport
        logger.debug(
            "connection timeout %ss, response timeout %ss",
            transport_config.connection_timeout,
            transport_config.response_timeout,
        )
        if self._transport is not None:
            return httpx.Client(base_url=base_url, timeout=transport_config.timeout(), transport=self._transport)

        proxy = resolve_proxy(transport_config, base_url)
        if proxy is not None:
            logger.debug("Using proxy %s", proxy.url)
        return httpx.Client(base_url=base_url, timeout=transport_config.timeout(), proxy=proxy, trust_env=False)

    def _search_headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": JSON_MEDIA_TYPE,
            "Accept": JSON_MEDIA_TYPE,
            "Accept-Language": self.config.transport.accept_language(),
            "X-Force-Accept-Language": "true",
        }
        if self.config.credentials.is_configured:
            headers["Authorization"] = self.config.credentials.basic_auth_header()
        return headers

    def build_query(self, project_key: str) -> str:
        return build_jql(self.config.facets.to_query_facets(project_key))

    # PUBLIC_INTERFACE
    def fetch_issues(self) -> List[Issue]:
        """
        Probe the server, run the search and map the returned issues.

        Raises InvalidInputError, UnsupportedServerError, QueryFailedError or
        ConnectivityError; only unreadable individual fields are tolerated.
        """
        base_url, project_key = parse_browse_url(self.config.browse_url)

        try:
            with self._open_client(base_url) as client:
                probe = client.get(SERVER_INFO_PATH, headers={"Accept": JSON_MEDIA_TYPE})
                if probe.status_code != httpx.codes.OK:
                    raise UnsupportedServerError(
                        "This JIRA server does not support version 3 of the REST API",
                        status_code=probe.status_code,
                    )

                jql = self.build_query(project_key)
                self.last_jql = jql
                logger.debug("Searching %s with JQL %s", base_url, jql)
                body = SearchRequest(jql=jql, max_results=self.config.max_entries)
                response = client.post(
                    SEARCH_PATH,
                    content=body.model_dump_json(by_alias=True),
                    headers=self._search_headers(),
                )
        except httpx.InvalidURL as exc:
            raise InvalidInputError(f"Invalid JIRA URL {base_url}: {exc}") from exc
        except httpx.TransportError as exc:
            raise ConnectivityError(f"Failed to contact JIRA at {base_url}: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            self._report_errors(response)

        try:
            result = SearchResponse.model_validate_json(response.content)
        except ValidationError as exc:
            raise MalformedResponseError(
                "JIRA search response is not a JSON object with an 'issues' array",
                status_code=response.status_code,
            ) from exc

        issues = map_issues(result.issues, base_url)
        logger.debug("Downloaded %d issues from %s", len(issues), base_url)
        return issues

    def _report_errors(self, response: httpx.Response) -> None:
        messages: List[str] = []
        if _is_json(response):
            try:
                messages = ErrorPayload.model_validate_json(response.content).all_messages()
            except ValidationError:
                logger.debug("Unreadable JSON error body from JIRA: %s", response.text[:200])
            for message in messages:
                logger.error(message)
        raise QueryFailedError(
            f"Failed to query issues; response {response.status_code}",
            status_code=response.status_code,
            messages=messages,
        )
