from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...clients.jira_client import IssueDownloader
from ...core.config import Settings
from ...core.errors import ErrorResponse
from ...core.security import AuthenticatedClient, get_current_client
from ...core.urls import validate_issue_management
from ...models.issue import IssueListResponse
from ...services.issue_filters import fetch_issues_or_empty, select_report_issues
from ..dependencies import get_app_settings, get_issue_downloader

router = APIRouter(prefix="/jira", tags=["JIRA"])


@router.get(
    "/issues",
    summary="List report issues",
    response_model=IssueListResponse,
    responses={
        400: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
        504: {"model": ErrorResponse},
    },
)
def list_issues(
    version: Optional[str] = Query(default=None, description="Version to report on, overrides PROJECT_VERSION"),
    lenient: bool = Query(default=False, description="Return an empty list instead of an error when the fetch fails"),
    auth: AuthenticatedClient = Depends(get_current_client),
    settings: Settings = Depends(get_app_settings),
    downloader: IssueDownloader = Depends(get_issue_downloader),
):
    """Download the issues selected by the configured facets and return them normalized."""
    problem = validate_issue_management(settings.JIRA_SYSTEM, settings.JIRA_BROWSE_URL)
    if problem is not None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=problem)

    issues = fetch_issues_or_empty(downloader) if lenient else downloader.fetch_issues()
    issues = select_report_issues(issues, settings, version=version)
    return IssueListResponse(count=len(issues), jql=downloader.last_jql, issues=issues)
