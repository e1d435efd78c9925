from __future__ import annotations

from typing import Optional

from fastapi import Depends, Query

from ..clients.jira_client import DownloaderConfig, IssueDownloader
from ..core.config import Settings, get_settings


# PUBLIC_INTERFACE
def get_app_settings() -> Settings:
    """Expose settings as dependency helper (wrapper around core.get_settings)."""
    return get_settings()


# PUBLIC_INTERFACE
def get_issue_downloader(
    version: Optional[str] = Query(default=None, description="Version to report on, overrides PROJECT_VERSION"),
    settings: Settings = Depends(get_app_settings),
) -> IssueDownloader:
    """Build a fresh downloader for this request from the configured settings."""
    return IssueDownloader(DownloaderConfig.from_settings(settings, version=version))
