"""Post-download selection of issues by fix version, and the lenient fetch policy."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..clients.jira_client import IssueDownloader
from ..core.config import Settings
from ..core.errors import JiraError, NoMatchingIssuesError
from ..models.issue import Issue
from ..models.query import strip_snapshot

logger = logging.getLogger(__name__)


def filter_issues_with_version_prefix(issues: Sequence[Issue], prefix: Optional[str]) -> List[Issue]:
    """
    Keep issues having at least one fix version that starts with ``prefix``.

    Raises NoMatchingIssuesError when issues were given but none matched, since
    that almost always means the prefix is misconfigured.
    """
    kept = [issue for issue in issues if any(prefix is None or v.startswith(prefix) for v in issue.fix_versions)]
    if issues and not kept:
        keys = ", ".join(issue.key or "?" for issue in issues)
        raise NoMatchingIssuesError(
            f"Couldn't find any issues with a Fix Version prefix of '{prefix}' among the supplied issues: {keys}"
        )
    return kept


def issues_for_version(issues: Sequence[Issue], version: str) -> List[Issue]:
    """Keep issues fixed in ``version`` (development suffix ignored)."""
    release = strip_snapshot(version)
    return [issue for issue in issues if release in issue.fix_versions]


# PUBLIC_INTERFACE
def select_report_issues(issues: List[Issue], settings: Settings, version: Optional[str] = None) -> List[Issue]:
    """Apply the version prefix and current-version settings to a downloaded batch."""
    prefix = settings.JIRA_VERSION_PREFIX
    if prefix and prefix.strip():
        original = len(issues)
        issues = filter_issues_with_version_prefix(issues, prefix)
        logger.debug("Kept %d issues of %d that matched the version prefix '%s'.", len(issues), original, prefix)

    version = version if version is not None else settings.PROJECT_VERSION
    if settings.JIRA_ONLY_CURRENT_VERSION and version:
        issues = issues_for_version(issues, (prefix or "") + version)
        logger.info("The report will contain issues only for version %s.", version)
    return issues


# PUBLIC_INTERFACE
def fetch_issues_or_empty(downloader: IssueDownloader) -> List[Issue]:
    """Fetch issues, logging any failure and returning an empty list instead of raising."""
    try:
        return downloader.fetch_issues()
    except JiraError as exc:
        logger.warning("Fetching issues failed (%s): %s", exc.kind, exc.message)
        return []
