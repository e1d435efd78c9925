"""Helpers for the issue tracker URLs configured by users."""

from __future__ import annotations

from typing import NamedTuple, Optional

from .errors import InvalidInputError

BROWSE_SEGMENT = "/browse"


class BrowseUrl(NamedTuple):
    base_url: str
    project_key: str


# PUBLIC_INTERFACE
def parse_browse_url(url: str) -> BrowseUrl:
    """
    Split a browse URL into the tracker base URL and the project key.

    ``https://host/secure/browse/PROJ/sub`` gives ``("https://host/secure", "PROJ")``.
    The base URL is returned exactly as it appears before ``/browse``.
    """
    index = url.find(BROWSE_SEGMENT) if url else -1
    if index == -1:
        raise InvalidInputError(f"Invalid browse URL: {url!r}")

    base_url = url[:index]
    start = index + len(BROWSE_SEGMENT) + 1
    end = url.find("/", start)
    project_key = url[start:] if end == -1 else url[start:end]
    return BrowseUrl(base_url=base_url, project_key=project_key)


# PUBLIC_INTERFACE
def validate_issue_management(system: Optional[str], url: Optional[str], result_name: str = "JIRA Report") -> Optional[str]:
    """Return why the issue management configuration cannot be used, or None when it is complete."""
    if not url or not url.strip():
        return f"No URL set in Issue Management. No {result_name} will be generated."
    if system is not None and system.lower() != "jira":
        return f"The {result_name} only supports JIRA. No {result_name} will be generated."
    return None
