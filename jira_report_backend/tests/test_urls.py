import pytest

from src.core.errors import InvalidInputError
from src.core.urls import parse_browse_url, validate_issue_management


def test_parse_browse_url_with_context_path_and_subpage():
    parsed = parse_browse_url("https://x.example/secure/browse/PROJ/subpage")
    assert parsed.base_url == "https://x.example/secure"
    assert parsed.project_key == "PROJ"


def test_parse_browse_url_without_trailing_path():
    base_url, project_key = parse_browse_url("http://jira.local:8080/browse/ABC")
    assert base_url == "http://jira.local:8080"
    assert project_key == "ABC"


def test_parse_browse_url_keeps_case():
    assert parse_browse_url("https://Host.Example/Jira/browse/Key-Case").base_url == "https://Host.Example/Jira"


@pytest.mark.parametrize("url", ["https://x.example/projects/PROJ", "", None])
def test_parse_browse_url_requires_browse_segment(url):
    with pytest.raises(InvalidInputError):
        parse_browse_url(url)


def test_invalid_input_is_a_value_error():
    with pytest.raises(ValueError):
        parse_browse_url("https://x.example/PROJ")


def test_validate_issue_management():
    assert validate_issue_management("JIRA", "https://x/browse/P") is None
    assert validate_issue_management(None, "https://x/browse/P") is None
    assert "No URL set" in validate_issue_management("jira", "  ")
    assert "only supports JIRA" in validate_issue_management("GitHub", "https://github.com/o/r/issues")
