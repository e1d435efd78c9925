"""
Mapping of JIRA search results onto :class:`Issue` records.

Each helper reads one optional fragment of the wire schema and returns the
value for one record attribute, or None when the fragment is absent. A value
that cannot be parsed is logged and dropped; it never fails the issue or the
batch.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from ..models.issue import Issue
from ..models.jira import CommentPage, IssueFields, IssuePayload, NamedRef, PersonRef

logger = logging.getLogger(__name__)

# yyyy-MM-dd'T'HH:mm:ss.SSSZ, e.g. 2024-09-01T10:00:00.000+0000
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"


def person_name(person: Optional[PersonRef]) -> Optional[str]:
    if person is None:
        return None
    if person.display_name is not None:
        return person.display_name
    return person.name


def ref_name(ref: Optional[NamedRef]) -> Optional[str]:
    return ref.name if ref is not None else None


def parse_timestamp(raw: Optional[str], field: str = "date") -> Optional[datetime]:
    if raw is None:
        return None
    try:
        return datetime.strptime(raw, TIMESTAMP_FORMAT)
    except ValueError:
        logger.warning("Invalid %s date %s", field, raw)
        return None


def names(refs: Optional[Sequence[NamedRef]]) -> Tuple[str, ...]:
    if not refs:
        return ()
    return tuple(ref.name for ref in refs if ref.name is not None)


def joined_names(refs: Optional[Sequence[NamedRef]]) -> Optional[str]:
    joined = ", ".join(names(refs))
    return joined or None


def adf_to_text(node: Any) -> str:
    """Flatten an Atlassian Document Format node into plain text."""
    if isinstance(node, str):
        return node
    if isinstance(node, list):
        return "".join(adf_to_text(child) for child in node)
    if not isinstance(node, dict):
        return ""

    node_type = node.get("type")
    if node_type == "text":
        return str(node.get("text") or "")
    if node_type == "hardBreak":
        return "\n"
    if node_type == "mention":
        return "@" + str((node.get("attrs") or {}).get("text", "")).lstrip("@")

    text = adf_to_text(node.get("content") or [])
    if node_type == "doc":
        return text.rstrip("\n")
    if node_type in ("paragraph", "heading", "listItem", "codeBlock", "blockquote"):
        return text + "\n"
    return text


def comment_bodies(page: Optional[CommentPage]) -> Tuple[str, ...]:
    if page is None:
        return ()
    bodies: List[str] = []
    for comment in page.comments:
        if comment.body is None:
            continue
        bodies.append(adf_to_text(comment.body))
    return tuple(bodies)


# PUBLIC_INTERFACE
def map_issue(payload: IssuePayload, base_url: str) -> Issue:
    """Build the record for one issue of a search result."""
    fields = payload.fields or IssueFields()
    values: Dict[str, Any] = {}

    def put(name: str, value: Any) -> None:
        if value is not None:
            values[name] = value

    put("id", payload.id)
    if payload.key is not None:
        values["key"] = payload.key
        values["link"] = f"{base_url}/browse/{payload.key}"

    put("assignee", person_name(fields.assignee))
    put("reporter", person_name(fields.reporter))
    put("created", parse_timestamp(fields.created, "created"))
    put("updated", parse_timestamp(fields.updated, "updated"))
    if fields.comment is not None:
        values["comments"] = comment_bodies(fields.comment)
    if fields.components is not None:
        values["components"] = names(fields.components)
    if fields.fix_versions is not None:
        values["fix_versions"] = names(fields.fix_versions)
    put("type", ref_name(fields.issuetype))
    put("priority", ref_name(fields.priority))
    put("resolution", ref_name(fields.resolution))
    put("status", ref_name(fields.status))
    put("summary", fields.summary)
    put("title", fields.title)
    put("version", joined_names(fields.versions))

    return Issue(**values)


# PUBLIC_INTERFACE
def map_issues(items: Iterable[Dict[str, Any]], base_url: str) -> List[Issue]:
    """
    Map every element of an ``issues`` array.

    A field of unexpected shape only leaves its attribute unset; an element that
    is not an object at all is logged and skipped.
    """
    issues: List[Issue] = []
    for position, item in enumerate(items):
        try:
            payload = IssuePayload.model_validate(item)
        except ValidationError as exc:
            logger.warning("Skipping issue at position %d, not an object: %s", position, exc.errors(include_url=False))
            continue
        issues.append(map_issue(payload, base_url))
    return issues
