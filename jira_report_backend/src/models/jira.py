"""Typed view of the JIRA REST v3 search payloads; only the fields the report reads."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

logger = logging.getLogger(__name__)


class WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True, populate_by_name=True)


class LenientModel(WireModel):
    """Wire model whose fields each fall back to their default when the server sends an unexpected shape."""

    @field_validator("*", mode="wrap")
    @classmethod
    def _default_when_unreadable(cls, value: Any, handler, info: ValidationInfo) -> Any:
        try:
            return handler(value)
        except ValidationError as exc:
            logger.warning(
                "Ignoring unreadable %s.%s: %s", cls.__name__, info.field_name, exc.errors(include_url=False)
            )
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)


class NamedRef(LenientModel):
    name: Optional[str] = None


class PersonRef(LenientModel):
    display_name: Optional[str] = Field(default=None, alias="displayName")
    name: Optional[str] = None


class CommentRef(LenientModel):
    # plain text on older servers, an ADF document on REST v3
    body: Union[str, Dict[str, Any], None] = None


class CommentPage(LenientModel):
    comments: List[CommentRef] = Field(default_factory=list)


class IssueFields(LenientModel):
    summary: Optional[str] = None
    title: Optional[str] = None
    created: Optional[str] = None
    updated: Optional[str] = None
    assignee: Optional[PersonRef] = None
    reporter: Optional[PersonRef] = None
    issuetype: Optional[NamedRef] = None
    priority: Optional[NamedRef] = None
    resolution: Optional[NamedRef] = None
    status: Optional[NamedRef] = None
    components: Optional[List[NamedRef]] = None
    fix_versions: Optional[List[NamedRef]] = Field(default=None, alias="fixVersions")
    versions: Optional[List[NamedRef]] = None
    comment: Optional[CommentPage] = None


class IssuePayload(LenientModel):
    id: Optional[str] = None
    key: Optional[str] = None
    fields: Optional[IssueFields] = None


class SearchResponse(WireModel):
    issues: List[Dict[str, Any]]


class ErrorPayload(LenientModel):
    error_messages: Optional[List[str]] = Field(default=None, alias="errorMessages")
    message: Optional[str] = None

    def all_messages(self) -> List[str]:
        if self.error_messages is not None:
            return list(self.error_messages)
        if self.message is not None:
            return [self.message]
        return []


class SearchRequest(BaseModel):
    """
    PUBLIC_INTERFACE
    Body of POST /rest/api/3/search.
    """
    model_config = ConfigDict(populate_by_name=True)

    jql: str = Field(..., description="JQL query, not URL encoded")
    max_results: int = Field(..., alias="maxResults", description="Upper bound of returned issues")
    fields: List[str] = Field(default_factory=lambda: ["*all"], description="Field selector")
