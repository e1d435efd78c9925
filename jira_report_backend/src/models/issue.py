from __future__ import annotations

from datetime import datetime
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Issue(BaseModel):
    """
    PUBLIC_INTERFACE
    Normalized issue record handed to report renderers.

    Attributes absent from the tracker response stay ``None`` (or empty for the
    sequence attributes) and are missing from ``model_fields_set``.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: Optional[str] = Field(default=None, description="Tracker internal id")
    key: Optional[str] = Field(default=None, description="Issue key, e.g. PROJ-12")
    link: Optional[str] = Field(default=None, description="Browse link to the issue")
    summary: Optional[str] = Field(default=None, description="Issue summary")
    title: Optional[str] = Field(default=None, description="Issue title")
    type: Optional[str] = Field(default=None, description="Issue type name")
    priority: Optional[str] = Field(default=None, description="Priority name")
    status: Optional[str] = Field(default=None, description="Status name")
    resolution: Optional[str] = Field(default=None, description="Resolution name")
    assignee: Optional[str] = Field(default=None, description="Assignee display name")
    reporter: Optional[str] = Field(default=None, description="Reporter display name")
    created: Optional[datetime] = Field(default=None, description="Creation timestamp")
    updated: Optional[datetime] = Field(default=None, description="Last update timestamp")
    version: Optional[str] = Field(default=None, description="Affected versions joined with ', '")
    components: Tuple[str, ...] = Field(default=(), description="Component names")
    fix_versions: Tuple[str, ...] = Field(default=(), alias="fixVersions", description="Fix version names")
    comments: Tuple[str, ...] = Field(default=(), description="Comment bodies, oldest first")


class IssueListResponse(BaseModel):
    """API envelope for a downloaded batch of issues."""
    count: int = Field(..., description="Number of issues returned")
    jql: Optional[str] = Field(default=None, description="Query sent to the tracker")
    issues: list[Issue] = Field(default_factory=list, description="Normalized issues")
