from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

SNAPSHOT_SUFFIX = "-SNAPSHOT"


def split_csv(value: Optional[str]) -> List[str]:
    """Split a comma-separated configuration value; None gives an empty list."""
    if value is None:
        return []
    return value.split(",")


def strip_snapshot(version: str) -> str:
    if version.endswith(SNAPSHOT_SUFFIX):
        return version[: -len(SNAPSHOT_SUFFIX)]
    return version


class QueryFacets(BaseModel):
    """
    PUBLIC_INTERFACE
    Input of the JQL builder. Every facet is optional.
    """
    model_config = ConfigDict(frozen=True)

    project: Optional[str] = Field(default=None, description="Project key")
    fix_version: Optional[str] = Field(default=None, description="Single fix version name")
    fix_version_ids: List[str] = Field(default_factory=list, description="Fix version ids")
    statuses: List[str] = Field(default_factory=list, description="Statuses to include")
    priorities: List[str] = Field(default_factory=list, description="Priorities to include")
    resolutions: List[str] = Field(default_factory=list, description="Resolutions to include")
    component_ids: List[str] = Field(default_factory=list, description="Component ids to include")
    types: List[str] = Field(default_factory=list, description="Issue types to include")
    filter: Optional[str] = Field(default=None, description="Raw JQL replacing every other facet")
    sort_column_names: Optional[str] = Field(default=None, description="Sort columns, e.g. 'Priority DESC, Created'")
    encode: bool = Field(default=True, description="Percent-encode the rendered query")


class FacetSettings(BaseModel):
    """
    PUBLIC_INTERFACE
    Facet configuration as supplied by users: comma-separated strings plus version data.
    """
    model_config = ConfigDict(frozen=True)

    statuses: Optional[str] = None
    resolutions: Optional[str] = None
    priorities: Optional[str] = None
    component_ids: Optional[str] = None
    fix_version_ids: Optional[str] = None
    types: Optional[str] = None
    filter: Optional[str] = None
    sort_column_names: Optional[str] = None
    version_prefix: Optional[str] = None
    version: Optional[str] = None

    def fix_for(self) -> Optional[str]:
        """Prefix plus version, without the development suffix."""
        if self.version is None:
            return None
        return strip_snapshot((self.version_prefix or "") + self.version)

    def to_query_facets(self, project_key: Optional[str]) -> QueryFacets:
        # the request body is JSON, its own escaping applies
        return QueryFacets(
            project=project_key,
            fix_version=self.fix_for(),
            fix_version_ids=split_csv(self.fix_version_ids),
            statuses=split_csv(self.statuses),
            priorities=split_csv(self.priorities),
            resolutions=split_csv(self.resolutions),
            component_ids=split_csv(self.component_ids),
            types=split_csv(self.types),
            filter=self.filter,
            sort_column_names=self.sort_column_names,
            encode=False,
        )
