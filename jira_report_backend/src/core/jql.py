"""
JQL rendering for issue searches.

Only implicit AND of ``field=value`` and ``field IN (...)`` clauses plus an
``ORDER BY`` suffix is supported. Clauses render in the order they were added.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Tuple, Union
from urllib.parse import quote_plus

from ..models.query import QueryFacets

logger = logging.getLogger(__name__)


def quote_value(value: str) -> str:
    """Trim a value and wrap it in double quotes when it holds a space or a period."""
    trimmed = value.strip()
    if " " in trimmed or "." in trimmed:
        return f'"{trimmed}"'
    return trimmed


@dataclass(frozen=True)
class EqualsClause:
    field: str
    value: str

    def render(self) -> str:
        return f"{self.field}={quote_value(self.value)}"


@dataclass(frozen=True)
class InClause:
    field: str
    values: Tuple[str, ...]

    def render(self) -> str:
        return f"{self.field} IN ({','.join(quote_value(v) for v in self.values)})"


@dataclass(frozen=True)
class SortColumn:
    name: str
    descending: bool = False

    @classmethod
    def parse(cls, token: str) -> "SortColumn":
        """
        Parse ``"Fix Version DESC"`` into ``SortColumn("fixversion", True)``.

        The direction is only recognised as a separate last word, so
        ``"CreatedDESC"`` is the ascending column ``createddesc`` and
        ``"Description"`` keeps its full name.
        """
        words = token.strip().lower().split()
        descending = False
        if len(words) > 1 and words[-1] in ("asc", "desc"):
            descending = words.pop() == "desc"
        return cls(name="".join(words), descending=descending)

    def render(self) -> str:
        return f"{self.name} {'DESC' if self.descending else 'ASC'}"


Clause = Union[EqualsClause, InClause]


@dataclass(frozen=True)
class JqlQueryBuilder:
    """
    PUBLIC_INTERFACE
    Immutable JQL builder; every facet method returns a new builder.

    Usage:
        jql = JqlQueryBuilder().project("PROJ").statuses(["Done"]).sort_column_names("Key").url_encode(False).build()
    """

    clauses: Tuple[Clause, ...] = ()
    order_by: Tuple[SortColumn, ...] = ()
    raw_filter: Optional[str] = None
    encode: bool = True

    def _add_value(self, key: str, value: Optional[str]) -> "JqlQueryBuilder":
        if value is None or not value.strip():
            return self
        return replace(self, clauses=self.clauses + (EqualsClause(key, value),))

    def _add_values(self, key: str, values: Optional[Iterable[str]]) -> "JqlQueryBuilder":
        kept = tuple(v for v in (values or ()) if v is not None and v.strip())
        if not kept:
            return self
        return replace(self, clauses=self.clauses + (InClause(key, kept),))

    def project(self, project: Optional[str]) -> "JqlQueryBuilder":
        return self._add_value("project", project)

    def fix_version(self, fix_version: Optional[str]) -> "JqlQueryBuilder":
        return self._add_value("fixVersion", fix_version)

    def fix_version_ids(self, ids: Optional[Iterable[str]]) -> "JqlQueryBuilder":
        return self._add_values("fixVersion", ids)

    def statuses(self, statuses: Optional[Iterable[str]]) -> "JqlQueryBuilder":
        return self._add_values("status", statuses)

    def priorities(self, priorities: Optional[Iterable[str]]) -> "JqlQueryBuilder":
        return self._add_values("priority", priorities)

    def resolutions(self, resolutions: Optional[Iterable[str]]) -> "JqlQueryBuilder":
        return self._add_values("resolution", resolutions)

    def components(self, components: Optional[Iterable[str]]) -> "JqlQueryBuilder":
        return self._add_values("component", components)

    def types(self, types: Optional[Iterable[str]]) -> "JqlQueryBuilder":
        return self._add_values("type", types)

    def filter(self, raw_filter: Optional[str]) -> "JqlQueryBuilder":
        return replace(self, raw_filter=raw_filter)

    def sort_column_names(self, columns_text: Optional[str]) -> "JqlQueryBuilder":
        if columns_text is None or not columns_text.strip():
            return self
        columns = tuple(SortColumn.parse(token) for token in columns_text.split(",") if token.strip())
        return replace(self, order_by=self.order_by + columns)

    def url_encode(self, encode: bool) -> "JqlQueryBuilder":
        return replace(self, encode=encode)

    def predicate(self) -> str:
        if self.raw_filter is not None and self.raw_filter.strip():
            return self.raw_filter
        return " AND ".join(clause.render() for clause in self.clauses)

    def order_by_clause(self) -> str:
        if not self.order_by:
            return ""
        return "ORDER BY " + ",".join(column.render() for column in self.order_by)

    def build(self) -> str:
        jql = " ".join(part for part in (self.predicate(), self.order_by_clause()) if part)
        if self.encode:
            encoded = quote_plus(jql, safe="*", encoding="utf-8")
            logger.debug("Encoded JQL query %s as %s", jql, encoded)
            return encoded
        return jql


# PUBLIC_INTERFACE
def build_jql(facets: QueryFacets) -> str:
    """Render facets in the fixed legacy clause order."""
    return (
        JqlQueryBuilder()
        .url_encode(facets.encode)
        .project(facets.project)
        .fix_version(facets.fix_version)
        .fix_version_ids(facets.fix_version_ids)
        .statuses(facets.statuses)
        .priorities(facets.priorities)
        .resolutions(facets.resolutions)
        .components(facets.component_ids)
        .types(facets.types)
        .sort_column_names(facets.sort_column_names)
        .filter(facets.filter)
        .build()
    )
