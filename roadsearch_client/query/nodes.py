"""RoadSearch Query Nodes - Query DSL Representation.

Query nodes render the server's JSON query DSL. They are the base
queries wrapped by query and filter facets and used as the main query
of a search request.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Dict, List, Mapping, Optional, Union

from roadsearch_client.errors import ConfigurationError


class QueryType(Enum):
    """Query type enumeration."""

    TERM = auto()
    TERMS = auto()
    BOOLEAN = auto()
    RANGE = auto()
    PREFIX = auto()
    MATCH_ALL = auto()


RangeValue = Union[int, float, str, datetime]


@dataclass
class QueryNode(ABC):
    """Abstract base class for query nodes.

    All query types inherit from this class.
    """

    query_type: QueryType = field(init=False)
    boost: float = 1.0
    field: Optional[str] = None

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Convert to query DSL."""
        pass

    def _require_field(self) -> str:
        if not isinstance(self.field, str) or not self.field:
            raise ConfigurationError(f"{type(self).__name__} requires a field")
        return self.field

    def _field_clause(self, value: Any, key: str = "value") -> Dict[str, Any]:
        """Render ``{field: value}``, expanding to an object when boosted."""
        name = self._require_field()
        if self.boost != 1.0:
            return {name: {key: value, "boost": self.boost}}
        return {name: value}


@dataclass
class MatchAllQuery(QueryNode):
    """Match all documents query."""

    def __post_init__(self):
        self.query_type = QueryType.MATCH_ALL

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {}
        if self.boost != 1.0:
            body["boost"] = self.boost
        return {"match_all": body}


@dataclass
class TermQuery(QueryNode):
    """Single term query.

    Matches documents whose field contains the exact, unanalyzed term.
    """

    term: Any = ""

    def __post_init__(self):
        self.query_type = QueryType.TERM

    def to_dict(self) -> Dict[str, Any]:
        return {"term": self._field_clause(self.term)}


@dataclass
class TermsQuery(QueryNode):
    """Matches documents containing any of the given terms."""

    terms: List[Any] = field(default_factory=list)

    def __post_init__(self):
        self.query_type = QueryType.TERMS

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {self._require_field(): list(self.terms)}
        if self.boost != 1.0:
            body["boost"] = self.boost
        return {"terms": body}


@dataclass
class PrefixQuery(QueryNode):
    """Prefix query.

    Matches terms starting with specified prefix.
    """

    prefix: str = ""

    def __post_init__(self):
        self.query_type = QueryType.PREFIX

    def to_dict(self) -> Dict[str, Any]:
        return {"prefix": self._field_clause(self.prefix, key="prefix")}


@dataclass
class RangeQuery(QueryNode):
    """Range query for numeric/date fields.

    Only the bounds that are set are rendered; an unset bound leaves the
    range open on that side.
    """

    gte: Optional[RangeValue] = None  # Greater than or equal
    gt: Optional[RangeValue] = None  # Greater than
    lte: Optional[RangeValue] = None  # Less than or equal
    lt: Optional[RangeValue] = None  # Less than

    def __post_init__(self):
        self.query_type = QueryType.RANGE

    def to_dict(self) -> Dict[str, Any]:
        bounds: Dict[str, Any] = {}
        for name in ("gte", "gt", "lte", "lt"):
            value = getattr(self, name)
            if value is None:
                continue
            bounds[name] = value.isoformat() if isinstance(value, datetime) else value
        if self.boost != 1.0:
            bounds["boost"] = self.boost
        return {"range": {self._require_field(): bounds}}


@dataclass
class BooleanQuery(QueryNode):
    """Boolean query combining multiple clauses."""

    must: List[QueryNode] = field(default_factory=list)  # AND
    should: List[QueryNode] = field(default_factory=list)  # OR
    must_not: List[QueryNode] = field(default_factory=list)  # NOT
    minimum_should_match: Optional[int] = None

    def __post_init__(self):
        self.query_type = QueryType.BOOLEAN

    def add_must(self, query: QueryNode) -> "BooleanQuery":
        """Add a MUST clause."""
        self.must.append(query)
        return self

    def add_should(self, query: QueryNode) -> "BooleanQuery":
        """Add a SHOULD clause."""
        self.should.append(query)
        return self

    def add_must_not(self, query: QueryNode) -> "BooleanQuery":
        """Add a MUST NOT clause."""
        self.must_not.append(query)
        return self

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {}
        for name in ("must", "should", "must_not"):
            clauses = getattr(self, name)
            if clauses:
                body[name] = [c.to_dict() for c in clauses]
        if self.minimum_should_match is not None:
            body["minimum_should_match"] = self.minimum_should_match
        if self.boost != 1.0:
            body["boost"] = self.boost
        return {"bool": body}


QueryLike = Union[QueryNode, Mapping[str, Any]]


def render_query(query: QueryLike) -> Dict[str, Any]:
    """Render a query node or a raw query DSL mapping to a plain dict."""
    if isinstance(query, QueryNode):
        return query.to_dict()
    if isinstance(query, Mapping):
        return copy.deepcopy(dict(query))
    to_dict = getattr(query, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    raise TypeError(f"Cannot render query of type {type(query).__name__}")


__all__ = [
    "QueryType",
    "QueryNode",
    "QueryLike",
    "MatchAllQuery",
    "TermQuery",
    "TermsQuery",
    "PrefixQuery",
    "RangeQuery",
    "BooleanQuery",
    "render_query",
]
