"""RoadSearch Facet Builders - Request-Side Facet Specifications.

Each builder is an immutable value: configuration methods return a new
builder and leave the receiver untouched, so a partially configured
builder can be shared and specialised safely. ``build()`` validates the
configuration and compiles it into a ``FacetSpec``, the frozen value
that is rendered into the facet portion of a search request.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import copy
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Tuple, Union

from roadsearch_client.errors import ConfigurationError
from roadsearch_client.facets.ranges import Number, RangeBoundary
from roadsearch_client.query.nodes import QueryLike, render_query

if TYPE_CHECKING:
    from roadsearch_client.config import ClientConfig

DEFAULT_TERMS_SIZE = 10

# Durations accepted by the histogram time_interval option, e.g. "1m", "1.5h".
DURATION_PATTERN = re.compile(r"^\d+(\.\d+)?(ms|s|m|h|d|w)$")


class FacetKind(Enum):
    """Facet kinds and their request keys."""

    TERMS = "terms"
    RANGE = "range"
    HISTOGRAM = "histogram"
    DATE_HISTOGRAM = "date_histogram"
    QUERY = "query"
    FILTER = "filter"
    STATISTICAL = "statistical"
    TERMS_STATS = "terms_stats"


class CalendarInterval(Enum):
    """Calendar-aligned date histogram units."""

    YEAR = "year"
    QUARTER = "quarter"
    MONTH = "month"
    WEEK = "week"
    DAY = "day"
    HOUR = "hour"
    MINUTE = "minute"
    SECOND = "second"


TERMS_ORDERS = frozenset({"count", "term", "reverse_count", "reverse_term"})
QUERY_ORDERS = frozenset({"count", "term"})
TERMS_STATS_ORDERS = frozenset({
    "term", "reverse_term",
    "count", "reverse_count",
    "total", "reverse_total",
    "min", "reverse_min",
    "max", "reverse_max",
    "mean", "reverse_mean",
})


def _freeze(value: Any) -> Any:
    """Recursively copy a rendered body into read-only containers."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return copy.deepcopy(value)


def _thaw(value: Any) -> Any:
    """Inverse of ``_freeze``: fresh plain dicts and lists."""
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return copy.deepcopy(value)


@dataclass(frozen=True)
class FacetSpec:
    """Compiled facet specification.

    Attributes:
        kind: Facet kind
        body: Kind-specific request body (read-only)
        global_scope: Aggregate over the whole index instead of the
            documents matched by the main query
        facet_filter: Rendered filter restricting the facet's documents
        order: Requested bucket ordering, if the kind has one
    """

    kind: FacetKind
    body: Mapping[str, Any]
    global_scope: bool = False
    facet_filter: Optional[Mapping[str, Any]] = None
    order: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "body", _freeze(self.body))
        if self.facet_filter is not None:
            object.__setattr__(self, "facet_filter", _freeze(self.facet_filter))

    def to_dict(self) -> Dict[str, Any]:
        """Render the wire form: ``{kind: body, "global"?, "facet_filter"?}``."""
        result: Dict[str, Any] = {self.kind.value: _thaw(self.body)}
        if self.global_scope:
            result["global"] = True
        if self.facet_filter is not None:
            result["facet_filter"] = _thaw(self.facet_filter)
        return result


@dataclass(frozen=True)
class FacetBuilder(ABC):
    """Base class for facet builders.

    Holds the options every facet kind accepts.
    """

    global_scope: bool = field(default=False, kw_only=True)
    filter_query: Optional[QueryLike] = field(default=None, kw_only=True)

    kind: FacetKind = field(init=False, repr=False)

    def global_(self, flag: bool = True) -> "FacetBuilder":
        """Aggregate over the whole index, ignoring the main query."""
        return replace(self, global_scope=flag)

    def facet_filter(self, query: QueryLike) -> "FacetBuilder":
        """Restrict the documents this facet sees."""
        return replace(self, filter_query=query)

    @abstractmethod
    def _body(self, config: Optional["ClientConfig"]) -> Dict[str, Any]:
        """Validate and return the kind-specific body."""
        pass

    def _order(self) -> Optional[str]:
        return None

    def build(self, config: Optional["ClientConfig"] = None) -> FacetSpec:
        """Compile into a facet specification.

        Args:
            config: Client configuration supplying defaults

        Returns:
            Frozen facet specification

        Raises:
            ConfigurationError: If the builder is misconfigured
        """
        body = self._body(config)
        facet_filter = None
        if self.filter_query is not None:
            facet_filter = render_query(self.filter_query)
        return FacetSpec(
            kind=self.kind,
            body=body,
            global_scope=bool(self.global_scope),
            facet_filter=facet_filter,
            order=self._order(),
        )

    def to_dict(self, config: Optional["ClientConfig"] = None) -> Dict[str, Any]:
        """Build and render in one step."""
        return self.build(config).to_dict()


def _require_field(kind: FacetKind, name: str, value: Optional[str]) -> str:
    if not isinstance(value, str) or not value:
        raise ConfigurationError(f"{kind.value} facet requires a non-empty {name}")
    return value


def _require_size(kind: FacetKind, size: Any) -> int:
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise ConfigurationError(f"{kind.value} facet size must be a positive integer, got {size!r}")
    return size


def _require_order(kind: FacetKind, order: Any, allowed: frozenset) -> str:
    if order not in allowed:
        raise ConfigurationError(
            f"Invalid {kind.value} facet order {order!r}; expected one of {sorted(allowed)}"
        )
    return order


def _key_value_body(
    kind: FacetKind,
    field_name: Optional[str],
    key_field: Optional[str],
    value_field: Optional[str],
) -> Dict[str, Any]:
    """Resolve the field selection of facets that accept key/value fields.

    A key/value pair replaces the plain field; setting only one half of
    the pair is an error.
    """
    if (key_field is None) != (value_field is None):
        raise ConfigurationError(
            f"{kind.value} facet requires both key_field and value_field, or neither"
        )
    if key_field is not None:
        return {
            "key_field": _require_field(kind, "key_field", key_field),
            "value_field": _require_field(kind, "value_field", value_field),
        }
    return {"field": _require_field(kind, "field", field_name)}


@dataclass(frozen=True)
class TermsFacet(FacetBuilder):
    """Most frequent terms of a field."""

    field_name: str
    bucket_count: Optional[int] = None
    order_by: str = "count"
    all_terms_flag: bool = False
    excluded: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "kind", FacetKind.TERMS)

    def size(self, size: int) -> "TermsFacet":
        return replace(self, bucket_count=size)

    def order(self, order: str) -> "TermsFacet":
        return replace(self, order_by=order)

    def all_terms(self, flag: bool = True) -> "TermsFacet":
        """Also return terms with no matching documents."""
        return replace(self, all_terms_flag=flag)

    def exclude(self, *terms: str) -> "TermsFacet":
        return replace(self, excluded=self.excluded + tuple(terms))

    def _order(self) -> Optional[str]:
        return self.order_by

    def _body(self, config: Optional["ClientConfig"]) -> Dict[str, Any]:
        size = self.bucket_count
        if size is None:
            size = config.default_terms_size if config is not None else DEFAULT_TERMS_SIZE
        body: Dict[str, Any] = {
            "field": _require_field(self.kind, "field", self.field_name),
            "size": _require_size(self.kind, size),
            "order": _require_order(self.kind, self.order_by, TERMS_ORDERS),
        }
        if self.all_terms_flag:
            body["all_terms"] = True
        if self.excluded:
            body["exclude"] = list(self.excluded)
        return body


@dataclass(frozen=True)
class RangeFacet(FacetBuilder):
    """Document counts per numeric range.

    Every boundary call appends a new range; ranges are sent and returned
    in the order they were added.
    """

    field_name: Optional[str] = None
    boundaries: Tuple[RangeBoundary, ...] = ()
    key_field_name: Optional[str] = None
    value_field_name: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "kind", FacetKind.RANGE)

    def add_range(self, boundary: RangeBoundary) -> "RangeFacet":
        return replace(self, boundaries=self.boundaries + (boundary,))

    def lt(self, upper: Number) -> "RangeFacet":
        return self.add_range(RangeBoundary.less_than(upper))

    def gt(self, lower: Number) -> "RangeFacet":
        return self.add_range(RangeBoundary.greater_than(lower))

    def between(self, lower: Number, upper: Number) -> "RangeFacet":
        return self.add_range(RangeBoundary.between(lower, upper))

    less_than = lt
    greater_than = gt

    def key_value_fields(self, key_field: str, value_field: str) -> "RangeFacet":
        """Bucket on ``key_field`` and compute statistics over ``value_field``."""
        return replace(self, key_field_name=key_field, value_field_name=value_field)

    def _body(self, config: Optional["ClientConfig"]) -> Dict[str, Any]:
        body = _key_value_body(self.kind, self.field_name, self.key_field_name, self.value_field_name)
        if not self.boundaries:
            raise ConfigurationError("range facet requires at least one range")
        body["ranges"] = [b.to_dict() for b in self.boundaries]
        return body


@dataclass(frozen=True)
class HistogramFacet(FacetBuilder):
    """Fixed-width buckets over a numeric field.

    The interval is either numeric or a duration string such as ``"1m"``;
    setting one replaces the other.
    """

    field_name: Optional[str] = None
    interval_value: Optional[Number] = None
    time_interval_value: Optional[str] = None
    key_field_name: Optional[str] = None
    value_field_name: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "kind", FacetKind.HISTOGRAM)

    def interval(self, interval: Number) -> "HistogramFacet":
        return replace(self, interval_value=interval, time_interval_value=None)

    def time_interval(self, duration: str) -> "HistogramFacet":
        return replace(self, time_interval_value=duration, interval_value=None)

    def key_value_fields(self, key_field: str, value_field: str) -> "HistogramFacet":
        return replace(self, key_field_name=key_field, value_field_name=value_field)

    def _body(self, config: Optional["ClientConfig"]) -> Dict[str, Any]:
        body = _key_value_body(self.kind, self.field_name, self.key_field_name, self.value_field_name)
        if self.interval_value is not None and self.time_interval_value is not None:
            raise ConfigurationError("histogram facet accepts either interval or time_interval, not both")

        if self.interval_value is not None:
            interval = self.interval_value
            if isinstance(interval, bool) or not isinstance(interval, (int, float)) or interval <= 0:
                raise ConfigurationError(f"histogram interval must be a positive number, got {interval!r}")
            body["interval"] = interval
        elif self.time_interval_value is not None:
            duration = self.time_interval_value
            if not isinstance(duration, str) or not DURATION_PATTERN.match(duration):
                raise ConfigurationError(f"Invalid histogram time_interval {duration!r}")
            body["time_interval"] = duration
        else:
            raise ConfigurationError("histogram facet requires an interval or a time_interval")
        return body


@dataclass(frozen=True)
class DateHistogramFacet(FacetBuilder):
    """Calendar-aligned buckets over a date field.

    With both key and value fields set, every bucket also carries
    statistics (min, max, mean, total, total_count) over the value field.
    """

    field_name: Optional[str] = None
    interval_unit: Optional[Union[str, CalendarInterval]] = None
    key_field_name: Optional[str] = None
    value_field_name: Optional[str] = None
    zone: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "kind", FacetKind.DATE_HISTOGRAM)

    def interval(self, unit: Union[str, CalendarInterval]) -> "DateHistogramFacet":
        return replace(self, interval_unit=unit)

    def key_field(self, key_field: str) -> "DateHistogramFacet":
        return replace(self, key_field_name=key_field)

    def value_field(self, value_field: str) -> "DateHistogramFacet":
        return replace(self, value_field_name=value_field)

    def time_zone(self, zone: str) -> "DateHistogramFacet":
        return replace(self, zone=zone)

    def _body(self, config: Optional["ClientConfig"]) -> Dict[str, Any]:
        body = _key_value_body(self.kind, self.field_name, self.key_field_name, self.value_field_name)
        unit = self.interval_unit
        if isinstance(unit, CalendarInterval):
            unit = unit.value
        try:
            body["interval"] = CalendarInterval(unit).value
        except ValueError:
            allowed = [u.value for u in CalendarInterval]
            raise ConfigurationError(
                f"Invalid date_histogram interval {unit!r}; expected one of {allowed}"
            ) from None
        if self.zone is not None:
            body["time_zone"] = self.zone
        return body


@dataclass(frozen=True)
class QueryFacet(FacetBuilder):
    """Count of documents matching a wrapped query."""

    query: Optional[QueryLike] = None
    order_by: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "kind", FacetKind.QUERY)

    def order(self, order: str) -> "QueryFacet":
        return replace(self, order_by=order)

    def _order(self) -> Optional[str]:
        return self.order_by

    def _body(self, config: Optional["ClientConfig"]) -> Dict[str, Any]:
        if self.query is None:
            raise ConfigurationError("query facet requires a query")
        if self.order_by is not None:
            _require_order(self.kind, self.order_by, QUERY_ORDERS)
        # The order is kept on the spec only; the server takes no ordering here.
        return render_query(self.query)


@dataclass(frozen=True)
class FilterFacet(FacetBuilder):
    """Count of documents matching a wrapped filter."""

    query: Optional[QueryLike] = None

    def __post_init__(self):
        object.__setattr__(self, "kind", FacetKind.FILTER)

    def _body(self, config: Optional["ClientConfig"]) -> Dict[str, Any]:
        if self.query is None:
            raise ConfigurationError("filter facet requires a filter query")
        return render_query(self.query)


@dataclass(frozen=True)
class StatisticalFacet(FacetBuilder):
    """Count, total, min, max, mean and variance over numeric fields."""

    field_name: Optional[str] = None
    field_names: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "kind", FacetKind.STATISTICAL)

    def fields(self, *names: str) -> "StatisticalFacet":
        """Compute the statistics across several fields at once."""
        return replace(self, field_name=None, field_names=tuple(names))

    def _body(self, config: Optional["ClientConfig"]) -> Dict[str, Any]:
        if self.field_names:
            for name in self.field_names:
                _require_field(self.kind, "field", name)
            return {"fields": list(self.field_names)}
        return {"field": _require_field(self.kind, "field", self.field_name)}


@dataclass(frozen=True)
class TermsStatsFacet(FacetBuilder):
    """Per-term statistics: terms come from one field, values from another."""

    key_field_name: Optional[str] = None
    value_field_name: Optional[str] = None
    bucket_count: Optional[int] = None
    order_by: str = "count"

    def __post_init__(self):
        object.__setattr__(self, "kind", FacetKind.TERMS_STATS)

    def size(self, size: int) -> "TermsStatsFacet":
        return replace(self, bucket_count=size)

    def order(self, order: str) -> "TermsStatsFacet":
        return replace(self, order_by=order)

    def _order(self) -> Optional[str]:
        return self.order_by

    def _body(self, config: Optional["ClientConfig"]) -> Dict[str, Any]:
        size = self.bucket_count
        if size is None:
            size = config.default_terms_size if config is not None else DEFAULT_TERMS_SIZE
        return {
            "key_field": _require_field(self.kind, "key_field", self.key_field_name),
            "value_field": _require_field(self.kind, "value_field", self.value_field_name),
            "size": _require_size(self.kind, size),
            "order": _require_order(self.kind, self.order_by, TERMS_STATS_ORDERS),
        }


__all__ = [
    "FacetKind",
    "CalendarInterval",
    "FacetSpec",
    "FacetBuilder",
    "TermsFacet",
    "RangeFacet",
    "HistogramFacet",
    "DateHistogramFacet",
    "QueryFacet",
    "FilterFacet",
    "StatisticalFacet",
    "TermsStatsFacet",
    "TERMS_ORDERS",
    "QUERY_ORDERS",
    "TERMS_STATS_ORDERS",
    "DURATION_PATTERN",
]
