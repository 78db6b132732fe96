"""RoadSearch Facet Results - Typed Response-Side Facets.

Every facet returned by the server is decoded into one of the frozen
result types below, chosen by the payload's type discriminator. The
``Facets`` store gives name-keyed access to them.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import (
    Dict,
    Iterator,
    List,
    Mapping,
    Optional,
    Tuple,
    Type,
    TypeVar,
    Union,
)


class KeyKind(Enum):
    """Kinds of bucket keys."""

    TERM = "term"
    NUMBER = "number"
    TIME = "time"


@dataclass(frozen=True)
class BucketKey:
    """Tagged bucket key: a term, a plain number, or an epoch-ms timestamp."""

    kind: KeyKind
    value: Union[str, float, int]

    @property
    def as_datetime(self) -> Optional[datetime]:
        """UTC datetime for time keys, None otherwise."""
        if self.kind is not KeyKind.TIME:
            return None
        return epoch_millis_to_datetime(int(self.value))


def epoch_millis_to_datetime(millis: int) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime."""
    return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)


@dataclass(frozen=True)
class TermEntry:
    """A term bucket."""

    term: str
    count: int

    @property
    def bucket_key(self) -> BucketKey:
        return BucketKey(KeyKind.TERM, self.term)


@dataclass(frozen=True)
class RangeEntry:
    """A range bucket.

    ``from_`` and ``to`` are None when the range is open on that side;
    they are never defaulted to zero.
    """

    from_: Optional[float]
    to: Optional[float]
    count: int
    total_count: int
    total: Optional[float] = None
    mean: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None

    @property
    def is_open_below(self) -> bool:
        return self.from_ is None

    @property
    def is_open_above(self) -> bool:
        return self.to is None


@dataclass(frozen=True)
class HistogramEntry:
    """A histogram or date histogram bucket.

    Numeric histograms set ``key``; date histograms set ``time`` (epoch
    milliseconds, UTC). The statistics are only present when the facet
    was requested with key and value fields, and are passed through as
    the server computed them.
    """

    count: int
    key: Optional[float] = None
    time: Optional[int] = None
    min: Optional[float] = None
    max: Optional[float] = None
    total: Optional[float] = None
    total_count: Optional[int] = None
    mean: Optional[float] = None

    @property
    def bucket_key(self) -> BucketKey:
        if self.time is not None:
            return BucketKey(KeyKind.TIME, self.time)
        return BucketKey(KeyKind.NUMBER, self.key)

    @property
    def timestamp(self) -> Optional[datetime]:
        if self.time is None:
            return None
        return epoch_millis_to_datetime(self.time)


@dataclass(frozen=True)
class TermStatsEntry:
    """A terms_stats bucket."""

    term: str
    count: int
    total_count: int
    min: Optional[float] = None
    max: Optional[float] = None
    total: Optional[float] = None
    mean: Optional[float] = None

    @property
    def bucket_key(self) -> BucketKey:
        return BucketKey(KeyKind.TERM, self.term)


@dataclass(frozen=True)
class FacetResult:
    """A decoded facet.

    Facet types the client does not know are returned as a bare
    ``FacetResult`` carrying only the type and total.

    Attributes:
        type: Type discriminator returned by the server
        total: Number of documents the facet aggregated
    """

    type: str
    total: int = 0


@dataclass(frozen=True)
class TermsFacetResult(FacetResult):
    terms: Tuple[TermEntry, ...] = ()
    missing: int = 0
    other: int = 0


@dataclass(frozen=True)
class RangeFacetResult(FacetResult):
    """Range buckets, positionally aligned with the requested ranges."""

    ranges: Tuple[RangeEntry, ...] = ()


@dataclass(frozen=True)
class HistogramFacetResult(FacetResult):
    """Histogram buckets in the order the server returned them."""

    entries: Tuple[HistogramEntry, ...] = ()


@dataclass(frozen=True)
class DateHistogramFacetResult(HistogramFacetResult):
    pass


@dataclass(frozen=True)
class QueryFacetResult(FacetResult):
    """Documents matched by a query or filter facet, in ``total``."""


@dataclass(frozen=True)
class StatisticalFacetResult(FacetResult):
    """Statistics over a numeric field.

    ``total`` is the number of values seen; ``value_total`` is their sum.
    """

    value_total: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None
    mean: Optional[float] = None
    sum_of_squares: Optional[float] = None
    variance: Optional[float] = None
    std_deviation: Optional[float] = None


@dataclass(frozen=True)
class TermsStatsFacetResult(FacetResult):
    terms: Tuple[TermStatsEntry, ...] = ()
    missing: int = 0


F = TypeVar("F", bound=FacetResult)


class Facets:
    """Read-only, name-keyed store of decoded facets.

    Looking up a name that was never returned is a normal negative
    result, not an error.
    """

    def __init__(self, facets: Optional[Mapping[str, FacetResult]] = None):
        self._facets: Mapping[str, FacetResult] = MappingProxyType(dict(facets or {}))

    def get(self, name: str) -> Tuple[Optional[FacetResult], bool]:
        """Look up a facet.

        Args:
            name: Facet name used in the request

        Returns:
            ``(facet, True)`` if present, ``(None, False)`` otherwise
        """
        facet = self._facets.get(name)
        return facet, facet is not None

    def get_typed(self, name: str, facet_type: Type[F]) -> Optional[F]:
        """Look up a facet expected to be of a given result type.

        Raises:
            TypeError: If the facet exists but is of another type
        """
        facet = self._facets.get(name)
        if facet is None:
            return None
        if not isinstance(facet, facet_type):
            raise TypeError(
                f"Facet {name!r} is {type(facet).__name__} ({facet.type}), "
                f"not {facet_type.__name__}"
            )
        return facet

    def names(self) -> List[str]:
        return list(self._facets)

    def to_dict(self) -> Dict[str, FacetResult]:
        return dict(self._facets)

    def __contains__(self, name: object) -> bool:
        return name in self._facets

    def __getitem__(self, name: str) -> FacetResult:
        return self._facets[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._facets)

    def __len__(self) -> int:
        return len(self._facets)

    def __repr__(self) -> str:
        return f"Facets({self.names()!r})"


__all__ = [
    "KeyKind",
    "BucketKey",
    "TermEntry",
    "RangeEntry",
    "HistogramEntry",
    "TermStatsEntry",
    "FacetResult",
    "TermsFacetResult",
    "RangeFacetResult",
    "HistogramFacetResult",
    "DateHistogramFacetResult",
    "QueryFacetResult",
    "StatisticalFacetResult",
    "TermsStatsFacetResult",
    "Facets",
    "epoch_millis_to_datetime",
]
