"""RoadSearch Facet Decoder - Response-Side Facet Classification.

Decodes the ``facets`` object of a search response. Each named payload
carries a ``_type`` discriminator set by the server; the decoder looks
the discriminator up in its registry and hands the payload to the
matching decode function. Unknown discriminators decode into a bare
``FacetResult`` so that facet kinds added by the server never break a
client.

Decoding is all-or-nothing: the result store is only built once every
payload decoded, and the first malformed payload aborts the whole
facets object.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from roadsearch_client.config import ClientConfig
from roadsearch_client.errors import MalformedFacetPayload
from roadsearch_client.facets.results import (
    DateHistogramFacetResult,
    FacetResult,
    Facets,
    HistogramEntry,
    HistogramFacetResult,
    QueryFacetResult,
    RangeEntry,
    RangeFacetResult,
    StatisticalFacetResult,
    TermEntry,
    TermsFacetResult,
    TermsStatsFacetResult,
    TermStatsEntry,
)

logger = logging.getLogger(__name__)

# Signature of a decode function: (facet name, discriminator, payload) -> facet
FacetDecodeFunc = Callable[[str, str, Mapping[str, Any]], FacetResult]

_REQUIRED = object()


def _value(name: str, obj: Mapping[str, Any], key: str, default: Any) -> Any:
    value = obj.get(key)
    if value is None:
        if default is _REQUIRED:
            raise MalformedFacetPayload(f"missing required field {key!r}", name)
        return default
    return value


def _int(name: str, obj: Mapping[str, Any], key: str, default: Any = _REQUIRED) -> Any:
    """Read an integer; integral floats are accepted."""
    value = _value(name, obj, key, default)
    if value is default and default is not _REQUIRED:
        return value
    if isinstance(value, bool):
        raise MalformedFacetPayload(f"field {key!r} must be an integer, got {value!r}", name)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise MalformedFacetPayload(f"field {key!r} must be an integer, got {value!r}", name)


def _number(name: str, obj: Mapping[str, Any], key: str, default: Any = None) -> Any:
    """Read a number as float. Absent or null fields return ``default``."""
    value = _value(name, obj, key, default)
    if value is default and default is not _REQUIRED:
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedFacetPayload(f"field {key!r} must be a number, got {value!r}", name)
    return float(value)


def _term(name: str, obj: Mapping[str, Any]) -> str:
    value = _value(name, obj, "term", _REQUIRED)
    if isinstance(value, str):
        return value
    # Terms of numeric fields come back as numbers.
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise MalformedFacetPayload(f"field 'term' must be a string, got {value!r}", name)


def _buckets(name: str, payload: Mapping[str, Any], key: str) -> List[Mapping[str, Any]]:
    buckets = payload.get(key)
    if buckets is None:
        raise MalformedFacetPayload(f"missing required field {key!r}", name)
    if not isinstance(buckets, list):
        raise MalformedFacetPayload(f"field {key!r} must be a list", name)
    for position, bucket in enumerate(buckets):
        if not isinstance(bucket, Mapping):
            raise MalformedFacetPayload(f"{key}[{position}] must be an object", name)
    return buckets


class FacetDecoder:
    """Decodes raw facet payloads into typed facet results.

    Decode functions are registered per discriminator; ``register`` lets
    callers add or replace handlers for further facet kinds.
    """

    def __init__(self, config: Optional[ClientConfig] = None):
        self.config = config or ClientConfig.defaults()
        self._decoders: Dict[str, FacetDecodeFunc] = {
            "terms": self._decode_terms,
            "range": self._decode_range,
            "geo_distance": self._decode_range,
            "histogram": self._decode_histogram,
            "date_histogram": self._decode_histogram,
            "query": self._decode_query,
            "filter": self._decode_query,
            "statistical": self._decode_statistical,
            "terms_stats": self._decode_terms_stats,
        }

    def register(self, type_name: str, decoder: FacetDecodeFunc) -> None:
        """Register a decode function for a discriminator."""
        self._decoders[type_name] = decoder

    def known_types(self) -> List[str]:
        return sorted(self._decoders)

    def decode(self, raw_facets: Optional[Mapping[str, Any]]) -> Facets:
        """Decode the facets object of a search response.

        Args:
            raw_facets: Mapping of facet name to raw payload

        Returns:
            Result store holding every decoded facet

        Raises:
            MalformedFacetPayload: If any payload cannot be decoded
        """
        if raw_facets is None:
            return Facets()
        if not isinstance(raw_facets, Mapping):
            raise MalformedFacetPayload(
                f"facets must be an object, got {type(raw_facets).__name__}"
            )

        decoded: Dict[str, FacetResult] = {}
        for name, payload in raw_facets.items():
            decoded[name] = self.decode_facet(name, payload)
        return Facets(decoded)

    def decode_facet(self, name: str, payload: Any) -> FacetResult:
        """Decode a single named facet payload."""
        if not isinstance(payload, Mapping):
            raise MalformedFacetPayload(
                f"payload must be an object, got {type(payload).__name__}", name
            )

        type_name = payload.get("_type", payload.get("type"))
        if type_name is None:
            raise MalformedFacetPayload("missing type discriminator", name)
        if not isinstance(type_name, str) or not type_name:
            raise MalformedFacetPayload(f"invalid type discriminator {type_name!r}", name)

        decoder = self._decoders.get(type_name)
        if decoder is None:
            return self._decode_unknown(name, type_name, payload)

        facet = decoder(name, type_name, payload)
        logger.debug(f"Decoded {type_name} facet: {name}")
        return facet

    def _decode_unknown(self, name: str, type_name: str, payload: Mapping[str, Any]) -> FacetResult:
        if self.config.log_unknown_types:
            logger.info(f"Facet {name!r} has unknown type {type_name!r}; keeping type and total only")
        total = payload.get("total")
        if isinstance(total, float) and total.is_integer():
            total = int(total)
        if isinstance(total, bool) or not isinstance(total, int):
            total = 0
        return FacetResult(type=type_name, total=total)

    def _decode_terms(self, name: str, type_name: str, payload: Mapping[str, Any]) -> TermsFacetResult:
        # Server order is kept; it already reflects the requested ordering.
        terms = tuple(
            TermEntry(term=_term(name, bucket), count=_int(name, bucket, "count"))
            for bucket in _buckets(name, payload, "terms")
        )
        return TermsFacetResult(
            type=type_name,
            total=_int(name, payload, "total"),
            terms=terms,
            missing=_int(name, payload, "missing", 0),
            other=_int(name, payload, "other", 0),
        )

    def _decode_range(self, name: str, type_name: str, payload: Mapping[str, Any]) -> RangeFacetResult:
        ranges = []
        for bucket in _buckets(name, payload, "ranges"):
            count = _int(name, bucket, "count")
            ranges.append(RangeEntry(
                from_=_number(name, bucket, "from"),
                to=_number(name, bucket, "to"),
                count=count,
                total_count=_int(name, bucket, "total_count", count),
                total=_number(name, bucket, "total"),
                mean=_number(name, bucket, "mean"),
                min=_number(name, bucket, "min"),
                max=_number(name, bucket, "max"),
            ))
        return RangeFacetResult(
            type=type_name,
            total=sum(r.count for r in ranges),
            ranges=tuple(ranges),
        )

    def _decode_histogram(self, name: str, type_name: str, payload: Mapping[str, Any]) -> HistogramFacetResult:
        is_date = type_name == "date_histogram"
        entries = []
        for bucket in _buckets(name, payload, "entries"):
            entries.append(HistogramEntry(
                count=_int(name, bucket, "count"),
                key=None if is_date else _number(name, bucket, "key", _REQUIRED),
                time=_int(name, bucket, "time") if is_date else None,
                min=_number(name, bucket, "min"),
                max=_number(name, bucket, "max"),
                total=_number(name, bucket, "total"),
                total_count=_int(name, bucket, "total_count", None),
                mean=_number(name, bucket, "mean"),
            ))

        keys = [e.time if is_date else e.key for e in entries]
        self._check_ascending(name, keys)

        result_type = DateHistogramFacetResult if is_date else HistogramFacetResult
        return result_type(
            type=type_name,
            total=sum(e.count for e in entries),
            entries=tuple(entries),
        )

    def _check_ascending(self, name: str, keys: Sequence[Any]) -> None:
        """Entries are never re-sorted; out-of-order keys are reported."""
        for position in range(1, len(keys)):
            if keys[position] <= keys[position - 1]:
                message = (
                    f"entries not in ascending order at position {position} "
                    f"({keys[position - 1]!r} then {keys[position]!r})"
                )
                if self.config.strict_ordering:
                    raise MalformedFacetPayload(message, name)
                logger.warning(f"Facet {name!r}: {message}")
                return

    def _decode_query(self, name: str, type_name: str, payload: Mapping[str, Any]) -> QueryFacetResult:
        # Older servers report the matched documents as "count".
        key = "total" if payload.get("total") is not None else "count"
        return QueryFacetResult(type=type_name, total=_int(name, payload, key))

    def _decode_statistical(self, name: str, type_name: str, payload: Mapping[str, Any]) -> StatisticalFacetResult:
        return StatisticalFacetResult(
            type=type_name,
            total=_int(name, payload, "count"),
            value_total=_number(name, payload, "total"),
            min=_number(name, payload, "min"),
            max=_number(name, payload, "max"),
            mean=_number(name, payload, "mean"),
            sum_of_squares=_number(name, payload, "sum_of_squares"),
            variance=_number(name, payload, "variance"),
            std_deviation=_number(name, payload, "std_deviation"),
        )

    def _decode_terms_stats(self, name: str, type_name: str, payload: Mapping[str, Any]) -> TermsStatsFacetResult:
        terms = []
        for bucket in _buckets(name, payload, "terms"):
            count = _int(name, bucket, "count")
            terms.append(TermStatsEntry(
                term=_term(name, bucket),
                count=count,
                total_count=_int(name, bucket, "total_count", count),
                min=_number(name, bucket, "min"),
                max=_number(name, bucket, "max"),
                total=_number(name, bucket, "total"),
                mean=_number(name, bucket, "mean"),
            ))
        return TermsStatsFacetResult(
            type=type_name,
            total=sum(t.count for t in terms),
            terms=tuple(terms),
            missing=_int(name, payload, "missing", 0),
        )


def decode_facets(
    raw_facets: Optional[Mapping[str, Any]],
    config: Optional[ClientConfig] = None,
) -> Facets:
    """Decode a response's facets object with a default decoder."""
    return FacetDecoder(config).decode(raw_facets)


__all__ = ["FacetDecoder", "FacetDecodeFunc", "decode_facets"]
