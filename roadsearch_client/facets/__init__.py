"""RoadSearch Faceted Search Components.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from roadsearch_client.facets.ranges import RangeBoundary
from roadsearch_client.facets.builder import (
    FacetKind,
    CalendarInterval,
    FacetSpec,
    FacetBuilder,
    TermsFacet,
    RangeFacet,
    HistogramFacet,
    DateHistogramFacet,
    QueryFacet,
    FilterFacet,
    StatisticalFacet,
    TermsStatsFacet,
)
from roadsearch_client.facets.request import FacetRequest
from roadsearch_client.facets.results import (
    KeyKind,
    BucketKey,
    TermEntry,
    RangeEntry,
    HistogramEntry,
    TermStatsEntry,
    FacetResult,
    TermsFacetResult,
    RangeFacetResult,
    HistogramFacetResult,
    DateHistogramFacetResult,
    QueryFacetResult,
    StatisticalFacetResult,
    TermsStatsFacetResult,
    Facets,
)
from roadsearch_client.facets.decoder import FacetDecoder, decode_facets

__all__ = [
    "RangeBoundary",
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
    "FacetRequest",
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
    "FacetDecoder",
    "decode_facets",
]
