"""RoadSearch Client - Faceted Search for BlackRoad OS.

Builds facet requests for the search server and decodes the facets it
returns into typed, queryable results.

Architecture:
┌─────────────────────────────────────────────────────────────────────────────┐
│                          RoadSearch Client                                  │
├─────────────────────────────────────────────────────────────────────────────┤
│                                                                             │
│   ┌─────────────────────────────────────────────────────────────────────┐   │
│   │                        Request Side                                 │   │
│   │  ┌────────────┐  ┌────────────┐  ┌────────────┐  ┌────────────┐    │   │
│   │  │   Range    │→ │   Facet    │→ │   Facet    │→ │   Search   │    │   │
│   │  │ Boundaries │  │  Builders  │  │  Request   │  │  Request   │    │   │
│   │  └────────────┘  └────────────┘  └────────────┘  └────────────┘    │   │
│   └─────────────────────────────────────────────────────────────────────┘   │
│                                     │                                       │
│                              Transport (caller)                             │
│                                     ↓                                       │
│   ┌─────────────────────────────────────────────────────────────────────┐   │
│   │                        Response Side                                │   │
│   │  ┌────────────┐  ┌────────────┐  ┌────────────┐                    │   │
│   │  │   Search   │→ │   Facet    │→ │   Facets   │                    │   │
│   │  │   Result   │  │  Decoder   │  │   Store    │                    │   │
│   │  └────────────┘  └────────────┘  └────────────┘                    │   │
│   └─────────────────────────────────────────────────────────────────────┘   │
│                                                                             │
└─────────────────────────────────────────────────────────────────────────────┘

Key Features:
- Terms, range, histogram, date histogram, query and filter facets
- Statistical and terms_stats facets
- Immutable facet builders compiled into frozen specifications
- Typed facet results with open-ended range boundaries kept as None
- Forward compatible decoding of facet types unknown to the client

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

__version__ = "1.0.0"
__author__ = "BlackRoad OS"
__license__ = "Proprietary"

from roadsearch_client.config import ClientConfig
from roadsearch_client.errors import (
    RoadSearchError,
    ConfigurationError,
    DuplicateFacetName,
    MalformedFacetPayload,
    ResponseError,
)

# Queries
from roadsearch_client.query.nodes import (
    QueryNode,
    MatchAllQuery,
    TermQuery,
    TermsQuery,
    PrefixQuery,
    RangeQuery,
    BooleanQuery,
)

# Facets
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
    BucketKey,
    KeyKind,
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

# Search
from roadsearch_client.search import (
    Transport,
    SearchRequest,
    SearchResult,
    SearchHits,
    SearchHit,
)

__all__ = [
    # Version
    "__version__",
    # Config and errors
    "ClientConfig",
    "RoadSearchError",
    "ConfigurationError",
    "DuplicateFacetName",
    "MalformedFacetPayload",
    "ResponseError",
    # Queries
    "QueryNode",
    "MatchAllQuery",
    "TermQuery",
    "TermsQuery",
    "PrefixQuery",
    "RangeQuery",
    "BooleanQuery",
    # Facets
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
    "BucketKey",
    "KeyKind",
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
    # Search
    "Transport",
    "SearchRequest",
    "SearchResult",
    "SearchHits",
    "SearchHit",
]
