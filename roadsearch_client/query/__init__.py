"""RoadSearch Query Components.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from roadsearch_client.query.nodes import (
    QueryType,
    QueryNode,
    QueryLike,
    MatchAllQuery,
    TermQuery,
    TermsQuery,
    PrefixQuery,
    RangeQuery,
    BooleanQuery,
    render_query,
)

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
