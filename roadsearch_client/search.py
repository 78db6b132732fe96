"""RoadSearch Client Search - Request Building and Response Parsing.

``SearchRequest`` assembles the search request document (main query plus
named facets) and hands it to a caller-supplied transport.
``SearchResult`` parses the raw response, decoding its facets into a
``Facets`` store.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Generator, List, Mapping, Optional, Protocol, Union

from roadsearch_client.config import ClientConfig
from roadsearch_client.errors import ConfigurationError, ResponseError
from roadsearch_client.facets.builder import FacetBuilder, FacetSpec
from roadsearch_client.facets.decoder import FacetDecoder
from roadsearch_client.facets.request import FacetRequest
from roadsearch_client.facets.results import Facets
from roadsearch_client.query.nodes import QueryLike, render_query

logger = logging.getLogger(__name__)

RawResponse = Union[Mapping[str, Any], str, bytes]


class Transport(Protocol):
    """Connection layer that sends requests to the search server.

    Retries and timeouts are the transport's concern.
    """

    def perform_request(self, method: str, path: str, body: Dict[str, Any]) -> RawResponse:
        ...


@dataclass
class SearchHit:
    """Single search result hit.

    Attributes:
        id: Document ID
        index: Index the document lives in
        type: Document type
        score: Relevance score
        source: Stored document source
    """

    id: str
    index: Optional[str] = None
    type: Optional[str] = None
    score: Optional[float] = None
    source: Dict[str, Any] = field(default_factory=dict)

    def get(self, field_name: str, default: Any = None) -> Any:
        """Get source field value."""
        return self.source.get(field_name, default)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SearchHit":
        return cls(
            id=str(data.get("_id", "")),
            index=data.get("_index"),
            type=data.get("_type"),
            score=data.get("_score"),
            source=dict(data.get("_source") or {}),
        )


@dataclass
class SearchHits:
    """Hits section of a search response."""

    total_hits: int = 0
    max_score: Optional[float] = None
    hits: List[SearchHit] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.hits)

    def __iter__(self) -> Generator[SearchHit, None, None]:
        yield from self.hits

    def __getitem__(self, index: int) -> SearchHit:
        return self.hits[index]


@dataclass
class SearchResult:
    """Search result container.

    Attributes:
        took_ms: Server-side execution time in milliseconds
        timed_out: Whether the query timed out
        hits: Matching documents
        facets: Decoded facets, keyed by request name
    """

    took_ms: int = 0
    timed_out: bool = False
    hits: SearchHits = field(default_factory=SearchHits)
    facets: Facets = field(default_factory=Facets)

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        config: Optional[ClientConfig] = None,
        decoder: Optional[FacetDecoder] = None,
    ) -> "SearchResult":
        """Parse a decoded JSON response.

        Args:
            data: Response document
            config: Client configuration for the facet decoder
            decoder: Decoder to use instead of a default one

        Returns:
            Parsed search result

        Raises:
            ResponseError: If the response is not an object
            MalformedFacetPayload: If a facet cannot be decoded
        """
        if not isinstance(data, Mapping):
            raise ResponseError(f"Search response must be an object, got {type(data).__name__}")

        raw_hits = data.get("hits") or {}
        total = raw_hits.get("total") or 0
        if isinstance(total, Mapping):
            total = total.get("value") or 0
        hits = SearchHits(
            total_hits=int(total),
            max_score=raw_hits.get("max_score"),
            hits=[SearchHit.from_dict(h) for h in raw_hits.get("hits") or []],
        )

        decoder = decoder or FacetDecoder(config)
        facets = decoder.decode(data.get("facets"))

        return cls(
            took_ms=int(data.get("took") or 0),
            timed_out=bool(data.get("timed_out", False)),
            hits=hits,
            facets=facets,
        )

    @classmethod
    def from_json(
        cls,
        raw: Union[str, bytes],
        config: Optional[ClientConfig] = None,
        decoder: Optional[FacetDecoder] = None,
    ) -> "SearchResult":
        """Parse a raw JSON response body."""
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise ResponseError(f"Search response is not valid JSON: {e}") from e
        return cls.from_dict(data, config=config, decoder=decoder)


class SearchRequest:
    """Fluent search request builder.

    Provides a convenient interface for assembling a query with named
    facets and executing it through a transport.
    """

    def __init__(self, config: Optional[ClientConfig] = None):
        """Initialize search request.

        Args:
            config: Client configuration
        """
        self.config = config or ClientConfig.defaults()
        self._indices: List[str] = []
        self._query: Optional[QueryLike] = None
        self._facets = FacetRequest(self.config)
        self._size: Optional[int] = None
        self._from: Optional[int] = None

    def index(self, *names: str) -> "SearchRequest":
        """Add indices to search.

        Args:
            *names: Index names

        Returns:
            Self for chaining
        """
        self._indices.extend(names)
        return self

    def query(self, query: QueryLike) -> "SearchRequest":
        """Set the main query.

        Args:
            query: Query node or raw query DSL

        Returns:
            Self for chaining
        """
        self._query = query
        return self

    def facet(self, name: str, facet: Union[FacetSpec, FacetBuilder]) -> "SearchRequest":
        """Add a named facet.

        Args:
            name: Facet name, unique within this request
            facet: Facet builder or compiled spec

        Returns:
            Self for chaining

        Raises:
            DuplicateFacetName: If the name is already used
        """
        self._facets.add_facet(name, facet)
        return self

    def size(self, size: int) -> "SearchRequest":
        """Set the number of hits to return.

        Args:
            size: Number of hits

        Returns:
            Self for chaining
        """
        if size < 0:
            raise ConfigurationError(f"size must not be negative, got {size}")
        self._size = size
        return self

    def from_(self, offset: int) -> "SearchRequest":
        """Set the offset of the first hit.

        Args:
            offset: Starting offset

        Returns:
            Self for chaining
        """
        if offset < 0:
            raise ConfigurationError(f"from must not be negative, got {offset}")
        self._from = offset
        return self

    @property
    def facets(self) -> FacetRequest:
        return self._facets

    def path(self) -> str:
        """Endpoint path for this request."""
        indices = self._indices or ([self.config.default_index] if self.config.default_index else [])
        if not indices:
            return "/_search"
        return f"/{','.join(indices)}/_search"

    def to_dict(self) -> Dict[str, Any]:
        """Render the request document."""
        body: Dict[str, Any] = {}
        if self._query is not None:
            body["query"] = render_query(self._query)
        if self._facets:
            body["facets"] = self._facets.to_dict()
        if self._size is not None:
            body["size"] = self._size
        if self._from is not None:
            body["from"] = self._from
        return body

    def execute(self, transport: Transport) -> SearchResult:
        """Send the request and parse the response.

        Args:
            transport: Connection layer performing the HTTP call

        Returns:
            Search result
        """
        path = self.path()
        body = self.to_dict()
        logger.debug(f"Executing search on {path} with {len(self._facets)} facet(s)")

        raw = transport.perform_request("POST", path, body)
        if isinstance(raw, (str, bytes)):
            return SearchResult.from_json(raw, config=self.config)
        return SearchResult.from_dict(raw, config=self.config)


__all__ = [
    "Transport",
    "SearchHit",
    "SearchHits",
    "SearchResult",
    "SearchRequest",
]
