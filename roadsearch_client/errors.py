"""RoadSearch Client Errors - Exception Hierarchy.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations
from typing import Optional

class RoadSearchError(Exception):
    """Base class for all client errors."""

class ConfigurationError(RoadSearchError, ValueError):
    """Invalid facet or client configuration supplied by the caller."""

class DuplicateFacetName(ConfigurationError):
    """A facet name was registered twice on the same request."""

    def __init__(self, name: str):
        super().__init__(f"Facet name already registered: {name!r}")
        self.name = name

class MalformedFacetPayload(RoadSearchError, ValueError):
    """A facet payload returned by the server could not be decoded."""

    def __init__(self, message: str, facet_name: Optional[str] = None):
        if facet_name is not None:
            message = f"Facet {facet_name!r}: {message}"
        super().__init__(message)
        self.facet_name = facet_name

class ResponseError(RoadSearchError):
    """The raw search response is not a decodable JSON object."""

__all__ = [
    "RoadSearchError",
    "ConfigurationError",
    "DuplicateFacetName",
    "MalformedFacetPayload",
    "ResponseError",
]
