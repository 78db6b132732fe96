"""RoadSearch Facet Request - Named Facets of One Search Request.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional, Union

from roadsearch_client.errors import ConfigurationError, DuplicateFacetName
from roadsearch_client.facets.builder import FacetBuilder, FacetSpec

if TYPE_CHECKING:
    from roadsearch_client.config import ClientConfig

logger = logging.getLogger(__name__)


class FacetRequest:
    """Collects named facet specifications for one request.

    Facet names must be unique within a request; registering a name
    twice fails immediately, before anything is sent.
    """

    def __init__(self, config: Optional["ClientConfig"] = None):
        self._config = config
        self._specs: Dict[str, FacetSpec] = {}

    def add_facet(self, name: str, facet: Union[FacetSpec, FacetBuilder]) -> FacetSpec:
        """Register a facet under a name.

        Args:
            name: Facet name, echoed back by the server in the response
            facet: Compiled spec, or a builder to compile now

        Returns:
            The registered facet specification

        Raises:
            DuplicateFacetName: If the name is already registered
            ConfigurationError: If the name is empty or the builder is invalid
        """
        if not isinstance(name, str) or not name:
            raise ConfigurationError(f"Facet name must be a non-empty string, got {name!r}")
        if name in self._specs:
            raise DuplicateFacetName(name)

        if isinstance(facet, FacetBuilder):
            spec = facet.build(self._config)
        elif isinstance(facet, FacetSpec):
            spec = facet
        else:
            raise ConfigurationError(
                f"Facet {name!r} must be a FacetSpec or FacetBuilder, got {type(facet).__name__}"
            )

        self._specs[name] = spec
        logger.debug(f"Registered {spec.kind.value} facet: {name}")
        return spec

    def get(self, name: str) -> Optional[FacetSpec]:
        return self._specs.get(name)

    def names(self) -> List[str]:
        return list(self._specs)

    def to_dict(self) -> Dict[str, Any]:
        """Render the facet portion of the request, in registration order."""
        return {name: spec.to_dict() for name, spec in self._specs.items()}

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def __iter__(self) -> Iterator[str]:
        return iter(self._specs)

    def __len__(self) -> int:
        return len(self._specs)

    def __bool__(self) -> bool:
        return bool(self._specs)


__all__ = ["FacetRequest"]
