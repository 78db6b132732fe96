"""RoadSearch Client Configuration.

Settings are read from ``ROADSEARCH_*`` environment variables (or a
``.env`` file) by ``ClientConfig.from_env()`` or a bare ``ClientConfig()``.
Components given no configuration use ``ClientConfig.defaults()``, which
never consults the environment.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from roadsearch_client.errors import ConfigurationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "ROADSEARCH_"


class ClientConfig(BaseSettings):
    """Client configuration.

    Attributes:
        default_index: Index searched when a request names none
        strict_ordering: Reject histogram entries that are not ascending
            instead of logging a warning
        default_terms_size: Bucket count for terms facets without an
            explicit size
        log_unknown_types: Log facets whose type the decoder does not know
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_index: Optional[str] = None
    strict_ordering: bool = False
    default_terms_size: int = Field(10, gt=0)
    log_unknown_types: bool = True

    @classmethod
    def defaults(cls) -> "ClientConfig":
        """Built-in defaults, ignoring the environment and any ``.env`` file."""
        return cls.model_construct()

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Load configuration from the environment.

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        try:
            config = cls()
        except ValidationError as e:
            raise ConfigurationError(f"Invalid {ENV_PREFIX}* configuration: {e}") from e
        logger.debug(f"Loaded client configuration: {config!r}")
        return config


__all__ = ["ClientConfig", "ENV_PREFIX"]
