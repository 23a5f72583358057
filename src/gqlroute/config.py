"""
Server configuration from environment variables.

Used by the ``gqlroute serve`` command; CLI flags override these values.
Per-request GraphQL behaviour is configured through ``GraphQLOptions``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


def _flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes", "on")


@dataclass
class ServerConfig:
    """Configuration for serving a schema with ``gqlroute serve``."""

    host: str = "127.0.0.1"
    port: int = 8000
    path: str = "/graphql"
    graphiql: bool = True
    pretty: bool = False
    log_level: str = "INFO"
    log_format: str = "console"

    @classmethod
    def from_env(cls) -> ServerConfig:
        """Load configuration from environment variables."""
        return cls(
            host=os.environ.get("GQLROUTE_HOST", "127.0.0.1"),
            port=int(os.environ.get("GQLROUTE_PORT", "8000")),
            path=os.environ.get("GQLROUTE_PATH", "/graphql"),
            graphiql=_flag("GQLROUTE_GRAPHIQL", "1"),
            pretty=_flag("GQLROUTE_PRETTY", "0"),
            log_level=os.environ.get("GQLROUTE_LOG_LEVEL", "INFO").upper(),
            log_format=os.environ.get("GQLROUTE_LOG_FORMAT", "console").lower(),
        )
