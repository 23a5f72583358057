"""
gqlroute - GraphQL over HTTP for FastAPI.

Exposes a GraphQL schema (graphql-core or Strawberry) on a FastAPI route,
with the GraphiQL explorer for browsers.

Key components:
- params: request body normalisation and GraphQL parameter resolution
- negotiation: Accept header negotiation and GraphiQL eligibility
- options: per-request options (static or from a provider callable)
- execution: parse / validate / method check / execute
- responses: JSON, GraphiQL and error responses
- handler: the request endpoint and its error boundary
- integration: mount_graphql() and create_graphql_app()
"""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version

try:
    __version__ = _metadata_version("gqlroute")
except PackageNotFoundError:
    __version__ = "0.0.0"

from gqlroute.errors import (
    ErrorKind,
    GraphQLConfigError,
    HttpQueryError,
    format_error,
)
from gqlroute.execution import Deferred, Failure, Success, execute_request
from gqlroute.handler import create_graphql_handler
from gqlroute.integration import RouteOptions, create_graphql_app, mount_graphql
from gqlroute.negotiation import best_match, can_display_graphiql
from gqlroute.options import GraphQLOptions, resolve_options
from gqlroute.params import ExecutionParams, normalize_payload, resolve_params

__all__ = [
    "__version__",
    # Integration
    "mount_graphql",
    "create_graphql_app",
    "create_graphql_handler",
    "RouteOptions",
    # Options
    "GraphQLOptions",
    "resolve_options",
    # Request processing
    "ExecutionParams",
    "normalize_payload",
    "resolve_params",
    "best_match",
    "can_display_graphiql",
    "execute_request",
    "Deferred",
    "Success",
    "Failure",
    # Errors
    "ErrorKind",
    "HttpQueryError",
    "GraphQLConfigError",
    "format_error",
]
