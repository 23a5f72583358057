"""
FastAPI integration for the GraphQL endpoint.

Provides utilities for mounting GraphQL on an existing FastAPI app
or creating a standalone GraphQL application.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from fastapi import FastAPI
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from gqlroute.errors import GraphQLConfigError, HttpQueryError
from gqlroute.handler import create_graphql_handler
from gqlroute.options import OptionsProvider, validate_options

logger = logging.getLogger(__name__)

# The endpoint answers anything other than GET and POST with its own 405.
ROUTED_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")


class RouteOptions(BaseModel):
    """Route registration options.

    Attributes:
        path: URL path of the endpoint
        config: Extra keyword arguments for ``FastAPI.add_api_route``
            (``name``, ``tags``, ``dependencies``...)
    """

    model_config = ConfigDict(extra="forbid")

    path: str
    config: dict[str, Any] = Field(default_factory=dict)

    @field_validator("path")
    @classmethod
    def _path_is_absolute(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("route path must start with '/'")
        return value


def _load_static_options(options: OptionsProvider) -> OptionsProvider:
    """Validate non-callable options once, at mount time."""
    if callable(options):
        return options
    try:
        return validate_options(options)
    except HttpQueryError as e:
        details = "; ".join(str(getattr(err, "message", err)) for err in e.errors)
        raise GraphQLConfigError(f"{e.message} {details}") from e


def mount_graphql(
    app: FastAPI,
    options: OptionsProvider,
    path: str = "/graphql",
    route_config: Mapping[str, Any] | None = None,
) -> None:
    """
    Mount a GraphQL endpoint on an existing FastAPI application.

    The route executes GET and POST requests; other methods get a 405
    with the usual {"errors": [...]} body. Static options are validated here;
    options from a provider callable are validated on every request.

    Args:
        app: Existing FastAPI application
        options: ``GraphQLOptions``, an options mapping, or a provider callable
        path: URL path for the endpoint (default: /graphql)
        route_config: Extra ``add_api_route`` keyword arguments

    Raises:
        GraphQLConfigError: Route or static options are invalid

    Example:
        from fastapi import FastAPI
        from gqlroute import GraphQLOptions, mount_graphql

        app = FastAPI()
        mount_graphql(app, GraphQLOptions(schema=schema, graphiql=True))
        # GraphQL available at /graphql
    """
    try:
        route = RouteOptions(path=path, config=dict(route_config or {}))
    except ValidationError as e:
        raise GraphQLConfigError(f"Invalid GraphQL route options: {e}") from e

    endpoint = create_graphql_handler(_load_static_options(options))

    route_kwargs: dict[str, Any] = {"include_in_schema": False, "name": "graphql"}
    route_kwargs.update(route.config)
    app.add_api_route(route.path, endpoint, methods=list(ROUTED_METHODS), **route_kwargs)
    logger.info("GraphQL endpoint mounted at %s", route.path)


def create_graphql_app(
    options: OptionsProvider,
    path: str = "/graphql",
    title: str = "GraphQL API",
    route_config: Mapping[str, Any] | None = None,
) -> FastAPI:
    """
    Create a standalone FastAPI application with a GraphQL endpoint.

    Use mount_graphql() to add GraphQL to an existing app.

    Example:
        app = create_graphql_app(GraphQLOptions(schema=schema))
        # Run with: uvicorn mymodule:app
    """
    app = FastAPI(title=title)
    mount_graphql(app, options, path=path, route_config=route_config)
    return app
