"""
GraphQL HTTP request handler.

``create_graphql_handler`` builds the async endpoint that ties the pieces
together for every request:

    method guard -> options -> payload -> params -> GraphiQL eligibility
    -> execution -> response

This is the single place where ``HttpQueryError`` (and any unexpected
exception) is turned into an ``{"errors": [...]}`` response.
"""

from __future__ import annotations

import logging
import time

from graphql import GraphQLError
from starlette.requests import Request
from starlette.responses import Response

from gqlroute.errors import ErrorFormatter, ErrorKind, HttpQueryError, format_error
from gqlroute.execution import Failure, execute_request
from gqlroute.negotiation import can_display_graphiql
from gqlroute.options import GraphQLOptions, OptionsProvider, resolve_options
from gqlroute.params import normalize_payload, read_body, resolve_params
from gqlroute.responses import compose_response, error_response

logger = logging.getLogger(__name__)

ALLOWED_METHODS = ("GET", "POST")


def _internal_error(exc: Exception) -> HttpQueryError:
    return HttpQueryError(
        ErrorKind.INTERNAL,
        "Internal server error.",
        errors=[GraphQLError("Internal server error.", original_error=exc)],
    )


def _failure(error: HttpQueryError, formatter: ErrorFormatter) -> Failure:
    try:
        return Failure.from_error(error, formatter)
    except Exception:
        logger.exception("Custom error formatter failed, using the default formatter")
        return Failure.from_error(error, format_error)


def create_graphql_handler(options: OptionsProvider):
    """
    Create the endpoint for a GraphQL route.

    Args:
        options: ``GraphQLOptions``, an options mapping, or a callable
            ``provider(request)`` returning either (sync or async)

    Returns:
        ``async def endpoint(request) -> Response`` usable with
        ``app.add_api_route`` or a Starlette ``Route``

    Example:
        endpoint = create_graphql_handler(GraphQLOptions(schema=schema))
        app.add_api_route("/graphql", endpoint, methods=["GET", "POST"])
    """
    static_formatter: ErrorFormatter = format_error
    if isinstance(options, GraphQLOptions):
        static_formatter = options.error_formatter

    async def graphql_endpoint(request: Request) -> Response:
        formatter = static_formatter
        started = time.perf_counter()

        try:
            if request.method.upper() not in ALLOWED_METHODS:
                raise HttpQueryError(
                    ErrorKind.METHOD_NOT_ALLOWED,
                    "GraphQL only supports GET and POST requests.",
                    headers={"Allow": ", ".join(ALLOWED_METHODS)},
                )

            resolved = await resolve_options(options, request)
            formatter = resolved.error_formatter

            body = await read_body(request)
            payload = normalize_payload(body, request.headers.get("content-type"))
            params = resolve_params(request.query_params, payload)

            show_graphiql = can_display_graphiql(resolved, params, request.headers.get("accept"))

            outcome = await execute_request(
                params,
                resolved,
                method=request.method,
                show_graphiql=show_graphiql,
            )
            response = compose_response(
                params,
                outcome,
                formatter,
                pretty=resolved.pretty,
                show_graphiql=show_graphiql,
            )
        except HttpQueryError as e:
            logger.debug(
                "GraphQL request failed: %s",
                e.message,
                extra={"context": {"kind": e.kind.code, "status": e.status_code}},
            )
            return error_response(_failure(e, formatter))
        except Exception as e:
            logger.exception("Unexpected error while handling GraphQL request")
            return error_response(_failure(_internal_error(e), formatter))

        logger.debug(
            "GraphQL request handled",
            extra={
                "context": {
                    "method": request.method,
                    "status": response.status_code,
                    "graphiql": show_graphiql,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                }
            },
        )
        return response

    return graphql_endpoint
