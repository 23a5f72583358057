"""
Turn execution outcomes into HTTP responses.
"""

from __future__ import annotations

import json
from typing import Any

from starlette.responses import HTMLResponse, Response

from gqlroute.errors import ErrorFormatter
from gqlroute.execution import ExecutionOutcome, Failure, Success
from gqlroute.explorer import render_graphiql
from gqlroute.params import ExecutionParams

JSON_MEDIA_TYPE = "application/json"


def dump_json(body: Any, pretty: bool = False) -> str:
    """Serialize *body*; two-space indent when pretty, otherwise compact."""
    if pretty:
        return json.dumps(body, indent=2, ensure_ascii=False, default=str)
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False, default=str)


def json_response(
    body: Any,
    status_code: int = 200,
    pretty: bool = False,
    headers: dict[str, str] | None = None,
) -> Response:
    return Response(
        content=dump_json(body, pretty),
        status_code=status_code,
        media_type=JSON_MEDIA_TYPE,
        headers=headers,
    )


def error_response(failure: Failure) -> Response:
    """``{"errors": [...]}`` with the failure's status and headers."""
    return json_response(
        {"errors": failure.errors},
        status_code=failure.status_code,
        headers=failure.headers or None,
    )


def explorer_response(
    params: ExecutionParams,
    outcome: ExecutionOutcome,
    formatter: ErrorFormatter,
) -> HTMLResponse:
    """GraphiQL page pre-filled with the request and its result, if any."""
    result = outcome.to_dict(formatter) if isinstance(outcome, Success) else None
    html = render_graphiql(
        query=params.query,
        variables=params.variables,
        operation_name=params.operation_name,
        result=result,
    )
    return HTMLResponse(content=html, status_code=200)


def compose_response(
    params: ExecutionParams,
    outcome: ExecutionOutcome,
    formatter: ErrorFormatter,
    pretty: bool = False,
    show_graphiql: bool = False,
) -> Response:
    """Pick the response for a request that did not fail."""
    if show_graphiql:
        return explorer_response(params, outcome, formatter)

    if isinstance(outcome, Success):
        return json_response(outcome.to_dict(formatter), pretty=pretty)

    # Deferred is only produced when GraphiQL is shown
    raise TypeError(f"Cannot compose a JSON response for {type(outcome).__name__}")
