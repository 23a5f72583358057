"""
Request payload normalisation and GraphQL parameter resolution.

A GraphQL request can arrive in several shapes:

- GET with ``query``/``variables``/``operationName`` in the query string
- POST with a JSON body (``application/json``)
- POST with the raw query text as the body (``application/graphql``)

``normalize_payload`` turns the body into a plain dict and ``resolve_params``
merges it with the query string into one canonical ``ExecutionParams``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from gqlroute.errors import ErrorKind, HttpQueryError

logger = logging.getLogger(__name__)

GRAPHQL_MEDIA_TYPE = "application/graphql"


@dataclass(frozen=True)
class ExecutionParams:
    """Canonical GraphQL parameters for one request."""

    query: str | None = None
    variables: dict[str, Any] | None = None
    operation_name: str | None = None
    raw: bool = False


def media_type(content_type: str | None) -> str:
    """Strip parameters (charset, boundary...) from a Content-Type value."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


async def read_body(request: Any) -> bytes:
    """Drain the request body stream completely."""
    chunks = [chunk async for chunk in request.stream()]
    return b"".join(chunks)


def normalize_payload(
    body: Mapping[str, Any] | bytes | str | None,
    content_type: str | None,
) -> dict[str, Any]:
    """Turn a request body into a payload dict.

    Args:
        body: Already-parsed mapping, raw bytes/text, or None when absent
        content_type: The request's Content-Type header value

    Returns:
        ``{"query": text}`` for ``application/graphql`` bodies, otherwise the
        decoded JSON object. An empty or absent body yields ``{}``.

    Raises:
        HttpQueryError: The body is not valid JSON or not a JSON object
    """
    if isinstance(body, Mapping):
        return dict(body)

    if isinstance(body, bytes):
        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise HttpQueryError(ErrorKind.INVALID_BODY, "POST body is not valid UTF-8.") from e
    else:
        text = body or ""

    if media_type(content_type) == GRAPHQL_MEDIA_TYPE:
        return {"query": text}

    if not text.strip():
        text = "{}"

    try:
        payload = json.loads(text)
    except ValueError as e:
        logger.debug("Rejecting body that is not JSON: %s", e)
        raise HttpQueryError(ErrorKind.INVALID_BODY, "POST body sent invalid JSON.") from e

    if not isinstance(payload, dict):
        raise HttpQueryError(ErrorKind.INVALID_BODY, "POST body must be a JSON object.")
    return payload


def _first_present(query_params: Mapping[str, Any], payload: Mapping[str, Any], key: str) -> Any:
    value = query_params.get(key)
    if value is None:
        value = payload.get(key)
    return value


def is_raw_request(query_params: Mapping[str, Any], payload: Mapping[str, Any]) -> bool:
    """The ``raw`` flag only needs to be present, its value is ignored."""
    return "raw" in query_params or "raw" in payload


def resolve_params(
    query_params: Mapping[str, Any],
    payload: Mapping[str, Any] | None = None,
) -> ExecutionParams:
    """Merge query string and payload into ``ExecutionParams``.

    Query string values take precedence over payload values. A missing query
    is not an error here; the orchestrator decides based on the explorer.

    Raises:
        HttpQueryError: ``variables`` is a string that is not valid JSON, or
            ``query`` is present but not a string
    """
    payload = payload or {}

    query = _first_present(query_params, payload, "query")
    if query is not None and not isinstance(query, str):
        raise HttpQueryError(ErrorKind.MISSING_QUERY, "Must provide query string.")

    variables = _first_present(query_params, payload, "variables")
    if isinstance(variables, str):
        try:
            variables = json.loads(variables)
        except ValueError as e:
            raise HttpQueryError(ErrorKind.INVALID_VARIABLES, "Variables are invalid JSON.") from e

    operation_name = _first_present(query_params, payload, "operationName")
    # An empty operationName means "not specified"
    if operation_name == "":
        operation_name = None

    return ExecutionParams(
        query=query,
        variables=variables,
        operation_name=operation_name,
        raw=is_raw_request(query_params, payload),
    )
