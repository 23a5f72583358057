"""
Error taxonomy for the GraphQL HTTP endpoint.

Every failure that ends a request early is raised as an ``HttpQueryError``
at the site where it is detected and interpreted only once, at the request
boundary in ``gqlroute.handler``. The error carries:

- kind: which failure occurred (see ``ErrorKind``)
- status_code: the HTTP status derived from the kind
- errors: the non-empty list of underlying errors handed to the formatter
- headers: extra response headers (e.g. ``Allow`` for 405)

Field-level execution errors are NOT part of this taxonomy; graphql-core
returns them inside a normal result and they are reported with HTTP 200.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from enum import Enum
from typing import Any

from graphql import GraphQLError

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."

ErrorFormatter = Callable[[BaseException], Any]


class ErrorKind(Enum):
    """Failure categories and the HTTP status each one maps to."""

    MISSING_QUERY = ("missing_query", 400)
    INVALID_BODY = ("invalid_body", 400)
    INVALID_VARIABLES = ("invalid_variables", 400)
    SYNTAX = ("syntax", 400)
    VALIDATION = ("validation", 400)
    EXECUTION_CONTEXT = ("execution_context", 400)
    METHOD_NOT_ALLOWED = ("method_not_allowed", 405)
    CONFIGURATION = ("configuration", 500)
    INTERNAL = ("internal", 500)

    def __init__(self, code: str, status_code: int) -> None:
        self.code = code
        self.status_code = status_code


class HttpQueryError(Exception):
    """A request-ending failure with an HTTP status and its underlying errors.

    When ``errors`` is omitted the message itself becomes the single error,
    wrapped in a ``GraphQLError`` so formatters always see one error type.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        errors: Sequence[BaseException] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.errors: list[BaseException] = list(errors) if errors else [GraphQLError(message)]
        self.headers: dict[str, str] = dict(headers or {})

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    def __repr__(self) -> str:
        return f"HttpQueryError({self.kind.code!r}, {self.message!r}, errors={len(self.errors)})"


class GraphQLConfigError(ValueError):
    """Raised at mount time when plugin or static options are invalid."""


def format_error(error: BaseException) -> dict[str, Any]:
    """Default error formatter.

    GraphQL errors use their standard ``formatted`` shape
    (``message``, ``locations``, ``path``, ``extensions``). Any other exception
    is reduced to its message so tracebacks never reach the client.
    """
    if isinstance(error, GraphQLError):
        formatted = dict(error.formatted)
        if not formatted.get("message"):
            formatted["message"] = UNKNOWN_ERROR_MESSAGE
        return formatted

    message = getattr(error, "message", None) or str(error)
    if not isinstance(message, str) or not message:
        message = UNKNOWN_ERROR_MESSAGE
    return {"message": message}


def format_errors(errors: Sequence[BaseException], formatter: ErrorFormatter) -> list[Any]:
    """Apply *formatter* to every error in order."""
    return [formatter(error) for error in errors]
