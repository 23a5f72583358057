"""
GraphQL request execution.

``execute_request`` drives one request through the stages below and either
returns an outcome or raises ``HttpQueryError``:

1. no query     -> defer to GraphiQL, or 400
2. parse        -> 400 on syntax error
3. validate     -> 400 with every validation error
4. method check -> GET may only run queries (defer to GraphiQL, or 405)
5. execute      -> 400 if the execution context cannot be built

Field errors raised by resolvers are not failures; graphql-core collects them
into the result and they are reported alongside partial data.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from typing import Any

from graphql import (
    ExecutionContext,
    ExecutionResult,
    GraphQLError,
    GraphQLSyntaxError,
    OperationType,
    Source,
    get_operation_ast,
    parse,
    validate,
)

from gqlroute.errors import ErrorFormatter, ErrorKind, HttpQueryError, format_errors
from gqlroute.options import GraphQLOptions
from gqlroute.params import ExecutionParams

logger = logging.getLogger(__name__)

SOURCE_NAME = "GraphQL request"


@dataclass(frozen=True)
class Deferred:
    """Nothing was executed; the GraphiQL page takes over."""


@dataclass(frozen=True)
class Success:
    """Execution ran; ``errors`` holds field errors reported by the engine."""

    data: dict[str, Any] | None
    errors: list[GraphQLError] = field(default_factory=list)
    extensions: dict[str, Any] | None = None

    @classmethod
    def from_result(cls, result: ExecutionResult) -> Success:
        return cls(
            data=result.data,
            errors=list(result.errors or []),
            extensions=getattr(result, "extensions", None),
        )

    def to_dict(self, formatter: ErrorFormatter) -> dict[str, Any]:
        """Response body; ``errors`` and ``extensions`` only when present."""
        body: dict[str, Any] = {"data": self.data}
        if self.errors:
            body["errors"] = format_errors(self.errors, formatter)
        if self.extensions:
            body["extensions"] = self.extensions
        return body


@dataclass(frozen=True)
class Failure:
    """A request that ended early, already formatted for the response."""

    status_code: int
    errors: list[Any]
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_error(cls, error: HttpQueryError, formatter: ErrorFormatter) -> Failure:
        return cls(
            status_code=error.status_code,
            errors=format_errors(error.errors, formatter),
            headers=dict(error.headers),
        )


ExecutionOutcome = Deferred | Success


async def _run_operation(context: ExecutionContext, root_value: Any) -> ExecutionResult:
    """Execute the operation of an already built context.

    A ``GraphQLError`` escaping the operation (a null in a non-null root
    field) nulls the whole result, as ``graphql.execute`` does.
    """
    try:
        data = context.execute_operation(context.operation, root_value)
        if inspect.isawaitable(data):
            data = await data
    except GraphQLError as error:
        context.errors.append(error)
        data = None
    return context.build_response(data, context.errors)


async def execute_request(
    params: ExecutionParams,
    options: GraphQLOptions,
    method: str,
    show_graphiql: bool = False,
) -> ExecutionOutcome:
    """Parse, validate and execute the request described by *params*.

    Args:
        params: Canonical query/variables/operation name
        options: Resolved options for this request
        method: HTTP method of the request (GET runs queries only)
        show_graphiql: Whether the GraphiQL page will be served

    Returns:
        ``Deferred`` when GraphiQL should handle the request without
        execution, otherwise ``Success``

    Raises:
        HttpQueryError: For every failure that ends the request early
    """
    if not params.query:
        if show_graphiql:
            logger.debug("No query given, deferring to GraphiQL")
            return Deferred()
        raise HttpQueryError(ErrorKind.MISSING_QUERY, "Must provide query string.")

    schema = options.graphql_schema

    try:
        document = parse(Source(params.query, SOURCE_NAME))
    except GraphQLSyntaxError as e:
        raise HttpQueryError(ErrorKind.SYNTAX, "Syntax error", errors=[e]) from e

    validation_errors = validate(schema, document, options.effective_validation_rules)
    if validation_errors:
        logger.debug(
            "Query failed validation",
            extra={"context": {"errors": len(validation_errors)}},
        )
        raise HttpQueryError(ErrorKind.VALIDATION, "Validation error", errors=validation_errors)

    if method.upper() == "GET":
        operation = get_operation_ast(document, params.operation_name)
        if operation is not None and operation.operation != OperationType.QUERY:
            if show_graphiql:
                # Let the user run it from GraphiQL, which POSTs
                return Deferred()
            kind = operation.operation.value
            raise HttpQueryError(
                ErrorKind.METHOD_NOT_ALLOWED,
                f"Can only perform a {kind} operation from a POST request.",
                headers={"Allow": "POST"},
            )

    try:
        context = ExecutionContext.build(
            schema=schema,
            document=document,
            root_value=options.root_value,
            context_value=options.context,
            raw_variable_values=params.variables,
            operation_name=params.operation_name,
        )
        if isinstance(context, list):
            raise HttpQueryError(ErrorKind.EXECUTION_CONTEXT, "Context error", errors=context)

        result = await _run_operation(context, options.root_value)
    except HttpQueryError:
        raise
    except Exception as e:
        raise HttpQueryError(ErrorKind.EXECUTION_CONTEXT, "Context error", errors=[e]) from e

    return Success.from_result(result)
