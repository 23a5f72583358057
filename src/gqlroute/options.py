"""
Per-request GraphQL options.

Options can be given to the plugin in three ways:

- a ``GraphQLOptions`` instance
- a mapping with the same keys (validated against ``GraphQLOptions``)
- a callable ``provider(request)`` returning either of the above, possibly
  as an awaitable, e.g. to build a per-user context after authentication

Whatever the source, ``resolve_options`` produces one validated
``GraphQLOptions`` per request. Invalid options are a server configuration
problem (HTTP 500), never a client error.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Union

from graphql import ASTValidationRule, GraphQLError, GraphQLSchema, specified_rules
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from strawberry import Schema as StrawberrySchema

from gqlroute.errors import ErrorFormatter, ErrorKind, HttpQueryError, format_error

logger = logging.getLogger(__name__)


def unwrap_schema(schema: Any) -> Any:
    """Return the graphql-core schema behind a Strawberry schema.

    Anything that is not a Strawberry schema is returned unchanged.
    """
    if isinstance(schema, StrawberrySchema):
        return schema._schema
    return schema


class GraphQLOptions(BaseModel):
    """
    Options used to execute one GraphQL request.

    Attributes:
        schema: The schema to execute against (graphql-core or Strawberry)
        context: Value passed to resolvers as ``info.context``
        root_value: Value passed to top-level resolvers as the parent object
        pretty: Indent JSON responses with two spaces
        graphiql: Serve the GraphiQL explorer to clients that prefer HTML
        format_error: Replaces the default error formatter
        validation_rules: Extra validation rules run after the specified rules

    Example:
        options = GraphQLOptions(schema=schema, graphiql=True, pretty=True)
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        extra="forbid",
        frozen=True,
        populate_by_name=True,
    )

    graphql_schema: GraphQLSchema = Field(alias="schema")
    context: Any = None
    root_value: Any = None
    pretty: bool = False
    graphiql: bool = False
    format_error: Callable[[BaseException], Any] | None = None
    validation_rules: list[type[ASTValidationRule]] = Field(default_factory=list)

    @field_validator("graphql_schema", mode="before")
    @classmethod
    def _unwrap_strawberry(cls, value: Any) -> Any:
        return unwrap_schema(value)

    @property
    def effective_validation_rules(self) -> tuple[type[ASTValidationRule], ...]:
        """Specified rules followed by the extra rules, as a new tuple."""
        return (*specified_rules, *self.validation_rules)

    @property
    def error_formatter(self) -> ErrorFormatter:
        return self.format_error or format_error


OptionsValue = Union[GraphQLOptions, Mapping[str, Any]]
OptionsProvider = Union[
    OptionsValue,
    Callable[[Any], Union[OptionsValue, Awaitable[OptionsValue]]],
]


def _describe_validation_error(exc: ValidationError) -> list[str]:
    messages: list[str] = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or "options"
        messages.append(f"Invalid GraphQL option '{loc}': {err.get('msg', 'invalid value')}")
    return messages


def validate_options(value: Any) -> GraphQLOptions:
    """Validate an options value.

    Raises:
        HttpQueryError: The value is not a valid options object (HTTP 500)
    """
    if isinstance(value, GraphQLOptions):
        return value

    if isinstance(value, Mapping):
        try:
            return GraphQLOptions.model_validate(dict(value))
        except ValidationError as e:
            messages = _describe_validation_error(e)
            logger.warning(
                "GraphQL options failed validation",
                extra={"context": {"errors": messages}},
            )
            raise HttpQueryError(
                ErrorKind.CONFIGURATION,
                "Invalid GraphQL options.",
                errors=[GraphQLError(message) for message in messages],
            ) from e

    raise HttpQueryError(
        ErrorKind.CONFIGURATION,
        f"GraphQL options must be GraphQLOptions or a mapping, got {type(value).__name__}.",
    )


async def resolve_options(provider: OptionsProvider, request: Any) -> GraphQLOptions:
    """Resolve the options for *request* from a static value or a provider."""
    value = provider(request) if callable(provider) else provider
    if inspect.isawaitable(value):
        value = await value
    return validate_options(value)
