"""Shared pytest fixtures for gqlroute tests."""

from __future__ import annotations

import logging
from typing import Any

import pytest
from graphql import (
    GraphQLArgument,
    GraphQLField,
    GraphQLObjectType,
    GraphQLSchema,
    GraphQLString,
)

from gqlroute import GraphQLOptions


def _resolve_thrower(_obj: Any, _info: Any) -> str:
    raise ValueError("Throws!")


def _resolve_context(_obj: Any, info: Any) -> str | None:
    context = info.context
    return context.get("name") if isinstance(context, dict) else None


def _resolve_root(obj: Any, _info: Any) -> str | None:
    return obj.get("name") if isinstance(obj, dict) else None


async def _resolve_async_hello(_obj: Any, _info: Any) -> str:
    return "Hello async world!"


QueryRootType = GraphQLObjectType(
    "QueryRoot",
    lambda: {
        "hello": GraphQLField(GraphQLString, resolve=lambda _obj, _info: "Hello world!"),
        "test": GraphQLField(
            GraphQLString,
            args={"who": GraphQLArgument(GraphQLString)},
            resolve=lambda _obj, _info, who=None: "Hello " + (who or "World"),
        ),
        "thrower": GraphQLField(GraphQLString, resolve=_resolve_thrower),
        "context": GraphQLField(GraphQLString, resolve=_resolve_context),
        "rootValue": GraphQLField(GraphQLString, resolve=_resolve_root),
        "asyncHello": GraphQLField(GraphQLString, resolve=_resolve_async_hello),
    },
)

MutationRootType = GraphQLObjectType(
    "MutationRoot",
    {
        "writeTest": GraphQLField(QueryRootType, resolve=lambda _obj, _info: {}),
    },
)

TEST_SCHEMA = GraphQLSchema(query=QueryRootType, mutation=MutationRootType)


@pytest.fixture
def schema() -> GraphQLSchema:
    """Schema with hello/test/thrower queries and a writeTest mutation."""
    return TEST_SCHEMA


@pytest.fixture
def options(schema: GraphQLSchema) -> GraphQLOptions:
    """Plain options: no GraphiQL, compact JSON."""
    return GraphQLOptions(schema=schema)


@pytest.fixture
def graphiql_options(schema: GraphQLSchema) -> GraphQLOptions:
    """Options with the GraphiQL explorer enabled."""
    return GraphQLOptions(schema=schema, graphiql=True)


@pytest.fixture(autouse=True)
def _restore_gqlroute_logger():
    """Undo setup_logging() calls made by a test."""
    logger = logging.getLogger("gqlroute")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
