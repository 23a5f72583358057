"""
gqlroute command line.

    gqlroute serve myapp.schema:schema --port 8000
    gqlroute print-schema myapp.schema:schema
"""

from __future__ import annotations

import importlib
from typing import Any

import typer
from graphql import GraphQLSchema, print_schema
from strawberry import Schema as StrawberrySchema

from gqlroute import __version__
from gqlroute.config import ServerConfig
from gqlroute.errors import GraphQLConfigError
from gqlroute.options import GraphQLOptions, unwrap_schema

app = typer.Typer(
    name="gqlroute",
    help="Serve and inspect GraphQL schemas over HTTP.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"gqlroute version {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """gqlroute: GraphQL over HTTP for FastAPI."""


def load_target(ref: str) -> Any:
    """Import ``package.module:attribute``."""
    module_name, sep, attr = ref.partition(":")
    if not sep or not module_name or not attr:
        raise typer.BadParameter(f"expected 'module:attribute', got {ref!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        typer.echo(f"Error: cannot import module {module_name!r}: {e}", err=True)
        raise typer.Exit(code=1) from e

    target: Any = module
    for part in attr.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            typer.echo(f"Error: {module_name!r} has no attribute {attr!r}", err=True)
            raise typer.Exit(code=1) from e
    return target


@app.command("serve")
def serve_command(
    target: str = typer.Argument(
        ..., help="Schema, GraphQLOptions or options provider as module:attribute"
    ),
    host: str = typer.Option(None, "--host", help="Host to bind to [env: GQLROUTE_HOST]"),
    port: int = typer.Option(None, "--port", "-p", help="Port to bind to [env: GQLROUTE_PORT]"),
    path: str = typer.Option(None, "--path", help="Endpoint path [env: GQLROUTE_PATH]"),
    graphiql: bool | None = typer.Option(
        None, "--graphiql/--no-graphiql", help="Serve the GraphiQL explorer"
    ),
    pretty: bool | None = typer.Option(None, "--pretty/--no-pretty", help="Indent JSON output"),
    log_level: str = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING or ERROR"),
    log_format: str = typer.Option(None, "--log-format", help="console or jsonl"),
) -> None:
    """Serve a GraphQL schema with uvicorn.

    A bare schema is wrapped in GraphQLOptions using --graphiql/--pretty.
    GraphQLOptions, mappings and provider callables are used as given.
    """
    import uvicorn

    from gqlroute.integration import create_graphql_app
    from gqlroute.logging import setup_logging

    config = ServerConfig.from_env()
    host = host or config.host
    port = port or config.port
    path = path or config.path
    graphiql = config.graphiql if graphiql is None else graphiql
    pretty = config.pretty if pretty is None else pretty

    try:
        setup_logging(log_level or config.log_level, log_format or config.log_format)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e

    options = load_target(target)
    if isinstance(options, (GraphQLSchema, StrawberrySchema)):
        options = GraphQLOptions(schema=options, graphiql=graphiql, pretty=pretty)

    try:
        graphql_app = create_graphql_app(options, path=path, title=f"GraphQL API ({target})")
    except GraphQLConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    typer.echo(f"Serving GraphQL at http://{host}:{port}{path}")
    uvicorn.run(graphql_app, host=host, port=port, log_level=(log_level or config.log_level).lower())


@app.command("print-schema")
def print_schema_command(
    target: str = typer.Argument(..., help="Schema or GraphQLOptions as module:attribute"),
) -> None:
    """Print the schema in SDL form."""
    obj = load_target(target)
    if isinstance(obj, GraphQLOptions):
        obj = obj.graphql_schema
    schema = unwrap_schema(obj)
    if not isinstance(schema, GraphQLSchema):
        typer.echo(f"Error: {target} is not a GraphQL schema", err=True)
        raise typer.Exit(code=1)
    typer.echo(print_schema(schema))


def main() -> None:
    """Entry point for the ``gqlroute`` console script."""
    app()
