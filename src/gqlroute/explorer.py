"""
GraphiQL explorer page.

Renders ``templates/graphiql.html`` with the request's query, variables,
operation name and (when the query was executed) its result, so the
explorer opens pre-filled and can replay the request from the browser.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

TEMPLATES_DIR = Path(__file__).parent / "templates"

GRAPHIQL_VERSION = "3.0.10"
REACT_VERSION = "18.2.0"


@lru_cache(maxsize=1)
def get_environment() -> Environment:
    """Jinja2 environment for the explorer templates."""
    return Environment(
        loader=FileSystemLoader(TEMPLATES_DIR),
        autoescape=select_autoescape(["html"]),
    )


def _to_editor_text(value: Any) -> str | None:
    """GraphiQL editors take text; structured values are shown as indented JSON."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value, indent=2, ensure_ascii=False)


def render_graphiql(
    query: str | None = None,
    variables: Any = None,
    operation_name: str | None = None,
    result: dict[str, Any] | None = None,
    title: str = "GraphiQL",
) -> str:
    """Render the GraphiQL page.

    Args:
        query: Query text to pre-fill
        variables: Variables to pre-fill (mapping or JSON text)
        operation_name: Operation to select
        result: Formatted execution result to show in the response pane

    Returns:
        Complete HTML document
    """
    template = get_environment().get_template("graphiql.html")
    return template.render(
        title=title,
        graphiql_version=GRAPHIQL_VERSION,
        react_version=REACT_VERSION,
        query=query,
        variables=_to_editor_text(variables),
        operation_name=operation_name,
        result=_to_editor_text(result),
    )
