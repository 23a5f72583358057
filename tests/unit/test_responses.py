"""Tests for response composition."""

from __future__ import annotations

import json

import pytest
from graphql import GraphQLError

from gqlroute import Deferred, ExecutionParams, Failure, Success, format_error
from gqlroute.responses import compose_response, dump_json, error_response


class TestDumpJson:
    def test_compact(self) -> None:
        assert dump_json({"data": {"hello": "Hello world!"}}) == (
            '{"data":{"hello":"Hello world!"}}'
        )

    def test_pretty(self) -> None:
        assert dump_json({"data": {"hello": "Hello world!"}}, pretty=True) == (
            '{\n  "data": {\n    "hello": "Hello world!"\n  }\n}'
        )

    def test_unicode_kept(self) -> None:
        assert dump_json({"data": "héllo"}) == '{"data":"héllo"}'


class TestComposeResponse:
    params = ExecutionParams(query="{ hello }")

    def test_success_json(self) -> None:
        response = compose_response(self.params, Success(data={"hello": "x"}), format_error)
        assert response.status_code == 200
        assert response.media_type == "application/json"
        assert json.loads(response.body) == {"data": {"hello": "x"}}

    def test_success_with_field_errors(self) -> None:
        outcome = Success(data={"hello": None}, errors=[GraphQLError("Throws!")])
        response = compose_response(self.params, outcome, format_error)
        assert response.status_code == 200
        assert json.loads(response.body)["errors"] == [{"message": "Throws!"}]

    def test_custom_formatter_applied(self) -> None:
        outcome = Success(data=None, errors=[GraphQLError("Throws!")])
        response = compose_response(
            self.params, outcome, lambda e: {"msg": e.message.upper()}
        )
        assert json.loads(response.body)["errors"] == [{"msg": "THROWS!"}]

    def test_pretty(self) -> None:
        response = compose_response(
            self.params, Success(data={"hello": "x"}), format_error, pretty=True
        )
        assert response.body.decode() == '{\n  "data": {\n    "hello": "x"\n  }\n}'

    def test_graphiql_for_deferred(self) -> None:
        response = compose_response(self.params, Deferred(), format_error, show_graphiql=True)
        assert response.status_code == 200
        assert response.media_type == "text/html"
        assert b"graphiql" in response.body

    def test_graphiql_includes_result(self) -> None:
        response = compose_response(
            self.params,
            Success(data={"hello": "Hello world!"}),
            format_error,
            show_graphiql=True,
        )
        assert b"Hello world!" in response.body

    def test_deferred_without_graphiql_is_a_bug(self) -> None:
        with pytest.raises(TypeError):
            compose_response(self.params, Deferred(), format_error)


class TestErrorResponse:
    def test_envelope_and_headers(self) -> None:
        failure = Failure(
            status_code=405,
            errors=[{"message": "GraphQL only supports GET and POST requests."}],
            headers={"Allow": "GET, POST"},
        )
        response = error_response(failure)
        assert response.status_code == 405
        assert response.headers["allow"] == "GET, POST"
        assert json.loads(response.body) == {
            "errors": [{"message": "GraphQL only supports GET and POST requests."}]
        }
