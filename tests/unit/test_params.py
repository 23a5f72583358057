"""Tests for payload normalisation and parameter resolution."""

from __future__ import annotations

import pytest

from gqlroute import ErrorKind, ExecutionParams, HttpQueryError
from gqlroute.params import media_type, normalize_payload, read_body, resolve_params


class _StreamingRequest:
    """Minimal request exposing Starlette's stream() interface."""

    def __init__(self, *chunks: bytes) -> None:
        self._chunks = chunks

    async def stream(self):
        for chunk in self._chunks:
            yield chunk


class TestReadBody:
    @pytest.mark.asyncio
    async def test_concatenates_all_chunks(self) -> None:
        request = _StreamingRequest(b'{"query":', b' "{ hello }"', b"}")
        assert await read_body(request) == b'{"query": "{ hello }"}'

    @pytest.mark.asyncio
    async def test_empty_stream(self) -> None:
        assert await read_body(_StreamingRequest()) == b""


class TestMediaType:
    def test_strips_parameters(self) -> None:
        assert media_type("Application/GraphQL; charset=utf-8") == "application/graphql"

    def test_missing(self) -> None:
        assert media_type(None) == ""


class TestNormalizePayload:
    def test_json_body(self) -> None:
        payload = normalize_payload(b'{"query": "{ hello }"}', "application/json")
        assert payload == {"query": "{ hello }"}

    def test_graphql_body_becomes_query(self) -> None:
        payload = normalize_payload(b"{ hello }", "application/graphql; charset=utf-8")
        assert payload == {"query": "{ hello }"}

    def test_absent_body_is_empty_payload(self) -> None:
        assert normalize_payload(None, None) == {}
        assert normalize_payload(b"", "application/json") == {}

    def test_buffered_mapping_passes_through(self) -> None:
        assert normalize_payload({"query": "{ hello }"}, None) == {"query": "{ hello }"}

    def test_missing_content_type_decodes_json(self) -> None:
        assert normalize_payload('{"operationName": "A"}', None) == {"operationName": "A"}

    def test_invalid_json(self) -> None:
        with pytest.raises(HttpQueryError) as exc_info:
            normalize_payload(b"{not json", "application/json")
        assert exc_info.value.kind is ErrorKind.INVALID_BODY
        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "POST body sent invalid JSON."

    def test_json_array_rejected(self) -> None:
        with pytest.raises(HttpQueryError) as exc_info:
            normalize_payload(b'[{"query": "{ hello }"}]', "application/json")
        assert exc_info.value.status_code == 400


class TestResolveParams:
    def test_query_string_only(self) -> None:
        params = resolve_params({"query": "{ hello }", "operationName": "Op"}, {})
        assert params == ExecutionParams(query="{ hello }", operation_name="Op")

    def test_payload_only(self) -> None:
        params = resolve_params({}, {"query": "{ hello }", "variables": {"who": "Dolly"}})
        assert params.query == "{ hello }"
        assert params.variables == {"who": "Dolly"}

    def test_query_string_takes_precedence(self) -> None:
        params = resolve_params(
            {"query": "{ fromQueryString }"},
            {"query": "{ fromBody }", "operationName": "Body"},
        )
        assert params.query == "{ fromQueryString }"
        assert params.operation_name == "Body"

    def test_variables_string_is_decoded(self) -> None:
        params = resolve_params({"variables": '{"who": "Dolly"}'}, {})
        assert params.variables == {"who": "Dolly"}

    def test_invalid_variables_json(self) -> None:
        with pytest.raises(HttpQueryError) as exc_info:
            resolve_params({"query": "{ hello }", "variables": "who:You"}, {})
        assert exc_info.value.kind is ErrorKind.INVALID_VARIABLES
        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Variables are invalid JSON."

    def test_missing_query_is_not_an_error(self) -> None:
        assert resolve_params({}, {}).query is None

    def test_non_string_query(self) -> None:
        with pytest.raises(HttpQueryError) as exc_info:
            resolve_params({}, {"query": 42})
        assert exc_info.value.status_code == 400

    def test_raw_flag_from_either_source(self) -> None:
        assert resolve_params({"raw": ""}, {}).raw is True
        assert resolve_params({}, {"raw": True}).raw is True
        assert resolve_params({}, {}).raw is False

    def test_empty_operation_name(self) -> None:
        assert resolve_params({"operationName": ""}, {}).operation_name is None
