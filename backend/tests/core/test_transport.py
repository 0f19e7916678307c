"""Unit tests for core.transport.HttpTransport (httpx.MockTransport, no network)."""

import asyncio
import json
from unittest.mock import patch

import httpx
import pytest

from pgtag.core.config import settings
from pgtag.core.connection import parse_connection_string
from pgtag.core.errors import TransportError
from pgtag.core.transport import (
    ARRAY_MODE_HEADER,
    CONNECTION_STRING_HEADER,
    RAW_TEXT_OUTPUT_HEADER,
    HttpTransport,
)

_URL = "postgres://u:p@db.example.com/app"


def _make(handler) -> HttpTransport:
    info = parse_connection_string(_URL)
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpTransport(info, client=client)


def _run(coro):
    return asyncio.run(coro)


def test_send_posts_json_with_headers() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"command": "SELECT", "rowCount": 0, "rows": [], "fields": []})

    transport = _make(handler)
    out = _run(transport.send({"query": "SELECT 1", "params": []}))

    assert out["command"] == "SELECT"
    req = seen[0]
    assert req.method == "POST"
    assert str(req.url) == "https://db.example.com/sql"
    assert req.headers[CONNECTION_STRING_HEADER] == _URL
    assert req.headers[RAW_TEXT_OUTPUT_HEADER] == "true"
    assert req.headers[ARRAY_MODE_HEADER] == "true"
    assert json.loads(req.content) == {"query": "SELECT 1", "params": []}


def test_endpoint_follows_settings() -> None:
    info = parse_connection_string(_URL)
    with (
        patch.object(settings, "HTTP_SCHEME", "http"),
        patch.object(settings, "SQL_ENDPOINT_PATH", "/v1/sql"),
    ):
        assert HttpTransport(info).endpoint == "http://db.example.com/v1/sql"


def test_non_success_raises_with_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, text='syntax error at or near "SELEC"')

    transport = _make(handler)
    with pytest.raises(TransportError) as exc:
        _run(transport.send({"query": "SELEC 1", "params": []}))
    assert exc.value.body == 'syntax error at or near "SELEC"'
    assert exc.value.status_code == 400
    assert str(exc.value) == 'syntax error at or near "SELEC"'


def test_invalid_json_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="not json")

    transport = _make(handler)
    with pytest.raises(TransportError, match="invalid JSON"):
        _run(transport.send({"query": "SELECT 1", "params": []}))


def test_close_keeps_injected_client_open() -> None:
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json={})))
    transport = HttpTransport(parse_connection_string(_URL), client=client)
    _run(transport.close())
    assert not client.is_closed


def test_close_without_client_is_noop() -> None:
    transport = HttpTransport(parse_connection_string(_URL))
    _run(transport.close())


def test_client_created_after_close_is_owned() -> None:
    injected = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json={})))
    transport = HttpTransport(parse_connection_string(_URL), client=injected)

    async def run():
        await transport.close()
        created = transport._get_client()
        assert created is not injected
        await transport.close()
        return created

    created = _run(run())
    assert created.is_closed
    assert not injected.is_closed
