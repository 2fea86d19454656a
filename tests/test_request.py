"""Tests for the immutable Request."""

import dataclasses

import pytest

from wren.errors import HTTPError
from wren.http.request import Request


def _receive_chunks(*chunks: bytes):
    messages = [
        {"type": "http.request", "body": chunk, "more_body": i < len(chunks) - 1}
        for i, chunk in enumerate(chunks)
    ]
    calls = iter(messages)

    async def receive() -> dict:
        return next(calls)

    return receive


def _scope(**overrides) -> dict:
    scope = {
        "type": "http",
        "method": "post",
        "path": "/users/1",
        "headers": [(b"content-type", b"application/json"), (b"content-length", b"12")],
        "query_string": b"a=1",
        "http_version": "2",
        "server": ("example.com", 443),
        "client": ("10.1.2.3", 5555),
    }
    scope.update(overrides)
    return scope


class TestFromAsgi:
    def test_metadata(self) -> None:
        request = Request.from_asgi(_scope(), _receive_chunks(b""))
        assert request.method == "POST"
        assert request.path == "/users/1"
        assert request.http_version == "2"
        assert request.server == ("example.com", 443)
        assert request.client == ("10.1.2.3", 5555)
        assert request.remote_addr == "10.1.2.3"
        assert request.query.get("a") == "1"

    def test_minimal_scope(self) -> None:
        request = Request.from_asgi({"method": "GET", "path": "/"}, _receive_chunks(b""))
        assert request.http_version == "1.1"
        assert request.client is None
        assert request.remote_addr is None
        assert len(request.headers) == 0

    def test_is_frozen(self) -> None:
        request = Request.from_asgi(_scope(), _receive_chunks(b""))
        with pytest.raises(dataclasses.FrozenInstanceError):
            request.path = "/other"  # type: ignore[misc]


class TestHeaderProperties:
    def test_content_type_and_length(self) -> None:
        request = Request.from_asgi(_scope(), _receive_chunks(b""))
        assert request.content_type == "application/json"
        assert request.content_length == 12

    def test_invalid_content_length(self) -> None:
        scope = _scope(headers=[(b"content-length", b"lots")])
        assert Request.from_asgi(scope, _receive_chunks(b"")).content_length is None

    def test_missing_content_headers(self) -> None:
        request = Request.from_asgi(_scope(headers=[]), _receive_chunks(b""))
        assert request.content_type is None
        assert request.content_length is None


class TestBody:
    @pytest.mark.anyio
    async def test_joins_chunks(self) -> None:
        request = Request.from_asgi(_scope(), _receive_chunks(b'{"a":', b" 1}"))
        assert await request.body() == b'{"a": 1}'

    @pytest.mark.anyio
    async def test_body_read_once(self) -> None:
        request = Request.from_asgi(_scope(), _receive_chunks(b"once"))
        assert await request.body() == b"once"
        # a second receive() call would fail
        assert await request.body() == b"once"

    @pytest.mark.anyio
    async def test_json(self) -> None:
        request = Request.from_asgi(_scope(), _receive_chunks(b'{"a": [1]}'))
        assert await request.json() == {"a": [1]}

    @pytest.mark.anyio
    async def test_form_first_value_wins(self) -> None:
        request = Request.from_asgi(_scope(), _receive_chunks(b"x=1&x=2&y=%20"))
        assert await request.form() == {"x": "1", "y": " "}

    @pytest.mark.anyio
    async def test_stream(self) -> None:
        request = Request.from_asgi(_scope(), _receive_chunks(b"a", b"", b"b"))
        assert [chunk async for chunk in request.stream()] == [b"a", b"b"]

    @pytest.mark.anyio
    async def test_max_size_allows_exact_fit(self) -> None:
        request = Request.from_asgi(_scope(), _receive_chunks(b"abc", b"de"))
        assert await request.body(max_size=5) == b"abcde"

    @pytest.mark.anyio
    async def test_max_size_exceeded_mid_stream(self) -> None:
        # the third chunk is never requested
        request = Request.from_asgi(_scope(), _receive_chunks(b"abc", b"def", b"ghi"))
        with pytest.raises(HTTPError) as exc_info:
            await request.body(max_size=5)
        assert exc_info.value.status == 413

    @pytest.mark.anyio
    async def test_max_size_checked_against_cached_body(self) -> None:
        request = Request.from_asgi(_scope(), _receive_chunks(b"abcdef"))
        assert await request.body() == b"abcdef"
        with pytest.raises(HTTPError):
            await request.body(max_size=3)

    @pytest.mark.anyio
    async def test_form_with_invalid_utf8(self) -> None:
        request = Request.from_asgi(_scope(), _receive_chunks(b"x=\xff"))
        with pytest.raises(HTTPError) as exc_info:
            await request.form()
        assert exc_info.value.status == 400
