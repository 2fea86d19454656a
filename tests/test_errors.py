"""Tests for wren.errors: the exception hierarchy."""

import pytest

from wren.errors import (
    ConfigurationError,
    HandlerFailure,
    HTTPError,
    InvalidDeclarationError,
    InvalidPatternError,
    NoRouteMatchedError,
    UnsupportedMediaType,
    WrenError,
)


@pytest.mark.parametrize(
    "exc_type",
    [
        ConfigurationError,
        InvalidPatternError,
        InvalidDeclarationError,
        HTTPError,
        NoRouteMatchedError,
        UnsupportedMediaType,
        HandlerFailure,
    ],
)
def test_everything_is_a_wren_error(exc_type: type) -> None:
    assert issubclass(exc_type, WrenError)


def test_registration_errors_are_configuration_errors() -> None:
    assert issubclass(InvalidPatternError, ConfigurationError)
    assert issubclass(InvalidDeclarationError, ConfigurationError)


class TestInvalidPatternError:
    def test_message(self) -> None:
        exc = InvalidPatternError("users", "must start with '/'")
        assert exc.pattern == "users"
        assert exc.reason == "must start with '/'"
        assert str(exc) == "Invalid path pattern 'users': must start with '/'"


class TestInvalidDeclarationError:
    def test_default_reason(self) -> None:
        exc = InvalidDeclarationError("GET")
        assert exc.declaration == "GET"
        assert "expected 'METHOD /path'" in str(exc)

    def test_custom_reason(self) -> None:
        assert str(InvalidDeclarationError(" /x", "method is empty")).endswith("method is empty")


class TestHTTPError:
    def test_fields(self) -> None:
        exc = HTTPError(409, "conflict", (("X-Reason", "dup"),))
        assert exc.status == 409
        assert exc.detail == "conflict"
        assert exc.headers == (("X-Reason", "dup"),)
        assert str(exc) == "409: conflict"

    def test_str_without_detail(self) -> None:
        assert str(HTTPError(503)) == "503"

    def test_is_raisable(self) -> None:
        with pytest.raises(HTTPError) as exc_info:
            raise HTTPError(400, "bad")
        assert exc_info.value.status == 400


class TestSubclasses:
    def test_no_route_matched(self) -> None:
        exc = NoRouteMatchedError()
        assert exc.status == 404
        assert exc.detail == "404 page not found"

    def test_unsupported_media_type(self) -> None:
        exc = UnsupportedMediaType("text/csv")
        assert exc.status == 415
        assert exc.detail == "unsupported content type: text/csv"

    def test_handler_failure_keeps_cause_message(self) -> None:
        cause = ValueError("no such user")
        exc = HandlerFailure("GET", "/users/1", cause)
        assert exc.cause is cause
        assert (exc.method, exc.path) == ("GET", "/users/1")
        assert str(exc) == "no such user"
