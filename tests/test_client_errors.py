"""
Tests for render_mcp/client/errors.py - response error classification.
"""

from dataclasses import dataclass
from typing import Any

import httpx
import pytest

from render_mcp.client.errors import error_from_response, first_error, raise_for_response
from render_mcp.errors import APIError, ForbiddenError, UnauthorizedError


@dataclass
class FakeResponse:
    http_response: Any
    body: Any


def _resp(status, body=b""):
    return FakeResponse(httpx.Response(status), body)


# ============================================================================
# error_from_response
# ============================================================================

class TestErrorFromResponse:

    def test_401_is_unauthorized(self):
        err = error_from_response(_resp(401, b'{"message": "bad key"}'))
        assert isinstance(err, UnauthorizedError)
        assert str(err) == "unauthorized"

    def test_403_is_forbidden(self):
        err = error_from_response(_resp(403, b"nope"))
        assert isinstance(err, ForbiddenError)
        assert err.status_code == 403

    def test_json_message(self):
        err = error_from_response(_resp(400, b'{"message": "bad owner"}'))
        assert type(err) is APIError
        assert str(err) == "received response code 400: bad owner"
        assert err.status_code == 400

    def test_non_json_body_used_as_message(self):
        err = error_from_response(_resp(502, b"Bad Gateway"))
        assert str(err) == "received response code 502: Bad Gateway"
        assert err.status_code == 502

    def test_missing_message_field(self):
        err = error_from_response(_resp(500, b'{"id": "x"}'))
        assert str(err) == "unknown error"
        assert err.status_code == 500

    def test_null_body(self):
        err = error_from_response(_resp(500, b"null"))
        assert str(err) == "unknown error"

    def test_non_string_message_falls_back_to_body(self):
        err = error_from_response(_resp(400, b'{"message": 5}'))
        assert str(err) == 'received response code 400: {"message": 5}'
        assert err.status_code == 400

    def test_null_message_is_unknown(self):
        err = error_from_response(_resp(500, b'{"message": null}'))
        assert str(err) == "unknown error"

    @pytest.mark.parametrize("status", [200, 201, 204, 302, 399])
    def test_success_is_none(self, status):
        assert error_from_response(_resp(status, b'{"message": "fine"}')) is None

    def test_accepts_httpx_response(self):
        err = error_from_response(httpx.Response(404, json={"message": "service not found"}))
        assert str(err) == "received response code 404: service not found"


# ============================================================================
# first_error edge cases
# ============================================================================

class TestFirstError:

    def test_object_without_http_response(self):
        assert first_error(object()) is None

    def test_unreadable_status(self):
        err = first_error(FakeResponse(http_response=None, body=b""))
        assert err.message == "could not read HTTP response"
        assert err.code == 0

    def test_unreadable_body(self):
        err = first_error(FakeResponse(httpx.Response(500), body=None))
        assert err.message == "could not read response body"

    def test_string_body(self):
        err = first_error(FakeResponse(httpx.Response(400), body='{"message": "m"}'))
        assert err.message == "m"
        assert err.code == 400

    def test_never_raises_on_garbage(self):
        err = error_from_response(_resp(500, b"\xff\xfe{not json"))
        assert isinstance(err, APIError)
        assert err.status_code == 500

    def test_deeply_nested_body_uses_raw_text(self):
        body = b"[" * 200000
        err = first_error(_resp(500, body))
        assert err.code == 500
        assert err.message == body.decode()

        api_err = error_from_response(_resp(500, body))
        assert api_err.status_code == 500
        assert str(api_err).startswith("received response code 500: [[[")


class TestRaiseForResponse:

    def test_raises_classified_error(self):
        with pytest.raises(ForbiddenError):
            raise_for_response(_resp(403))

    def test_success_passes(self):
        raise_for_response(_resp(200, b"[]"))
