"""
Classify Render API responses into errors.

Every client call returns a response object exposing ``http_response`` (the
httpx.Response, or None) and ``body`` (raw bytes). The normalizer reads those
attributes structurally, so it works on any object of that shape without a
shared base class.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from render_mcp.errors import APIError, ForbiddenError, UnauthorizedError

_MISSING = object()


@dataclass
class ErrorWithCode:
    message: Optional[str]
    code: int = 0


def _decode_body(body: bytes | str) -> str:
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    return body


def first_error(response: Any) -> Optional[ErrorWithCode]:
    """Extract (status, message) from a failed response, or None on success."""
    if isinstance(response, httpx.Response):
        http_response, body = response, response.content
    else:
        http_response = getattr(response, "http_response", _MISSING)
        if http_response is _MISSING:
            return None
        body = getattr(response, "body", None)

    status = getattr(http_response, "status_code", None)
    if not isinstance(status, int):
        return ErrorWithCode(message="could not read HTTP response")

    if status < 400:
        return None

    if not isinstance(body, (bytes, str)):
        return ErrorWithCode(message="could not read response body")

    text = _decode_body(body)
    try:
        payload = json.loads(text)
    except (ValueError, RecursionError):
        return ErrorWithCode(message=text, code=status)

    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        return ErrorWithCode(message=text, code=status)

    # A present but non-string message does not fit the error shape
    message = payload.get("message")
    if message is not None and not isinstance(message, str):
        return ErrorWithCode(message=text, code=status)
    return ErrorWithCode(message=message, code=status)


def error_from_response(response: Any) -> Optional[APIError]:
    """
    Classify a response.

    Returns:
        UnauthorizedError for 401, ForbiddenError for 403, APIError carrying
        the status and message for other failures, None on success. Never
        raises on malformed bodies.
    """
    err = first_error(response)
    if err is None:
        return None

    if err.code == 401:
        return UnauthorizedError()
    if err.code == 403:
        return ForbiddenError()

    if err.message:
        return APIError(f"received response code {err.code}: {err.message}", status_code=err.code)

    return APIError("unknown error", status_code=err.code)


def raise_for_response(response: Any) -> None:
    """Raise the classified error, if any."""
    err = error_from_response(response)
    if err is not None:
        raise err
