"""Tests for the Growatt portal client."""

import json
from typing import Any

import requests

USERNAME = "test_username"
PASSWORD = "test_password"


def make_response(
    json_data: Any = None,
    status_code: int = 200,
    *,
    body: str | None = None,
) -> requests.Response:
    """Build a real requests.Response carrying a JSON (or raw) body."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = "Test"
    response.url = "https://server.growatt.com/test"
    response.encoding = "utf-8"
    if body is None:
        body = json.dumps(json_data)
    response._content = body.encode("utf-8")  # noqa: SLF001
    return response


def login_ok(token: str | None = None) -> requests.Response:
    """Return the portal's answer to a successful login."""
    payload: dict[str, Any] = {"result": 1, "msg": ""}
    if token is not None:
        payload["token"] = token
    return make_response(payload)
