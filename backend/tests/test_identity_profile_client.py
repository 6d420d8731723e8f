"""
Identity provider client tests.

Focus:
- the bearer token and populate parameter reach the `/api/users/me` call
- a timeout is always passed
- rejected tokens map to PermissionError, other failures to RuntimeError
"""

from __future__ import annotations

import types

import pytest
import requests

from identity_access.profile import ProfileClient


def _response(status_code: int, body=None, *, bad_json: bool = False):
    def _json():
        if bad_json:
            raise ValueError("no json")
        return body

    return types.SimpleNamespace(status_code=status_code, json=_json)


def test_fetch_current_user_sends_token_and_timeout(monkeypatch):
    called = {}

    def fake_get(url, params=None, headers=None, timeout=None):
        called.update(url=url, params=params, headers=headers, timeout=timeout)
        return _response(200, {"id": 1, "role": {"type": "authenticated", "name": "Student"}})

    monkeypatch.setattr("identity_access.profile.http.get", fake_get)

    client = ProfileClient(base_url="http://cms.local/", timeout=4)
    user = client.fetch_current_user("tok-123")

    assert user["role"]["name"] == "Student"
    assert called["url"] == "http://cms.local/api/users/me"
    assert called["params"] == {"populate": "role"}
    assert called["headers"] == {"Authorization": "Bearer tok-123"}
    assert called["timeout"] == 4


def test_fetch_current_user_rejects_blank_token():
    with pytest.raises(ValueError):
        ProfileClient(base_url="http://cms.local").fetch_current_user("  ")


@pytest.mark.parametrize("status", [401, 403])
def test_fetch_current_user_invalid_token(monkeypatch, status):
    monkeypatch.setattr("identity_access.profile.http.get", lambda *a, **k: _response(status, {"error": {}}))
    with pytest.raises(PermissionError):
        ProfileClient(base_url="http://cms.local").fetch_current_user("tok")


@pytest.mark.parametrize(
    "resp",
    [
        _response(500, {"error": {}}),
        _response(200, bad_json=True),
        _response(200, []),
        _response(200, {}),
    ],
)
def test_fetch_current_user_provider_failures(monkeypatch, resp):
    monkeypatch.setattr("identity_access.profile.http.get", lambda *a, **k: resp)
    with pytest.raises(RuntimeError):
        ProfileClient(base_url="http://cms.local").fetch_current_user("tok")


def test_fetch_current_user_network_error(monkeypatch):
    def boom(*a, **k):
        raise requests.ConnectionError("down")

    monkeypatch.setattr("identity_access.profile.http.get", boom)
    with pytest.raises(RuntimeError, match="identity_provider_unavailable"):
        ProfileClient(base_url="http://cms.local").fetch_current_user("tok")
