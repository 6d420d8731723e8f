"""
Content-store client tests (no network; `requests.get` is stubbed).
"""
from __future__ import annotations

import types

import pytest
import requests

from catalog.content import ContentClient


def _response(status_code: int, body=None):
    return types.SimpleNamespace(status_code=status_code, json=lambda: body)


def test_list_courses_forwards_token_and_populate(monkeypatch):
    called = {}

    def fake_get(url, params=None, headers=None, timeout=None):
        called.update(url=url, params=params, headers=headers, timeout=timeout)
        return _response(200, {"data": [{"id": 1, "title": "A"}, "junk"], "meta": {}})

    monkeypatch.setattr("catalog.content.http.get", fake_get)

    items = ContentClient(base_url="http://cms.local/", timeout=3).list_courses("tok")

    assert items == [{"id": 1, "title": "A"}]
    assert called["url"] == "http://cms.local/api/courses"
    assert called["params"] == {"populate": "*"}
    assert called["headers"]["Authorization"] == "Bearer tok"
    assert called["timeout"] == 3


def test_list_courses_without_token_sends_no_authorization(monkeypatch):
    seen = {}

    def fake_get(url, params=None, headers=None, timeout=None):
        seen["headers"] = headers
        return _response(200, {"data": None})

    monkeypatch.setattr("catalog.content.http.get", fake_get)
    assert ContentClient(base_url="http://cms.local").list_courses() == []
    assert "Authorization" not in seen["headers"]


def test_get_course_populates_modules_and_classes(monkeypatch):
    called = {}

    def fake_get(url, params=None, headers=None, timeout=None):
        called.update(url=url, params=params)
        return _response(200, {"data": {"id": 2, "documentId": "abc"}})

    monkeypatch.setattr("catalog.content.http.get", fake_get)

    course = ContentClient(base_url="http://cms.local").get_course("abc")
    assert course["documentId"] == "abc"
    assert called["url"] == "http://cms.local/api/courses/abc"
    assert called["params"] == {"populate[modules][populate]": "classes"}


def test_get_course_quotes_the_id(monkeypatch):
    called = {}

    def fake_get(url, params=None, headers=None, timeout=None):
        called["url"] = url
        return _response(200, {"data": {"id": 1}})

    monkeypatch.setattr("catalog.content.http.get", fake_get)
    ContentClient(base_url="http://cms.local").get_course("../users")
    assert called["url"] == "http://cms.local/api/courses/..%2Fusers"


@pytest.mark.parametrize("resp", [_response(404, {"error": {}}), _response(200, {"data": None})])
def test_get_course_not_found(monkeypatch, resp):
    monkeypatch.setattr("catalog.content.http.get", lambda *a, **k: resp)
    with pytest.raises(LookupError):
        ContentClient(base_url="http://cms.local").get_course("missing")


def test_content_store_errors_are_runtime_errors(monkeypatch):
    monkeypatch.setattr("catalog.content.http.get", lambda *a, **k: _response(500, {}))
    client = ContentClient(base_url="http://cms.local")
    with pytest.raises(RuntimeError):
        client.list_courses()
    with pytest.raises(RuntimeError):
        client.get_course("x")

    def boom(*a, **k):
        raise requests.Timeout("slow")

    monkeypatch.setattr("catalog.content.http.get", boom)
    with pytest.raises(RuntimeError, match="content_store_unavailable"):
        client.list_courses()
