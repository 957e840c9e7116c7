# tests/services/test_draft_client.py
"""Tests for the HTTP draft sink."""

import json

import httpx
import pytest

from quillpress.core.errors import Forbidden, InternalError, ValidationFailed
from quillpress.editor import ApiDraftSink


def _sink(handler) -> ApiDraftSink:
    return ApiDraftSink("http://api.test/", "tok-123", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_create_and_update_requests():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": 5, "title": "T"})

    sink = _sink(handler)
    try:
        assert (await sink.create({"title": "T"}))["id"] == 5
        await sink.update(5, {"title": "T2"})
    finally:
        await sink.aclose()

    assert [(r.method, r.url.path) for r in seen] == [
        ("POST", "/api/v1/posts/"),
        ("PATCH", "/api/v1/posts/5"),
    ]
    assert all(r.headers["x-auth-token"] == "tok-123" for r in seen)
    assert json.loads(seen[1].content) == {"title": "T2"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status_code", "error_type"),
    [(400, ValidationFailed), (403, Forbidden), (502, InternalError)],
)
async def test_error_responses_map_to_domain_errors(status_code, error_type):
    sink = _sink(lambda request: httpx.Response(status_code, json={"detail": "nope"}))
    with pytest.raises(error_type) as exc_info:
        await sink.update(1, {"title": "x"})
    assert exc_info.value.message == "nope"
    await sink.aclose()


@pytest.mark.asyncio
async def test_transport_failure_is_internal_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("down", request=request)

    sink = _sink(handler)
    with pytest.raises(InternalError):
        await sink.create({"title": "x"})
    await sink.aclose()
