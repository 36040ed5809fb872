"""Tests for the single-shot fetch client."""

from __future__ import annotations

import httpx
import pytest

from cachefresh.client import fetch
from cachefresh.exceptions import ConnectionError_
from cachefresh.models import RequestConfig
from cachefresh.response import CachedResponse


def _transport(status: int = 200, headers: dict[str, str] | None = None, body: bytes = b"ok"):
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(status, headers=headers or {}, content=body)

    return httpx.MockTransport(handler), seen


class TestFetch:
    def test_returns_cached_response(self, quiet_output, clock, http_date) -> None:
        transport, _ = _transport(
            headers={"Cache-Control": "max-age=120", "Date": http_date(-20)},
            body=b"hello",
        )
        cached = fetch("https://example.com/a", transport=transport, clock=clock)
        assert isinstance(cached, CachedResponse)
        assert cached.status == 200
        assert cached.body == b"hello"
        assert cached.ttl() == 100

    def test_sends_method_and_headers(self, quiet_output) -> None:
        transport, seen = _transport()
        fetch(
            "https://example.com/a",
            method="head",
            headers={"X-Probe": "1"},
            transport=transport,
        )
        assert seen[0].method == "HEAD"
        assert seen[0].headers["X-Probe"] == "1"

    def test_single_request_even_on_server_error(self, quiet_output) -> None:
        transport, seen = _transport(status=503)
        cached = fetch("https://example.com/a", transport=transport)
        assert cached.status == 503
        assert len(seen) == 1

    def test_private_evaluation_forwarded(self, quiet_output) -> None:
        transport, _ = _transport(headers={"Cache-Control": "s-maxage=50, max-age=5"})
        cached = fetch("https://example.com/a", transport=transport, shared=False)
        assert cached.max_age() == 5

    def test_transport_error_raises_connection_error(self, quiet_output) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(ConnectionError_, match="refused"):
            fetch("https://example.com/a", transport=httpx.MockTransport(handler))

    def test_timeout_raises_connection_error(self, quiet_output) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(ConnectionError_):
            fetch(
                "https://example.com/a",
                RequestConfig(timeout=1),
                transport=httpx.MockTransport(handler),
            )
