"""Single-shot HTTP fetch that captures a response for freshness evaluation.

:func:`fetch` is what ``cachefresh check URL`` uses to obtain a live
response.  It issues exactly one request through :class:`httpx.Client`
(no retries, no conditional headers) and wraps the result in a
:class:`~cachefresh.response.CachedResponse`.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from cachefresh.exceptions import ConnectionError_
from cachefresh.models import RequestConfig
from cachefresh.output import get_output
from cachefresh.response import CachedResponse


def fetch(
    url: str,
    request_config: Optional[RequestConfig] = None,
    method: str = "GET",
    headers: Optional[dict[str, str]] = None,
    transport: Optional[httpx.BaseTransport] = None,
    **response_kwargs: Any,
) -> CachedResponse:
    """Fetch *url* and capture the response.

    Args:
        url: Absolute URL to request.
        request_config: Timeout, TLS verification, and redirect settings.
        method: HTTP method, normally ``GET`` or ``HEAD``.
        headers: Extra request headers.
        transport: Optional httpx transport (tests pass
            :class:`httpx.MockTransport`).
        **response_kwargs: Forwarded to :meth:`CachedResponse.from_httpx`
            (``clock``, ``shared``).

    Returns:
        The captured response, with status, headers, and body.

    Raises:
        ConnectionError_: On DNS, connect, timeout, or other transport errors.
    """
    config = request_config or RequestConfig()
    output = get_output()

    client_kwargs: dict[str, Any] = {
        "timeout": config.timeout,
        "verify": config.verify_ssl,
        "follow_redirects": config.follow_redirects,
    }
    if transport is not None:
        client_kwargs["transport"] = transport

    output.debug(f"{method.upper()} {url}")
    try:
        with httpx.Client(**client_kwargs) as client:
            response = client.request(method.upper(), url, headers=headers)
    except httpx.TransportError as exc:
        raise ConnectionError_(f"Request to {url} failed: {exc}") from exc

    output.debug(f"HTTP {response.status_code} {response.reason_phrase or ''}".rstrip())
    return CachedResponse.from_httpx(response, **response_kwargs)
