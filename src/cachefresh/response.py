"""Freshness calculator for captured HTTP responses.

:class:`CachedResponse` wraps the status, headers, and body of a response
read from a cache store (or just received from the network) and answers
the one question a caching middleware needs: may this copy be served
without asking the origin again, and for how long?

The quantities follow RFC 7234 section 4.2:

* ``max_age`` -- freshness lifetime, from ``s-maxage``, then ``max-age``,
  then ``Expires - Date``.
* ``age`` -- the ``Age`` header when present, else ``now - Date``.
* ``ttl`` -- ``max_age - age``.

Only the response date is memoised.  When a response has no ``Date``
header the first access pins it to "now", so every later calculation on
the same instance agrees on when the response was generated.

Example::

    cached = CachedResponse.from_dict(store[key])
    if cached.is_fresh():
        return cached.to_response()
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Any, Optional, Union

import httpx

from cachefresh.clock import Clock, SystemClock
from cachefresh.exceptions import InvalidStateError
from cachefresh.headers import (
    format_http_date,
    parse_cache_control,
    parse_http_date,
    parse_seconds,
)
from cachefresh.models import FreshnessReport, ResponseConfig

logger = logging.getLogger(__name__)


class CachedResponse:
    """An HTTP response captured for caching, with on-demand freshness math.

    The caller's header mapping is copied into a case-insensitive
    :class:`httpx.Headers`, so lookups of ``Cache-Control``, ``Expires``,
    ``Date`` and ``Age`` ignore case and the original is never modified.

    Args:
        config: Status, headers, and body.  Defaults to an empty response.
        clock: Source of "now".  Defaults to :class:`SystemClock`.
        shared: Evaluate as a shared cache.  Private caches ignore the
            ``s-maxage`` directive.
    """

    def __init__(
        self,
        config: Optional[ResponseConfig] = None,
        *,
        clock: Optional[Clock] = None,
        shared: bool = True,
    ) -> None:
        config = config or ResponseConfig()
        self.status = config.status
        # Values outside ASCII (e.g. a UTF-8 Content-Disposition filename) are
        # stored as UTF-8 rather than rejected.
        self.headers = httpx.Headers(config.response_headers, encoding="utf-8")
        self.body = config.body
        self.shared = shared
        self._clock: Clock = clock or SystemClock()
        self._resolved_date: Optional[datetime] = None
        self._date_lock = threading.Lock()

    # ------------------------------------------------------------------ #
    # Alternate constructors
    # ------------------------------------------------------------------ #

    @classmethod
    def build(
        cls,
        status: Optional[int] = None,
        response_headers: Optional[dict[str, str]] = None,
        body: Optional[Union[str, bytes]] = None,
        **kwargs: Any,
    ) -> CachedResponse:
        """Keyword shortcut for ``CachedResponse(ResponseConfig(...))``.

        Extra keyword arguments (``clock``, ``shared``) are forwarded to
        the constructor.
        """
        config = ResponseConfig(
            status=status,
            response_headers=response_headers or {},
            body=body,
        )
        return cls(config, **kwargs)

    @classmethod
    def from_httpx(cls, response: httpx.Response, **kwargs: Any) -> CachedResponse:
        """Capture a live :class:`httpx.Response` before it is stored.

        The body must already have been read.  Repeated header fields are
        folded into one comma-separated value.

        httpx only exposes the decoded body, so for a compressed response
        ``Content-Encoding`` and ``Content-Length`` are dropped: they
        describe bytes that are no longer stored.
        """
        headers = dict(response.headers)
        if "content-encoding" in headers:
            headers.pop("content-encoding")
            headers.pop("content-length", None)
        return cls.build(
            status=response.status_code,
            response_headers=headers,
            body=response.content,
            **kwargs,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any], **kwargs: Any) -> CachedResponse:
        """Rebuild a response from a stored ``{"status_code", "headers", "body"}`` dict."""
        return cls.build(
            status=data.get("status_code"),
            response_headers=data.get("headers") or {},
            body=data.get("body"),
            **kwargs,
        )

    # ------------------------------------------------------------------ #
    # Freshness quantities
    # ------------------------------------------------------------------ #

    def date(self) -> datetime:
        """Return when the response was generated.

        Uses the ``Date`` header when it parses.  Otherwise the current
        time is taken once and remembered, so later calls return the same
        instant.
        """
        parsed = parse_http_date(self.headers.get("Date"))
        if parsed is not None:
            return parsed
        with self._date_lock:
            if self._resolved_date is None:
                if "Date" in self.headers:
                    logger.debug("Ignoring malformed Date header: %r", self.headers["Date"])
                self._resolved_date = self._clock.now()
            return self._resolved_date

    def max_age(self) -> Optional[int]:
        """Return the freshness lifetime in seconds, or ``None`` if unknown.

        A negative value means the ``Expires`` date is before ``Date``.
        """
        directives = parse_cache_control(self.headers.get("Cache-Control"))

        if self.shared and "s-maxage" in directives:
            s_maxage = parse_seconds(directives["s-maxage"])
            if s_maxage is not None:
                return s_maxage
            logger.debug("Ignoring malformed s-maxage: %r", directives["s-maxage"])

        if "max-age" in directives:
            max_age = parse_seconds(directives["max-age"])
            if max_age is not None:
                return max_age
            logger.debug("Ignoring malformed max-age: %r", directives["max-age"])

        expires_value = self.headers.get("Expires")
        if expires_value is not None:
            expires = parse_http_date(expires_value)
            if expires is not None:
                return int((expires - self.date()).total_seconds())
            logger.debug("Ignoring malformed Expires header: %r", expires_value)

        return None

    def age(self, now: Optional[datetime] = None) -> int:
        """Return the seconds elapsed since the response was generated.

        A well-formed ``Age`` header is returned as is.  Otherwise the age
        is ``now - date()``, never negative.

        Args:
            now: The instant to measure against.  Defaults to the clock.
        """
        declared = parse_seconds(self.headers.get("Age"))
        if declared is not None:
            return declared
        date = self.date()
        if now is None:
            now = self._clock.now()
        return max(0, int((now - date).total_seconds()))

    def ttl(self, now: Optional[datetime] = None) -> Optional[int]:
        """Return the remaining freshness in seconds (may be negative), or ``None``."""
        max_age = self.max_age()
        if max_age is None:
            return None
        return max_age - self.age(now)

    def is_fresh(self, now: Optional[datetime] = None) -> bool:
        """Return ``True`` when the response may be served without revalidation.

        A response without any freshness information is never fresh.
        """
        ttl = self.ttl(now)
        return ttl is not None and ttl > 0

    def evaluate(self, now: Optional[datetime] = None) -> FreshnessReport:
        """Compute every freshness quantity against a single sampled instant."""
        if now is None:
            now = self._clock.now()
        max_age = self.max_age()
        age = self.age(now)
        ttl = None if max_age is None else max_age - age
        return FreshnessReport(
            status=self.status,
            date=self.date(),
            max_age=max_age,
            age=age,
            ttl=ttl,
            fresh=ttl is not None and ttl > 0,
        )

    # ------------------------------------------------------------------ #
    # Unwrapping
    # ------------------------------------------------------------------ #

    def response_headers(self) -> httpx.Headers:
        """Return the captured headers plus the resolved ``Date``, if one was pinned."""
        headers = self.headers.copy()
        if self._resolved_date is not None and "Date" not in headers:
            headers["Date"] = format_http_date(self._resolved_date)
        return headers

    def to_response(self, request: Optional[httpx.Request] = None) -> httpx.Response:
        """Unwrap into an :class:`httpx.Response` with the same status, headers, and body.

        No headers are added beyond a pinned ``Date``; in particular no
        ``Content-Length`` is synthesised.  The body is loaded verbatim:
        when ``Content-Encoding`` is set, ``content`` holds the stored
        (still encoded) bytes.

        Raises:
            InvalidStateError: If no status code was supplied.
        """
        if self.status is None:
            raise InvalidStateError("Cannot build a response without a status code")
        response = httpx.Response(
            status_code=self.status,
            stream=httpx.ByteStream(self._body_bytes()),
            request=request,
        )
        # Read while no Content-Encoding is attached, so httpx picks its
        # identity decoder and the body is not transformed.
        response.read()
        response.headers = self.response_headers()
        return response

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the ``{"status_code", "headers", "body"}`` shape used by cache stores."""
        headers = self.response_headers()
        # .raw keeps the original header-name casing; dict(headers) would lower it.
        return {
            "status_code": self.status,
            "headers": {
                key.decode(headers.encoding): value.decode(headers.encoding)
                for key, value in headers.raw
            },
            "body": self.body,
        }

    def _body_bytes(self) -> bytes:
        if self.body is None:
            return b""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    def __repr__(self) -> str:
        return f"<CachedResponse status={self.status!r} headers={len(self.headers)}>"
