"""Canonical Pydantic models shared across all cachefresh modules.

This is the single source of truth for data shapes in the project. The
models fall into two groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`RequestConfig`, :class:`OutputConfig`, :class:`FreshnessConfig`,
    and :class:`GlobalConfig`.

**Response models** -- consumed and produced by the freshness calculator:
    :class:`ResponseConfig` (the captured status, headers, and body a
    :class:`~cachefresh.response.CachedResponse` is built from) and
    :class:`FreshnessReport` (the outcome of one freshness evaluation).
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, Field


# --- Configuration models ---


class RequestConfig(BaseModel):
    """HTTP settings used by ``cachefresh check`` when it fetches a URL."""

    timeout: int = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    follow_redirects: bool = Field(
        default=True, description="Follow 3xx redirects before evaluating"
    )


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class FreshnessConfig(BaseModel):
    """Freshness evaluation settings stored in :class:`GlobalConfig`."""

    shared_cache: bool = Field(
        default=True,
        description="Evaluate as a shared cache (honour s-maxage before max-age)",
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/cachefresh/config.json``.

    Loaded and saved by :func:`~cachefresh.config.load_global_config` and
    :func:`~cachefresh.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by environment variables or
    CLI flags. See :func:`~cachefresh.config.resolve_config` for the full
    precedence chain.
    """

    output: OutputConfig = Field(default_factory=OutputConfig)
    request: RequestConfig = Field(default_factory=RequestConfig)
    freshness: FreshnessConfig = Field(default_factory=FreshnessConfig)


# --- Response models ---


class ResponseConfig(BaseModel):
    """The captured parts of an HTTP response.

    All three fields are optional.  Missing headers simply produce absent
    freshness values; a missing ``status`` only matters when the response
    is unwrapped with :meth:`~cachefresh.response.CachedResponse.to_response`.

    Example::

        ResponseConfig(
            status=200,
            response_headers={"Cache-Control": "max-age=60"},
            body=b"{}",
        )
    """

    status: Optional[int] = Field(default=None, description="HTTP status code")
    response_headers: dict[str, str] = Field(
        default_factory=dict, description="Raw response headers"
    )
    body: Optional[Union[str, bytes]] = Field(
        default=None, description="Response payload, passed through unmodified"
    )


class FreshnessReport(BaseModel):
    """Result of a single freshness evaluation, sampled at one instant.

    ``max_age`` and ``ttl`` are ``None`` when the response carries no
    freshness information at all; ``fresh`` is then ``False``.
    """

    status: Optional[int] = None
    date: datetime
    max_age: Optional[int] = None
    age: int
    ttl: Optional[int] = None
    fresh: bool
