"""cachefresh -- HTTP response freshness evaluation per RFC 7234.

Given a captured HTTP response (status, headers, body), decide whether a
cached copy may still be served without revalidation, and for how much
longer.  Storage, cache keys, and revalidation belong to the surrounding
client; this package only does the freshness arithmetic and the wrapping
and unwrapping of :class:`httpx.Response` objects.

Typical use inside a caching layer::

    from cachefresh import CachedResponse

    cached = CachedResponse.from_dict(stored)
    if cached.is_fresh():
        return cached.to_response()

Modules:
    response: :class:`CachedResponse`, the freshness calculator.
    headers: Cache-Control, HTTP-date, and delta-seconds parsing.
    clock: Injectable time sources.
    models: Pydantic models shared across the package.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting for the ``cachefresh`` CLI.
"""

__version__ = "0.1.0"

from cachefresh.clock import FrozenClock, SystemClock
from cachefresh.exceptions import CachefreshError, InvalidStateError
from cachefresh.models import FreshnessReport, ResponseConfig
from cachefresh.response import CachedResponse

__all__ = [
    "CachedResponse",
    "CachefreshError",
    "FreshnessReport",
    "FrozenClock",
    "InvalidStateError",
    "ResponseConfig",
    "SystemClock",
    "__version__",
]
