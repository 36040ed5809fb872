"""Parsing helpers for the caching-related HTTP header fields.

Covers the three value formats the freshness calculator reads:

* **HTTP dates** (``Date``, ``Expires``) -- IMF-fixdate such as
  ``Sun, 06 Nov 1994 08:49:37 GMT``.  The obsolete RFC 850 and asctime
  forms are accepted as well, since :func:`email.utils.parsedate_to_datetime`
  understands them.
* **Cache-Control** -- a comma-separated list of ``token`` or
  ``token=value`` directives.
* **Delta seconds** (``Age``, ``max-age``, ``s-maxage``) -- a non-negative
  decimal integer.

None of these helpers raise on malformed input.  They return ``None`` and
leave it to the caller to fall back to the next signal.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime
from typing import Optional

_DELTA_SECONDS = re.compile(r"[0-9]+")

# token ( "=" ( token / quoted-string ) )?
_DIRECTIVE = re.compile(
    r"""([!#$%&'*+\-.^_`|~0-9A-Za-z]+)"""
    r"""(?:\s*=\s*("(?:[^"\\]|\\.)*"|[^,\s]*))?"""
)


def parse_http_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an HTTP date into a timezone-aware UTC datetime.

    Args:
        value: Raw header value, or ``None``.

    Returns:
        The parsed instant, or ``None`` when *value* is missing or cannot
        be parsed.
    """
    if not value:
        return None
    try:
        parsed = parsedate_to_datetime(value.strip())
    except (TypeError, ValueError, IndexError):
        return None
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        # "-0000" means UTC with no source timezone information.
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_http_date(moment: datetime) -> str:
    """Format *moment* as an IMF-fixdate string (``Sun, 06 Nov 1994 08:49:37 GMT``).

    Naive datetimes are taken as UTC.  Sub-second precision is dropped.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return format_datetime(moment.astimezone(timezone.utc), usegmt=True)


def parse_seconds(value: Optional[str]) -> Optional[int]:
    """Parse a delta-seconds value.

    Returns:
        The integer value, or ``None`` for missing, negative, fractional,
        or otherwise non-numeric input.
    """
    if value is None:
        return None
    value = value.strip()
    if not _DELTA_SECONDS.fullmatch(value):
        return None
    return int(value)


def parse_cache_control(value: Optional[str]) -> dict[str, Optional[str]]:
    """Split a ``Cache-Control`` header into its directives.

    Directive names are lower-cased.  Values are returned as strings with
    surrounding quotes removed; valueless directives (``no-store``) map to
    ``None``.  When a directive repeats, the first occurrence wins.

    Example::

        >>> parse_cache_control('Public, MAX-AGE=60, no-cache="Set-Cookie"')
        {'public': None, 'max-age': '60', 'no-cache': 'Set-Cookie'}
    """
    directives: dict[str, Optional[str]] = {}
    if not value:
        return directives
    for name, raw in _DIRECTIVE.findall(value):
        name = name.lower()
        if name in directives:
            continue
        if raw.startswith('"') and raw.endswith('"') and len(raw) >= 2:
            raw = re.sub(r"\\(.)", r"\1", raw[1:-1])
        directives[name] = raw if raw != "" else None
    return directives
