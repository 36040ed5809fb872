"""Check command -- evaluate the freshness of a response.

``cachefresh check`` works in two modes:

* **URL mode** -- ``cachefresh check https://example.com/logo.png`` fetches
  the URL once and evaluates the live response.  ``-H`` lines are sent as
  request headers.
* **Header mode** -- ``cachefresh check -H "Cache-Control: max-age=60"
  -H "Date: ..."`` evaluates the given response headers without any
  network access.

The result is a :class:`~cachefresh.models.FreshnessReport` printed as a
table, plain ``field<TAB>value`` lines, or JSON.
"""

from __future__ import annotations

from typing import Optional

import typer

from cachefresh.clock import Clock, FrozenClock
from cachefresh.exceptions import CachefreshError, InvalidUsageError
from cachefresh.exit_codes import EXIT_STALE
from cachefresh.headers import parse_http_date
from cachefresh.models import FreshnessReport
from cachefresh.output import debug, error, format_record, info


def parse_header_lines(lines: list[str]) -> dict[str, str]:
    """Turn ``"Name: value"`` lines into a header dict.

    Repeated names are folded into one comma-separated value, as HTTP
    allows for list-valued fields such as ``Cache-Control``.

    Raises:
        InvalidUsageError: If a line has no colon or an empty name.
    """
    headers: dict[str, str] = {}
    folded: dict[str, str] = {}
    for line in lines:
        name, sep, value = line.partition(":")
        name = name.strip()
        if not sep or not name:
            raise InvalidUsageError(f"Invalid header line (expected 'Name: value'): {line!r}")
        value = value.strip()
        existing = folded.get(name.lower())
        if existing is None:
            folded[name.lower()] = name
            headers[name] = value
        else:
            headers[existing] = f"{headers[existing]}, {value}"
    return headers


def _summary(report: FreshnessReport) -> str:
    if report.ttl is None:
        return "No freshness information: revalidation required"
    if report.fresh:
        return f"Fresh for another {report.ttl}s"
    return f"Stale by {-report.ttl}s" if report.ttl < 0 else "Stale"


def check_command(
    url: Optional[str] = typer.Argument(
        None, help="URL to fetch. Omit to evaluate --header lines only."
    ),
    header: Optional[list[str]] = typer.Option(
        None,
        "--header",
        "-H",
        help="Header line 'Name: value'. Response header without a URL, request header with one.",
    ),
    status: Optional[int] = typer.Option(
        None, "--status", help="Status code of the evaluated response (header mode)."
    ),
    head: bool = typer.Option(
        False, "--head", help="Use HEAD instead of GET (URL mode)."
    ),
    private: bool = typer.Option(
        False, "--private", help="Evaluate as a private cache (ignore s-maxage)."
    ),
    at: Optional[str] = typer.Option(
        None, "--at", help="Evaluate at this HTTP date instead of now."
    ),
    fail_if_stale: bool = typer.Option(
        False, "--fail-if-stale", help=f"Exit with code {EXIT_STALE} when not fresh."
    ),
) -> None:
    """Report max-age, age, TTL, and freshness for a response.

    Example::

        cachefresh check https://example.com/
        cachefresh check -H "Cache-Control: s-maxage=200, max-age=0"
        cachefresh check -H "Expires: Sun, 06 Nov 1994 08:51:17 GMT" \\
            -H "Date: Sun, 06 Nov 1994 08:49:37 GMT" --json
    """
    from cachefresh.client import fetch
    from cachefresh.config import resolve_config
    from cachefresh.response import CachedResponse

    try:
        config = resolve_config(cli_shared_cache=False if private else None)
        lines = parse_header_lines(header or [])

        clock: Optional[Clock] = None
        if at is not None:
            instant = parse_http_date(at)
            if instant is None:
                raise InvalidUsageError(f"Invalid HTTP date for --at: {at!r}")
            clock = FrozenClock(instant)

        shared = config.freshness.shared_cache
        if url:
            cached = fetch(
                url,
                config.request,
                method="HEAD" if head else "GET",
                headers=lines,
                clock=clock,
                shared=shared,
            )
        else:
            debug(f"Evaluating {len(lines)} header(s) without network access")
            cached = CachedResponse.build(
                status=status, response_headers=lines, clock=clock, shared=shared
            )

        report = cached.evaluate()
    except CachefreshError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    info(_summary(report))
    format_record(report.model_dump(mode="json"), title=url or "Freshness")

    if fail_if_stale and not report.fresh:
        raise typer.Exit(code=EXIT_STALE)
