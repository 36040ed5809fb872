"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~cachefresh.exceptions.CachefreshError` subclass.
Shell scripts can branch on the exit code of ``cachefresh check`` without
parsing stderr.

Example::

    $ cachefresh check https://example.com/ --fail-if-stale
    $ echo $?
    9   # EXIT_STALE -- the response must be revalidated
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or malformed header lines."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_INVALID_STATE = 8
"""A cached response was unwrapped without the data it requires (e.g. no status)."""

EXIT_STALE = 9
"""``--fail-if-stale`` was given and the evaluated response is not fresh."""
