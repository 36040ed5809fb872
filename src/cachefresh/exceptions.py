"""Errors raised by cachefresh, each tied to a process exit code.

Header values that do not parse are never errors here: the freshness
calculator skips them and moves on to the next signal.  Exceptions cover
caller mistakes (bad CLI input, unwrapping a response with no status),
network failures, and unreadable configuration.

::

    CachefreshError        1
        InvalidUsageError  2
        ConnectionError_   6
        InvalidStateError  8
        ConfigError        1
"""

from cachefresh.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_STATE,
    EXIT_INVALID_USAGE,
)


class CachefreshError(Exception):
    """Root of the hierarchy; :func:`cachefresh.app.main` exits with ``exit_code``.

    Args:
        message: Shown to the user on stderr.
        exit_code: Replaces the subclass default for this instance.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(CachefreshError):
    """Bad command-line input: a header line without a colon, an unparseable ``--at``."""

    exit_code = EXIT_INVALID_USAGE


class ConnectionError_(CachefreshError):
    """``cachefresh check URL`` could not get a response (DNS, connect, timeout).

    The underscore keeps the builtin ``ConnectionError`` visible.
    """

    exit_code = EXIT_CONNECTION_ERROR


class InvalidStateError(CachefreshError):
    """A :class:`~cachefresh.response.CachedResponse` cannot be unwrapped (no status)."""

    exit_code = EXIT_INVALID_STATE


class ConfigError(CachefreshError):
    """The config file or a ``CACHEFRESH_*`` variable holds an invalid value."""

    exit_code = EXIT_GENERIC_FAILURE
