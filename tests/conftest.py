"""Shared test fixtures for cachefresh.

Provides a frozen clock with HTTP-date helpers, config isolation, output
reset, and a Typer CLI runner.  These fixtures are discovered by pytest
and available to all test modules without explicit imports.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from cachefresh.clock import FrozenClock
from cachefresh.headers import format_http_date
from cachefresh.output import OutputFormat, OutputManager, reset_output, set_output


NOW = datetime(2024, 5, 17, 12, 0, 0, tzinfo=timezone.utc)
"""The instant every frozen clock starts at (whole seconds, so HTTP dates are exact)."""


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches sys.stdout/sys.stderr at creation time, which
    go stale once CliRunner or capfd swap the streams back.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------


@pytest.fixture
def clock() -> FrozenClock:
    """A clock frozen at :data:`NOW`."""
    return FrozenClock(NOW)


@pytest.fixture
def http_date():
    """Format ``NOW + offset`` seconds as an HTTP date.

    ``http_date(-200)`` is the Date of a response generated 200 seconds
    before the frozen clock's starting instant.
    """

    def _format(offset_seconds: float = 0) -> str:
        return format_http_date(NOW + timedelta(seconds=offset_seconds))

    return _format


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Forces XDG path resolution, points XDG_CONFIG_HOME and XDG_DATA_HOME
    at tmp_path, and clears all CACHEFRESH_* environment variables.

    Returns:
        The tmp_path root directory.
    """
    monkeypatch.setattr("cachefresh.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ["CACHEFRESH_FORMAT", "CACHEFRESH_SHARED_CACHE", "CACHEFRESH_TIMEOUT"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN-format OutputManager for the duration of a test."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
