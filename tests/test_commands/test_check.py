"""Tests for the ``cachefresh check`` command."""

from __future__ import annotations

import json

import pytest

from cachefresh import __version__
from cachefresh.app import app
from cachefresh.commands.check import parse_header_lines
from cachefresh.exceptions import ConnectionError_, InvalidUsageError
from cachefresh.exit_codes import EXIT_CONNECTION_ERROR, EXIT_INVALID_USAGE, EXIT_STALE
from cachefresh.response import CachedResponse


def _check(cli_runner, *args: str):
    return cli_runner.invoke(app, ["--json", "--quiet", "check", *args])


class TestParseHeaderLines:
    def test_name_value(self) -> None:
        assert parse_header_lines(["Cache-Control: max-age=60", "Age:3"]) == {
            "Cache-Control": "max-age=60",
            "Age": "3",
        }

    def test_value_may_contain_colons(self) -> None:
        lines = ["Date: Sun, 06 Nov 1994 08:49:37 GMT"]
        assert parse_header_lines(lines) == {"Date": "Sun, 06 Nov 1994 08:49:37 GMT"}

    def test_repeated_names_folded(self) -> None:
        lines = ["Cache-Control: public", "cache-control: max-age=5"]
        assert parse_header_lines(lines) == {"Cache-Control": "public, max-age=5"}

    @pytest.mark.parametrize("line", ["no colon here", ": value"])
    def test_invalid_lines(self, line: str) -> None:
        with pytest.raises(InvalidUsageError):
            parse_header_lines([line])


class TestHeaderMode:
    def test_fresh_report(self, cli_runner, isolated_config, http_date) -> None:
        result = _check(
            cli_runner,
            "-H", "Cache-Control: max-age=400",
            "-H", f"Date: {http_date(-200)}",
            "--status", "200",
            "--at", http_date(),
        )
        assert result.exit_code == 0, result.output
        report = json.loads(result.stdout)
        assert report["status"] == 200
        assert report["max_age"] == 400
        assert report["age"] == 200
        assert report["ttl"] == 200
        assert report["fresh"] is True

    def test_shared_max_age_wins(self, cli_runner, isolated_config) -> None:
        result = _check(cli_runner, "-H", "Cache-Control: s-maxage=200, max-age=0")
        assert json.loads(result.stdout)["max_age"] == 200

    def test_private_ignores_shared_max_age(self, cli_runner, isolated_config) -> None:
        result = _check(cli_runner, "--private", "-H", "Cache-Control: s-maxage=200, max-age=0")
        assert json.loads(result.stdout)["max_age"] == 0

    def test_shared_cache_disabled_in_config(
        self, cli_runner, isolated_config, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("CACHEFRESH_SHARED_CACHE", "false")
        result = _check(cli_runner, "-H", "Cache-Control: s-maxage=200, max-age=10")
        assert json.loads(result.stdout)["max_age"] == 10

    def test_no_information_is_not_fresh(self, cli_runner, isolated_config) -> None:
        result = _check(cli_runner)
        assert result.exit_code == 0
        report = json.loads(result.stdout)
        assert report["max_age"] is None
        assert report["ttl"] is None
        assert report["fresh"] is False

    def test_fail_if_stale(self, cli_runner, isolated_config, http_date) -> None:
        result = _check(
            cli_runner,
            "-H", "Cache-Control: max-age=400",
            "-H", f"Date: {http_date(-500)}",
            "--at", http_date(),
            "--fail-if-stale",
        )
        assert result.exit_code == EXIT_STALE

    def test_fail_if_stale_passes_when_fresh(self, cli_runner, isolated_config, http_date) -> None:
        result = _check(
            cli_runner,
            "-H", "Cache-Control: max-age=400",
            "-H", f"Date: {http_date(-5)}",
            "--at", http_date(),
            "--fail-if-stale",
        )
        assert result.exit_code == 0

    def test_invalid_header_line(self, cli_runner, isolated_config) -> None:
        result = _check(cli_runner, "-H", "garbage")
        assert result.exit_code == EXIT_INVALID_USAGE

    def test_invalid_at(self, cli_runner, isolated_config) -> None:
        result = _check(cli_runner, "--at", "tomorrow")
        assert result.exit_code == EXIT_INVALID_USAGE

    def test_plain_output(self, cli_runner, isolated_config) -> None:
        result = cli_runner.invoke(
            app, ["--plain", "--quiet", "check", "-H", "Cache-Control: max-age=30", "-H", "Age: 10"]
        )
        assert result.exit_code == 0
        lines = result.stdout.splitlines()
        assert "max_age\t30" in lines
        assert "ttl\t20" in lines
        assert "fresh\tyes" in lines


class TestUrlMode:
    def test_fetches_and_reports(
        self, cli_runner, isolated_config, monkeypatch: pytest.MonkeyPatch, clock, http_date
    ) -> None:
        calls = []

        def fake_fetch(url, request_config, method="GET", headers=None, **kwargs):
            calls.append((url, method, headers, kwargs["shared"]))
            return CachedResponse.build(
                status=200,
                response_headers={"Cache-Control": "max-age=60", "Date": http_date(-10)},
                clock=clock,
            )

        monkeypatch.setattr("cachefresh.client.fetch", fake_fetch)
        result = _check(cli_runner, "https://example.com/", "--head", "-H", "Accept: */*")

        assert result.exit_code == 0, result.output
        assert calls == [("https://example.com/", "HEAD", {"Accept": "*/*"}, True)]
        report = json.loads(result.stdout)
        assert report["ttl"] == 50
        assert report["fresh"] is True

    def test_connection_error_exit_code(
        self, cli_runner, isolated_config, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def fake_fetch(url, *args, **kwargs):
            raise ConnectionError_(f"Request to {url} failed: refused")

        monkeypatch.setattr("cachefresh.client.fetch", fake_fetch)
        result = _check(cli_runner, "https://example.com/")
        assert result.exit_code == EXIT_CONNECTION_ERROR


class TestVersion:
    def test_version_flag(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout
