"""``cachefresh config`` -- inspect and edit the global config file.

Keys use dot notation over :class:`~cachefresh.models.GlobalConfig`
sections, e.g. ``freshness.shared_cache`` or ``request.timeout``.
"""

from __future__ import annotations

from typing import Any

import typer

from cachefresh.exceptions import CachefreshError, InvalidUsageError
from cachefresh.exit_codes import EXIT_INVALID_USAGE
from cachefresh.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


def _locate(data: dict[str, Any], key: str) -> tuple[dict[str, Any], str]:
    """Return the section holding *key* and the leaf name within it."""
    *sections, leaf = key.split(".")
    section = data
    for name in sections:
        section = section.get(name)
        if not isinstance(section, dict):
            raise InvalidUsageError(f"Invalid config key: {key}")
    if leaf not in section or isinstance(section[leaf], dict):
        raise InvalidUsageError(f"Unknown config key: {key}")
    return section, leaf


def _coerce(key: str, current: Any, value: str) -> Any:
    """Convert *value* to the type of the setting it replaces."""
    from cachefresh.config import parse_bool
    from cachefresh.exceptions import ConfigError

    if isinstance(current, bool):
        try:
            return parse_bool(value, key)
        except ConfigError as exc:
            raise InvalidUsageError(str(exc)) from None
    if isinstance(current, int):
        try:
            return int(value)
        except ValueError:
            raise InvalidUsageError(f"Expected integer for {key}, got: {value}") from None
    return value


@config_app.command("show")
def config_show() -> None:
    """Print the stored configuration.

    Example::

        cachefresh --json config show
    """
    from cachefresh.config import get_config_dir, load_global_config

    try:
        config = load_global_config()
    except CachefreshError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Dotted key, e.g. 'freshness.shared_cache'."),
    value: str = typer.Argument(help="New value."),
) -> None:
    """Change one setting and save the file.

    Booleans accept true/false, yes/no, on/off and 1/0.

    Example::

        cachefresh config set freshness.shared_cache false
        cachefresh config set request.timeout 10
    """
    from cachefresh.config import load_global_config, save_global_config
    from cachefresh.models import GlobalConfig

    try:
        data = load_global_config().model_dump(mode="json")
        section, leaf = _locate(data, key)
        section[leaf] = _coerce(key, section[leaf], value)
        updated = GlobalConfig.model_validate(data)
    except CachefreshError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    save_global_config(updated)
    success(f"Set {key} = {section[leaf]}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Do not ask for confirmation."),
) -> None:
    """Overwrite the config file with defaults."""
    from cachefresh.config import save_global_config
    from cachefresh.models import GlobalConfig

    if not force and not typer.confirm("Reset all config to defaults?"):
        info("Cancelled.")
        raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
