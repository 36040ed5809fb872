"""Configuration management with XDG paths, atomic writes, and precedence resolution.

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.cachefresh/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~cachefresh.models.GlobalConfig`
  JSON file storing defaults (output format, request settings, whether
  evaluation is done as a shared cache).
* **Precedence resolution** -- :func:`resolve_config` layers CLI flags and
  ``CACHEFRESH_*`` environment variables over the global config.

File writes use a temp-file-then-rename strategy (:func:`_atomic_write`).
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from cachefresh.exceptions import ConfigError
from cachefresh.models import GlobalConfig

_APP_NAME = "cachefresh"
_CONFIG_FILENAME = "config.json"

ENV_FORMAT = "CACHEFRESH_FORMAT"
ENV_SHARED_CACHE = "CACHEFRESH_SHARED_CACHE"
ENV_TIMEOUT = "CACHEFRESH_TIMEOUT"

_TRUTHY = ("1", "true", "yes", "on")
_FALSY = ("0", "false", "no", "off")


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/cachefresh/`` (default ``~/.config/cachefresh/``).
    On macOS/Windows: ``~/.cachefresh/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/cachefresh/`` (default ``~/.local/share/cachefresh/``).
    On macOS/Windows: ``~/.cachefresh/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to *path* atomically using a sibling temp file and ``os.replace``.

    The temp file is removed if anything goes wrong before the rename.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    tmp = tempfile.NamedTemporaryFile(
        mode="w",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
        encoding="utf-8",
    )
    try:
        with tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp.name, path)
    except BaseException:
        try:
            os.unlink(tmp.name)
        except OSError:
            pass
        raise


# --- Global config ---


def global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The deserialised :class:`~cachefresh.models.GlobalConfig`, or a
        default instance when the file does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Precedence resolution ---


def parse_bool(value: str, name: str) -> bool:
    """Interpret a user-supplied boolean (``true``/``false``, ``1``/``0``, ...).

    Raises:
        ConfigError: If *value* is not a recognised boolean; *name* is
            included in the message.
    """
    lowered = value.strip().lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise ConfigError(f"Invalid boolean for {name}: {value!r}")


def _env_bool(name: str) -> Optional[bool]:
    value = os.environ.get(name)
    if value is None or value == "":
        return None
    return parse_bool(value, name)


def _env_int(name: str) -> Optional[int]:
    value = os.environ.get(name)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"Invalid integer for {name}: {value!r}") from None


def resolve_config(
    cli_format: Optional[str] = None,
    cli_shared_cache: Optional[bool] = None,
    cli_timeout: Optional[int] = None,
) -> GlobalConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI flags
        2. Environment variables (``CACHEFRESH_FORMAT``,
           ``CACHEFRESH_SHARED_CACHE``, ``CACHEFRESH_TIMEOUT``)
        3. User config (``~/.config/cachefresh/config.json``)
        4. Defaults

    Raises:
        ConfigError: If the config file or an environment value is invalid.
    """
    config = load_global_config()

    env_format = os.environ.get(ENV_FORMAT)
    if env_format:
        config.output.format = env_format
    env_shared = _env_bool(ENV_SHARED_CACHE)
    if env_shared is not None:
        config.freshness.shared_cache = env_shared
    env_timeout = _env_int(ENV_TIMEOUT)
    if env_timeout is not None:
        config.request.timeout = env_timeout

    if cli_format is not None:
        config.output.format = cli_format
    if cli_shared_cache is not None:
        config.freshness.shared_cache = cli_shared_cache
    if cli_timeout is not None:
        config.request.timeout = cli_timeout

    return config
