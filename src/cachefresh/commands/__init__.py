"""Built-in ``cachefresh`` sub-commands."""

from cachefresh.commands.check import check_command
from cachefresh.commands.config import config_app

__all__ = ["check_command", "config_app"]
