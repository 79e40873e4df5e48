"""Error presentation utilities.

Centralized error formatting for the CLI commands.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tagship.output.console import Style

if TYPE_CHECKING:
    from tagship.core.config import ConfigError
    from tagship.output.console import ConsoleProtocol
    from tagship.services.release.errors import ReleaseError

__all__ = ["print_config_error", "print_release_error"]


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    """Print a release error, with its hint dimmed on the next line."""
    match error.kind:
        case "version_unresolved":
            console.error(f"cannot determine release version: {error.message}")
        case _:
            console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def print_config_error(error: ConfigError, console: ConsoleProtocol) -> None:
    message = error.message
    if error.path is not None and str(error.path) not in message:
        message = f"{message} ({error.path})"
    console.error(message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)
