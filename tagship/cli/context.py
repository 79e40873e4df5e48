from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

import typer

from tagship.core.config import (
    DEFAULT_CONFIG_FILE,
    ConfigError,
    FileConfig,
    load_config,
    load_config_or_default,
)
from tagship.core.errors import ErrorCode
from tagship.core.result import Err
from tagship.git.repository import Repository
from tagship.output.console import ConsoleProtocol, RichConsole
from tagship.output.errors import print_config_error


@dataclass(frozen=True, slots=True)
class CLIContext:
    repo_root: Path
    git_root: Path
    file_config: FileConfig
    console: ConsoleProtocol


def exit_config_error(error: ConfigError, console: ConsoleProtocol) -> NoReturn:
    print_config_error(error, console)
    raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))


def build_context(*, repo: Path, config_path: Path | None = None) -> CLIContext:
    """Resolve the crate directory, its git checkout and the config.

    ``repo`` is where Cargo runs and where ``tagship.toml`` is looked up. It
    may sit anywhere inside a git work tree; tags are made in that tree.

    An explicit ``--config`` must exist; the default ``tagship.toml`` is
    optional.
    """
    console = RichConsole()
    try:
        repo_root = repo.expanduser().resolve()
    except OSError as e:
        exit_config_error(ConfigError(f"invalid --repo: {e}"), console)

    toplevel = Repository(repo_root).toplevel()
    if isinstance(toplevel, Err):
        exit_config_error(
            ConfigError(
                f"not a git repository: {repo_root}",
                hint="Run from the crate's checkout or pass --repo.",
            ),
            console,
        )

    if config_path is not None:
        result = load_config(config_path)
    else:
        result = load_config_or_default(repo_root / DEFAULT_CONFIG_FILE)
    if isinstance(result, Err):
        exit_config_error(result.error, console)

    return CLIContext(
        repo_root=repo_root,
        git_root=toplevel.value,
        file_config=result.value,
        console=console,
    )
