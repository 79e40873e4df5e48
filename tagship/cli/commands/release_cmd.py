from __future__ import annotations

import os
from pathlib import Path

import typer

from tagship.cli.context import build_context, exit_config_error
from tagship.core.config import build_release_config, credentials_from_env
from tagship.core.result import Err
from tagship.git.repository import Repository
from tagship.services.release.cargo import CargoPublisher
from tagship.services.release.sequencer import ReleaseSequencer
from tagship.services.release.vcs import GitVersionControl


def release(
    repo: Path = typer.Option(
        Path("."),
        "--repo",
        help="Crate directory to release (may be inside a larger checkout).",
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        help="Config file (default: <repo>/tagship.toml, optional).",
    ),
    remote_url: str | None = typer.Option(
        None,
        "--remote-url",
        help="https URL the tag is pushed to (overrides [remote] url).",
    ),
    remote_user: str | None = typer.Option(
        None,
        "--remote-user",
        help="User for the push URL (default: repository owner).",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Run 'cargo publish --dry-run' and only print the tag and push.",
    ),
) -> None:
    """Publish the crate, tag v<version> and push the tag.

    Reads CARGO_TOKEN and GH_TOKEN from the environment.
    Exit codes: 1 publish, 2 tag, 3 push, 4 version, 5 config.
    """
    ctx = build_context(repo=repo, config_path=config_path)

    credentials = credentials_from_env(os.environ)
    if isinstance(credentials, Err):
        exit_config_error(credentials.error, ctx.console)

    config = build_release_config(
        repo_root=ctx.repo_root,
        file_config=ctx.file_config,
        credentials=credentials.value,
        remote_url=remote_url,
        remote_user=remote_user,
    )
    if isinstance(config, Err):
        exit_config_error(config.error, ctx.console)

    release_config = config.value
    sequencer = ReleaseSequencer(
        config=release_config,
        publisher=CargoPublisher(
            repo_root=release_config.repo_root,
            console=ctx.console,
            timeouts=release_config.timeouts,
        ),
        vcs=GitVersionControl(
            repository=Repository(ctx.git_root),
            console=ctx.console,
            timeouts=release_config.timeouts,
            push_retry_attempts=release_config.push_retry_attempts,
        ),
        console=ctx.console,
        dry_run=dry_run,
    )
    code = sequencer.run()
    raise typer.Exit(code=int(code))
