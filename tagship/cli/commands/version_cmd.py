from __future__ import annotations

from pathlib import Path

import typer

from tagship.cli.context import build_context
from tagship.core.errors import ErrorCode
from tagship.core.result import Err
from tagship.output.errors import print_release_error
from tagship.services.release.cargo import CargoPublisher
from tagship.services.release.version import format_tag, resolve_version


def version(
    repo: Path = typer.Option(Path("."), "--repo", help="Crate directory to inspect."),
    config_path: Path | None = typer.Option(None, "--config", help="Config file."),
) -> None:
    """Print the version and tag a release would create. Publishes nothing."""
    ctx = build_context(repo=repo, config_path=config_path)

    publisher = CargoPublisher(
        repo_root=ctx.repo_root,
        console=ctx.console,
        timeouts=ctx.file_config.timeouts,
    )
    result = resolve_version(publisher)
    if isinstance(result, Err):
        print_release_error(result.error, ctx.console)
        raise typer.Exit(code=int(ErrorCode.VERSION_UNRESOLVED))

    tag = format_tag(result.value, prefix=ctx.file_config.tag_prefix)
    # stdout, so scripts can capture it
    typer.echo(f"{result.value} {tag}")
