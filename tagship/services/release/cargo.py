from __future__ import annotations

import os
from pathlib import Path

from tagship.core.config import TimeoutsConfig
from tagship.core.result import Err, Ok, Result
from tagship.output.console import ConsoleProtocol, Style
from tagship.platform.process import run as run_process
from tagship.platform.process import run_streaming
from tagship.services.release.errors import ReleaseError

# Cargo reads the registry token from here; keeping it off argv keeps it out
# of process listings.
CARGO_TOKEN_ENV = "CARGO_REGISTRY_TOKEN"


class CargoPublisher:
    """PackagePublisher backed by the ``cargo`` CLI."""

    def __init__(
        self,
        *,
        repo_root: Path,
        console: ConsoleProtocol,
        timeouts: TimeoutsConfig | None = None,
    ) -> None:
        self.repo_root = repo_root
        self.console = console
        self.timeouts = timeouts or TimeoutsConfig()

    def publish(self, token: str, *, dry_run: bool = False) -> Result[None, ReleaseError]:
        cmd = ["cargo", "publish"]
        if dry_run:
            cmd.append("--dry-run")
        self.console.print(" ".join(cmd), Style.DIM)

        env = dict(os.environ)
        env[CARGO_TOKEN_ENV] = token
        result = run_streaming(
            cmd,
            cwd=self.repo_root,
            env=env,
            timeout=self.timeouts.publish,
            secrets=(token,),
        )
        if isinstance(result, Err):
            e = result.error
            return Err(
                ReleaseError(
                    kind="publish_failed",
                    message=f"cargo publish failed (exit {e.returncode})",
                    hint=e.stderr.strip() or None,
                )
            )
        return Ok(None)

    def package_id(self) -> Result[str, ReleaseError]:
        self.console.print("cargo pkgid", Style.DIM)
        result = run_process(["cargo", "pkgid"], cwd=self.repo_root, timeout=self.timeouts.pkgid)
        if isinstance(result, Err):
            e = result.error
            return Err(
                ReleaseError(
                    kind="pkgid_failed",
                    message=f"cargo pkgid failed (exit {e.returncode})",
                    hint=e.stderr.strip() or None,
                )
            )
        return Ok(result.value.strip())
