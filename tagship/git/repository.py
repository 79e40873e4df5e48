"""Git repository abstraction.

This module provides the Repository class for the handful of git operations
a release needs: find the checkout root, check for and create an
annotated tag, and push it to an authenticated remote URL. All operations
return Result types.

Usage:
    repo = Repository(Path("/path/to/repo"))

    if not repo.tag_exists("v1.0.0"):
        match repo.create_annotated_tag("v1.0.0", message="v1.0.0"):
            case Ok(_):
                print("tagged")
            case Err(e):
                print(f"tag failed: {e.message}")
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote, urlsplit, urlunsplit

from tagship.core.result import Err, Ok, Result
from tagship.platform.process import ProcessError, redact
from tagship.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0

__all__ = [
    "GitError",
    "Repository",
    "authenticated_url",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand that failed
        message: Error message, secrets masked
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


def authenticated_url(url: str, *, user: str, token: str) -> str:
    """Embed ``user:token`` in an https remote URL.

    >>> authenticated_url("https://github.com/o/r", user="o", token="t")
    'https://o:t@github.com/o/r'
    """
    parts = urlsplit(url)
    host = parts.hostname or ""
    if parts.port is not None:
        host = f"{host}:{parts.port}"
    netloc = f"{quote(user, safe='')}:{quote(token, safe='')}@{host}"
    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))


class Repository:
    """Git repository abstraction.

    Attributes:
        path: Repository root, or any directory inside the work tree
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def toplevel(self) -> Result[Path, GitError]:
        """Root of the checkout containing ``path``.

        ``path`` may be any directory inside the work tree, such as a crate
        in a Cargo workspace.
        """
        result = self._run(["rev-parse", "--show-toplevel"])
        match result:
            case Err(e):
                return Err(_git_error("rev-parse", e, f"not a git repository: {self.path}"))
            case Ok(stdout):
                return Ok(Path(stdout.strip()))

    def tag_exists(self, name: str) -> bool:
        """True if ``refs/tags/<name>`` resolves locally."""
        result = self._run(["rev-parse", "-q", "--verify", f"refs/tags/{name}"])
        return isinstance(result, Ok)

    def create_annotated_tag(
        self,
        name: str,
        *,
        message: str,
        timeout: float = _GIT_TIMEOUT_SECONDS,
    ) -> Result[None, GitError]:
        """Create an annotated tag on HEAD.

        Fails if the tag already exists; an existing tag is never moved.
        """
        result = self._run(["tag", "-a", name, "-m", message], timeout=timeout)
        if isinstance(result, Err):
            return Err(_git_error("tag", result.error, f"git tag {name} failed"))
        return Ok(None)

    def push_tag(
        self,
        remote_url: str,
        name: str,
        *,
        secrets: tuple[str, ...] = (),
        timeout: float = _GIT_NETWORK_TIMEOUT_SECONDS,
    ) -> Result[str, GitError]:
        """Push a single tag to ``remote_url``.

        ``remote_url`` may carry credentials; pass them in ``secrets`` so the
        returned output and errors are masked. Git is told never to prompt,
        so a rejected credential fails instead of blocking.

        Returns:
            Ok(output) with git's (masked) progress text on success
            Err(GitError) on failure
        """
        env = dict(os.environ)
        env["GIT_TERMINAL_PROMPT"] = "0"
        result = self._run(
            ["push", remote_url, f"refs/tags/{name}"],
            env=env,
            timeout=timeout,
            secrets=secrets,
        )
        match result:
            case Err(e):
                return Err(_git_error("push", e, f"git push {name} failed"))
            case Ok(stdout):
                return Ok(redact(stdout, secrets).strip())

    def _run(
        self,
        args: list[str],
        *,
        env: dict[str, str] | None = None,
        timeout: float | None = None,
        secrets: tuple[str, ...] = (),
    ) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        if timeout is None:
            command = args[0] if args else ""
            timeout = (
                _GIT_NETWORK_TIMEOUT_SECONDS
                if command in {"fetch", "pull", "push"}
                else _GIT_TIMEOUT_SECONDS
            )
        return run_process(
            ["git", "-C", str(self.path), *args],
            cwd=self.path,
            env=env,
            timeout=timeout,
            secrets=secrets,
        )


def _git_error(command: str, error: ProcessError, fallback: str) -> GitError:
    return GitError(
        command=command,
        message=error.stderr.strip() or error.stdout.strip() or fallback,
        returncode=error.returncode,
    )
