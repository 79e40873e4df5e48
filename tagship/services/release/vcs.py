from __future__ import annotations

from collections.abc import Callable
from time import sleep

from tagship.core.config import TimeoutsConfig
from tagship.core.result import Err, Ok, Result
from tagship.git.repository import GitError, Repository
from tagship.output.console import ConsoleProtocol, Style
from tagship.platform.process import redact
from tagship.services.release.errors import ReleaseError

PUSH_RETRY_DELAY_SECONDS = 2.0


def _is_transient_push_error(error: GitError) -> bool:
    text = error.message.lower()
    markers = (
        "timed out",
        "connection reset",
        "connection refused",
        "could not resolve host",
        "temporarily unavailable",
        "service unavailable",
        "bad gateway",
        "gateway timeout",
        "network is unreachable",
        "remote end hung up unexpectedly",
        "http 429",
        "http 500",
        "http 502",
        "http 503",
        "http 504",
    )
    return any(marker in text for marker in markers)


class GitVersionControl:
    """VersionControl backed by a local git checkout."""

    def __init__(
        self,
        *,
        repository: Repository,
        console: ConsoleProtocol,
        timeouts: TimeoutsConfig | None = None,
        push_retry_attempts: int = 1,
        sleep_fn: Callable[[float], None] = sleep,
    ) -> None:
        self.repository = repository
        self.console = console
        self.timeouts = timeouts or TimeoutsConfig()
        self.push_retry_attempts = max(1, push_retry_attempts)
        self._sleep = sleep_fn

    def tag_exists(self, name: str) -> bool:
        return self.repository.tag_exists(name)

    def tag(self, name: str, *, dry_run: bool = False) -> Result[None, ReleaseError]:
        self.console.print(f"git tag -a {name} -m {name}", Style.DIM)
        if dry_run:
            return Ok(None)

        result = self.repository.create_annotated_tag(
            name, message=name, timeout=self.timeouts.tag
        )
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="tag_failed",
                    message=f"failed to create tag: {name}",
                    hint=result.error.message or None,
                )
            )
        return Ok(None)

    def push(
        self,
        remote_url: str,
        tag: str,
        *,
        secrets: tuple[str, ...] = (),
        dry_run: bool = False,
    ) -> Result[None, ReleaseError]:
        self.console.print(f"git push {redact(remote_url, secrets)} refs/tags/{tag}", Style.DIM)
        if dry_run:
            return Ok(None)

        attempts = self.push_retry_attempts
        attempt = 0
        while True:
            result = self.repository.push_tag(
                remote_url, tag, secrets=secrets, timeout=self.timeouts.push
            )
            if isinstance(result, Ok):
                if result.value:
                    self.console.print(result.value, Style.DIM)
                return Ok(None)

            error = result.error
            attempt += 1
            if attempt < attempts and _is_transient_push_error(error):
                self.console.warning(f"push failed, retrying ({attempt + 1}/{attempts})")
                self._sleep(PUSH_RETRY_DELAY_SECONDS * attempt)
                continue

            return Err(
                ReleaseError(
                    kind="push_failed",
                    message=f"failed to push tag: {tag}",
                    hint=error.message or None,
                )
            )
