"""Release sequencer.

Runs the release as an ordered list of steps:

    1. publish   -> exit 1 on failure
    2. version   -> exit 4 on failure
    3. tag       -> exit 2 on failure
    4. push      -> exit 3 on failure

A step only starts after the previous one returned Ok. The first Err stops
the run and its step's failure code becomes the exit status. Nothing is
retried here; retry policy, if any, belongs to the capability implementation.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from tagship.core.config import ReleaseConfig
from tagship.core.errors import ErrorCode
from tagship.core.result import Err, Ok, Result
from tagship.git.repository import authenticated_url
from tagship.output.console import ConsoleProtocol
from tagship.output.errors import print_release_error
from tagship.services.release.errors import ReleaseError
from tagship.services.release.ports import PackagePublisher, VersionControl
from tagship.services.release.version import extract_version, format_tag

__all__ = [
    "ReleaseContext",
    "ReleaseSequencer",
    "ReleaseStep",
    "StepFailure",
]


class ReleaseContext:
    """State carried between steps of a single run.

    The version is written once, by the version step, and read by the tag and
    push steps.
    """

    def __init__(self, *, tag_prefix: str = "v") -> None:
        self.tag_prefix = tag_prefix
        self._version: str | None = None

    @property
    def version(self) -> str | None:
        return self._version

    @property
    def tag(self) -> str | None:
        if self._version is None:
            return None
        return format_tag(self._version, prefix=self.tag_prefix)

    def set_version(self, version: str) -> None:
        if self._version is not None:
            raise RuntimeError(f"version already resolved: {self._version}")
        self._version = version

    def require_tag(self) -> str:
        tag = self.tag
        if tag is None:
            raise RuntimeError("tag requested before the version step ran")
        return tag


StepAction = Callable[[ReleaseContext], Result[None, ReleaseError]]


@dataclass(frozen=True, slots=True)
class ReleaseStep:
    name: str
    ordinal: int
    failure_code: ErrorCode
    action: StepAction


@dataclass(frozen=True, slots=True)
class StepFailure:
    step: ReleaseStep
    error: ReleaseError

    @property
    def exit_code(self) -> ErrorCode:
        return self.step.failure_code


class ReleaseSequencer:
    """Publish, resolve the version, tag, push; stop at the first failure."""

    def __init__(
        self,
        *,
        config: ReleaseConfig,
        publisher: PackagePublisher,
        vcs: VersionControl,
        console: ConsoleProtocol,
        dry_run: bool = False,
    ) -> None:
        self.config = config
        self.publisher = publisher
        self.vcs = vcs
        self.console = console
        self.dry_run = dry_run

    def steps(self) -> tuple[ReleaseStep, ...]:
        return (
            ReleaseStep("publish", 1, ErrorCode.PUBLISH_FAILED, self._publish),
            ReleaseStep("version", 2, ErrorCode.VERSION_UNRESOLVED, self._resolve_version),
            ReleaseStep("tag", 3, ErrorCode.TAG_FAILED, self._tag),
            ReleaseStep("push", 4, ErrorCode.PUSH_FAILED, self._push),
        )

    def execute(self) -> Result[ReleaseContext, StepFailure]:
        """Run every step in order, returning the context or the first failure."""
        context = ReleaseContext(tag_prefix=self.config.tag_prefix)
        steps = self.steps()
        for step in steps:
            self.console.header(f"[{step.ordinal}/{len(steps)}] {step.name}")
            result = step.action(context)
            if isinstance(result, Err):
                return Err(StepFailure(step=step, error=result.error))
        return Ok(context)

    def run(self) -> ErrorCode:
        """Run the release and return the process exit code."""
        result = self.execute()
        if isinstance(result, Err):
            failure = result.error
            print_release_error(failure.error, self.console)
            return failure.exit_code

        tag = result.value.require_tag()
        if self.dry_run:
            self.console.success(f"dry run complete: would release {tag}")
        else:
            self.console.success(f"released {tag}")
        return ErrorCode.OK

    # Steps

    def _publish(self, context: ReleaseContext) -> Result[None, ReleaseError]:
        del context
        token = self.config.credentials.registry_token
        result = self.publisher.publish(token, dry_run=self.dry_run)
        if isinstance(result, Ok):
            self.console.success("published" if not self.dry_run else "publish dry run passed")
        return result

    def _resolve_version(self, context: ReleaseContext) -> Result[None, ReleaseError]:
        package_id = self.publisher.package_id()
        if isinstance(package_id, Err):
            return package_id

        version = extract_version(package_id.value)
        if isinstance(version, Err):
            return version

        context.set_version(version.value)
        self.console.success(f"version {version.value}")
        return Ok(None)

    def _tag(self, context: ReleaseContext) -> Result[None, ReleaseError]:
        tag = context.require_tag()
        if self.vcs.tag_exists(tag):
            return Err(
                ReleaseError(
                    kind="tag_exists",
                    message=f"tag already exists: {tag}",
                    hint="Bump the package version before releasing again.",
                )
            )

        result = self.vcs.tag(tag, dry_run=self.dry_run)
        if isinstance(result, Ok):
            self.console.success(f"tagged {tag}")
        return result

    def _push(self, context: ReleaseContext) -> Result[None, ReleaseError]:
        tag = context.require_tag()
        credentials = self.config.credentials
        url = authenticated_url(
            self.config.remote_url,
            user=self.config.remote_user,
            token=credentials.remote_token,
        )
        result = self.vcs.push(url, tag, secrets=credentials.secrets, dry_run=self.dry_run)
        if isinstance(result, Ok):
            self.console.success(f"pushed {tag} to {self.config.remote_url}")
        return result
