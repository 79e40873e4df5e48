"""Capabilities the release sequencer depends on.

Concrete tools (Cargo, git) live in ``cargo.py`` and ``vcs.py``; tests
substitute in-memory fakes.
"""

from __future__ import annotations

from typing import Protocol

from tagship.core.result import Result
from tagship.services.release.errors import ReleaseError


class PackagePublisher(Protocol):
    def publish(self, token: str, *, dry_run: bool = False) -> Result[None, ReleaseError]:
        """Upload the current package to the registry using ``token``."""
        ...

    def package_id(self) -> Result[str, ReleaseError]:
        """Return the package manager's identifier for the current package."""
        ...


class VersionControl(Protocol):
    def tag_exists(self, name: str) -> bool: ...

    def tag(self, name: str, *, dry_run: bool = False) -> Result[None, ReleaseError]:
        """Create an annotated tag ``name`` on the current commit."""
        ...

    def push(
        self,
        remote_url: str,
        tag: str,
        *,
        secrets: tuple[str, ...] = (),
        dry_run: bool = False,
    ) -> Result[None, ReleaseError]:
        """Push ``tag`` to ``remote_url``, which may embed a credential."""
        ...
