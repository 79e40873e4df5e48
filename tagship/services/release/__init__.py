"""Release service: sequencer plus the package-manager and git adapters."""

from tagship.services.release.cargo import CargoPublisher
from tagship.services.release.errors import ReleaseError
from tagship.services.release.ports import PackagePublisher, VersionControl
from tagship.services.release.sequencer import (
    ReleaseContext,
    ReleaseSequencer,
    ReleaseStep,
    StepFailure,
)
from tagship.services.release.vcs import GitVersionControl
from tagship.services.release.version import extract_version, format_tag, resolve_version

__all__ = [
    "CargoPublisher",
    "GitVersionControl",
    "PackagePublisher",
    "ReleaseContext",
    "ReleaseError",
    "ReleaseSequencer",
    "ReleaseStep",
    "StepFailure",
    "VersionControl",
    "extract_version",
    "format_tag",
    "resolve_version",
]
