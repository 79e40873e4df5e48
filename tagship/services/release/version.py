from __future__ import annotations

import re

from tagship.core.result import Err, Ok, Result
from tagship.services.release.errors import ReleaseError
from tagship.services.release.ports import PackagePublisher

# Everything up to the last '#', then an optional "<name>:" or "<name>@"
# prefix (greedy up to the last separator), then the version.
_PKGID_RE = re.compile(r"^.*#(?:.*[:@])?(?P<version>.+)$")

# Characters a version may contain so that "v<version>" is a valid tag name.
_VERSION_RE = re.compile(r"^[0-9A-Za-z][0-9A-Za-z.+_-]*$")


def extract_version(package_id: str) -> Result[str, ReleaseError]:
    """Pull the version out of a package identifier.

    >>> extract_version("mypkg#1:2.3.4")
    Ok('2.3.4')
    >>> extract_version("registry+https://example.org/index#foo@0.4.0")
    Ok('0.4.0')

    An identifier without '#' is rejected rather than turned into a tag name.
    """
    text = package_id.strip()
    m = _PKGID_RE.match(text)
    if m is None:
        return Err(
            ReleaseError(
                kind="version_unresolved",
                message=f"package id has no '#' version segment: {text!r}",
                hint="Expected output like 'path+file:///src/foo#0.1.0'.",
            )
        )

    version = m.group("version").strip()
    if not _VERSION_RE.match(version):
        return Err(
            ReleaseError(
                kind="version_unresolved",
                message=f"invalid version {version!r} in package id {text!r}",
            )
        )
    return Ok(version)


def format_tag(version: str, *, prefix: str = "v") -> str:
    return f"{prefix}{version}"


def resolve_version(publisher: PackagePublisher) -> Result[str, ReleaseError]:
    """Query the package manager and extract the current version."""
    return publisher.package_id().flat_map(extract_version)
