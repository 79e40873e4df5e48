"""Exit codes for the release CLI.

Each release step owns one code so a failing pipeline can tell which step
broke from the exit status alone. The values are part of the CLI contract
and must remain stable:
- 0: Success
- 1: Publish to the package registry failed
- 2: Tag creation failed (including "tag already exists")
- 3: Tag push to the remote failed
- 4: The package version could not be resolved
- 5: Configuration error (missing credentials, invalid config file)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes, one per release step."""

    OK = 0
    PUBLISH_FAILED = 1
    TAG_FAILED = 2
    PUSH_FAILED = 3
    VERSION_UNRESOLVED = 4
    CONFIG_ERROR = 5

    def __str__(self) -> str:
        """Return human-readable name."""
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK

    @property
    def is_error(self) -> bool:
        return self != ErrorCode.OK
