"""Git operations module.

Usage:
    from tagship.git import Repository

    repo = Repository(Path("/path/to/repo"))
    if repo.tag_exists("v1.0.0"):
        print("already released")
"""

from tagship.git.repository import (
    GitError,
    Repository,
    authenticated_url,
)

__all__ = [
    "GitError",
    "Repository",
    "authenticated_url",
]
