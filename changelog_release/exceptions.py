"""Exception hierarchy for changelog-release.

Every failure raised by the release pipeline derives from ReleaseError so
the run controller can catch one type per stage and report it.
"""

from __future__ import annotations


class ReleaseError(Exception):
    """Base class for all release pipeline errors."""


class ConfigError(ReleaseError):
    """Missing or invalid environment input."""


class ProfileLookupError(ReleaseError):
    """The author profile could not be fetched from the hosting API."""


class ChangelogError(ReleaseError):
    """Base class for changelog document errors."""


class ChangelogParseError(ChangelogError):
    """The changelog file could not be read or parsed."""


class PromotionError(ChangelogError):
    """The Unreleased section could not be promoted into a release."""


class ChangelogWriteError(ChangelogError):
    """The changelog could not be written back to disk."""


class GitError(ReleaseError):
    """A git command failed.

    Attributes:
        stderr: Captured stderr of the failing command, if any.
    """

    def __init__(self, message: str, *, stderr: str | None = None) -> None:
        super().__init__(message)
        self.stderr = stderr

    def __str__(self) -> str:
        message = super().__str__()
        if self.stderr:
            return f"{message}: {self.stderr.strip()}"
        return message


class StageError(GitError):
    """The changelog file could not be staged."""


class CommitError(GitError):
    """The release commit could not be created."""


class TagError(GitError):
    """A tag could not be created or replaced."""


class TagExistsError(TagError):
    """A tag with the requested name already exists."""


class TagConflictError(TagError):
    """The exact version tag already exists in the repository."""


class PushError(GitError):
    """The commit or a tag could not be pushed to the remote."""
