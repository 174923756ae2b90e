"""Git repository operations used by the release pipeline.

Thin wrappers over the git CLI that translate failures into the typed
errors of each pipeline stage.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from .exceptions import (
    CommitError,
    GitError,
    PushError,
    StageError,
    TagError,
    TagExistsError,
)
from .models import Credentials, Signature
from .shell import git

DEFAULT_REMOTE = "origin"


def head() -> str:
    """Return the commit hash HEAD currently points at."""
    return git("rev-parse", "HEAD")


def stage(path: Path) -> None:
    """Stage a single file.

    Raises:
        StageError: If the path does not exist or git refuses to add it.
    """
    if not Path(path).exists():
        raise StageError(f"error staging {path}: file does not exist")
    try:
        git("add", "--", str(path))
    except GitError as exc:
        raise StageError(f"error staging {path}", stderr=exc.stderr) from exc


def commit(message: str, author: Signature, committer: Signature) -> str:
    """Commit the staged changes and return the new commit hash.

    Raises:
        CommitError: If git cannot create the commit (e.g., nothing staged).
    """
    env = {**author.git_env("AUTHOR"), **committer.git_env("COMMITTER")}
    try:
        git("commit", "-m", message, env=env)
    except GitError as exc:
        raise CommitError("error committing changes", stderr=exc.stderr) from exc
    return head()


def list_tags() -> list[str]:
    """Return the names of all tags in the repository."""
    tags = git("tag", "--list")
    return tags.splitlines() if tags else []


def tag_exists(name: str) -> bool:
    return bool(git("rev-parse", "-q", "--verify", f"refs/tags/{name}", check=False))


def create_tag(name: str, target: str, message: str, tagger: Signature) -> None:
    """Create an annotated tag pointing at `target`.

    Raises:
        TagExistsError: If a tag named `name` already exists.
        TagError: If git fails to create the tag.
    """
    if tag_exists(name):
        raise TagExistsError(f"tag {name} already exists")
    try:
        git("tag", "-a", name, "-m", message, target, env=tagger.git_env("COMMITTER"))
    except GitError as exc:
        raise TagError(f"error tagging a commit ({name})", stderr=exc.stderr) from exc


def delete_tag(name: str) -> None:
    try:
        git("tag", "-d", name)
    except GitError as exc:
        raise TagError(f"error deleting tag ({name})", stderr=exc.stderr) from exc


def tag_refspec(ref: str, *, force: bool = False) -> str:
    """Build the refspec that publishes a tag under the same name.

    A leading "+" lets the remote tag be overwritten.

    Examples:
        ("v1.4.0", force=False) → "refs/tags/v1.4.0:refs/tags/v1.4.0"
        ("v1", force=True) → "+refs/tags/v1:refs/tags/v1"
    """
    spec = f"refs/tags/{ref}:refs/tags/{ref}"
    return f"+{spec}" if force else spec


def auth_env(credentials: Credentials) -> dict[str, str]:
    """Environment that injects an http.extraheader for a single git call."""
    return {
        "GIT_CONFIG_COUNT": "1",
        "GIT_CONFIG_KEY_0": "http.extraheader",
        "GIT_CONFIG_VALUE_0": credentials.auth_header(),
    }


def push(
    refspecs: Sequence[str], credentials: Credentials, *, remote: str = DEFAULT_REMOTE
) -> None:
    """Push refspecs to the remote, authenticating over HTTP basic auth.

    The auth header is handed to git through GIT_CONFIG_* environment
    variables so the token never appears on the command line.

    Raises:
        PushError: On any transport, authentication or rejected update.
    """
    try:
        git("push", remote, *refspecs, env=auth_env(credentials))
    except GitError as exc:
        refs = " ".join(refspecs)
        raise PushError(f"error pushing {refs}", stderr=exc.stderr) from exc
