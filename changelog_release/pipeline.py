"""Release pipeline: changelog → commit → tag → push.

This module orchestrates a release run:
1. Promote the Unreleased changelog section into a dated, linked release
2. Commit the changelog as the release commit
3. Tag the commit with the version and, optionally, the floating
   major and major.minor aliases
4. Push the commit, then every tag (aliases are force-pushed)
5. Emit the commit hash and version tag as step outputs

Stages run in order and the first failure ends the run. Nothing already
applied is rolled back; the recovery path is to fix the cause (e.g. delete
the conflicting tag) and run again.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from pathlib import Path

from .changelog import Changelog, Release, parse
from .config import RunConfig
from .exceptions import ReleaseError, TagConflictError, TagExistsError
from .identity import resolve_identity
from .models import Credentials, Identity
from .repo import (
    commit,
    create_tag,
    delete_tag,
    head,
    list_tags,
    push,
    stage,
    tag_refspec,
)
from .shell import fatal, step
from .versions import is_alias, strip_prefix


def initialize(config: RunConfig) -> tuple[Changelog, Identity, Credentials]:
    """Parse the changelog and resolve who commits and pushes."""
    changelog = parse(config.changelog_file)
    identity, credentials = resolve_identity(config)
    print(f"  author: {identity.author.name} <{identity.author.email}>")
    return changelog, identity, credentials


def release_url(changelog: Changelog, config: RunConfig) -> str:
    """Pick the URL linked from the new release heading.

    The first release links to its tag's release page. Later releases
    link to a compare view from the previous release.
    """
    base = config.repository_url
    tag_page = f"{base}/releases/tag/{config.version}"

    latest = changelog.latest_release()
    if latest is None:
        return tag_page
    if latest.version is None:
        print(
            f"  Warning: latest release '{latest.label}' has no version, "
            f"linking {config.version} to its release page"
        )
        return tag_page
    return f"{base}/compare/v{latest.version}...{config.version}"


def update_changelog(
    changelog: Changelog, config: RunConfig, *, today: date | None = None
) -> Release:
    """Promote Unreleased into a release for config.version and save the file.

    Args:
        changelog: Parsed changelog, modified in place.
        config: Run configuration.
        today: Release date; defaults to the current UTC date.

    Returns:
        The newly created release entry.
    """
    step("updating changelog file")

    if changelog.unreleased is not None and not changelog.unreleased.body:
        print(
            f"  Warning: Unreleased section is empty, {config.version} has no entries"
        )
    url = release_url(changelog, config)
    released_on = (today or datetime.now(timezone.utc).date()).strftime("%Y-%m-%d")
    release = changelog.promote_unreleased(
        strip_prefix(config.version), released_on, url
    )
    changelog.set_unreleased_url(
        f"{config.repository_url}/compare/{config.version}...HEAD"
    )
    changelog.save(config.changelog_file)

    print(f"  {release.label} - {release.date} ({release.url})")
    return release


def commit_changelog(config: RunConfig, identity: Identity) -> str:
    """Stage the changelog and create the release commit.

    Returns:
        The new commit hash.
    """
    step("committing changes")

    stage(config.changelog_file)
    sha = commit(strip_prefix(config.version), identity.author, identity.committer)

    print(f"  {sha}")
    return sha


def create_tags(config: RunConfig, identity: Identity) -> None:
    """Tag HEAD with every reference in config.refs.

    The exact version must be new to the repository. An alias that already
    exists is deleted and recreated at HEAD. Tags created before a failure
    are left in place.

    Raises:
        TagConflictError: If the exact version tag already exists.
        TagError: If a tag cannot be created, or an alias cannot be replaced.
    """
    step("creating tags")

    if config.version in list_tags():
        raise TagConflictError(f"tag {config.version} already exists")

    target = head()
    tagger = identity.committer
    for ref in config.refs:
        try:
            create_tag(ref, target, ref, tagger)
        except TagExistsError:
            if not is_alias(ref, config.version):
                raise
            delete_tag(ref)
            create_tag(ref, target, ref, tagger)
            print(f"  {ref} (moved)")
        else:
            print(f"  {ref}")


def push_changes(config: RunConfig, credentials: Credentials) -> None:
    """Push the current branch, then each tag in config.refs.

    Aliases are force-pushed since they move between releases; the exact
    version tag never is.
    """
    step("pushing changes")

    push(["HEAD"], credentials)
    print("  HEAD")

    for ref in config.refs:
        force = is_alias(ref, config.version)
        push([tag_refspec(ref, force=force)], credentials)
        print(f"  {ref} (forced)" if force else f"  {ref}")


def write_outputs(outputs: dict[str, str], output_file: Path | None) -> None:
    """Print step outputs and append them to the GitHub output file."""
    step("creating outputs")
    for key, value in outputs.items():
        print(f"  {key}={value}")
        if output_file is not None:
            with open(output_file, "a") as fh:
                fh.write(f"{key}={value}\n")


def run_release(config: RunConfig) -> dict[str, str]:
    """Execute the full release pipeline.

    Any stage failure prints the error and exits with status 1.

    Returns:
        The step outputs: "hash" (release commit) and "tag" (exact version).
    """
    try:
        changelog, identity, credentials = initialize(config)
    except ReleaseError as exc:
        fatal(f"initialization error: {exc}")

    try:
        update_changelog(changelog, config)
    except ReleaseError as exc:
        fatal(f"error updating changelog file: {exc}")

    try:
        sha = commit_changelog(config, identity)
    except ReleaseError as exc:
        fatal(f"error committing changes: {exc}")

    try:
        create_tags(config, identity)
    except ReleaseError as exc:
        fatal(f"error creating tags: {exc}")

    try:
        push_changes(config, credentials)
    except ReleaseError as exc:
        fatal(f"error pushing changes: {exc}")

    outputs = {"hash": sha, "tag": config.version}
    try:
        write_outputs(outputs, config.github_output)
    except OSError as exc:
        fatal(f"error defining output: {exc}")

    print(f"\n{'=' * 60}\nDone!\n{'=' * 60}")
    return outputs
