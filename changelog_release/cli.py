"""CLI entry point for changelog-release."""

from __future__ import annotations

from importlib.metadata import version as pkg_version

import click

from .config import DEFAULT_API_URL, DEFAULT_CHANGELOG, DEFAULT_SERVER_URL, load_config
from .exceptions import ConfigError
from .pipeline import run_release
from .shell import fatal, step

__version__ = pkg_version("changelog-release")

REQUIRED_ENV = {
    "VERSION": "release_version",
    "GITHUB_REPOSITORY": "repository",
    "GITHUB_TOKEN": "token",
}


@click.command()
@click.version_option(__version__, prog_name="changelog-release")
@click.option(
    "--release-version",
    envvar="VERSION",
    help="Version to release, with a 'v' prefix (e.g., v1.4.0).",
)
@click.option(
    "--update-tags",
    envvar="UPDATE_TAGS",
    default="",
    help="Also move the floating major and major.minor tags (true/false).",
)
@click.option(
    "--changelog-file",
    envvar="CHANGELOG_FILE",
    default=DEFAULT_CHANGELOG,
    show_default=True,
    help="Changelog to promote.",
)
@click.option("--repository", envvar="GITHUB_REPOSITORY", help="owner/name slug.")
@click.option("--token", envvar="GITHUB_TOKEN", help="Token for the API and pushes.")
@click.option("--actor", envvar="GITHUB_ACTOR", default="", help="Commit author login.")
@click.option(
    "--server-url",
    envvar="GITHUB_SERVER_URL",
    default=DEFAULT_SERVER_URL,
    show_default=True,
)
@click.option(
    "--api-url",
    envvar="GITHUB_API_URL",
    default=DEFAULT_API_URL,
    show_default=True,
)
@click.option(
    "--github-output",
    envvar="GITHUB_OUTPUT",
    type=click.Path(dir_okay=False),
    help="File that the hash and tag outputs are appended to.",
)
def cli(**options: str | None) -> None:
    """Release a version from the changelog's Unreleased section.

    Promotes Unreleased into a dated release, commits the changelog, tags
    the commit and pushes everything. Inputs are read from the CI
    environment (usually called from a GitHub Actions workflow).
    """
    step("initializing")

    missing = [env for env, key in REQUIRED_ENV.items() if not options[key]]
    if missing:
        fatal(f"missing required environmental variable: {', '.join(missing)}")

    try:
        config = load_config(
            version=options.pop("release_version"),
            **options,
        )
    except ConfigError as exc:
        fatal(f"initialization error: {exc}")

    run_release(config)
