"""Tests for changelog_release.cli."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from changelog_release.cli import __version__, cli

ENV_VARS = (
    "VERSION",
    "UPDATE_TAGS",
    "CHANGELOG_FILE",
    "GITHUB_REPOSITORY",
    "GITHUB_TOKEN",
    "GITHUB_ACTOR",
    "GITHUB_SERVER_URL",
    "GITHUB_API_URL",
    "GITHUB_OUTPUT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CI-provided variables from leaking into the tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


ACTION_ENV = {
    "VERSION": "v1.4.0",
    "GITHUB_REPOSITORY": "octo/widgets",
    "GITHUB_TOKEN": "s3cret",
    "GITHUB_ACTOR": "octocat",
}


@patch("changelog_release.cli.run_release")
def test_reads_inputs_from_environment(
    mock_run: MagicMock, runner: CliRunner, tmp_path: Path
) -> None:
    env = {
        **ACTION_ENV,
        "UPDATE_TAGS": "true",
        "CHANGELOG_FILE": "docs/CHANGES.md",
        "GITHUB_OUTPUT": str(tmp_path / "out"),
    }

    result = runner.invoke(cli, [], env=env)

    assert result.exit_code == 0, result.output
    config = mock_run.call_args[0][0]
    assert config.version == "v1.4.0"
    assert config.refs == ["v1.4.0", "v1", "v1.4"]
    assert config.changelog_file == Path("docs/CHANGES.md")
    assert config.repository == "octo/widgets"
    assert config.actor == "octocat"
    assert config.github_output == tmp_path / "out"
    assert result.output.startswith("- initializing")


@patch("changelog_release.cli.run_release")
def test_options_override_environment(mock_run: MagicMock, runner: CliRunner) -> None:
    result = runner.invoke(cli, ["--release-version", "v2.0.0"], env=ACTION_ENV)

    assert result.exit_code == 0, result.output
    assert mock_run.call_args[0][0].version == "v2.0.0"


@patch("changelog_release.cli.run_release")
def test_missing_required_variables(mock_run: MagicMock, runner: CliRunner) -> None:
    result = runner.invoke(cli, [], env={"GITHUB_ACTOR": "octocat"})

    assert result.exit_code == 1
    assert (
        "ERROR: missing required environmental variable: "
        "VERSION, GITHUB_REPOSITORY, GITHUB_TOKEN" in result.output
    )
    mock_run.assert_not_called()


@patch("changelog_release.cli.run_release")
def test_invalid_version(mock_run: MagicMock, runner: CliRunner) -> None:
    result = runner.invoke(cli, [], env={**ACTION_ENV, "VERSION": "1.4.0"})

    assert result.exit_code == 1
    assert "ERROR: initialization error: version:" in result.output
    assert "'v' prefix" in result.output
    mock_run.assert_not_called()


@patch("changelog_release.cli.run_release")
def test_malformed_update_tags(mock_run: MagicMock, runner: CliRunner) -> None:
    result = runner.invoke(cli, [], env={**ACTION_ENV, "UPDATE_TAGS": "maybe"})

    assert result.exit_code == 1
    assert "update_tags" in result.output
    mock_run.assert_not_called()


def test_version_option(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output
