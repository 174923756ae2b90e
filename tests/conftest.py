"""Shared test fixtures."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from changelog_release.config import RunConfig, load_config
from changelog_release.models import Identity, Signature, bot_signature

SAMPLE_CHANGELOG = """\
# Changelog

All notable changes to this project will be documented in this file.

## [Unreleased]

### Added
- Floating tags

## [1.9.0] - 2024-03-01

### Fixed
- Compare links

## [1.8.0] - 2024-01-15

### Added
- First cut

[Unreleased]: https://github.com/octo/widgets/compare/v1.9.0...HEAD
[1.9.0]: https://github.com/octo/widgets/compare/v1.8.0...v1.9.0
[1.8.0]: https://github.com/octo/widgets/releases/tag/v1.8.0
"""

FRESH_CHANGELOG = """\
# Changelog

## [Unreleased]
### Added
- Everything
"""


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)


@pytest.fixture
def identity(now: datetime) -> Identity:
    return Identity(
        author=Signature(name="octocat", email="octocat@example.com", when=now),
        committer=bot_signature(now),
    )


@pytest.fixture
def tmp_changelog(tmp_path: Path) -> Path:
    """Create a changelog with two releases and pending changes."""
    path = tmp_path / "CHANGELOG.md"
    path.write_text(SAMPLE_CHANGELOG)
    return path


@pytest.fixture
def make_config(tmp_path: Path):
    """Build a RunConfig with sensible defaults, overridable per test."""

    def _make(**overrides: object) -> RunConfig:
        values: dict[str, object] = {
            "version": "v2.0.0",
            "update_tags": "false",
            "changelog_file": tmp_path / "CHANGELOG.md",
            "repository": "octo/widgets",
            "token": "s3cret",
            "actor": "octocat",
        }
        values.update(overrides)
        return load_config(**values)

    return _make
