"""Tests for changelog_release.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from changelog_release.config import load_config
from changelog_release.exceptions import ConfigError


class TestLoadConfig:
    def test_defaults(self) -> None:
        config = load_config(version="v1.0.0", repository="octo/widgets", token="t")
        assert config.update_tags is False
        assert config.changelog_file == Path("CHANGELOG.md")
        assert config.actor == ""
        assert config.github_output is None
        assert config.repository_url == "https://github.com/octo/widgets"

    def test_refs_follow_update_tags(self, make_config) -> None:
        assert make_config(version="v2.1.0").refs == ["v2.1.0"]
        assert make_config(version="v2.1.0", update_tags="true").refs == [
            "v2.1.0",
            "v2",
            "v2.1",
        ]

    @pytest.mark.parametrize("raw", ["1", "t", "T", "TRUE", "true", "True"])
    def test_truthy_update_tags(self, make_config, raw: str) -> None:
        assert make_config(update_tags=raw).update_tags is True

    @pytest.mark.parametrize("raw", ["0", "f", "F", "FALSE", "false", "False", ""])
    def test_falsy_update_tags(self, make_config, raw: str) -> None:
        assert make_config(update_tags=raw).update_tags is False

    @pytest.mark.parametrize("raw", ["yes", "on", "2", "tru"])
    def test_malformed_update_tags_is_fatal(self, make_config, raw: str) -> None:
        with pytest.raises(ConfigError, match="update_tags"):
            make_config(update_tags=raw)

    @pytest.mark.parametrize("raw", ["1.0.0", "v1.0", "latest"])
    def test_invalid_version(self, make_config, raw: str) -> None:
        with pytest.raises(ConfigError, match="version"):
            make_config(version=raw)

    def test_invalid_repository(self, make_config) -> None:
        with pytest.raises(ConfigError, match="repository"):
            make_config(repository="widgets")

    def test_empty_token(self, make_config) -> None:
        with pytest.raises(ConfigError, match="token"):
            make_config(token="")

    def test_empty_changelog_file_uses_default(self, make_config) -> None:
        assert make_config(changelog_file="").changelog_file == Path("CHANGELOG.md")

    def test_server_url_trailing_slash(self, make_config) -> None:
        config = make_config(server_url="https://ghe.example.com/")
        assert config.repository_url == "https://ghe.example.com/octo/widgets"

    def test_token_is_not_rendered(self, make_config) -> None:
        assert "s3cret" not in repr(make_config())

    def test_config_is_frozen(self, make_config) -> None:
        config = make_config()
        with pytest.raises(Exception):
            config.version = "v9.9.9"  # type: ignore[misc]
