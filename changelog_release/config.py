"""Run configuration loaded from the CI environment.

All inputs arrive as environment variables (surfaced as CLI options) and
are validated once, up front, into an immutable RunConfig.
"""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, SecretStr, ValidationError, field_validator

from .exceptions import ConfigError
from .versions import parse_version, version_references

DEFAULT_CHANGELOG = "CHANGELOG.md"
DEFAULT_SERVER_URL = "https://github.com"
DEFAULT_API_URL = "https://api.github.com"

# Spellings accepted for boolean flags such as UPDATE_TAGS
_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}

_REPOSITORY_RE = re.compile(r"^[\w.-]+/[\w.-]+$")


class RunConfig(BaseModel):
    """Immutable inputs for a single release run.

    Attributes:
        version: Release version with its "v" prefix (e.g., "v1.4.0").
        update_tags: Also create/move the floating major and major.minor tags.
        changelog_file: Path of the changelog to promote.
        repository: "owner/name" slug used to build web and compare URLs.
        token: Token for the hosting API and for pushing.
        actor: Name of the user who triggered the run; may be empty.
        server_url: Web base URL of the hosting provider.
        api_url: REST API base URL of the hosting provider.
        github_output: File that step outputs are appended to, if any.
    """

    model_config = ConfigDict(frozen=True)

    version: str
    update_tags: bool = False
    changelog_file: Path = Path(DEFAULT_CHANGELOG)
    repository: str
    token: SecretStr
    actor: str = ""
    server_url: str = DEFAULT_SERVER_URL
    api_url: str = DEFAULT_API_URL
    github_output: Path | None = None

    @field_validator("version")
    @classmethod
    def _check_version(cls, value: str) -> str:
        parse_version(value)
        return value

    @field_validator("update_tags", mode="before")
    @classmethod
    def _parse_bool(cls, value: object) -> object:
        if value is None or value == "":
            return False
        if isinstance(value, bool):
            return value
        if value in _TRUE:
            return True
        if value in _FALSE:
            return False
        raise ValueError(f"invalid boolean value {value!r}")

    @field_validator("changelog_file", mode="before")
    @classmethod
    def _default_changelog(cls, value: object) -> object:
        return value or DEFAULT_CHANGELOG

    @field_validator("github_output", mode="before")
    @classmethod
    def _empty_output(cls, value: object) -> object:
        return value or None

    @field_validator("repository")
    @classmethod
    def _check_repository(cls, value: str) -> str:
        if not _REPOSITORY_RE.match(value):
            raise ValueError(f"expected an 'owner/name' repository slug, got {value!r}")
        return value

    @field_validator("token")
    @classmethod
    def _check_token(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value():
            raise ValueError("token must not be empty")
        return value

    @field_validator("server_url", "api_url")
    @classmethod
    def _strip_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def refs(self) -> list[str]:
        """Tag names to create, exact version first."""
        return version_references(self.version, self.update_tags)

    @property
    def repository_url(self) -> str:
        """Web URL of the repository (e.g., https://github.com/owner/name)."""
        return f"{self.server_url}/{self.repository}"


def load_config(**values: object) -> RunConfig:
    """Validate raw inputs into a RunConfig.

    Raises:
        ConfigError: If any input is missing or invalid.
    """
    try:
        return RunConfig(**values)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}"
            for err in exc.errors()
        )
        raise ConfigError(problems) from exc
