"""Data models for changelog-release.

These Pydantic models represent the identities and credentials passed
between the stages of the release pipeline.
"""

from __future__ import annotations

import base64
from datetime import datetime

from pydantic import BaseModel, ConfigDict, SecretStr

BOT_NAME = "github-actions[bot]"
BOT_EMAIL = "github-actions[bot]@users.noreply.github.com"


class Signature(BaseModel):
    """A git identity stamped with a point in time.

    Attributes:
        name: Display name (e.g., "octocat").
        email: Email address recorded in commits and tags.
        when: Timestamp recorded alongside the identity.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    email: str
    when: datetime

    def git_date(self) -> str:
        """Format `when` in git's internal "<unix-seconds> <offset>" form."""
        offset = self.when.strftime("%z") or "+0000"
        return f"{int(self.when.timestamp())} {offset}"

    def git_env(self, role: str) -> dict[str, str]:
        """Environment variables that make git record this identity.

        Args:
            role: "AUTHOR" or "COMMITTER". Tags take their tagger from the
                  COMMITTER variables.
        """
        return {
            f"GIT_{role}_NAME": self.name,
            f"GIT_{role}_EMAIL": self.email,
            f"GIT_{role}_DATE": self.git_date(),
        }


class Identity(BaseModel):
    """The author/committer pair used for the release commit.

    Attributes:
        author: The actor who triggered the run.
        committer: The bot identity, also used as the tagger.
    """

    model_config = ConfigDict(frozen=True)

    author: Signature
    committer: Signature


class Credentials(BaseModel):
    """Username and token used for authenticated pushes."""

    model_config = ConfigDict(frozen=True)

    username: str
    token: SecretStr

    def auth_header(self) -> str:
        """HTTP basic authorization header for git's http.extraheader."""
        raw = f"{self.username}:{self.token.get_secret_value()}".encode()
        return f"AUTHORIZATION: basic {base64.b64encode(raw).decode()}"


def bot_signature(when: datetime) -> Signature:
    """Build the constant bot committer identity for the given time."""
    return Signature(name=BOT_NAME, email=BOT_EMAIL, when=when)
