"""Commit identity resolution.

The committer is always the bot identity. The author is the actor who
triggered the run; their public profile email replaces the noreply
placeholder when the hosting API has one.
"""

from __future__ import annotations

import json
import urllib.error
import urllib.parse
import urllib.request
from datetime import datetime, timezone

from .config import RunConfig
from .exceptions import ProfileLookupError
from .models import Credentials, Identity, Signature, bot_signature

PROFILE_TIMEOUT = 10


def noreply_email(name: str) -> str:
    """Placeholder email for a user without a public address."""
    return f"{name}@users.noreply.github.com"


def fetch_profile_email(
    api_url: str, name: str, token: str, *, timeout: float = PROFILE_TIMEOUT
) -> str:
    """Fetch the public email of a user profile.

    Args:
        api_url: REST API base URL (e.g., https://api.github.com).
        name: Login of the user to look up.
        token: Bearer token for the request.
        timeout: Seconds before the request is abandoned.

    Returns:
        The profile email, or "" if the profile has none.

    Raises:
        ProfileLookupError: On any non-200 status, transport error, or
            undecodable response body.
    """
    url = f"{api_url}/users/{urllib.parse.quote(name)}"
    request = urllib.request.Request(url, method="GET")
    request.add_header("Authorization", f"Bearer {token}")
    request.add_header("Accept", "application/vnd.github+json")

    try:
        with urllib.request.urlopen(request, timeout=timeout) as response:
            status = response.status
            body = response.read()
    except urllib.error.HTTPError as exc:
        raise ProfileLookupError(f"error contacting api: http code {exc.code}") from exc
    except OSError as exc:  # URLError, timeouts and connection resets
        raise ProfileLookupError(f"error fetching author information: {exc}") from exc

    if status != 200:
        raise ProfileLookupError(f"error contacting api: http code {status}")

    try:
        profile = json.loads(body)
    except ValueError as exc:  # JSONDecodeError or UnicodeDecodeError
        raise ProfileLookupError(f"error decoding response body: {exc}") from exc
    if not isinstance(profile, dict):
        raise ProfileLookupError("error decoding response body: expected an object")

    email = profile.get("email") or ""
    if not isinstance(email, str):
        raise ProfileLookupError(
            f"error decoding response body: email is not a string: {email!r}"
        )
    return email


def resolve_identity(
    config: RunConfig, *, now: datetime | None = None
) -> tuple[Identity, Credentials]:
    """Determine the commit identities and push credentials for a run.

    An empty actor collapses the author into the committer, and no lookup
    is made. Otherwise the actor's profile is fetched; a failed lookup is
    fatal rather than silently falling back to the placeholder.

    Raises:
        ProfileLookupError: If the profile lookup fails.
    """
    when = now or datetime.now(timezone.utc)
    committer = bot_signature(when)

    if not config.actor:
        author = committer
    else:
        email = fetch_profile_email(
            config.api_url, config.actor, config.token.get_secret_value()
        )
        author = Signature(
            name=config.actor, email=email or noreply_email(config.actor), when=when
        )

    credentials = Credentials(username=committer.name, token=config.token)
    return Identity(author=author, committer=committer), credentials
