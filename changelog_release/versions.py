"""Version parsing and tag reference utilities.

Release versions are "v"-prefixed SemVer strings (e.g., "v1.4.0"). The
floating aliases derived from them ("v1", "v1.4") are moved on every
release of that line.
"""

from __future__ import annotations

import semver


def parse_version(version_str: str) -> semver.Version:
    """Parse a "v"-prefixed version string into a semver.Version object.

    Raises:
        ValueError: If the prefix is missing or the remainder is not a
            full MAJOR.MINOR.PATCH SemVer version.
    """
    if not version_str.startswith("v"):
        raise ValueError(
            f"invalid semantic version {version_str!r} "
            "(make sure to add a 'v' prefix: vX.X.X)"
        )
    return semver.Version.parse(version_str[1:])


def strip_prefix(version_str: str) -> str:
    """Drop the leading "v" from a version string: "v1.2.3" → "1.2.3"."""
    return version_str.removeprefix("v")


def major_alias(version_str: str) -> str:
    """Return the floating major tag for a version: "v2.1.3" → "v2"."""
    return f"v{parse_version(version_str).major}"


def major_minor_alias(version_str: str) -> str:
    """Return the floating major.minor tag for a version: "v2.1.3" → "v2.1"."""
    v = parse_version(version_str)
    return f"v{v.major}.{v.minor}"


def version_references(version_str: str, update_tags: bool) -> list[str]:
    """Build the ordered list of tag names to create for a release.

    The exact version always comes first. With update_tags, the major and
    major.minor aliases follow.

    Examples:
        ("v1.4.0", False) → ["v1.4.0"]
        ("v1.4.0", True) → ["v1.4.0", "v1", "v1.4"]
    """
    refs = [version_str]
    if update_tags:
        refs.extend([major_alias(version_str), major_minor_alias(version_str)])
    return refs


def is_alias(ref: str, version_str: str) -> bool:
    """True for every reference other than the exact release version."""
    return ref != version_str
