"""Keep a Changelog document model.

Parses a markdown changelog of the form::

    # Changelog
    Free description.

    ## [Unreleased]
    ### Added
    - Something new

    ## [1.0.0] - 2024-01-15
    ### Fixed
    - Something broken

    [Unreleased]: https://github.com/owner/repo/compare/v1.0.0...HEAD
    [1.0.0]: https://github.com/owner/repo/releases/tag/v1.0.0

Section bodies are kept as free-form text. Link reference definitions are
attached to the section whose label they name and re-emitted at the bottom
of the document on save.
"""

from __future__ import annotations

import re
from pathlib import Path

import semver
from pydantic import BaseModel, Field

from .exceptions import (
    ChangelogError,
    ChangelogParseError,
    ChangelogWriteError,
    PromotionError,
)

UNRELEASED = "Unreleased"

_TITLE_RE = re.compile(r"^#\s+(?P<title>.+?)\s*$")
_SECTION_RE = re.compile(r"^##\s+(?P<heading>.+?)\s*$")
_UNRELEASED_RE = re.compile(r"^\[?unreleased\]?$", re.IGNORECASE)
_RELEASE_RE = re.compile(
    r"^\[?(?P<label>[^\]\s]+)\]?"
    r"(?:\s+-\s+(?P<date>\d{4}-\d{2}-\d{2}))?"
    r"(?P<yanked>\s+\[YANKED\])?$",
    re.IGNORECASE,
)
_LINK_RE = re.compile(r"^\[(?P<label>[^\]]+)\]:\s*(?P<url>\S+)\s*$")


class Unreleased(BaseModel):
    """The section accumulating changes that have not shipped yet.

    Attributes:
        body: Markdown between the heading and the next section.
        url: Compare URL from the latest release to HEAD.
    """

    body: str = ""
    url: str | None = None


class Release(BaseModel):
    """A dated release entry.

    Attributes:
        label: Text inside the heading brackets (e.g., "1.0.0").
        version: SemVer version without "v", or None if the label isn't one.
        date: Release date in YYYY-MM-DD form.
        yanked: Whether the heading carries a [YANKED] marker.
        body: Markdown between the heading and the next section.
        url: Release page or compare URL linked from the heading.
    """

    label: str
    version: str | None = None
    date: str | None = None
    yanked: bool = False
    body: str = ""
    url: str | None = None

    def sort_key(self) -> tuple[int, semver.Version]:
        """Key ordering releases by version; unversioned entries sort lowest."""
        if self.version is None:
            return (0, semver.Version(0))
        return (1, semver.Version.parse(self.version))


class Changelog(BaseModel):
    """In-memory changelog: title, description, Unreleased and releases.

    Releases are kept sorted by version, newest first.
    """

    title: str | None = None
    description: str = ""
    unreleased: Unreleased | None = None
    releases: list[Release] = Field(default_factory=list)
    links: dict[str, str] = Field(default_factory=dict)

    def sort_releases(self) -> None:
        self.releases.sort(key=Release.sort_key, reverse=True)

    def latest_release(self) -> Release | None:
        """Return the highest-versioned release, or None for a new changelog."""
        if not self.releases:
            return None
        return sorted(self.releases, key=Release.sort_key, reverse=True)[0]

    def promote_unreleased(self, version: str, date: str, url: str) -> Release:
        """Move the Unreleased body into a new release entry.

        The Unreleased section stays in place with an empty body.

        Args:
            version: Version without the "v" prefix (e.g., "1.4.0").
            date: Release date in YYYY-MM-DD form.
            url: URL linked from the release heading.

        Raises:
            PromotionError: If there is no Unreleased section, or a release
                for `version` already exists.
        """
        if self.unreleased is None:
            raise PromotionError("changelog has no Unreleased section to promote")
        if any(r.version == version for r in self.releases):
            raise PromotionError(f"release {version} already exists in changelog")

        release = Release(
            label=version,
            version=version,
            date=date,
            body=self.unreleased.body,
            url=url,
        )
        self.releases.append(release)
        self.sort_releases()
        self.unreleased.body = ""
        return release

    def set_unreleased_url(self, url: str) -> None:
        if self.unreleased is None:
            raise ChangelogError("changelog has no Unreleased section")
        self.unreleased.url = url

    def render(self) -> str:
        """Serialize the document back to markdown."""
        blocks: list[str] = []
        if self.title:
            blocks.append(f"# {self.title}")
        if self.description:
            blocks.append(self.description)

        if self.unreleased is not None:
            blocks.append(_section(f"## [{UNRELEASED}]", self.unreleased.body))

        for release in self.releases:
            heading = f"## [{release.label}]"
            if release.date:
                heading += f" - {release.date}"
            if release.yanked:
                heading += " [YANKED]"
            blocks.append(_section(heading, release.body))

        links: list[str] = []
        if self.unreleased is not None and self.unreleased.url:
            links.append(f"[{UNRELEASED}]: {self.unreleased.url}")
        links.extend(f"[{r.label}]: {r.url}" for r in self.releases if r.url)
        links.extend(f"[{label}]: {url}" for label, url in self.links.items())
        if links:
            blocks.append("\n".join(links))

        return "\n\n".join(blocks) + "\n"

    def save(self, path: Path) -> None:
        """Write the rendered document to `path`, overwriting it.

        Raises:
            ChangelogWriteError: If the file cannot be written.
        """
        try:
            Path(path).write_text(self.render(), encoding="utf-8")
        except OSError as exc:
            raise ChangelogWriteError(
                f"error saving changelog to {path}: {exc}"
            ) from exc


def _section(heading: str, body: str) -> str:
    return f"{heading}\n\n{body}" if body else heading


def _clean(lines: list[str]) -> str:
    """Join lines, dropping leading and trailing blank lines."""
    start, end = 0, len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return "\n".join(lines[start:end])


def _version_of(label: str) -> str | None:
    candidate = label.removeprefix("v")
    if semver.Version.is_valid(candidate):
        return candidate
    return None


def parse_text(text: str) -> Changelog:
    """Parse changelog markdown into a Changelog.

    Raises:
        ChangelogParseError: On a second Unreleased section, or a level-two
            heading that is not a release heading.
    """
    # Link reference definitions may appear anywhere; collect them first
    links: dict[str, tuple[str, str]] = {}
    content: list[str] = []
    for line in text.splitlines():
        m = _LINK_RE.match(line)
        if m:
            links[m["label"].lower()] = (m["label"], m["url"])
        else:
            content.append(line)

    title: str | None = None
    preamble: list[str] = []
    sections: list[tuple[str, list[str]]] = []
    for line in content:
        m = _SECTION_RE.match(line)
        if m:
            sections.append((m["heading"], []))
        elif sections:
            sections[-1][1].append(line)
        elif title is None and _TITLE_RE.match(line):
            title = _TITLE_RE.match(line)["title"]
        else:
            preamble.append(line)

    doc = Changelog(title=title, description=_clean(preamble))
    for heading, lines in sections:
        if _UNRELEASED_RE.match(heading):
            if doc.unreleased is not None:
                raise ChangelogParseError(
                    "changelog has more than one Unreleased section"
                )
            link = links.pop(UNRELEASED.lower(), None)
            doc.unreleased = Unreleased(
                body=_clean(lines), url=link[1] if link else None
            )
            continue

        m = _RELEASE_RE.match(heading)
        if not m:
            raise ChangelogParseError(f"unrecognized release heading: '## {heading}'")
        label = m["label"]
        link = links.pop(label.lower(), None)
        doc.releases.append(
            Release(
                label=label,
                version=_version_of(label),
                date=m["date"],
                yanked=bool(m["yanked"]),
                body=_clean(lines),
                url=link[1] if link else None,
            )
        )

    doc.sort_releases()
    doc.links = {label: url for label, url in links.values()}
    return doc


def parse(path: Path) -> Changelog:
    """Read and parse the changelog at `path`.

    Raises:
        ChangelogParseError: If the file is missing, unreadable or malformed.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ChangelogParseError(f"error reading {path}: {exc}") from exc
    return parse_text(text)
