"""Reading the header and the latest release notes of a markdown changelog."""

from __future__ import annotations

import re
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

_FIRST_HEADER_RE = re.compile(
    r"^(# Changelog|# CHANGELOG|# changelog)(.*)"
    r"(## Unreleased|## \[Unreleased\]|## unreleased|## \[unreleased\])",
    re.DOTALL,
)
_SECOND_HEADER_RE = re.compile(
    r"^(# Changelog|# CHANGELOG|# changelog)(.*?)(\n## )", re.DOTALL
)
_HEADING_RE = re.compile(r"^(#{1,2})[ \t]+(.*?)[ \t]*$")
_FENCE_RE = re.compile(r"^ {0,3}(```|~~~)")
_VERSION_RE = re.compile(
    r"^v?\d+\.\d+\.\d+(?:-[0-9A-Za-z.-]+)?(?:\+[0-9A-Za-z.-]+)?$|^unreleased$",
    re.IGNORECASE,
)


class ChangelogParseError(ValueError):
    """The changelog could not be parsed."""


@dataclass(frozen=True)
class ChangelogRelease:
    """One release section of a changelog."""

    version: str
    title: str
    notes: str


def parse_header(changelog: str) -> str | None:
    """Header of the changelog: from ``# Changelog`` up to the unreleased heading.

    Without an unreleased heading, the header stops before the first ``## `` heading.
    """
    match = _FIRST_HEADER_RE.match(changelog)
    if match:
        return match[0] + "\n"
    match = _SECOND_HEADER_RE.match(changelog)
    if match:
        return match[1] + match[2]
    return None


def _release_version(title: str) -> str | None:
    if title.startswith("["):
        close = title.find("]")
        if close <= 0:
            return None
        version = title[1:close].strip()
    else:
        words = title.split()
        if not words:
            return None
        version = words[0]
    return version if _VERSION_RE.match(version) else None


class ChangelogParser:
    """Release sections of a changelog, newest first."""

    def __init__(self, changelog_text: str) -> None:
        self.releases: list[ChangelogRelease] = self._parse(changelog_text)

    @staticmethod
    def _parse(text: str) -> list[ChangelogRelease]:
        releases: dict[str, ChangelogRelease] = {}
        current: tuple[str, str, list[str]] | None = None

        def finish() -> None:
            if current is None:
                return
            version, title, lines = current
            if version in releases:
                raise ChangelogParseError(
                    f"can't parse changelog: multiple release notes for '{version}'"
                )
            releases[version] = ChangelogRelease(version, title, "\n".join(lines).strip())

        in_fence = False
        for line in text.splitlines():
            if _FENCE_RE.match(line):
                in_fence = not in_fence
            elif not in_fence and (heading := _HEADING_RE.match(line)):
                finish()
                current = None
                if len(heading[1]) == 2:
                    version = _release_version(heading[2])
                    if version is not None:
                        current = (version, heading[2], [])
                continue
            if current is not None:
                current[2].append(line)
        finish()

        if not releases:
            raise ChangelogParseError("can't parse changelog: no release was found")
        return list(releases.values())

    def last_release(self) -> ChangelogRelease | None:
        """Newest released section, skipping an ``Unreleased`` one."""
        first = self.releases[0]
        if "unreleased" not in first.version.lower():
            return first
        return self.releases[1] if len(self.releases) > 1 else None


def last_changes(path: str | PathLike[str]) -> str | None:
    """Notes of the latest release in the changelog file at ``path``."""
    return last_changes_from_str(Path(path).read_text(encoding="utf-8"))


def last_changes_from_str(changelog: str) -> str | None:
    release = ChangelogParser(changelog).last_release()
    return None if release is None else release.notes


def last_version_from_str(changelog: str) -> str | None:
    release = ChangelogParser(changelog).last_release()
    return None if release is None else release.version


def last_release_from_str(changelog: str) -> ChangelogRelease | None:
    return ChangelogParser(changelog).last_release()