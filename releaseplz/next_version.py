"""Next semantic version from a list of commit messages.

Commits that follow the conventional commits format decide which part of
the version grows; any other commit counts as a patch. Pre-release versions
always grow their pre-release number, and build metadata is kept.
"""

from __future__ import annotations

import dataclasses
import itertools
from collections.abc import Iterable
from enum import Enum

from releaseplz.conventional import (
    CommitType,
    ConventionalCommit,
    ConventionalCommitError,
    parse_commit,
)
from releaseplz.versions import Version

_MISSING = object()


class VersionIncrement(Enum):
    """Which part of a version to increment."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    PRERELEASE = "prerelease"

    @classmethod
    def from_commits(
        cls, current_version: Version, commits: Iterable[str]
    ) -> VersionIncrement | None:
        """Increment implied by ``commits``; ``None`` if there are no commits."""
        iterator = iter(commits)
        first = next(iterator, _MISSING)
        if first is _MISSING:
            return None
        if current_version.pre:
            return cls.PRERELEASE
        parsed: list[ConventionalCommit] = []
        for message in itertools.chain([first], iterator):
            try:
                parsed.append(parse_commit(message))
            except ConventionalCommitError:
                continue
        return cls._from_conventional_commits(current_version, parsed)

    @classmethod
    def breaking(cls, current_version: Version) -> VersionIncrement:
        """Increment that accounts for a breaking change."""
        if current_version.pre:
            return cls.PRERELEASE
        if current_version.major == 0 and current_version.minor == 0:
            return cls.PATCH
        if current_version.major == 0:
            return cls.MINOR
        return cls.MAJOR

    @classmethod
    def _from_conventional_commits(
        cls, current: Version, commits: list[ConventionalCommit]
    ) -> VersionIncrement:
        has_feature = any(c.commit_type is CommitType.FEATURE for c in commits)
        has_breaking = any(c.is_breaking_change for c in commits)
        if current.major != 0 and has_breaking:
            return cls.MAJOR
        if (current.major != 0 and has_feature) or (
            current.major == 0 and current.minor != 0 and has_breaking
        ):
            return cls.MINOR
        return cls.PATCH

    def bump(self, version: Version) -> Version:
        """Apply this increment to ``version``."""
        match self:
            case VersionIncrement.MAJOR:
                return increment_major(version)
            case VersionIncrement.MINOR:
                return increment_minor(version)
            case VersionIncrement.PATCH:
                return increment_patch(version)
            case VersionIncrement.PRERELEASE:
                return increment_prerelease(version)
        raise AssertionError(f"unhandled increment {self!r}")


def next_version(version: Version, commits: Iterable[str]) -> Version:
    """Next version after ``commits``; unchanged when there are no commits."""
    increment = VersionIncrement.from_commits(version, commits)
    return version if increment is None else increment.bump(version)


def increment_major(version: Version) -> Version:
    return dataclasses.replace(version, major=version.major + 1, minor=0, patch=0, pre="")


def increment_minor(version: Version) -> Version:
    return dataclasses.replace(version, minor=version.minor + 1, patch=0, pre="")


def increment_patch(version: Version) -> Version:
    return dataclasses.replace(version, patch=version.patch + 1, pre="")


def increment_prerelease(version: Version) -> Version:
    return dataclasses.replace(version, pre=_increment_last_identifier(version.pre))


def _increment_last_identifier(release: str) -> str:
    left, dot, right = release.rpartition(".")
    if dot and right.isascii() and right.isdigit() and int(right) < 2**32:
        return f"{left}.{int(right) + 1}"
    return f"{release}.1"