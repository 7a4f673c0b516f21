"""Parsing of commit messages that follow the conventional commits format."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

_HEADER_RE = re.compile(
    r"^(?P<type>[A-Za-z][A-Za-z0-9]*)"
    r"(?:\((?P<scope>[^()\r\n]+)\))?"
    r"(?P<bang>!)?"
    r": (?P<summary>\S.*)$"
)
_FOOTER_RE = re.compile(r"^(?P<token>BREAKING[ -]CHANGE|[A-Za-z0-9-]+)(?:: | #)(?P<value>.*)$")
_PARAGRAPH_SPLIT = re.compile(r"\n[ \t]*\n")
_BREAKING_TOKENS = frozenset({"BREAKING CHANGE", "BREAKING-CHANGE"})


class CommitType(Enum):
    """Kind of change a conventional commit declares."""

    FEATURE = "feat"
    BUG_FIX = "fix"
    CHORE = "chore"
    REVERT = "revert"
    PERFORMANCES = "perf"
    DOCUMENTATION = "docs"
    STYLE = "style"
    REFACTORING = "refactor"
    TEST = "test"
    BUILD = "build"
    CI = "ci"
    CUSTOM = "custom"

    @classmethod
    def from_name(cls, name: str) -> CommitType:
        try:
            return cls(name.lower())
        except ValueError:
            return cls.CUSTOM


class ConventionalCommitError(ValueError):
    """The message does not follow the conventional commits format."""


@dataclass(frozen=True)
class ConventionalCommit:
    """A parsed conventional commit message."""

    type_name: str
    summary: str
    scope: str | None = None
    body: str | None = None
    footers: tuple[tuple[str, str], ...] = ()
    is_breaking_change: bool = False

    @property
    def commit_type(self) -> CommitType:
        return CommitType.from_name(self.type_name)


def _parse_footers(paragraph: str) -> tuple[tuple[str, str], ...]:
    footers: list[list[str]] = []
    for line in paragraph.splitlines():
        match = _FOOTER_RE.match(line)
        if match:
            footers.append([match["token"], match["value"]])
        elif footers:
            footers[-1][1] += "\n" + line
    return tuple((token, value.rstrip()) for token, value in footers)


def parse_commit(message: str) -> ConventionalCommit:
    """Parse ``message``, raising ``ConventionalCommitError`` if it is not conventional."""
    text = message.strip()
    if not text:
        raise ConventionalCommitError("empty commit message")
    header, _, rest = text.partition("\n")
    match = _HEADER_RE.match(header.rstrip())
    if match is None:
        raise ConventionalCommitError(f"not a conventional commit: {header!r}")

    paragraphs = [p.strip("\n") for p in _PARAGRAPH_SPLIT.split(rest.strip("\n")) if p.strip()]
    footers: tuple[tuple[str, str], ...] = ()
    if paragraphs and _FOOTER_RE.match(paragraphs[-1].splitlines()[0]):
        footers = _parse_footers(paragraphs.pop())
    body = "\n\n".join(paragraphs) or None

    breaking = match["bang"] is not None or any(
        token in _BREAKING_TOKENS for token, _ in footers
    )
    return ConventionalCommit(
        type_name=match["type"],
        summary=match["summary"].rstrip(),
        scope=match["scope"],
        body=body,
        footers=footers,
        is_breaking_change=breaking,
    )