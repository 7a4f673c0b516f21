"""Semantic versions, version requirements and requirement upgrades."""

from __future__ import annotations

import dataclasses
import functools
import re
from dataclasses import dataclass
from enum import Enum

_NUMBER = re.compile(r"0|[1-9][0-9]*")
_IDENTIFIER = re.compile(r"[0-9A-Za-z-]+")
_WILDCARDS = frozenset("*xX")


def _parse_number(text: str, context: str) -> int:
    if not _NUMBER.fullmatch(text):
        raise ValueError(f"invalid numeric component {text!r} in {context!r}")
    return int(text)


def _validate_identifiers(text: str, *, numeric_leading_zero_ok: bool, what: str) -> None:
    if not text:
        return
    for identifier in text.split("."):
        if not _IDENTIFIER.fullmatch(identifier):
            raise ValueError(f"invalid {what} identifier {identifier!r} in {text!r}")
        if (
            not numeric_leading_zero_ok
            and identifier.isdigit()
            and len(identifier) > 1
            and identifier.startswith("0")
        ):
            raise ValueError(f"{what} identifier {identifier!r} has a leading zero")


def _identifier_key(identifier: str) -> tuple[int, int, str]:
    if identifier.isdigit():
        return (0, int(identifier), "")
    return (1, 0, identifier)


def _identifiers_key(text: str) -> tuple[tuple[int, int, str], ...]:
    if not text:
        return ()
    return tuple(_identifier_key(part) for part in text.split("."))


@functools.total_ordering
@dataclass(frozen=True)
class Version:
    """A semantic version: ``MAJOR.MINOR.PATCH[-PRE][+BUILD]``."""

    major: int
    minor: int
    patch: int
    pre: str = ""
    build: str = ""

    def __post_init__(self) -> None:
        if min(self.major, self.minor, self.patch) < 0:
            raise ValueError("version numbers must not be negative")
        _validate_identifiers(self.pre, numeric_leading_zero_ok=False, what="pre-release")
        _validate_identifiers(self.build, numeric_leading_zero_ok=True, what="build")

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse a version string, raising ``ValueError`` if it is malformed."""
        rest, plus, build = text.partition("+")
        if plus and not build:
            raise ValueError(f"empty build metadata in {text!r}")
        core, dash, pre = rest.partition("-")
        if dash and not pre:
            raise ValueError(f"empty pre-release in {text!r}")
        fields = core.split(".")
        if len(fields) != 3:
            raise ValueError(f"expected MAJOR.MINOR.PATCH, got {text!r}")
        major, minor, patch = (_parse_number(field, text) for field in fields)
        return cls(major, minor, patch, pre, build)

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre:
            text += f"-{self.pre}"
        if self.build:
            text += f"+{self.build}"
        return text

    def _sort_key(self) -> tuple:
        pre_key = (1, ()) if not self.pre else (0, _identifiers_key(self.pre))
        return (self.major, self.minor, self.patch, pre_key, _identifiers_key(self.build))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._sort_key() < other._sort_key()


class Op(Enum):
    """Comparison operator of a requirement comparator."""

    EXACT = "="
    GREATER = ">"
    GREATER_EQ = ">="
    LESS = "<"
    LESS_EQ = "<="
    TILDE = "~"
    CARET = "^"
    WILDCARD = "*"

    @property
    def symbol(self) -> str:
        return "" if self is Op.WILDCARD else self.value


_OP_SYMBOLS = (">=", "<=", ">", "<", "=", "~", "^")


@dataclass(frozen=True)
class Comparator:
    """One comparator of a version requirement, such as ``^1.2`` or ``1.*``."""

    op: Op
    major: int
    minor: int | None = None
    patch: int | None = None
    pre: str = ""

    @classmethod
    def _parse(cls, text: str) -> Comparator:
        source = text
        text = text.strip()
        op: Op | None = None
        for symbol in _OP_SYMBOLS:
            if text.startswith(symbol):
                op = Op(symbol)
                text = text[len(symbol):].lstrip()
                break
        if "+" in text:
            raise ValueError(f"build metadata is not allowed in a requirement: {source!r}")
        core, dash, pre = text.partition("-")
        fields = core.split(".")
        if not core or len(fields) > 3:
            raise ValueError(f"invalid comparator {source!r}")
        major = _parse_number(fields[0], source)
        parts: list[int | None] = []
        wildcard = False
        for field in fields[1:]:
            if field in _WILDCARDS:
                wildcard = True
                parts.append(None)
            elif wildcard:
                raise ValueError(f"unexpected number after wildcard in {source!r}")
            else:
                parts.append(_parse_number(field, source))
        minor, patch = (parts + [None, None])[:2]
        if dash:
            if patch is None:
                raise ValueError(f"pre-release requires a patch number in {source!r}")
            if not pre:
                raise ValueError(f"empty pre-release in {source!r}")
            _validate_identifiers(pre, numeric_leading_zero_ok=False, what="pre-release")
        if wildcard:
            if op in (None, Op.EXACT):
                op = Op.WILDCARD
        elif op is None:
            op = Op.CARET
        return cls(op, major, minor, patch, pre)

    def __str__(self) -> str:
        text = f"{self.op.symbol}{self.major}"
        if self.minor is not None:
            text += f".{self.minor}"
            if self.patch is not None:
                text += f".{self.patch}"
                if self.pre:
                    text += f"-{self.pre}"
            elif self.op is Op.WILDCARD:
                text += ".*"
        elif self.op is Op.WILDCARD:
            text += ".*"
        return text


@dataclass(frozen=True)
class VersionReq:
    """A version requirement: comma separated comparators; none matches everything."""

    comparators: tuple[Comparator, ...] = ()

    @classmethod
    def parse(cls, text: str) -> VersionReq:
        """Parse a requirement string, raising ``ValueError`` if it is malformed."""
        stripped = text.strip()
        if not stripped:
            raise ValueError("empty version requirement")
        if stripped in _WILDCARDS:
            return cls()
        return cls(tuple(Comparator._parse(part) for part in stripped.split(",")))

    def __str__(self) -> str:
        if not self.comparators:
            return "*"
        return ", ".join(str(comparator) for comparator in self.comparators)


class UnsupportedVersionReqError(ValueError):
    """A requirement uses an operator that cannot be upgraded."""


def _set_comparator(comparator: Comparator, version: Version) -> Comparator:
    if comparator.op not in (Op.WILDCARD, Op.EXACT, Op.TILDE, Op.CARET):
        raise UnsupportedVersionReqError(
            f"Support for modifying {comparator} is currently unsupported"
        )
    updated = dataclasses.replace(
        comparator,
        major=version.major,
        minor=None if comparator.minor is None else version.minor,
        patch=None if comparator.patch is None else version.patch,
    )
    if comparator.op is not Op.WILDCARD:
        updated = dataclasses.replace(updated, pre=version.pre)
    return updated


def upgrade_requirement(req: str, version: Version) -> str | None:
    """Rewrite ``req`` to point at ``version``; ``None`` when nothing changes."""
    raw_req = VersionReq.parse(req)
    if not raw_req.comparators:
        return None
    new_req = VersionReq(tuple(_set_comparator(c, version) for c in raw_req.comparators))
    new_text = str(new_req)
    if new_text.startswith("^") and not req.startswith("^"):
        new_text = new_text[1:]
    if new_text == req:
        return None
    return new_text