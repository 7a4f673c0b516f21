"""The release-plz configuration file: workspace defaults and per-package settings."""

from __future__ import annotations

import json
import tomllib
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar
from urllib.parse import urlsplit

_E = TypeVar("_E", bound=Enum)


class ConfigError(ValueError):
    """The configuration file is not valid."""


class ReleaseType(Enum):
    """How a git release is marked."""

    PROD = "prod"
    PRE = "pre"
    AUTO = "auto"


class SemverCheck(Enum):
    """Whether to run cargo-semver-checks."""

    YES = "yes"
    NO = "no"


def _opt_bool(data: Mapping[str, Any], key: str) -> bool | None:
    value = data.get(key)
    if value is not None and not isinstance(value, bool):
        raise ConfigError(f"invalid type for `{key}`: expected a boolean")
    return value


def _opt_str(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ConfigError(f"invalid type for `{key}`: expected a string")
    return value


def _opt_str_list(data: Mapping[str, Any], key: str) -> tuple[str, ...] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"invalid type for `{key}`: expected a list of strings")
    return tuple(value)


def _opt_enum(data: Mapping[str, Any], key: str, enum: type[_E]) -> _E | None:
    value = _opt_str(data, key)
    if value is None:
        return None
    try:
        return enum(value)
    except ValueError:
        allowed = ", ".join(f"`{member.value}`" for member in enum)
        raise ConfigError(
            f"unknown variant `{value}` for `{key}`, expected one of {allowed}"
        ) from None


def _opt_url(data: Mapping[str, Any], key: str) -> str | None:
    value = _opt_str(data, key)
    if value is None:
        return None
    try:
        parts = urlsplit(value)
    except ValueError as error:
        raise ConfigError(f"invalid url for `{key}`: {error}") from error
    if not parts.scheme or not (parts.netloc or parts.path):
        raise ConfigError(f"invalid url for `{key}`: relative URL without a base")
    return value


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return _format_value(value.value)
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_format_value(item) for item in value) + "]"
    raise TypeError(f"cannot serialize {value!r}")


def _format_table(header: str, items: Iterator[tuple[str, Any]]) -> str:
    lines = [header]
    lines.extend(f"{key} = {_format_value(value)}" for key, value in items if value is not None)
    return "\n".join(lines) + "\n"


@dataclass(frozen=True)
class GitTagConfig:
    """Whether to publish a git tag for the new version (enabled unless ``False``)."""

    enable: bool | None = None

    def merge(self, default: GitTagConfig) -> GitTagConfig:
        return GitTagConfig(enable=self.enable if self.enable is not None else default.enable)

    @classmethod
    def _read(cls, data: Mapping[str, Any]) -> GitTagConfig:
        return cls(enable=_opt_bool(data, "git_tag_enable"))

    def _items(self) -> Iterator[tuple[str, Any]]:
        yield "git_tag_enable", self.enable


@dataclass(frozen=True)
class GitReleaseConfig:
    """Settings of the GitHub/Gitea/GitLab release."""

    enable: bool | None = None
    release_type: ReleaseType | None = None
    draft: bool | None = None

    def merge(self, default: GitReleaseConfig) -> GitReleaseConfig:
        return GitReleaseConfig(
            enable=self.enable if self.enable is not None else default.enable,
            release_type=(
                self.release_type if self.release_type is not None else default.release_type
            ),
            draft=self.draft if self.draft is not None else default.draft,
        )

    @classmethod
    def _read(cls, data: Mapping[str, Any]) -> GitReleaseConfig:
        return cls(
            enable=_opt_bool(data, "git_release_enable"),
            release_type=_opt_enum(data, "git_release_type", ReleaseType),
            draft=_opt_bool(data, "git_release_draft"),
        )

    def _items(self) -> Iterator[tuple[str, Any]]:
        yield "git_release_enable", self.enable
        yield "git_release_type", self.release_type
        yield "git_release_draft", self.draft


@dataclass(frozen=True)
class ReleaseConfig:
    """Settings of ``cargo publish``."""

    publish: bool | None = None
    allow_dirty: bool | None = None
    no_verify: bool | None = None

    def merge(self, default: ReleaseConfig) -> ReleaseConfig:
        return ReleaseConfig(
            publish=self.publish if self.publish is not None else default.publish,
            allow_dirty=self.allow_dirty if self.allow_dirty is not None else default.allow_dirty,
            no_verify=self.no_verify if self.no_verify is not None else default.no_verify,
        )

    @classmethod
    def _read(cls, data: Mapping[str, Any]) -> ReleaseConfig:
        return cls(
            publish=_opt_bool(data, "publish"),
            allow_dirty=_opt_bool(data, "publish_allow_dirty"),
            no_verify=_opt_bool(data, "publish_no_verify"),
        )

    def _items(self) -> Iterator[tuple[str, Any]]:
        yield "publish", self.publish
        yield "publish_allow_dirty", self.allow_dirty
        yield "publish_no_verify", self.no_verify


@dataclass(frozen=True)
class PackageReleaseConfig:
    """Options of the ``release`` command that a package can override."""

    git_release: GitReleaseConfig = field(default_factory=GitReleaseConfig)
    git_tag: GitTagConfig = field(default_factory=GitTagConfig)
    release: ReleaseConfig = field(default_factory=ReleaseConfig)

    def merge(self, default: PackageReleaseConfig) -> PackageReleaseConfig:
        return PackageReleaseConfig(
            git_release=self.git_release.merge(default.git_release),
            git_tag=self.git_tag.merge(default.git_tag),
            release=self.release.merge(default.release),
        )

    @classmethod
    def _read(cls, data: Mapping[str, Any]) -> PackageReleaseConfig:
        return cls(
            git_release=GitReleaseConfig._read(data),
            git_tag=GitTagConfig._read(data),
            release=ReleaseConfig._read(data),
        )

    def _items(self) -> Iterator[tuple[str, Any]]:
        yield from self.git_release._items()
        yield from self.git_tag._items()
        yield from self.release._items()


@dataclass(frozen=True)
class PackageUpdateConfig:
    """Options of the ``update`` command that a package can override."""

    semver_check: bool | None = None
    changelog_update: bool | None = None

    def merge(self, default: PackageUpdateConfig) -> PackageUpdateConfig:
        return PackageUpdateConfig(
            semver_check=(
                self.semver_check if self.semver_check is not None else default.semver_check
            ),
            changelog_update=(
                self.changelog_update
                if self.changelog_update is not None
                else default.changelog_update
            ),
        )

    @classmethod
    def _read(cls, data: Mapping[str, Any]) -> PackageUpdateConfig:
        return cls(
            semver_check=_opt_bool(data, "semver_check"),
            changelog_update=_opt_bool(data, "changelog_update"),
        )

    def _items(self) -> Iterator[tuple[str, Any]]:
        yield "semver_check", self.semver_check
        yield "changelog_update", self.changelog_update


@dataclass(frozen=True)
class PackageConfig:
    """Settings applied to every package by default."""

    update: PackageUpdateConfig = field(default_factory=PackageUpdateConfig)
    release: PackageReleaseConfig = field(default_factory=PackageReleaseConfig)

    @classmethod
    def _read(cls, data: Mapping[str, Any]) -> PackageConfig:
        return cls(update=PackageUpdateConfig._read(data), release=PackageReleaseConfig._read(data))

    def _items(self) -> Iterator[tuple[str, Any]]:
        yield from self.update._items()
        yield from self.release._items()


@dataclass(frozen=True)
class PackageSpecificConfig:
    """Settings of one ``[[package]]`` entry."""

    update: PackageUpdateConfig = field(default_factory=PackageUpdateConfig)
    release: PackageReleaseConfig = field(default_factory=PackageReleaseConfig)
    changelog_path: str | None = None
    changelog_include: tuple[str, ...] | None = None

    def merge(self, default: PackageConfig) -> PackageSpecificConfig:
        """Fill the settings this package leaves unset from the workspace defaults."""
        return PackageSpecificConfig(
            update=self.update.merge(default.update),
            release=self.release.merge(default.release),
            changelog_path=self.changelog_path,
            changelog_include=self.changelog_include,
        )

    @classmethod
    def _read(cls, data: Mapping[str, Any]) -> PackageSpecificConfig:
        return cls(
            update=PackageUpdateConfig._read(data),
            release=PackageReleaseConfig._read(data),
            changelog_path=_opt_str(data, "changelog_path"),
            changelog_include=_opt_str_list(data, "changelog_include"),
        )

    def _items(self) -> Iterator[tuple[str, Any]]:
        yield from self.update._items()
        yield from self.release._items()
        yield "changelog_path", self.changelog_path
        yield "changelog_include", self.changelog_include


@dataclass(frozen=True)
class PackageSpecificConfigWithName:
    """A ``[[package]]`` entry together with the package it applies to."""

    name: str
    config: PackageSpecificConfig = field(default_factory=PackageSpecificConfig)

    @classmethod
    def _read(cls, data: Mapping[str, Any]) -> PackageSpecificConfigWithName:
        name = _opt_str(data, "name")
        if name is None:
            raise ConfigError("missing field `name` in `[[package]]`")
        return cls(name=name, config=PackageSpecificConfig._read(data))

    def _items(self) -> Iterator[tuple[str, Any]]:
        yield "name", self.name
        yield from self.config._items()


@dataclass(frozen=True)
class UpdateConfig:
    """Workspace-wide options of the ``update`` command."""

    dependencies_update: bool | None = None
    changelog_config: str | None = None
    allow_dirty: bool | None = None

    @classmethod
    def _read(cls, data: Mapping[str, Any]) -> UpdateConfig:
        return cls(
            dependencies_update=_opt_bool(data, "dependencies_update"),
            changelog_config=_opt_str(data, "changelog_config"),
            allow_dirty=_opt_bool(data, "allow_dirty"),
        )

    def _items(self) -> Iterator[tuple[str, Any]]:
        yield "dependencies_update", self.dependencies_update
        yield "changelog_config", self.changelog_config
        yield "allow_dirty", self.allow_dirty


@dataclass(frozen=True)
class ReleasePrConfig:
    """Workspace-wide options of the ``release-pr`` command."""

    pr_draft: bool = False
    pr_labels: tuple[str, ...] = ()

    @classmethod
    def _read(cls, data: Mapping[str, Any]) -> ReleasePrConfig:
        return cls(
            pr_draft=bool(_opt_bool(data, "pr_draft")),
            pr_labels=_opt_str_list(data, "pr_labels") or (),
        )

    def _items(self) -> Iterator[tuple[str, Any]]:
        yield "pr_draft", self.pr_draft
        yield "pr_labels", self.pr_labels


@dataclass(frozen=True)
class CommonCmdConfig:
    """Options shared by several commands."""

    repo_url: str | None = None

    @classmethod
    def _read(cls, data: Mapping[str, Any]) -> CommonCmdConfig:
        return cls(repo_url=_opt_url(data, "repo_url"))

    def _items(self) -> Iterator[tuple[str, Any]]:
        yield "repo_url", self.repo_url


@dataclass(frozen=True)
class Workspace:
    """The ``[workspace]`` table."""

    update: UpdateConfig = field(default_factory=UpdateConfig)
    release_pr: ReleasePrConfig = field(default_factory=ReleasePrConfig)
    common: CommonCmdConfig = field(default_factory=CommonCmdConfig)
    packages_defaults: PackageConfig = field(default_factory=PackageConfig)

    @classmethod
    def _read(cls, data: Mapping[str, Any]) -> Workspace:
        return cls(
            update=UpdateConfig._read(data),
            release_pr=ReleasePrConfig._read(data),
            common=CommonCmdConfig._read(data),
            packages_defaults=PackageConfig._read(data),
        )

    def _items(self) -> Iterator[tuple[str, Any]]:
        yield from self.update._items()
        yield from self.release_pr._items()
        yield from self.common._items()
        yield from self.packages_defaults._items()


_TOP_LEVEL_KEYS = frozenset({"workspace", "package"})


@dataclass(frozen=True)
class Config:
    """The whole configuration file."""

    workspace: Workspace = field(default_factory=Workspace)
    package: tuple[PackageSpecificConfigWithName, ...] = ()

    @classmethod
    def from_toml(cls, text: str) -> Config:
        """Parse the configuration, raising ``ConfigError`` if it is invalid."""
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as error:
            raise ConfigError(f"invalid TOML: {error}") from error
        unknown = sorted(set(data) - _TOP_LEVEL_KEYS)
        if unknown:
            raise ConfigError(
                f"unknown field `{unknown[0]}`, expected `workspace` or `package`"
            )
        workspace = data.get("workspace", {})
        if not isinstance(workspace, dict):
            raise ConfigError("invalid type for `workspace`: expected a table")
        packages = data.get("package", [])
        if not isinstance(packages, list) or not all(isinstance(p, dict) for p in packages):
            raise ConfigError("invalid type for `package`: expected an array of tables")
        return cls(
            workspace=Workspace._read(workspace),
            package=tuple(PackageSpecificConfigWithName._read(p) for p in packages),
        )

    def to_toml(self) -> str:
        """The configuration as TOML text; unset settings are left out."""
        tables = [_format_table("[workspace]", self.workspace._items())]
        tables.extend(_format_table("[[package]]", p._items()) for p in self.package)
        return "\n".join(tables)

    def packages(self) -> dict[str, PackageSpecificConfig]:
        """Package-specific configurations by package name."""
        return {entry.name: entry.config for entry in self.package}