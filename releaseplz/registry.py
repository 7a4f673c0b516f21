"""Finding the index URL of a Cargo registry from Cargo configuration files."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

CRATES_IO_INDEX = "https://github.com/rust-lang/crates.io-index"
CRATES_IO_REGISTRY = "crates-io"


class RegistryError(ValueError):
    """The registry could not be resolved from the Cargo configuration."""


@dataclass
class _Source:
    registry: str | None = None
    replace_with: str | None = None


def _invalid() -> RegistryError:
    return RegistryError("Invalid cargo config")


def _mapping(value: Any) -> dict:
    if not isinstance(value, dict):
        raise _invalid()
    return value


def _optional_str(value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    raise _invalid()


def _read_config(registries: dict[str, _Source], path: Path) -> None:
    content = path.read_text(encoding="utf-8")
    try:
        config = tomllib.loads(content)
    except tomllib.TOMLDecodeError as error:
        raise _invalid() from error
    for name, value in _mapping(config.get("registries", {})).items():
        index = _optional_str(_mapping(value).get("index"))
        registries.setdefault(name, _Source(registry=index))
    for name, value in _mapping(config.get("source", {})).items():
        value = _mapping(value)
        registries.setdefault(
            name,
            _Source(
                registry=_optional_str(value.get("registry")),
                replace_with=_optional_str(value.get("replace-with")),
            ),
        )


def _read_config_dir(registries: dict[str, _Source], directory: Path) -> None:
    config = directory / "config"
    if config.is_file():
        _read_config(registries, config)
        return
    config_toml = directory / "config.toml"
    if config_toml.is_file():
        _read_config(registries, config_toml)


def cargo_home() -> Path:
    """Cargo's home directory: ``$CARGO_HOME`` or ``~/.cargo``."""
    try:
        default = Path.home() / ".cargo"
    except (RuntimeError, KeyError) as error:
        raise RegistryError("Failed to read home directory") from error
    configured = os.environ.get("CARGO_HOME")
    return Path(configured) if configured is not None else default


def _is_url(text: str) -> bool:
    try:
        parts = urlsplit(text)
    except ValueError:
        return False
    return bool(parts.scheme) and bool(parts.netloc or parts.path)


def registry_url(manifest_path: str | PathLike[str], registry: str | None = None) -> str:
    """Index URL of ``registry`` (crates.io if ``None``), following source replacement."""
    registries: dict[str, _Source] = {}
    start = Path(manifest_path).parent
    for work_dir in (start, *start.parents):
        _read_config_dir(registries, work_dir / ".cargo")
    _read_config_dir(registries, cargo_home())

    if registry is None or registry == CRATES_IO_INDEX:
        source = registries.pop(CRATES_IO_REGISTRY, _Source())
        if source.registry is None:
            source.registry = CRATES_IO_INDEX
    else:
        try:
            source = registries.pop(registry)
        except KeyError:
            raise RegistryError(f"The registry '{registry}' could not be found") from None

    while source.replace_with is not None:
        replace_with = source.replace_with
        try:
            source = registries.pop(replace_with)
        except KeyError:
            raise RegistryError(f"The source '{replace_with}' could not be found") from None
        if replace_with == CRATES_IO_INDEX and source.registry is None:
            source.registry = CRATES_IO_INDEX

    if source.registry is None or not _is_url(source.registry):
        raise _invalid()
    return source.registry