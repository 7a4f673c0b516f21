"""Check whether a newer release of the tool is available."""

from __future__ import annotations

import json
import urllib.error
import urllib.request
from importlib.metadata import PackageNotFoundError, version

_LATEST_RELEASE_URL = "https://api.github.com/repos/release-plz/release-plz/releases/latest"
_PROJECT_URL = "https://github.com/release-plz/release-plz"
_TAG_PREFIX = "release-plz-v"
_USER_AGENT = "release-plz"


def _installed_version() -> str:
    try:
        return version("releaseplz")
    except PackageNotFoundError:
        return "0.0.0"


CURRENT_VERSION = _installed_version()


def extract_version(tag: str) -> str | None:
    """Version in a release tag such as ``release-plz-v0.2.37``; ``None`` if it has no prefix."""
    if tag.startswith(_TAG_PREFIX):
        return tag[len(_TAG_PREFIX):]
    return None


def get_latest_version() -> str:
    """Version of the latest published release."""
    request = urllib.request.Request(_LATEST_RELEASE_URL, headers={"User-Agent": _USER_AGENT})
    try:
        with urllib.request.urlopen(request, timeout=30) as response:
            body = response.read()
    except (urllib.error.URLError, OSError) as error:
        raise RuntimeError(f"error while sending request: {error}") from error
    try:
        tag_name = json.loads(body)["tag_name"]
        if not isinstance(tag_name, str):
            raise TypeError("tag_name is not a string")
    except (ValueError, KeyError, TypeError) as error:
        raise RuntimeError("can't parse response") from error
    latest = extract_version(tag_name)
    if latest is None:
        raise RuntimeError(
            f"can't extract latest release-plz version from tag name {tag_name}"
        )
    return latest


def check_update() -> None:
    """Print whether the installed version is the latest one."""
    try:
        latest = get_latest_version()
    except RuntimeError as error:
        raise RuntimeError(f"error while checking for updates: {error}") from error
    if latest != CURRENT_VERSION:
        print(
            f"Your release-plz version is {CURRENT_VERSION}. "
            f"A newer version ({latest}) is available at {_PROJECT_URL}"
        )
    else:
        print(f"Your release-plz version ({CURRENT_VERSION}) is up to date")