"""Running cargo and checking which versions of a package are published."""

from __future__ import annotations

import logging
import os
import subprocess
import sys
import threading
from collections.abc import Iterable, Sequence
from os import PathLike

_log = logging.getLogger(__name__)


class CargoError(RuntimeError):
    """Cargo could not be run or its output could not be read."""


def _cargo_program() -> str:
    return os.environ.get("CARGO", "cargo")


def run_cargo(root: str | PathLike[str], args: Sequence[str]) -> tuple[str, str]:
    """Run cargo in ``root`` and return its trimmed stdout and stderr.

    Standard error is echoed line by line while cargo runs.
    """
    arguments = [str(arg) for arg in args]
    _log.debug("cargo %s", " ".join(arguments))
    try:
        child = subprocess.Popen(
            [_cargo_program(), *arguments],
            cwd=os.fspath(root),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except OSError as error:
        raise CargoError(f"cannot run cargo: {error}") from error

    stdout_chunks: list[bytes] = []
    reader = threading.Thread(
        target=lambda: stdout_chunks.append(child.stdout.read()), daemon=True
    )
    reader.start()

    stderr_lines: list[str] = []
    try:
        for raw in child.stderr:
            try:
                line = raw.decode("utf-8").rstrip("\r\n")
            except UnicodeDecodeError as error:
                raise CargoError("cannot read cargo stderr") from error
            print(line, file=sys.stderr)
            stderr_lines.append(line)
    finally:
        child.stderr.close()
        reader.join()
        child.stdout.close()
        child.wait()

    try:
        stdout = b"".join(stdout_chunks).decode("utf-8")
    except UnicodeDecodeError as error:
        raise CargoError("cannot read cargo stdout") from error
    stderr = "\n".join(stderr_lines)
    _log.debug("cargo stderr: %s", stderr)
    _log.debug("cargo stdout: %s", stdout)
    return stdout.strip(), stderr.strip()


def is_version_present(version: str, published_versions: Iterable[str]) -> bool:
    """Whether ``version`` is among the published versions."""
    return any(str(published) == version for published in published_versions)


def is_in_cache(published_versions: Iterable[str] | None, version: str) -> bool:
    """Whether the index entry, if there is one, lists ``version``."""
    if published_versions is None:
        return False
    return is_version_present(version, published_versions)