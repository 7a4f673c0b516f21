"""Run git in a working directory and interpret its output."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Iterable
from os import PathLike
from pathlib import Path

_log = logging.getLogger(__name__)

_NO_UPSTREAM = "fatal: no upstream configured for branch"
_NO_COMMIT = (
    "fatal: ambiguous argument 'HEAD': unknown revision or path not in the working tree."
)
_NO_COMMIT_MESSAGE = "git repository does not contain any commit."


class GitError(RuntimeError):
    """A git command failed or its output could not be understood."""


def _decode(data: bytes) -> str:
    try:
        return data.decode("utf-8").strip()
    except UnicodeDecodeError as error:
        raise GitError("cannot extract stderr") from error


def git_in_dir(directory: str | PathLike[str], args: Iterable[str]) -> str:
    """Run ``git -C directory args`` and return its trimmed standard output."""
    arguments = [str(arg).strip() for arg in args]
    try:
        completed = subprocess.run(
            ["git", "-C", str(directory), *arguments],
            capture_output=True,
            check=False,
        )
    except OSError as error:
        raise GitError(
            f"error while running git in directory `{directory}` with args `{arguments}`"
        ) from error
    _log.debug("git %s: exit status %s", arguments, completed.returncode)
    stdout = _decode(completed.stdout)
    if completed.returncode == 0:
        return stdout
    stderr = _decode(completed.stderr)
    message = f"error while running git with args `{arguments}`"
    if stdout or stderr:
        message += ":"
    if stdout:
        message += f"\n- stdout: {stdout}"
    if stderr:
        message += f"\n- stderr: {stderr}"
    raise GitError(message)


def changed_files(output: str) -> list[str]:
    """File names from ``git status --porcelain`` output, leaving out type changes."""
    return [
        line.rsplit(" ", 1)[-1]
        for line in (raw.strip() for raw in output.splitlines())
        if not line.startswith("T ")
    ]


class Repo:
    """A git working directory, remembering the branch and remote it started on."""

    def __init__(self, directory: str | PathLike[str]) -> None:
        self._directory = Path(directory)
        _log.debug("initializing directory %s", self._directory)
        try:
            remote, branch = self._current_remote_and_branch()
        except GitError as error:
            raise GitError(f"cannot determine current branch: {error}") from error
        self._original_remote = remote
        self._original_branch = branch

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def original_branch(self) -> str:
        """Branch that was checked out when the repository was opened."""
        return self._original_branch

    def _current_remote_and_branch(self) -> tuple[str, str]:
        try:
            output = git_in_dir(
                self._directory,
                ["rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{upstream}"],
            )
        except GitError as error:
            text = str(error)
            if _NO_UPSTREAM in text:
                branch = self._current_branch()
                _log.warning("no upstream configured for branch %s", branch)
                return "origin", branch
            if _NO_COMMIT in text:
                raise GitError(_NO_COMMIT_MESSAGE) from error
            raise
        remote, separator, branch = output.partition("/")
        if not separator:
            raise GitError("cannot determine current remote and branch")
        return remote, branch

    def _current_branch(self) -> str:
        try:
            return git_in_dir(self._directory, ["rev-parse", "--abbrev-ref", "HEAD"])
        except GitError as error:
            if _NO_COMMIT in str(error):
                raise GitError(_NO_COMMIT_MESSAGE) from error
            raise

    def git(self, *args: str) -> str:
        """Run a git command in the repository directory."""
        return git_in_dir(self._directory, args)

    def is_clean(self) -> None:
        """Raise ``GitError`` if the working directory has uncommitted changes."""
        changes = self.changes_except_typechanges()
        if changes:
            raise GitError(
                "the working directory of this project has uncommitted changes. "
                f"Please commit or stash these changes:\n{changes}"
            )

    def checkout_new_branch(self, branch: str) -> None:
        self.git("checkout", "-b", branch)

    def add_all_and_commit(self, message: str) -> None:
        self.git("add", ".")
        self.git("commit", "-m", message)

    def changes_except_typechanges(self) -> list[str]:
        return changed_files(self.git("status", "--porcelain"))

    def add(self, paths: Iterable[str | PathLike[str]]) -> None:
        self.git("add", *(str(path) for path in paths))

    def commit(self, message: str) -> None:
        self.git("commit", "-m", message)

    def commit_signed(self, message: str) -> None:
        self.git("commit", "-s", "-m", message)

    def push(self, obj: str) -> None:
        self.git("push", self._original_remote, obj)

    def fetch(self, obj: str) -> None:
        self.git("fetch", self._original_remote, obj)

    def force_push(self, obj: str) -> None:
        self.git("push", self._original_remote, obj, "--force")

    def checkout_head(self) -> None:
        """Go back to the branch checked out when the repository was opened."""
        self.git("checkout", self._original_branch)

    def stash_pop(self) -> None:
        self.git("stash", "pop")

    def checkout_last_commit_at_path(self, path: str | PathLike[str]) -> None:
        """Check out the latest commit that touched ``path``."""
        self.checkout(self._nth_commit_at_path(1, path))

    def checkout_previous_commit_at_path(self, path: str | PathLike[str]) -> None:
        """Check out the second latest commit that touched ``path``."""
        self.checkout(self._nth_commit_at_path(2, path))

    def checkout(self, obj: str) -> None:
        self.git("checkout", obj)

    def _nth_commit_at_path(self, nth: int, path: str | PathLike[str]) -> str:
        commit_list = self.git("log", "--format=%H", "-n", str(nth), "--", str(path))
        commits = commit_list.splitlines()
        if len(commits) < nth:
            raise GitError("not enough commits")
        commit = commits[nth - 1]
        _log.debug("nth_commit found: %s", commit)
        return commit

    def current_commit_message(self) -> str:
        return self.git("log", "-1", "--pretty=format:%B")

    def current_commit_hash(self) -> str:
        return self.git("log", "-1", "--pretty=format:%H")

    def tag(self, name: str) -> str:
        """Create a git tag."""
        return self.git("tag", name)

    def get_tag_commit(self, tag: str) -> str | None:
        """Commit hash the tag points to, or ``None`` if it cannot be resolved."""
        try:
            return self.git("rev-list", "-n", "1", tag)
        except GitError:
            return None

    def is_ancestor(self, maybe_ancestor_commit: str, descendant_commit: str) -> bool:
        """Whether the first commit comes before the second one."""
        try:
            self.git("merge-base", "--is-ancestor", maybe_ancestor_commit, descendant_commit)
        except GitError:
            return False
        return True

    def original_remote_url(self) -> str:
        """URL of the remote in use when the repository was opened."""
        return self.git("config", "--get", f"remote.{self._original_remote}.url")

    def tag_exists(self, tag: str) -> bool:
        try:
            output = self.git("tag", "-l", tag)
        except GitError as error:
            raise GitError(f"cannot determine if git tag exists: {error}") from error
        return len(output.splitlines()) >= 1