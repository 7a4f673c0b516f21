# releaseplz

Helpers for releasing packages of a Cargo workspace, using only the
standard library:

- work out the next semantic version from a list of commit messages,
  following the conventional commits rules (`releaseplz.next_version`);
- parse versions and version requirements, and upgrade a requirement to a
  new version (`releaseplz.versions`);
- parse conventional commit messages (`releaseplz.conventional`);
- read the header and the latest release notes of a markdown changelog
  (`releaseplz.changelog_parser`);
- find the index URL of a registry from the Cargo configuration files
  (`releaseplz.registry`);
- read and write the `release-plz.toml` configuration (`releaseplz.config`);
- drive `git` in a repository (`releaseplz.gitrepo`) and run `cargo` in a
  project (`releaseplz.cargo`);
- check whether a newer release of the tool is published
  (`releaseplz.update_checker`).

## Next version

```python
from releaseplz.versions import Version
from releaseplz.next_version import VersionIncrement, next_version

version = Version.parse("1.2.3")
print(next_version(version, ["my change"]))          # 1.2.4
print(next_version(version, ["feat: make coffee"]))  # 1.3.0
print(next_version(version, ["feat!: break user"]))  # 2.0.0

# Pre-releases move their last identifier forward, whatever the commits say.
print(next_version(Version.parse("1.0.0-alpha.2"), ["feat!: break user"]))  # 1.0.0-alpha.3
print(next_version(Version.parse("1.0.0-beta"), ["my change"]))             # 1.0.0-beta.1

# What a breaking change means for a given version.
print(VersionIncrement.breaking(Version.parse("0.3.3")))  # VersionIncrement.MINOR
```

With no commits the version stays as it is. Commits that are not
conventional count as a patch. In `0.0.x` versions only the patch number
moves; while the major number is `0`, a breaking change moves the minor
number. Build metadata is kept. `increment_major`, `increment_minor`,
`increment_patch` and `increment_prerelease` apply one step directly.

## Version requirements

```python
from releaseplz.versions import Version, upgrade_requirement

print(upgrade_requirement("1.0", Version.parse("1.2.3")))  # 1.2
print(upgrade_requirement("*", Version.parse("1.2.3")))    # None
```

`upgrade_requirement` returns the new requirement text, or `None` when
nothing changes. Only `=`, `~`, `^` and wildcard comparators can be
rewritten; others raise `UnsupportedVersionReqError`.

## Conventional commits

```python
from releaseplz.conventional import CommitType, parse_commit

commit = parse_commit("feat(api)!: drop old endpoint")
print(commit.commit_type is CommitType.FEATURE, commit.scope, commit.is_breaking_change)
```

A `BREAKING CHANGE:` footer also marks a commit as breaking. Messages that
do not follow the format raise `ConventionalCommitError`.

## Reading a changelog

```python
from releaseplz.changelog_parser import last_changes_from_str, last_version_from_str, parse_header

text = open("CHANGELOG.md", encoding="utf-8").read()
print(parse_header(text))
print(last_version_from_str(text))
print(last_changes_from_str(text))
```

An `Unreleased` section at the top is skipped. `last_changes(path)` reads
the file for you, and `ChangelogParser(text).releases` lists every release
section, newest first.

## Registry lookup

```python
from releaseplz.registry import registry_url

print(registry_url("path/to/Cargo.toml"))                    # crates.io index by default
print(registry_url("path/to/Cargo.toml", "my-registry"))
```

`.cargo/config` or `.cargo/config.toml` is read in the manifest's directory
and every parent, then in `cargo_home()` (`$CARGO_HOME` or `~/.cargo`).
Source replacement (`replace-with`) is followed. Unknown registries raise
`RegistryError`.

## Configuration

```python
from releaseplz.config import Config

config = Config.from_toml("""
[workspace]
changelog_update = true
git_release_enable = true

[[package]]
name = "crate1"
semver_check = false
""")
print(config.packages()["crate1"].merge(config.workspace.packages_defaults))
print(config.to_toml())
```

Unknown top-level keys and wrongly typed values raise `ConfigError`.

## Git and cargo

```python
from releaseplz.gitrepo import Repo

repo = Repo(".")
repo.is_clean()  # raises GitError when there are uncommitted changes
print(repo.original_branch, repo.current_commit_hash())
```

`Repo` needs a repository with at least one commit. Failing git commands
raise `GitError` with git's output. `releaseplz.cargo.run_cargo(root, args)`
runs `$CARGO` (or `cargo`), echoes its standard error as it arrives, and
returns the trimmed standard output and standard error. `git` and `cargo`
must be on the `PATH`.

## What this package does not do

There is no command-line program. The package does not generate or
prepend changelog sections, does not edit `Cargo.toml` manifests, does not
list workspace members, does not publish packages or query a registry
index, and does not open pull requests or create releases on a git host.
It provides the pieces listed above for code that does those things.