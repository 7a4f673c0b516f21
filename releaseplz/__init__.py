"""Release helpers for Cargo workspaces: versions, commits, changelogs, registries, config, git and cargo."""

__version__ = "0.1.0"