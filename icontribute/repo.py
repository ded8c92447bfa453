"""Thin helpers for locating a repository and running git in it."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from git import Git, InvalidGitRepositoryError, NoSuchPathError, Repo

logger = logging.getLogger(__name__)


def resolve_git_root(path: str | Path = ".") -> Path:
    """Return the working tree root for *path* (or any of its parents).

    Falls back to *path* itself when no repository is found there; git
    commands run against it later simply yield no history.
    """
    try:
        repo = Repo(str(path), search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError):
        logger.warning("Could not determine git root for %s, using it as-is", path)
        return Path(path)
    if repo.working_tree_dir is None:
        logger.warning("Repository at %s is bare, using it as-is", path)
        return Path(path)
    return Path(repo.working_tree_dir)


def git_command(root: str | Path) -> Git:
    """Return a GitPython command runner bound to *root*."""
    return Git(str(root))


if __name__ == "__main__":
    path = sys.argv[1] if len(sys.argv) > 1 else "."
    print(f"Git root: {resolve_git_root(path)}")
