"""Read authorship from git history and merge it into per-person groups.

Two history sources are tried in order:

- **shortlog**: ``git shortlog -sne HEAD`` gives one pre-counted line per
  (name, email) pair, e.g. ``    42\tJane Doe <jane@example.com>``.
- **log**: ``git log --pretty=format:%an <%ae>`` gives one line per commit;
  occurrences of each (name, email) pair are counted here.

The first source that produces any output wins. Lines that do not look like
authorship are dropped without error.
"""

from __future__ import annotations

import logging
import re
import sys
from abc import ABC, abstractmethod
from collections import Counter
from collections.abc import Callable, Iterable
from pathlib import Path

from git import Git
from git.exc import GitError

from icontribute.models import AuthorEntry, AuthorGroup, to_json
from icontribute.repo import git_command, resolve_git_root

logger = logging.getLogger(__name__)

# "42 Jane Doe <jane@example.com>" (whitespace may be a tab)
_SUMMARY_RE = re.compile(r"^(\d+)\s+(.+)\s+<(.+)>$")
_NAME_EMAIL_RE = re.compile(r"(.+)\s+<(.+)>")
_LEADING_INT_RE = re.compile(r"^\s*(\d+)")

LineParser = Callable[[str], "AuthorEntry | None"]


def parse_summary_line(line: str) -> AuthorEntry | None:
    m = _SUMMARY_RE.match(line.strip())
    if not m:
        return None
    return AuthorEntry(name=m.group(2).strip(), email=m.group(3).strip(), commits=int(m.group(1)))


def parse_tab_separated_line(line: str) -> AuthorEntry | None:
    """Laxer parse: ``<count>\\t<name> <email>`` where the count may be junk."""
    parts = [p for p in line.split("\t") if p]
    if len(parts) < 2:
        return None
    m = _NAME_EMAIL_RE.search(parts[1])
    if not m:
        return None
    count = _LEADING_INT_RE.match(parts[0])
    commits = int(count.group(1)) if count else 0
    return AuthorEntry(name=m.group(1).strip(), email=m.group(2).strip(), commits=commits)


SUMMARY_LINE_PARSERS: tuple[LineParser, ...] = (parse_summary_line, parse_tab_separated_line)


def parse_summary(lines: Iterable[str], parsers: Iterable[LineParser] = SUMMARY_LINE_PARSERS) -> list[AuthorEntry]:
    """Parse shortlog lines, trying each parser in turn per line."""
    parsers = tuple(parsers)
    entries: list[AuthorEntry] = []
    for line in lines:
        for parser in parsers:
            entry = parser(line)
            if entry is not None:
                entries.append(entry)
                break
        else:
            logger.debug("Skipping unparseable summary line: %r", line)
    return entries


def count_log_lines(lines: Iterable[str]) -> list[AuthorEntry]:
    """Count commits per distinct ``Name <email>`` pair, in first-seen order."""
    counts: Counter[tuple[str, str]] = Counter()
    for line in lines:
        m = _NAME_EMAIL_RE.search(line)
        if not m:
            continue
        counts[(m.group(1).strip(), m.group(2).strip())] += 1
    return [AuthorEntry(name=name, email=email, commits=n) for (name, email), n in counts.items()]


def _split_lines(output: str) -> list[str]:
    return [line.strip() for line in output.splitlines() if line.strip()]


class HistorySource(ABC):
    """One way of pulling authorship out of git.

    :meth:`read` returns raw, non-empty lines (an empty list when the git call
    fails or prints nothing); :meth:`parse` turns them into entries.
    """

    name = "base"

    @abstractmethod
    def run(self, git: Git) -> str:
        ...

    def read(self, git: Git) -> list[str]:
        try:
            output = self.run(git)
        except GitError as exc:
            logger.warning("git %s failed: %s", self.name, exc)
            return []
        return _split_lines(output)

    @abstractmethod
    def parse(self, lines: list[str]) -> list[AuthorEntry]:
        ...


class ShortlogSource(HistorySource):
    name = "shortlog"

    def run(self, git: Git) -> str:
        # An explicit revision keeps shortlog from reading stdin when not on a tty
        return git.shortlog("-sne", "HEAD")

    def parse(self, lines: list[str]) -> list[AuthorEntry]:
        return parse_summary(lines)


class LogSource(HistorySource):
    name = "log"

    def run(self, git: Git) -> str:
        return git.log("--pretty=format:%an <%ae>")

    def parse(self, lines: list[str]) -> list[AuthorEntry]:
        return count_log_lines(lines)


DEFAULT_SOURCES: tuple[HistorySource, ...] = (ShortlogSource(), LogSource())


def read_author_entries(
    root: str | Path,
    sources: Iterable[HistorySource] = DEFAULT_SOURCES,
    git: Git | None = None,
) -> list[AuthorEntry]:
    """Return authorship entries for the repository at *root*.

    Parameters
    ----------
    root:
        Repository working tree (see :func:`icontribute.repo.resolve_git_root`).
    sources:
        History sources in priority order. The first one that yields any
        lines is used, even if none of those lines parse.
    git:
        Command runner to use instead of one bound to *root*.
    """
    git = git or git_command(root)
    for source in sources:
        lines = source.read(git)
        if lines:
            entries = source.parse(lines)
            logger.info("Parsed %d authorship entries from git %s", len(entries), source.name)
            return entries
        logger.info("git %s gave no output, trying next source", source.name)
    logger.warning("No authorship data found in %s", root)
    return []


def merge_authors(entries: Iterable[AuthorEntry]) -> list[AuthorGroup]:
    """Merge entries by case-insensitive trimmed name.

    The first-seen casing of a name is kept, emails are collected without
    duplicates and commit counts are summed.
    """
    merged: dict[str, AuthorGroup] = {}
    for entry in entries:
        key = entry.name.strip().lower()
        group = merged.get(key)
        if group is None:
            merged[key] = AuthorGroup(name=entry.name.strip(), emails=[entry.email], commits=entry.commits)
            continue
        if entry.email not in group.emails:
            group.emails.append(entry.email)
        group.commits += entry.commits
    return list(merged.values())


if __name__ == "__main__":
    repo_path = sys.argv[1] if len(sys.argv) > 1 else "."

    root = resolve_git_root(Path(repo_path))
    groups = merge_authors(read_author_entries(root))
    print(f"Found {len(groups)} author(s) in '{root}':\n")
    print(to_json(groups))
