"""Batch job: git history in, contributor records on disk out."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from icontribute.builder import build_records, write_records
from icontribute.config import DEFAULT_THRESHOLD, Settings
from icontribute.history import merge_authors, read_author_entries
from icontribute.identity import HttpIdentityResolver, IdentityResolver, OfflineIdentityResolver
from icontribute.models import ContributorRecord
from icontribute.repo import resolve_git_root

logger = logging.getLogger(__name__)


def resolver_from_settings(settings: Settings, offline: bool = False) -> IdentityResolver:
    """Build the identity resolver for *settings* (avatar host, probe timeout)."""
    if offline:
        return OfflineIdentityResolver(host=settings.avatar_host)
    return HttpIdentityResolver(host=settings.avatar_host, timeout=settings.probe_timeout)


def collect_contributors(
    repo_path: str | Path,
    output_dir: str | Path,
    threshold: int | None = None,
    resolver: IdentityResolver | None = None,
) -> list[ContributorRecord]:
    """Aggregate authorship for *repo_path* and persist it under *output_dir*.

    Parameters
    ----------
    repo_path:
        Any path inside the repository; the working tree root is looked up.
    output_dir:
        Directory for ``contributors.json`` and the per-contributor files.
        Created when missing.
    threshold:
        Minimum commit count for the Maintainer role (default 5).
    resolver:
        Identity resolver to use. Defaults to a network-probing resolver built
        from the environment settings, closed once the run finishes.
    """
    threshold = DEFAULT_THRESHOLD if threshold is None else threshold
    root = resolve_git_root(repo_path)
    groups = merge_authors(read_author_entries(root))
    logger.info("Merged authorship into %d contributor(s)", len(groups))

    if resolver is None:
        with resolver_from_settings(Settings.from_env()) as default_resolver:
            records = build_records(groups, default_resolver, threshold)
    else:
        records = build_records(groups, resolver, threshold)

    write_records(records, output_dir)
    logger.info("Wrote %d contributors to %s", len(records), output_dir)
    return records


if __name__ == "__main__":
    settings = Settings.from_env()
    repo_arg = sys.argv[1] if len(sys.argv) > 1 else str(settings.repo_path)

    with resolver_from_settings(settings) as resolver:
        result = collect_contributors(repo_arg, settings.data_dir, settings.maintainer_threshold, resolver=resolver)
    print(f"Wrote {len(result)} contributors to {settings.data_dir}")
