"""Turn merged author groups into contributor records and write them to disk."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from icontribute.config import COLLECTION_FILENAME, DEFAULT_THRESHOLD
from icontribute.identity import DEFAULT_HOST, IdentityResolver, is_noreply, noreply_username
from icontribute.models import CONTRIBUTOR, MAINTAINER, AuthorGroup, ContributorRecord, to_json

logger = logging.getLogger(__name__)

_UNSAFE_RE = re.compile(r"[^a-z0-9.-]+", re.IGNORECASE)


def primary_email(emails: Iterable[str], host: str = DEFAULT_HOST) -> str:
    """Return the first non-noreply email, else the first email, else ``""``."""
    emails = list(emails)
    for email in emails:
        if not is_noreply(email, host):
            return email
    return emails[0] if emails else ""


def group_username(emails: Iterable[str], host: str = DEFAULT_HOST) -> str | None:
    for email in emails:
        username = noreply_username(email, host)
        if username:
            return username
    return None


def role_for(commits: int, threshold: int = DEFAULT_THRESHOLD) -> str:
    return MAINTAINER if commits >= threshold else CONTRIBUTOR


def build_record(group: AuthorGroup, resolver: IdentityResolver, threshold: int = DEFAULT_THRESHOLD) -> ContributorRecord:
    email = primary_email(group.emails, resolver.host)
    identity = resolver.resolve(email, username=group_username(group.emails, resolver.host))
    return ContributorRecord(
        name=group.name,
        email=email,
        avatar=identity.avatar,
        username=identity.username,
        role=role_for(group.commits, threshold),
        commits=group.commits,
    )


def build_records(
    groups: Iterable[AuthorGroup],
    resolver: IdentityResolver,
    threshold: int = DEFAULT_THRESHOLD,
) -> list[ContributorRecord]:
    records: list[ContributorRecord] = []
    for group in groups:
        record = build_record(group, resolver, threshold)
        logger.debug("Resolved %s -> avatar=%s username=%s", record.name, record.avatar, record.username)
        records.append(record)
    return records


def sanitize_filename(text: str) -> str:
    """Replace anything outside ``[A-Za-z0-9.-]`` with ``_`` and trim edge underscores."""
    return _UNSAFE_RE.sub("_", text).strip("_")


def record_filename(record: ContributorRecord) -> str:
    stem = sanitize_filename(f"{record.name}-{record.email}") or sanitize_filename(record.email)
    return f"{stem}.json"


def write_records(records: list[ContributorRecord], output_dir: str | Path) -> Path:
    """Overwrite the combined collection file and one file per record.

    Per-record files from earlier runs whose contributor has disappeared are
    left in place.

    Returns the path of the combined collection file.
    """
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    combined = out / COLLECTION_FILENAME
    combined.write_text(to_json(records), encoding="utf-8")

    for record in records:
        (out / record_filename(record)).write_text(to_json(record), encoding="utf-8")

    return combined
