from __future__ import annotations

import json
import re
from pathlib import Path

from icontribute.builder import (
    build_record,
    build_records,
    primary_email,
    record_filename,
    role_for,
    sanitize_filename,
    write_records,
)
from icontribute.identity import OfflineIdentityResolver, gravatar_url
from icontribute.models import CONTRIBUTOR, MAINTAINER, AuthorGroup, ContributorRecord


def _record(**overrides) -> ContributorRecord:
    fields = dict(name="Jane Doe", email="jane@x.com", avatar="https://a/b.png", username=None, role=CONTRIBUTOR, commits=1)
    fields.update(overrides)
    return ContributorRecord(**fields)


def test_primary_email_prefers_real_address() -> None:
    assert primary_email(["a@users.noreply.x.com", "b@real.com"], host="x.com") == "b@real.com"
    assert primary_email(["b@real.com", "a@users.noreply.x.com"], host="x.com") == "b@real.com"


def test_primary_email_falls_back_to_noreply_or_empty() -> None:
    assert primary_email(["1+a@users.noreply.github.com"]) == "1+a@users.noreply.github.com"
    assert primary_email([]) == ""


def test_role_is_a_threshold_function() -> None:
    assert role_for(5) == MAINTAINER
    assert role_for(4) == CONTRIBUTOR
    assert role_for(4, threshold=2) == MAINTAINER
    assert role_for(0, threshold=0) == MAINTAINER


def test_threshold_changes_only_role() -> None:
    group = AuthorGroup(name="Alice", emails=["alice@x.com"], commits=3)
    resolver = OfflineIdentityResolver()
    low = build_record(group, resolver, threshold=2)
    high = build_record(group, resolver, threshold=10)
    assert (low.role, high.role) == (MAINTAINER, CONTRIBUTOR)
    assert (low.name, low.email, low.avatar, low.username, low.commits) == (
        high.name, high.email, high.avatar, high.username, high.commits,
    )


def test_build_record_uses_handle_from_noreply_email() -> None:
    group = AuthorGroup(name="Octo Cat", emails=["12345+octocat@users.noreply.github.com", "octo@corp.com"], commits=7)
    record = build_record(group, OfflineIdentityResolver(known_usernames=["octocat"]))
    assert record.email == "octo@corp.com"
    assert record.username == "octocat"
    assert record.avatar == "https://github.com/octocat.png"
    assert record.role == MAINTAINER


def test_build_records_keeps_group_order() -> None:
    groups = [AuthorGroup("B", ["b@x.com"], 1), AuthorGroup("A", ["a@x.com"], 9)]
    records = build_records(groups, OfflineIdentityResolver())
    assert [r.name for r in records] == ["B", "A"]
    assert all(r.avatar for r in records)


def test_sanitize_filename_keeps_only_safe_characters() -> None:
    name = sanitize_filename("  Jane Doe-jane+tag@x.com!!")
    assert re.fullmatch(r"[A-Za-z0-9._-]+", name)
    assert not name.startswith("_") and not name.endswith("_")
    assert name == "Jane_Doe-jane_tag_x.com"


def test_record_filename_combines_name_and_email() -> None:
    assert record_filename(_record(name="Jane Doe", email="jane@x.com")) == "Jane_Doe-jane_x.com.json"
    assert record_filename(_record(name="Zoë", email="z@x.com")) == "Zo_-z_x.com.json"


def test_record_to_dict_omits_missing_username() -> None:
    assert "username" not in _record().to_dict()
    data = _record(username="jdoe").to_dict()
    assert list(data) == ["name", "email", "avatar", "username", "role", "commits"]


def test_write_records_writes_collection_and_per_record_files(tmp_path: Path) -> None:
    out = tmp_path / "nested" / "contributors"
    records = [_record(), _record(name="Bob", email="bob@x.com", username="bob", role=MAINTAINER, commits=9)]

    combined = write_records(records, out)

    assert combined == out / "contributors.json"
    data = json.loads(combined.read_text(encoding="utf-8"))
    assert [r["name"] for r in data] == ["Jane Doe", "Bob"]
    single = json.loads((out / "Bob-bob_x.com.json").read_text(encoding="utf-8"))
    assert single == {"name": "Bob", "email": "bob@x.com", "avatar": "https://a/b.png", "username": "bob", "role": MAINTAINER, "commits": 9}


def test_write_records_overwrites_collection_and_keeps_stale_files(tmp_path: Path) -> None:
    write_records([_record(name="Old", email="old@x.com")], tmp_path)
    write_records([_record()], tmp_path)

    data = json.loads((tmp_path / "contributors.json").read_text(encoding="utf-8"))
    assert [r["name"] for r in data] == ["Jane Doe"]
    assert (tmp_path / "Old-old_x.com.json").exists()


def test_write_records_empty_collection(tmp_path: Path) -> None:
    write_records([], tmp_path)
    assert json.loads((tmp_path / "contributors.json").read_text(encoding="utf-8")) == []


def test_gravatar_fallback_is_never_empty() -> None:
    record = build_record(AuthorGroup("No Mail", [""], 1), OfflineIdentityResolver())
    assert record.email == ""
    assert record.avatar == gravatar_url("")
