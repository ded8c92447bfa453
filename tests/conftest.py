"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from git import Actor, Repo


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "contributors"


@pytest.fixture
def write_collection(data_dir: Path):
    """Write a ``contributors.json`` snapshot and return the directory."""

    def _write(records: list[dict]) -> Path:
        data_dir.mkdir(parents=True, exist_ok=True)
        (data_dir / "contributors.json").write_text(json.dumps(records), encoding="utf-8")
        return data_dir

    return _write


@pytest.fixture
def make_repo(tmp_path: Path):
    """Create a git repository with one commit per ``(name, email)`` author given."""

    def _make(authors: list[tuple[str, str]]) -> Path:
        root = tmp_path / "repo"
        root.mkdir()
        repo = Repo.init(root)
        notes = root / "notes.txt"
        for i, (name, email) in enumerate(authors):
            notes.write_text(f"change {i}\n", encoding="utf-8")
            repo.index.add(["notes.txt"])
            actor = Actor(name, email)
            repo.index.commit(f"change {i}", author=actor, committer=actor)
        repo.close()
        return root

    return _make
