"""Shared dataclasses for authorship parsing and persisted contributor records."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Any

MAINTAINER = "Maintainer"
CONTRIBUTOR = "Contributor"


def _serializable(item: Any) -> Any:
    if hasattr(item, "to_dict"):
        return item.to_dict()
    if hasattr(item, "__dataclass_fields__"):
        return asdict(item)
    return item


def to_json(data: Any, indent: int = 2) -> str:
    if isinstance(data, list):
        serializable = [_serializable(item) for item in data]
    else:
        serializable = _serializable(data)
    return json.dumps(serializable, indent=indent, ensure_ascii=False)


@dataclass
class AuthorEntry:
    name: str
    email: str
    commits: int


@dataclass
class AuthorGroup:
    name: str  # first-seen casing of the normalized name
    emails: list[str] = field(default_factory=list)  # distinct, first-seen order
    commits: int = 0


@dataclass
class ContributorRecord:
    name: str
    email: str
    avatar: str
    username: str | None
    role: str  # MAINTAINER | CONTRIBUTOR
    commits: int

    def to_dict(self) -> dict[str, Any]:
        """Return the persisted shape; ``username`` is left out when unknown."""
        data: dict[str, Any] = {"name": self.name, "email": self.email, "avatar": self.avatar}
        if self.username:
            data["username"] = self.username
        data["role"] = self.role
        data["commits"] = self.commits
        return data
