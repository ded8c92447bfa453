"""Read side of the persisted contributor snapshot."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from icontribute.config import COLLECTION_FILENAME

logger = logging.getLogger(__name__)


def load_contributors(data_dir: str | Path) -> list[dict[str, Any]]:
    """Read ``contributors.json`` from *data_dir*; a missing file reads as ``[]``."""
    path = Path(data_dir) / COLLECTION_FILENAME
    logger.debug("Reading contributors from %s", path)
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return []
    data = json.loads(raw)
    return data if isinstance(data, list) else []


def find_by_username(username: str | None, data_dir: str | Path) -> dict[str, Any] | None:
    """Return the record whose ``username`` matches case-insensitively, else ``None``."""
    if not username:
        return None
    wanted = username.lower()
    for record in load_contributors(data_dir):
        if isinstance(record, dict) and (record.get("username") or "").lower() == wanted:
            return record
    return None
