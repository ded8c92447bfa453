"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_THRESHOLD = 5
DEFAULT_DATA_DIR = "contributors"
COLLECTION_FILENAME = "contributors.json"


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name, "").strip()
    return raw or default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    try:
        return max(0.1, float(raw)) if raw else default
    except ValueError:
        return default


@dataclass
class Settings:
    repo_path: Path = Path(".")
    data_dir: Path = Path(DEFAULT_DATA_DIR)
    maintainer_threshold: int = DEFAULT_THRESHOLD
    probe_timeout: float = 5.0
    avatar_host: str = "github.com"
    host: str = "127.0.0.1"
    port: int = 3000

    @property
    def collection_path(self) -> Path:
        return self.data_dir / COLLECTION_FILENAME

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            repo_path=Path(_env_str("ICONTRIBUTE_REPO", ".")),
            data_dir=Path(_env_str("ICONTRIBUTE_DATA_DIR", DEFAULT_DATA_DIR)),
            maintainer_threshold=_env_int("ICONTRIBUTE_MAINTAINER_THRESHOLD", DEFAULT_THRESHOLD),
            probe_timeout=_env_float("ICONTRIBUTE_PROBE_TIMEOUT", 5.0),
            avatar_host=_env_str("ICONTRIBUTE_AVATAR_HOST", "github.com").lower(),
            host=_env_str("ICONTRIBUTE_HOST", "127.0.0.1"),
            port=_env_int("ICONTRIBUTE_PORT", 3000),
        )
