from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import PlainTextResponse

from icontribute.config import Settings
from icontribute.store import find_by_username, load_contributors

logger = logging.getLogger(__name__)

GREETING = "Hello! Welcome to iContribute!"

router = APIRouter()


def get_data_dir(request: Request) -> Path:
    return request.app.state.settings.data_dir


@router.get("/", response_class=PlainTextResponse)
def root() -> str:
    return GREETING


@router.get("/api/contributors")
def list_contributors(data_dir: Path = Depends(get_data_dir)) -> list[dict[str, Any]]:
    """List every persisted contributor."""
    return load_contributors(data_dir)


@router.get("/api/contributors/{username}")
def get_contributor(username: str, data_dir: Path = Depends(get_data_dir)) -> Optional[dict[str, Any]]:
    """Look a contributor up by handle; ``null`` when nobody matches."""
    logger.info("Fetching contributor for username: %s", username)
    return find_by_username(username, data_dir)


def create_app(settings: Settings | None = None) -> FastAPI:
    app = FastAPI(title="iContribute API", version="1.0.0")
    app.state.settings = settings or Settings.from_env()
    app.include_router(router)
    return app


app = create_app()
