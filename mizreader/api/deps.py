"""FastAPI dependency injection wiring."""

from __future__ import annotations

from pathlib import Path

from fastapi import Depends, HTTPException, Request

from mizreader.config import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_missions_dir(settings: Settings = Depends(get_settings)) -> Path:
    return settings.missions_dir.resolve()


def resolve_mission_path(
    name: str,
    missions_dir: Path = Depends(get_missions_dir),
) -> Path:
    """Mission archive ``name`` inside the missions folder.

    Rejects names that escape the folder and files that do not exist.
    """
    path = (missions_dir / name).resolve()
    if not path.is_relative_to(missions_dir):
        raise HTTPException(status_code=400, detail="Mission path outside missions folder")
    if not path.is_file():
        raise HTTPException(status_code=404, detail=f"Mission {name} not found")
    return path
