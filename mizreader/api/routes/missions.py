"""Mission listing, details, images and map feed endpoints."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from mizreader.api.deps import get_missions_dir, get_settings, resolve_mission_path
from mizreader.config import Settings
from mizreader.contracts.enums import Coalition
from mizreader.services.map_feed import build_map_feed, map_center
from mizreader.services.mission_parser import parse_mission_result
from mizreader.services.theater_probe import list_missions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/missions", tags=["missions"])

_IMAGE_MEDIA_TYPES = {
    b"\x89PNG": "image/png",
    b"\xff\xd8\xff": "image/jpeg",
    b"BM": "image/bmp",
}


def _media_type(data: bytes) -> str:
    for magic, media_type in _IMAGE_MEDIA_TYPES.items():
        if data.startswith(magic):
            return media_type
    return "application/octet-stream"


async def _load(path: Path):
    result = await asyncio.to_thread(parse_mission_result, path)
    if not result.success:
        raise HTTPException(status_code=422, detail=result.error.message)
    return result.data


@router.get("")
async def list_mission_files(
    recursive: bool = False,
    missions_dir: Path = Depends(get_missions_dir),
    settings: Settings = Depends(get_settings),
) -> list[dict]:
    rows = await asyncio.to_thread(
        list_missions, missions_dir, recursive, settings.probe_workers
    )
    return [
        {**row.to_dict(), "path": str(Path(row.path).relative_to(missions_dir))}
        for row in rows
    ]


@router.get("/details")
async def get_details(path: Path = Depends(resolve_mission_path)) -> dict:
    details = await _load(path)
    data = details.to_dict(exclude={"images", "kneeboard_images"})
    data["image_count"] = len(details.images)
    data["kneeboard_image_count"] = len(details.kneeboard_images)
    return data


@router.get("/images/{kind}/{index}")
async def get_image(
    kind: str,
    index: int,
    path: Path = Depends(resolve_mission_path),
) -> Response:
    if kind not in ("briefing", "kneeboard"):
        raise HTTPException(status_code=404, detail=f"Unknown image kind {kind}")
    details = await _load(path)
    images = details.images if kind == "briefing" else details.kneeboard_images
    if not 0 <= index < len(images):
        raise HTTPException(status_code=404, detail=f"No {kind} image {index}")
    data = images[index]
    return Response(content=data, media_type=_media_type(data))


@router.get("/map")
async def get_map_feed(
    path: Path = Depends(resolve_mission_path),
    coalition: list[Coalition] | None = Query(default=None),
    routes: bool = True,
) -> dict:
    details = await _load(path)
    markers = build_map_feed(details, coalitions=coalition, include_routes=routes)
    return {
        "theater": details.theater,
        "center": map_center(details, markers).model_dump(),
        "groups": [m.to_dict() for m in markers],
    }
