"""Theater projection endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from mizreader.services.projection import (
    dcs_to_geopoint,
    get_projection,
    known_theaters,
    theater_center,
)

router = APIRouter(prefix="/theaters", tags=["theaters"])


@router.get("")
async def list_theaters() -> list[dict]:
    return [
        {"name": name, **get_projection(name).model_dump()}
        for name in known_theaters()
    ]


@router.get("/{theater}/center")
async def get_center(theater: str) -> dict:
    lat, lon = theater_center(theater)
    return {"theater": theater, "latitude": lat, "longitude": lon}


@router.get("/{theater}/latlon")
async def convert(theater: str, x: float, y: float) -> dict:
    """Mission planar x (northing) / y (easting) to WGS84."""
    point = dcs_to_geopoint(theater, x, y)
    return {"theater": theater, "x": x, "y": y, **point.model_dump()}
