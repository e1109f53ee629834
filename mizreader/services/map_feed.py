"""Map feed: parsed groups projected into WGS84 for a map consumer.

No rendering here — callers receive ``GroupMarker`` rows with geographic
unit positions and route polylines, already filtered by coalition.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable

from mizreader.contracts.common import GeoPoint
from mizreader.contracts.enums import Coalition
from mizreader.contracts.mission import MissionDetails
from mizreader.contracts.theater import GroupMarker, UnitMarker
from mizreader.services.projection import DEFAULT_THEATER, dcs_to_geopoint, theater_center

logger = logging.getLogger(__name__)


def _project(theater: str, x: float, y: float) -> GeoPoint | None:
    """Geographic position of a mission point; None when it is not a valid coordinate."""
    try:
        point = dcs_to_geopoint(theater, x, y)
    except (OverflowError, ValueError):
        return None
    lat, lon = point.latitude, point.longitude
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        return None
    return point


def _theater_of(details: MissionDetails) -> str:
    if not details.theater or details.theater == "Unknown":
        return DEFAULT_THEATER
    return details.theater


def build_map_feed(
    details: MissionDetails,
    *,
    coalitions: Iterable[Coalition | str] | None = None,
    include_routes: bool = True,
) -> list[GroupMarker]:
    """Project every group of ``details`` onto the mission's theater.

    Units whose projected position is not a valid coordinate are dropped.
    Routes with fewer than two points are omitted.
    """
    theater = _theater_of(details)
    wanted = {Coalition(c).value for c in coalitions} if coalitions is not None else None

    markers = []
    for group in details.all_groups:
        if wanted is not None and group.coalition not in wanted:
            continue

        units = []
        for unit in group.units:
            position = _project(theater, unit.x, unit.y)
            if position is None:
                logger.debug("Invalid position for unit %s: (%s, %s)", unit.name, unit.x, unit.y)
                continue
            units.append(UnitMarker(
                name=unit.name,
                type=unit.type,
                position=position,
                is_player=unit.is_player,
            ))

        route = []
        if include_routes and len(group.route) > 1:
            for wp in group.route:
                point = _project(theater, wp.x, wp.y)
                if point is not None:
                    route.append(point)

        markers.append(GroupMarker(
            coalition=group.coalition,
            category=group.category,
            group_name=group.name,
            units=units,
            route=route,
        ))
    return markers


def map_center(details: MissionDetails, markers: list[GroupMarker] | None = None) -> GeoPoint:
    """Mean unit position, or the theater center when there are no units."""
    markers = markers if markers is not None else build_map_feed(details, include_routes=False)
    points = [u.position for m in markers for u in m.units]
    if not points:
        lat, lon = theater_center(_theater_of(details))
        return GeoPoint(latitude=lat, longitude=lon)
    return GeoPoint(
        latitude=sum(p.latitude for p in points) / len(points),
        longitude=sum(p.longitude for p in points) / len(points),
    )
