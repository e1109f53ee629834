"""mizreader data contracts — Pydantic v2 models for parsed mission archives.

Parsed (built once per archive, immutable)
------------------------------------------
- ``MissionDetails`` — aggregate root: theater, sortie, date, weather,
  briefing text, images, groups and flight slots
- ``UnitGroup`` → ``Unit`` / ``Waypoint`` — the coalition hierarchy
- ``FlightSlot`` — flattened (group, unit) pairs for display

Reference data (compiled in, read-only)
---------------------------------------
- ``TheaterProjection`` — per-theater Transverse Mercator parameters

Calculated (never stored)
-------------------------
- ``MissionFile`` — folder listing row with probed theater
- ``GroupMarker`` / ``UnitMarker`` — map feed in WGS84 coordinates
- ``Extracted`` / ``FieldIssue`` — per-field extraction outcomes
- ``ParseResult`` — archive read outcome with a best-effort partial result
"""

from mizreader.contracts.enums import (
    BriefingField,
    Coalition,
    FailureCode,
    FieldStatus,
    GroupCategory,
)
from mizreader.contracts.common import GeoPoint, MissionModel
from mizreader.contracts.extraction import Extracted, FieldIssue
from mizreader.contracts.result import ParseFailure, ParseResult
from mizreader.contracts.mission import (
    FlightSlot,
    MissionDetails,
    Unit,
    UnitGroup,
    Waypoint,
    WeatherInfo,
)
from mizreader.contracts.theater import (
    GroupMarker,
    MissionFile,
    TheaterProjection,
    UnitMarker,
)

__all__ = [
    # Enums
    "BriefingField",
    "Coalition",
    "FailureCode",
    "FieldStatus",
    "GroupCategory",
    # Common
    "GeoPoint",
    "MissionModel",
    # Extraction outcomes
    "Extracted",
    "FieldIssue",
    # Result
    "ParseFailure",
    "ParseResult",
    # Mission graph
    "FlightSlot",
    "MissionDetails",
    "Unit",
    "UnitGroup",
    "Waypoint",
    "WeatherInfo",
    # Theater / listing / map
    "GroupMarker",
    "MissionFile",
    "TheaterProjection",
    "UnitMarker",
]
