"""Base classes and shared types for mizreader contracts.

Unit conventions (all contracts):
- **Planar coordinates**: simulation-local meters, ``x`` = northing,
  ``y`` = easting (theater projection with axis order north/east/up)
- **Altitudes**: meters, as stored in the mission file
- **Speeds**: meters per second, as stored in the mission file
- **Headings**: radians, as stored in the mission file
- **Geographic coordinates**: WGS84 decimal degrees

Every contract is frozen: a parse call builds the entity graph once and
hands out an immutable snapshot.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class MissionModel(BaseModel):
    """Base model for parsed mission entities.

    - Enums serialize as string values.
    - Binary payloads (embedded images) serialize as base64 in JSON mode.
    - ``to_dict()`` produces a JSON-safe dict for API responses.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        use_enum_values=True,
        ser_json_bytes="base64",
    )

    def to_dict(self, **kwargs: Any) -> dict[str, Any]:
        """Dump to a JSON-compatible dict."""
        return self.model_dump(mode="json", by_alias=True, **kwargs)


class GeoPoint(BaseModel):
    """WGS84 geographic coordinate."""

    latitude: float
    longitude: float

    model_config = ConfigDict(frozen=True)
