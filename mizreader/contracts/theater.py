"""Theater projection parameters and mission listing rows."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from mizreader.contracts.common import GeoPoint, MissionModel
from mizreader.contracts.enums import Coalition, GroupCategory


class TheaterProjection(BaseModel):
    """Transverse Mercator parameters of one theater map.

    The simulation uses axis order north/east: mission ``x`` is the
    northing and ``y`` the easting, both offset by the false values below.
    """

    central_meridian: float = Field(..., ge=-180.0, le=180.0, description="lon_0 in degrees")
    scale_factor: float = Field(..., gt=0, description="k_0")
    false_easting: float = Field(..., description="x_0 in meters")
    false_northing: float = Field(..., description="y_0 in meters")

    model_config = ConfigDict(frozen=True)


class MissionFile(MissionModel):
    """One mission archive in a folder listing, annotated with its theater."""

    file_name: str
    path: str
    theater: str = "Unknown"
    size_bytes: int = Field(default=0, ge=0)
    modified: datetime | None = None


class UnitMarker(MissionModel):
    """A unit position ready to be placed on a map."""

    name: str
    type: str
    position: GeoPoint
    is_player: bool = False


class GroupMarker(MissionModel):
    """A group's units and route projected into geographic coordinates."""

    coalition: Coalition
    category: GroupCategory
    group_name: str
    units: list[UnitMarker] = Field(default_factory=list)
    route: list[GeoPoint] = Field(default_factory=list)
