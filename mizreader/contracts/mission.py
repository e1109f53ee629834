"""Mission entity graph — coalitions, groups, units, routes, weather, briefing.

Built once per archive by ``mizreader.services.mission_parser`` and never
mutated afterwards.  ``FlightSlot`` is a derived, denormalized projection of
(group, unit) pairs for display; it is not independently owned.
"""

from pydantic import Field, computed_field

from mizreader.contracts.common import MissionModel
from mizreader.contracts.enums import Coalition, GroupCategory
from mizreader.contracts.extraction import FieldIssue

PLAYER_SKILLS = frozenset({"Client", "Player"})
DEFAULT_SKILL = "AI"


class WeatherInfo(MissionModel):
    """Wind at three altitude bands, QNH and temperature.

    Every field defaults to zero so a mission without weather still yields
    a complete snapshot.
    """

    wind_speed_ground: int = 0
    wind_dir_ground: int = 0
    wind_speed_2000: int = 0
    wind_dir_2000: int = 0
    wind_speed_8000: int = 0
    wind_dir_8000: int = 0
    qnh: int = Field(default=0, description="mmHg")
    temperature: float = Field(default=0.0, description="deg C")


class Unit(MissionModel):
    """A single unit, owned by exactly one ``UnitGroup``."""

    name: str = ""
    type: str = Field(..., min_length=1, description="Unit type identifier")
    unit_id: int = 0
    skill: str = DEFAULT_SKILL
    callsign: str | None = None
    x: float = 0.0
    y: float = 0.0
    alt: float = 0.0
    speed: float = 0.0
    heading: float = 0.0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_player(self) -> bool:
        """True for client and player slots."""
        return self.skill in PLAYER_SKILLS


class Waypoint(MissionModel):
    """A route point.  Route order is flight order."""

    name: str | None = None
    action: str = ""
    type: str = ""
    x: float = 0.0
    y: float = 0.0
    alt: float = 0.0
    speed: float = 0.0


class UnitGroup(MissionModel):
    """A group of one or more units sharing a category, route, and task."""

    coalition: Coalition
    country: str = "Unknown"
    category: GroupCategory
    name: str = ""
    task: str = ""
    units: list[Unit] = Field(..., min_length=1)
    route: list[Waypoint] = Field(default_factory=list)


class FlightSlot(MissionModel):
    """One (group, unit) pair with group-level fields copied onto it."""

    coalition: Coalition
    country: str
    category: GroupCategory
    group_name: str
    task: str
    unit_name: str
    type: str
    skill: str
    callsign: str | None = None
    unit_id: int
    x: float
    y: float
    alt: float
    speed: float
    heading: float
    is_player: bool

    @classmethod
    def from_pair(cls, group: UnitGroup, unit: Unit) -> "FlightSlot":
        return cls(
            coalition=group.coalition,
            country=group.country,
            category=group.category,
            group_name=group.name,
            task=group.task,
            unit_name=unit.name,
            type=unit.type,
            skill=unit.skill,
            callsign=unit.callsign,
            unit_id=unit.unit_id,
            x=unit.x,
            y=unit.y,
            alt=unit.alt,
            speed=unit.speed,
            heading=unit.heading,
            is_player=unit.is_player,
        )


class MissionDetails(MissionModel):
    """Aggregate root for one parsed mission archive.

    Always returned, even for unreadable archives: in that case ``briefing``
    carries the error description and the collections are empty.
    """

    theater: str = "Unknown"
    sortie: str = ""
    date: str = "Unknown Date"
    start_time: str = "00:00:00"
    weather: WeatherInfo = Field(default_factory=WeatherInfo)
    required_modules: list[str] = Field(default_factory=list)

    # Briefing text (already resolved through the dictionary)
    briefing: str = ""
    briefing_blue_task: str = ""
    briefing_red_task: str = ""
    briefing_neutrals_task: str = ""

    images: list[bytes] = Field(default_factory=list)
    kneeboard_images: list[bytes] = Field(default_factory=list)

    flight_slots: list[FlightSlot] = Field(default_factory=list)
    all_groups: list[UnitGroup] = Field(default_factory=list)

    debug_info: str = ""
    diagnostics: list[FieldIssue] = Field(default_factory=list)

    @property
    def player_slots(self) -> list[FlightSlot]:
        return [slot for slot in self.flight_slots if slot.is_player]
