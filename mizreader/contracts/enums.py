"""Enumerations shared across all mizreader contracts."""

from enum import Enum


class Coalition(str, Enum):
    """One of the two opposing sides of a mission."""
    BLUE = "blue"
    RED = "red"


class GroupCategory(str, Enum):
    """Group category, in the order categories appear under a country."""
    PLANE = "plane"
    HELICOPTER = "helicopter"
    VEHICLE = "vehicle"
    SHIP = "ship"
    STATIC = "static"


class FieldStatus(str, Enum):
    """Outcome of a single field extraction."""
    FOUND = "found"
    DEFAULTED = "defaulted"  # Key absent, default value used
    MALFORMED = "malformed"  # Key present, value could not be converted


class FailureCode(str, Enum):
    """Why an archive could not be parsed."""
    MISSION_NOT_FOUND = "mission_not_found"
    ARCHIVE_ERROR = "archive_error"


class BriefingField(str, Enum):
    """Briefing text fields stored at the mission root."""
    SORTIE = "sortie"
    SITUATION = "descriptionText"
    BLUE_TASK = "descriptionBlueTask"
    RED_TASK = "descriptionRedTask"
    NEUTRALS_TASK = "descriptionNeutralsTask"
