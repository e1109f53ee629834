"""Mission model builder — archive → ``MissionDetails`` entity graph.

The coalition hierarchy is walked in document order::

    coalition → blue|red → country[n] → plane|helicopter|vehicle|ship|static
              → group[n] → units[n] / route.points[n]

Navigation down to each group uses balanced-block extraction on the raw
text; each group block is then read with the table reader so that unit
and waypoint fields are looked up in their own table only.  Missing
fields become defaults; a group that cannot be read is skipped without
affecting the others.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections.abc import Iterator
from pathlib import Path

from mizreader.adapters.archive import (
    BRIEFING_IMAGE_PREFIX,
    DICTIONARY_ENTRY,
    IMAGE_EXTENSIONS,
    KNEEBOARD_PREFIX,
    MISSION_ENTRY,
    MizArchive,
)
from mizreader.adapters.blocks import (
    find_keyed_block,
    iter_indexed_blocks,
    read_float,
    read_int,
    read_loose_string,
    read_string,
    read_string_list,
)
from mizreader.adapters.dictionary import resolve_display
from mizreader.adapters.lua_table import (
    LuaTable,
    find_top_level_value,
    find_top_level_values,
    parse_table,
)
from mizreader.contracts.enums import BriefingField, Coalition, FailureCode, GroupCategory
from mizreader.contracts.extraction import Extracted, FieldIssue
from mizreader.contracts.mission import (
    DEFAULT_SKILL,
    FlightSlot,
    MissionDetails,
    Unit,
    UnitGroup,
    Waypoint,
    WeatherInfo,
)
from mizreader.contracts.result import ParseResult
from mizreader.errors import (
    ArchiveError,
    MissionEntryNotFoundError,
    ParseCancelledError,
    TableSyntaxError,
)
from mizreader.services.theater_probe import THEATER_KEYS, UNKNOWN_THEATER

logger = logging.getLogger(__name__)

NO_BRIEFING = "No briefing available."
UNKNOWN_DATE = "Unknown Date"
MIDNIGHT = "00:00:00"

WIND_LEVELS = ("atGround", "at2000", "at8000")


class _Issues(list):
    """Collects malformed-field diagnostics while building one mission."""

    def take(self, extracted: Extracted, path: str):
        if extracted.is_malformed:
            self.append(FieldIssue(path=path, raw=extracted.raw, message="unparsable value"))
        return extracted.value


def _check_cancel(cancel: threading.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        raise ParseCancelledError("mission parse cancelled")


# ----------------------------------------------------------------------
# Root fields
# ----------------------------------------------------------------------


def _format_date(date: LuaTable | None, text: str, issues: _Issues) -> str:
    if date is not None:
        parts = [date.integer(k) for k in ("Year", "Month", "Day")]
    else:
        block = find_keyed_block(text, "date")
        if block is None:
            return UNKNOWN_DATE
        parts = [read_int(block, k) for k in ("Year", "Month", "Day")]

    for key, part in zip(("Year", "Month", "Day"), parts):
        issues.take(part, f"date.{key}")
    if not all(p.is_found for p in parts):
        return UNKNOWN_DATE
    year, month, day = (p.value for p in parts)
    return f"{year}-{month:02d}-{day:02d}"


def _format_start_time(value: object, text: str, issues: _Issues) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        extracted = LuaTable(start_time=value).number("start_time")
    else:
        extracted = read_float(text, "start_time")
    issues.take(extracted, "start_time")
    if not extracted.is_found:
        return MIDNIGHT

    total = int(extracted.value)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def extract_weather(text: str, issues: _Issues | None = None) -> WeatherInfo:
    """Weather snapshot from the mission's ``weather`` table."""
    issues = issues if issues is not None else _Issues()
    block = find_keyed_block(text, "weather")
    if block is None:
        return WeatherInfo()

    season = find_keyed_block(block, "season") or block
    fields = {
        "qnh": issues.take(read_int(block, "qnh"), "weather.qnh"),
        "temperature": issues.take(read_float(season, "temperature"), "weather.temperature"),
    }

    wind = find_keyed_block(block, "wind") or ""
    for level in WIND_LEVELS:
        level_block = find_keyed_block(wind, level) or ""
        suffix = "ground" if level == "atGround" else level[2:]
        fields[f"wind_speed_{suffix}"] = issues.take(
            read_int(level_block, "speed"), f"weather.wind.{level}.speed"
        )
        fields[f"wind_dir_{suffix}"] = issues.take(
            read_int(level_block, "dir"), f"weather.wind.{level}.dir"
        )
    return WeatherInfo(**fields)


def extract_required_modules(text: str) -> list[str]:
    block = find_keyed_block(text, "requiredModules")
    return read_string_list(block) if block else []


# ----------------------------------------------------------------------
# Coalition hierarchy
# ----------------------------------------------------------------------


def _parse_unit(
    table: LuaTable, path: str, issues: _Issues, dictionary_text: str = ""
) -> Unit | None:
    unit_type = issues.take(table.string("type"), f"{path}.type")
    if not unit_type:
        logger.debug("Skipping unit without type at %s", path)
        return None

    skill = issues.take(table.string("skill", DEFAULT_SKILL), f"{path}.skill") or DEFAULT_SKILL

    callsign = table.get("callsign")
    if isinstance(callsign, LuaTable):
        callsign = callsign.string("name").value or None
    elif not isinstance(callsign, str):
        number = table.integer("callsign")
        callsign = str(number.value) if number.is_found else None
    if callsign:
        callsign = resolve_display(dictionary_text, callsign)

    return Unit(
        name=resolve_display(
            dictionary_text, issues.take(table.string("name"), f"{path}.name")
        ),
        type=unit_type,
        unit_id=issues.take(table.integer("unitId"), f"{path}.unitId"),
        skill=skill,
        callsign=callsign,
        x=issues.take(table.number("x"), f"{path}.x"),
        y=issues.take(table.number("y"), f"{path}.y"),
        alt=issues.take(table.number("alt"), f"{path}.alt"),
        speed=issues.take(table.number("speed"), f"{path}.speed"),
        heading=issues.take(table.number("heading"), f"{path}.heading"),
    )


def _parse_waypoint(
    table: LuaTable, path: str, issues: _Issues, dictionary_text: str = ""
) -> Waypoint:
    name = table.string("name")
    return Waypoint(
        name=resolve_display(dictionary_text, name.value) if name.is_found else None,
        action=issues.take(table.string("action"), f"{path}.action"),
        type=issues.take(table.string("type"), f"{path}.type"),
        x=issues.take(table.number("x"), f"{path}.x"),
        y=issues.take(table.number("y"), f"{path}.y"),
        alt=issues.take(table.number("alt"), f"{path}.alt"),
        speed=issues.take(table.number("speed"), f"{path}.speed"),
    )


def parse_group(
    block: str,
    coalition: Coalition,
    country: str,
    category: GroupCategory,
    path: str = "group",
    issues: _Issues | None = None,
    dictionary_text: str = "",
) -> UnitGroup | None:
    """Build one group from its balanced block; None when it has no units.

    Name, task, callsign and waypoint name values holding a dictionary key
    are shown resolved through ``dictionary_text``.
    """
    issues = issues if issues is not None else _Issues()
    try:
        table = parse_table(block)
    except TableSyntaxError as exc:
        logger.warning("Skipping unreadable group at %s: %s", path, exc)
        issues.append(FieldIssue(path=path, message=str(exc)))
        return None

    units = []
    for i, unit_table in enumerate(table.table("units").array(), start=1):
        unit = _parse_unit(unit_table, f"{path}.units[{i}]", issues, dictionary_text)
        if unit is not None:
            units.append(unit)
    if not units:
        logger.debug("Discarding group without units at %s", path)
        return None

    points = table.table("route").table("points").array()
    route = [
        _parse_waypoint(point, f"{path}.route.points[{i}]", issues, dictionary_text)
        for i, point in enumerate(points, start=1)
    ]

    return UnitGroup(
        coalition=coalition,
        country=country,
        category=category,
        name=resolve_display(
            dictionary_text, issues.take(table.string("name"), f"{path}.name")
        ),
        task=resolve_display(
            dictionary_text, issues.take(table.string("task"), f"{path}.task")
        ),
        units=units,
        route=route,
    )


def _iter_group_blocks(
    country_block: str,
) -> Iterator[tuple[GroupCategory, int, str]]:
    for category in GroupCategory:
        category_block = find_keyed_block(country_block, category.value)
        if category_block is None:
            continue
        group_array = find_keyed_block(category_block, "group")
        if group_array is None:
            continue
        for index, block in iter_indexed_blocks(group_array):
            yield category, index, block


def extract_groups(
    mission_text: str,
    issues: _Issues | None = None,
    cancel: threading.Event | None = None,
    dictionary_text: str = "",
) -> list[UnitGroup]:
    """All groups with at least one unit, in document order."""
    issues = issues if issues is not None else _Issues()
    groups: list[UnitGroup] = []

    coalition_block = find_keyed_block(mission_text, "coalition")
    if coalition_block is None:
        return groups

    for side in Coalition:
        side_block = find_keyed_block(coalition_block, side.value)
        if side_block is None:
            continue
        country_array = find_keyed_block(side_block, "country")
        if country_array is None:
            continue

        for country_index, country_block in iter_indexed_blocks(country_array):
            _check_cancel(cancel)
            country_name = find_top_level_value(country_block, "name")
            if not isinstance(country_name, str) or not country_name:
                country_name = "Unknown"

            for category, group_index, block in _iter_group_blocks(country_block):
                path = (
                    f"coalition.{side.value}.country[{country_index}]"
                    f".{category.value}.group[{group_index}]"
                )
                group = parse_group(
                    block, side, country_name, category, path, issues, dictionary_text
                )
                if group is not None:
                    groups.append(group)

    return groups


def flatten_flight_slots(groups: list[UnitGroup]) -> list[FlightSlot]:
    """One slot per (group, unit) pair."""
    return [FlightSlot.from_pair(group, unit) for group in groups for unit in group.units]


# ----------------------------------------------------------------------
# Entry points
# ----------------------------------------------------------------------


def parse_mission_text(
    mission_text: str,
    dictionary_text: str = "",
    cancel: threading.Event | None = None,
) -> MissionDetails:
    """Build ``MissionDetails`` from ``mission`` and dictionary text (no images)."""
    issues = _Issues()

    root = find_top_level_values(mission_text, "date", "start_time")
    date = root.get("date")

    briefing = {}
    for field in BriefingField:
        raw = issues.take(read_string(mission_text, field.value), field.value)
        briefing[field] = resolve_display(dictionary_text, raw) if raw else ""

    groups = extract_groups(mission_text, issues, cancel, dictionary_text)
    slots = flatten_flight_slots(groups)
    unit_count = sum(len(g.units) for g in groups)
    waypoint_count = sum(len(g.route) for g in groups)
    debug_info = f"Found {len(groups)} groups, {unit_count} units, {waypoint_count} waypoints"
    logger.info("%s (%d malformed fields)", debug_info, len(issues))

    return MissionDetails(
        theater=read_loose_string(mission_text, *THEATER_KEYS) or UNKNOWN_THEATER,
        sortie=briefing[BriefingField.SORTIE],
        date=_format_date(date if isinstance(date, LuaTable) else None, mission_text, issues),
        start_time=_format_start_time(root.get("start_time"), mission_text, issues),
        weather=extract_weather(mission_text, issues),
        required_modules=extract_required_modules(mission_text),
        briefing=briefing[BriefingField.SITUATION] or NO_BRIEFING,
        briefing_blue_task=briefing[BriefingField.BLUE_TASK],
        briefing_red_task=briefing[BriefingField.RED_TASK],
        briefing_neutrals_task=briefing[BriefingField.NEUTRALS_TASK],
        flight_slots=slots,
        all_groups=groups,
        debug_info=debug_info,
        diagnostics=list(issues),
    )


def _read_images(
    archive: MizArchive, prefix: str, cancel: threading.Event | None
) -> list[bytes]:
    images = []
    for name in archive.list_entries(prefix, IMAGE_EXTENSIONS):
        _check_cancel(cancel)
        try:
            data = archive.read_bytes(name)
        except ArchiveError as exc:
            logger.warning("Skipping unreadable image %s: %s", name, exc)
            continue
        if data:
            images.append(data)
    return images


def _parse_archive(path: str | Path, cancel: threading.Event | None) -> MissionDetails:
    with MizArchive.open(path) as archive:
        _check_cancel(cancel)
        if not archive.has_entry(MISSION_ENTRY):
            raise MissionEntryNotFoundError(str(path))
        mission_text = archive.read_text(MISSION_ENTRY)
        if not mission_text:
            raise MissionEntryNotFoundError(str(path))

        _check_cancel(cancel)
        dictionary_text = archive.read_text(DICTIONARY_ENTRY)

        _check_cancel(cancel)
        details = parse_mission_text(mission_text, dictionary_text, cancel)

        images = _read_images(archive, BRIEFING_IMAGE_PREFIX, cancel)
        kneeboard = _read_images(archive, KNEEBOARD_PREFIX, cancel)

    return details.model_copy(update={"images": images, "kneeboard_images": kneeboard})


def _failure_details(exc: ArchiveError) -> MissionDetails:
    if isinstance(exc, MissionEntryNotFoundError):
        return MissionDetails(briefing=f"Error: {exc.reason}.")
    return MissionDetails(briefing=f"Error parsing mission file: {exc.reason}")


def parse_mission(path: str | Path, cancel: threading.Event | None = None) -> MissionDetails:
    """Parse one mission archive.

    Always returns a ``MissionDetails``: when the archive cannot be read,
    its ``briefing`` carries the error description and everything else
    keeps its defaults.

    Raises:
        ParseCancelledError: ``cancel`` was set between archive entries.
    """
    try:
        return _parse_archive(path, cancel)
    except ArchiveError as exc:
        logger.warning("Failed to parse mission %s: %s", path, exc)
        return _failure_details(exc)


def parse_mission_result(
    path: str | Path, cancel: threading.Event | None = None
) -> ParseResult[MissionDetails]:
    """Like ``parse_mission`` but also says whether the archive could be read."""
    start = time.perf_counter()
    try:
        details = _parse_archive(path, cancel)
    except ArchiveError as exc:
        logger.warning("Failed to parse mission %s: %s", path, exc)
        code = (
            FailureCode.MISSION_NOT_FOUND
            if isinstance(exc, MissionEntryNotFoundError)
            else FailureCode.ARCHIVE_ERROR
        )
        return ParseResult.fail(str(path), code, str(exc), _failure_details(exc))
    return ParseResult.ok(str(path), details, duration_ms=(time.perf_counter() - start) * 1000)


async def parse_mission_async(
    path: str | Path, cancel: threading.Event | None = None
) -> MissionDetails:
    """Run ``parse_mission`` off the event loop."""
    return await asyncio.to_thread(parse_mission, path, cancel)
