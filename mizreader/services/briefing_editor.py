"""Briefing text rewrite — the only write path into a mission archive.

Each briefing field lives at the mission root either as a literal string
or as a ``DictKey_...`` reference into the localization dictionary.  A
reference has its dictionary value replaced (appended when the dictionary
lacks it); a literal is replaced in the ``mission`` entry itself.  All
other archive entries are copied byte for byte.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
import zipfile
from pathlib import Path

from mizreader.adapters.archive import DICTIONARY_ENTRY, MISSION_ENTRY, MizArchive
from mizreader.adapters.blocks import read_string
from mizreader.adapters.dictionary import escape_lua_string, is_dict_key, value_pattern
from mizreader.contracts.enums import BriefingField
from mizreader.errors import ArchiveError, BriefingUpdateError

logger = logging.getLogger(__name__)

_EMPTY_DICTIONARY = "dictionary = \n{\n} -- end of dictionary\n"


def _replace_value(text: str, key: str, value: str) -> tuple[str, bool]:
    """Replace the quoted value of ``["key"]``; returns (text, replaced)."""
    escaped = escape_lua_string(value)
    new_text, count = value_pattern(key).subn(
        lambda m: m.group(0)[: m.start(1) - m.start(0)] + escaped + '"', text, count=1
    )
    return new_text, count > 0


def _append_entry(dictionary_text: str, key: str, value: str) -> str:
    """Insert ``["key"] = "value",`` before the dictionary's closing brace."""
    text = dictionary_text or _EMPTY_DICTIONARY
    close = text.rfind("}")
    if close < 0:
        raise BriefingUpdateError("dictionary entry has no closing brace")
    entry = f'    ["{key}"] = "{escape_lua_string(value)}",\n'
    head = text[:close]
    if not head.endswith("\n"):
        head += "\n"
    return head + entry + text[close:]


def apply_briefing_updates(
    mission_text: str,
    dictionary_text: str,
    updates: dict[BriefingField, str],
) -> tuple[str, str]:
    """Return (mission_text, dictionary_text) with ``updates`` applied."""
    for field, value in updates.items():
        current = read_string(mission_text, field.value)
        if not current.is_found:
            raise BriefingUpdateError(f"mission has no {field.value!r} field")

        if is_dict_key(current.value):
            dictionary_text, replaced = _replace_value(dictionary_text, current.value, value)
            if not replaced:
                dictionary_text = _append_entry(dictionary_text, current.value, value)
            logger.debug("Updated dictionary entry %s", current.value)
        else:
            mission_text, replaced = _replace_value(mission_text, field.value, value)
            if not replaced:
                raise BriefingUpdateError(f"mission field {field.value!r} is not a quoted string")
            logger.debug("Updated mission field %s", field.value)
    return mission_text, dictionary_text


def _rewrite_archive(path: Path, replacements: dict[str, str]) -> None:
    """Copy ``path`` to a temp file with some entries replaced, then swap it in."""
    fd, tmp_name = tempfile.mkstemp(suffix=".miz", dir=path.parent)
    os.close(fd)
    tmp_path = Path(tmp_name)
    try:
        with zipfile.ZipFile(path) as src, zipfile.ZipFile(
            tmp_path, "w", compression=zipfile.ZIP_DEFLATED
        ) as dst:
            written = set()
            for info in src.infolist():
                name = info.filename.replace("\\", "/")
                if name in replacements:
                    dst.writestr(info, replacements[name].encode("utf-8"))
                    written.add(name)
                else:
                    dst.writestr(info, src.read(info))
            for name, text in replacements.items():
                if name not in written:
                    dst.writestr(name, text.encode("utf-8"))
        os.replace(tmp_path, path)
    except (OSError, zipfile.BadZipFile) as exc:
        tmp_path.unlink(missing_ok=True)
        raise ArchiveError(str(path), f"failed to rewrite archive ({exc})") from exc


def update_briefings(
    path: str | Path,
    *,
    situation: str | None = None,
    blue_task: str | None = None,
    red_task: str | None = None,
    neutrals_task: str | None = None,
    sortie: str | None = None,
) -> list[BriefingField]:
    """Rewrite the given briefing fields in the archive at ``path``.

    Fields left as None are untouched.  Returns the fields written.

    Raises:
        ArchiveError: the archive cannot be opened or rewritten.
        BriefingUpdateError: a requested field is absent from the mission.
    """
    path = Path(path)
    updates = {
        field: value
        for field, value in (
            (BriefingField.SORTIE, sortie),
            (BriefingField.SITUATION, situation),
            (BriefingField.BLUE_TASK, blue_task),
            (BriefingField.RED_TASK, red_task),
            (BriefingField.NEUTRALS_TASK, neutrals_task),
        )
        if value is not None
    }
    if not updates:
        return []

    with MizArchive.open(path) as archive:
        mission_text = archive.read_text(MISSION_ENTRY)
        dictionary_text = archive.read_text(DICTIONARY_ENTRY)
    if not mission_text:
        raise BriefingUpdateError(f"{path}: 'mission' file not found in archive")

    new_mission, new_dictionary = apply_briefing_updates(mission_text, dictionary_text, updates)

    replacements = {}
    if new_mission != mission_text:
        replacements[MISSION_ENTRY] = new_mission
    if new_dictionary != dictionary_text:
        replacements[DICTIONARY_ENTRY] = new_dictionary
    if replacements:
        _rewrite_archive(path, replacements)
    logger.info("Updated %d briefing fields in %s", len(updates), path)
    return list(updates)
