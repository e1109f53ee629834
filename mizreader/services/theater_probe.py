"""Fast theater lookup for folder listings.

Annotating every archive in a folder with its theater only needs one
field, so the ``mission`` entry is streamed line by line and reading stops
at the first theater line.  Any failure collapses to ``"Unknown"``.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime, timezone
from pathlib import Path

from mizreader.adapters.archive import MISSION_ENTRY, MizArchive
from mizreader.adapters.blocks import read_loose_string
from mizreader.contracts.theater import MissionFile
from mizreader.errors import MizReaderError

logger = logging.getLogger(__name__)

UNKNOWN_THEATER = "Unknown"

# Priority order: current spelling, alternate spelling, legacy key
THEATER_KEYS = ("theatre", "theater", "map")

MISSION_SUFFIX = ".miz"


def probe_theater(path: str | Path, cancel: threading.Event | None = None) -> str:
    """Theater identifier of one archive, or ``"Unknown"`` on any failure."""
    try:
        if cancel is not None and cancel.is_set():
            return UNKNOWN_THEATER
        with MizArchive.open(path) as archive:
            for line in archive.iter_lines(MISSION_ENTRY):
                theater = read_loose_string(line, *THEATER_KEYS)
                if theater is not None:
                    return theater
    except MizReaderError as exc:
        logger.debug("Theater probe failed for %s: %s", path, exc)
    except Exception:
        logger.debug("Theater probe failed for %s", path, exc_info=True)
    return UNKNOWN_THEATER


async def probe_theater_async(path: str | Path) -> str:
    return await asyncio.to_thread(probe_theater, path)


def probe_theaters(
    paths: Iterable[str | Path],
    max_workers: int = 4,
    cancel: threading.Event | None = None,
) -> dict[str, str]:
    """Probe many archives concurrently.

    Returns a mapping of path (as given, stringified) to theater.  Probes
    started after ``cancel`` is set report ``"Unknown"``.
    """
    results: dict[str, str] = {}
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {executor.submit(probe_theater, p, cancel): str(p) for p in paths}
        for future in as_completed(futures):
            results[futures[future]] = future.result()
    return results


def find_mission_files(folder: str | Path, recursive: bool = False) -> list[Path]:
    """``.miz`` files in ``folder``, sorted by name."""
    folder = Path(folder)
    pattern = f"**/*{MISSION_SUFFIX}" if recursive else f"*{MISSION_SUFFIX}"
    return sorted(
        (p for p in folder.glob(pattern) if p.is_file()),
        key=lambda p: p.name.lower(),
    )


def list_missions(
    folder: str | Path,
    recursive: bool = False,
    max_workers: int = 4,
) -> list[MissionFile]:
    """Listing rows for every mission archive in ``folder``, with theaters."""
    files = find_mission_files(folder, recursive=recursive)
    theaters = probe_theaters(files, max_workers=max_workers)

    rows = []
    for path in files:
        stat = path.stat()
        rows.append(MissionFile(
            file_name=path.name,
            path=str(path),
            theater=theaters.get(str(path), UNKNOWN_THEATER),
            size_bytes=stat.st_size,
            modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
        ))
    logger.info("Listed %d mission files in %s", len(rows), folder)
    return rows
