"""Command line entry point.

Usage:
    mizreader probe /path/to/missions [--recursive]
    mizreader show /path/to/mission.miz [--json] [--slots]
    mizreader latlon Caucasus -- -281713 647369
    mizreader update-briefing /path/to/mission.miz --sortie "Strike" --situation-file brief.txt
    mizreader serve /path/to/missions --port 8000
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from mizreader.config import configure_logging, load_settings
from mizreader.errors import MizReaderError
from mizreader.services.briefing_editor import update_briefings
from mizreader.services.mission_parser import parse_mission_result
from mizreader.services.projection import dcs_to_latlon
from mizreader.services.theater_probe import list_missions

logger = logging.getLogger(__name__)


def _cmd_probe(args: argparse.Namespace) -> int:
    rows = list_missions(args.folder, recursive=args.recursive, max_workers=args.workers)
    for row in rows:
        print(f"{row.theater:<20} {row.file_name}")
    return 0


def _cmd_show(args: argparse.Namespace) -> int:
    result = parse_mission_result(args.path)
    if not result.success:
        print(f"Error: {result.error.message}", file=sys.stderr)
        return 1
    details = result.data

    if args.json:
        print(json.dumps(details.to_dict(exclude={"images", "kneeboard_images"}), indent=2))
        return 0

    print(f"Sortie:     {details.sortie}")
    print(f"Theater:    {details.theater}")
    print(f"Date:       {details.date} {details.start_time}")
    w = details.weather
    print(f"Weather:    QNH {w.qnh}, {w.temperature:g} C, wind {w.wind_dir_ground}/{w.wind_speed_ground}")
    if details.required_modules:
        print(f"Modules:    {', '.join(details.required_modules)}")
    print(f"Groups:     {details.debug_info}")
    print(f"Images:     {len(details.images)} briefing, {len(details.kneeboard_images)} kneeboard")
    print()
    print(details.briefing)

    if args.slots:
        print()
        for slot in details.player_slots:
            print(
                f"{slot.coalition:<5} {slot.group_name:<24} {slot.unit_name:<24} "
                f"{slot.type:<16} {slot.callsign or ''}"
            )
    for issue in details.diagnostics:
        logger.warning("Malformed field %s: %s", issue.path, issue.raw)
    return 0


def _cmd_latlon(args: argparse.Namespace) -> int:
    lat, lon = dcs_to_latlon(args.theater, args.x, args.y)
    print(f"{lat:.6f} {lon:.6f}")
    return 0


def _read_text_arg(value: str | None, file_value: Path | None) -> str | None:
    if file_value is not None:
        return file_value.read_text(encoding="utf-8")
    return value


def _cmd_update_briefing(args: argparse.Namespace) -> int:
    written = update_briefings(
        args.path,
        sortie=args.sortie,
        situation=_read_text_arg(args.situation, args.situation_file),
        blue_task=_read_text_arg(args.blue_task, args.blue_task_file),
        red_task=_read_text_arg(args.red_task, args.red_task_file),
        neutrals_task=_read_text_arg(args.neutrals_task, args.neutrals_task_file),
    )
    if not written:
        print("Nothing to update.")
    else:
        print(f"Updated: {', '.join(f.value for f in written)}")
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from mizreader.api.app import create_app

    settings = replace(load_settings(), missions_dir=args.missions_dir)
    logger.info("Starting API on %s:%d", args.host, args.port)
    uvicorn.run(create_app(settings), host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    settings = load_settings()

    parser = argparse.ArgumentParser(description="DCS mission archive reader")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    probe = sub.add_parser("probe", help="List mission files with their theater")
    probe.add_argument("folder", type=Path, nargs="?", default=settings.missions_dir)
    probe.add_argument("--recursive", action="store_true", help="Include subfolders")
    probe.add_argument("--workers", type=int, default=settings.probe_workers)
    probe.set_defaults(func=_cmd_probe)

    show = sub.add_parser("show", help="Print mission details")
    show.add_argument("path", type=Path)
    show.add_argument("--json", action="store_true", help="Dump details as JSON")
    show.add_argument("--slots", action="store_true", help="List player slots")
    show.set_defaults(func=_cmd_show)

    latlon = sub.add_parser("latlon", help="Convert mission x/y to latitude/longitude")
    latlon.add_argument("theater")
    latlon.add_argument("x", type=float, help="Northing (mission x)")
    latlon.add_argument("y", type=float, help="Easting (mission y)")
    latlon.set_defaults(func=_cmd_latlon)

    update = sub.add_parser("update-briefing", help="Rewrite briefing text fields")
    update.add_argument("path", type=Path)
    update.add_argument("--sortie")
    for name in ("situation", "blue-task", "red-task", "neutrals-task"):
        group = update.add_mutually_exclusive_group()
        group.add_argument(f"--{name}")
        group.add_argument(f"--{name}-file", type=Path)
    update.set_defaults(func=_cmd_update_briefing)

    serve = sub.add_parser("serve", help="Run the read-only HTTP API")
    serve.add_argument("missions_dir", type=Path, nargs="?", default=settings.missions_dir)
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.set_defaults(func=_cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(logging.DEBUG if args.verbose else load_settings().log_level)

    try:
        return args.func(args)
    except MizReaderError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
