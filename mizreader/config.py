"""Runtime settings read from the environment (and a ``.env`` file if present)."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    """mizreader settings.

    - ``MIZREADER_MISSIONS_DIR``: folder listed by the API when none is given
    - ``MIZREADER_PROBE_WORKERS``: threads used for bulk theater probing
    - ``MIZREADER_LOG_LEVEL``: root log level for the CLI and API
    - ``CORS_ORIGINS``: comma-separated origins allowed by the API
    """

    missions_dir: Path = Path(".")
    probe_workers: int = 4
    log_level: str = "INFO"
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:5173"])


def load_settings() -> Settings:
    load_dotenv()
    workers = os.environ.get("MIZREADER_PROBE_WORKERS", "4")
    return Settings(
        missions_dir=Path(os.environ.get("MIZREADER_MISSIONS_DIR", ".")),
        probe_workers=max(1, int(workers)) if workers.isdigit() else 4,
        log_level=os.environ.get("MIZREADER_LOG_LEVEL", "INFO").upper(),
        cors_origins=os.environ.get("CORS_ORIGINS", "http://localhost:5173").split(","),
    )


def configure_logging(level: str | int) -> None:
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
