"""Shared fixtures for API tests."""

from __future__ import annotations

import httpx
import pytest

from mizreader.api.app import create_app
from mizreader.config import Settings
from tests.mission_samples import (
    FULL_DICTIONARY,
    FULL_MISSION,
    JPEG_BYTES,
    PNG_BYTES,
    write_miz,
)


@pytest.fixture
def missions_dir(tmp_path):
    """Missions folder with one full archive, one broken file and a subfolder."""
    write_miz(
        tmp_path / "full.miz",
        mission=FULL_MISSION,
        dictionary=FULL_DICTIONARY,
        extra={
            "l10n/DEFAULT/brief.png": PNG_BYTES,
            "KNEEBOARD/page.jpg": JPEG_BYTES,
        },
    )
    (tmp_path / "broken.miz").write_bytes(b"garbage")
    (tmp_path / "campaign").mkdir()
    write_miz(tmp_path / "campaign" / "minimal.miz")
    return tmp_path


@pytest.fixture
def test_app(missions_dir):
    return create_app(Settings(missions_dir=missions_dir, probe_workers=2))


@pytest.fixture
async def client(test_app):
    """httpx AsyncClient wired to the test app."""
    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
