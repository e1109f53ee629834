"""Tests for theater API endpoints."""

from __future__ import annotations

import pytest

from mizreader.services.projection import get_projection, known_theaters


class TestTheatersAPI:
    async def test_list(self, client):
        resp = await client.get("/api/theaters")
        assert resp.status_code == 200
        data = resp.json()
        assert [t["name"] for t in data] == known_theaters()
        caucasus = data[0]
        assert caucasus["central_meridian"] == 33
        assert caucasus["scale_factor"] == 0.9996

    async def test_center(self, client):
        resp = await client.get("/api/theaters/Nevada/center")
        assert resp.json() == {"theater": "Nevada", "latitude": 36.5, "longitude": -115.5}

    async def test_unknown_theater_center_uses_default(self, client):
        resp = await client.get("/api/theaters/Atlantis/center")
        assert (resp.json()["latitude"], resp.json()["longitude"]) == (42.5, 42.0)

    async def test_latlon_at_false_origin(self, client):
        proj = get_projection("Syria")
        resp = await client.get(
            "/api/theaters/Syria/latlon",
            params={"x": proj.false_northing, "y": proj.false_easting},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["latitude"] == pytest.approx(0.0, abs=1e-6)
        assert data["longitude"] == pytest.approx(39.0, abs=1e-6)

    async def test_latlon_requires_coordinates(self, client):
        resp = await client.get("/api/theaters/Syria/latlon", params={"x": 1})
        assert resp.status_code == 422
