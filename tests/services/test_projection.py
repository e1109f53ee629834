"""Tests for theater projection lookup and the inverse Transverse Mercator."""

from __future__ import annotations

import math

import pytest

from mizreader.services.projection import (
    DEFAULT_THEATER,
    E2,
    EP2,
    SEMI_MAJOR_AXIS_M,
    THEATER_PROJECTIONS,
    dcs_to_geopoint,
    dcs_to_latlon,
    get_projection,
    known_theaters,
    theater_center,
)


def _forward_tm(lat_deg: float, lon_deg: float, lon_0_deg: float, k0: float) -> tuple[float, float]:
    """(northing, easting) of a WGS84 point, Snyder eqs. 8-9 and 8-10."""
    phi = math.radians(lat_deg)
    n = SEMI_MAJOR_AXIS_M / math.sqrt(1 - E2 * math.sin(phi) ** 2)
    t = math.tan(phi) ** 2
    c = EP2 * math.cos(phi) ** 2
    a = math.radians(lon_deg - lon_0_deg) * math.cos(phi)
    m = SEMI_MAJOR_AXIS_M * (
        (1 - E2 / 4 - 3 * E2**2 / 64 - 5 * E2**3 / 256) * phi
        - (3 * E2 / 8 + 3 * E2**2 / 32 + 45 * E2**3 / 1024) * math.sin(2 * phi)
        + (15 * E2**2 / 256 + 45 * E2**3 / 1024) * math.sin(4 * phi)
        - (35 * E2**3 / 3072) * math.sin(6 * phi)
    )
    easting = k0 * n * (
        a + (1 - t + c) * a**3 / 6 + (5 - 18 * t + t**2 + 72 * c - 58 * EP2) * a**5 / 120
    )
    northing = k0 * (
        m + n * math.tan(phi) * (
            a**2 / 2
            + (5 - t + 9 * c + 4 * c**2) * a**4 / 24
            + (61 - 58 * t + t**2 + 600 * c - 330 * EP2) * a**6 / 720
        )
    )
    return northing, easting


def _to_mission_xy(theater: str, lat: float, lon: float) -> tuple[float, float]:
    proj = get_projection(theater)
    northing, easting = _forward_tm(lat, lon, proj.central_meridian, proj.scale_factor)
    return northing + proj.false_northing, easting + proj.false_easting


class TestProjectionTable:
    def test_known_theaters(self):
        names = known_theaters()
        assert DEFAULT_THEATER in names
        assert {"Syria", "PersianGulf", "Nevada", "Normandy", "TheChannel"} <= set(names)

    def test_every_theater_has_a_center(self):
        for name in known_theaters():
            lat, lon = theater_center(name)
            assert -90 <= lat <= 90
            assert -180 <= lon <= 180

    def test_case_insensitive(self):
        assert get_projection("SYRIA") == get_projection("Syria")
        assert get_projection("persiangulf").central_meridian == 57

    def test_unknown_theater_uses_default(self):
        assert get_projection("Atlantis") == get_projection(DEFAULT_THEATER)
        assert theater_center("Atlantis") == theater_center(DEFAULT_THEATER)
        assert get_projection(None) == get_projection(DEFAULT_THEATER)

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            THEATER_PROJECTIONS["caucasus"] = get_projection("Syria")


class TestDcsToLatLon:
    @pytest.mark.parametrize("theater", ["Caucasus", "Syria", "Nevada", "SouthAtlantic", "Normandy"])
    def test_false_origin_maps_to_central_meridian(self, theater):
        proj = get_projection(theater)
        lat, lon = dcs_to_latlon(theater, proj.false_northing, proj.false_easting)
        assert abs(lat) < 1e-6
        assert abs(lon - proj.central_meridian) < 1e-6

    def test_unknown_theater_matches_default(self):
        assert dcs_to_latlon("Atlantis", -281713, 647369) == dcs_to_latlon(
            DEFAULT_THEATER, -281713, 647369
        )

    @pytest.mark.parametrize(
        "theater,lat,lon",
        [
            ("Caucasus", 43.5, 34.5),
            ("Syria", 33.5, 36.3),
            ("Nevada", 36.2, -115.0),
            ("Falklands", -51.7, -57.9),
        ],
    )
    def test_inverts_forward_projection(self, theater, lat, lon):
        x, y = _to_mission_xy(theater, lat, lon)
        got_lat, got_lon = dcs_to_latlon(theater, x, y)
        assert got_lat == pytest.approx(lat, abs=1e-6)
        assert got_lon == pytest.approx(lon, abs=1e-6)

    def test_far_from_central_meridian(self):
        # Kutaisi, about 9.5 degrees east of the Caucasus meridian
        x, y = _to_mission_xy("Caucasus", 42.18, 42.48)
        lat, lon = dcs_to_latlon("Caucasus", x, y)
        assert lat == pytest.approx(42.18, abs=1e-4)
        assert lon == pytest.approx(42.48, abs=1e-4)

    def test_northing_increases_latitude(self):
        lat_south, _ = dcs_to_latlon("Caucasus", -300000, 600000)
        lat_north, _ = dcs_to_latlon("Caucasus", -200000, 600000)
        assert lat_north > lat_south

    def test_geopoint(self):
        point = dcs_to_geopoint("Syria", 0, 0)
        assert (point.latitude, point.longitude) == dcs_to_latlon("Syria", 0, 0)
