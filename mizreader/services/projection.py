"""Theater coordinate transforms: mission planar x/y to WGS84 lat/lon.

Every theater map is a Transverse Mercator projection on the WGS84
ellipsoid.  Mission files use axis order north/east:

- mission ``x`` = northing (m), offset by the theater's false northing
- mission ``y`` = easting (m), offset by the theater's false easting

Projection parameters come from the published DCS projection set
(https://github.com/JonathanTurnock/dcs-projections); the Sinai, Kola and
Afghanistan entries are estimates.  The inverse series follows Snyder,
*Map Projections: A Working Manual* (USGS PP 1395), eqs. 8-18 to 8-25.
"""

from __future__ import annotations

import math
from types import MappingProxyType

from mizreader.contracts.common import GeoPoint
from mizreader.contracts.theater import TheaterProjection

# WGS84 ellipsoid
SEMI_MAJOR_AXIS_M = 6378137.0
FLATTENING = 1.0 / 298.257223563
E2 = 2 * FLATTENING - FLATTENING * FLATTENING  # first eccentricity squared
EP2 = E2 / (1 - E2)  # second eccentricity squared
E1 = (1 - math.sqrt(1 - E2)) / (1 + math.sqrt(1 - E2))

DEFAULT_THEATER = "Caucasus"

_UTM_K0 = 0.9996


def _tm(lon_0: float, x_0: float, y_0: float) -> TheaterProjection:
    return TheaterProjection(
        central_meridian=lon_0, scale_factor=_UTM_K0, false_easting=x_0, false_northing=y_0
    )


_PROJECTIONS = {
    "Caucasus": _tm(33, -99516.9999999732, -4998114.999999984),
    "Syria": _tm(39, 282801.00000003993, -3879865.9999999935),
    "PersianGulf": _tm(57, 75755.99999999645, -2894933.0000000377),
    "Nevada": _tm(-117, -193996.80999964548, -4410028.063999966),
    "MarianaIslands": _tm(147, 238417.99999989968, -1491840.000000048),
    "MarianaIslandsWWII": _tm(147, 238417.99999989968, -1491840.000000048),
    "SouthAtlantic": _tm(-57, 147639.99999997593, 5815417.000000032),
    "Falklands": _tm(-57, 147639.99999997593, 5815417.000000032),
    "Normandy": _tm(-3, -195526.00000000204, -5484812.999999951),
    "TheChannel": _tm(3, 99376.00000000288, -5636889.00000001),
    # Estimated
    "Sinai": _tm(33, 250000, -3300000),
    "Kola": _tm(33, 500000, -7550000),
    "Afghanistan": _tm(69, 200000, -3850000),
}

# Approximate map centers (lat, lon), used when a mission has no positions
_CENTERS = {
    "Caucasus": (42.5, 42.0),
    "Syria": (35.0, 37.0),
    "PersianGulf": (26.0, 56.0),
    "Nevada": (36.5, -115.5),
    "MarianaIslands": (15.0, 145.5),
    "MarianaIslandsWWII": (15.0, 145.5),
    "SouthAtlantic": (-52.0, -59.0),
    "Falklands": (-52.0, -59.0),
    "Normandy": (49.0, -1.0),
    "TheChannel": (50.5, 1.0),
    "Sinai": (30.0, 33.5),
    "Kola": (68.5, 33.0),
    "Afghanistan": (34.5, 69.0),
}

THEATER_PROJECTIONS = MappingProxyType({k.lower(): v for k, v in _PROJECTIONS.items()})
THEATER_CENTERS = MappingProxyType({k.lower(): v for k, v in _CENTERS.items()})


def known_theaters() -> list[str]:
    """Theater names with projection parameters, in canonical spelling."""
    return list(_PROJECTIONS)


def get_projection(theater: str | None) -> TheaterProjection:
    """Projection for ``theater`` (case-insensitive), else the default theater."""
    key = (theater or DEFAULT_THEATER).lower()
    return THEATER_PROJECTIONS.get(key, THEATER_PROJECTIONS[DEFAULT_THEATER.lower()])


def theater_center(theater: str | None) -> tuple[float, float]:
    """Approximate (lat, lon) center of ``theater``, else the default theater's."""
    key = (theater or DEFAULT_THEATER).lower()
    return THEATER_CENTERS.get(key, THEATER_CENTERS[DEFAULT_THEATER.lower()])


def inverse_transverse_mercator(
    northing: float, easting: float, lon_0_deg: float, k0: float
) -> tuple[float, float]:
    """Projected northing/easting (false offsets removed) to (lat, lon) degrees."""
    lon_0 = math.radians(lon_0_deg)

    # Meridional arc, then footpoint latitude
    m = northing / k0
    mu = m / (SEMI_MAJOR_AXIS_M * (1 - E2 / 4 - 3 * E2**2 / 64 - 5 * E2**3 / 256))
    phi1 = (
        mu
        + (3 * E1 / 2 - 27 * E1**3 / 32) * math.sin(2 * mu)
        + (21 * E1**2 / 16 - 55 * E1**4 / 32) * math.sin(4 * mu)
        + (151 * E1**3 / 96) * math.sin(6 * mu)
        + (1097 * E1**4 / 512) * math.sin(8 * mu)
    )

    sin_phi1 = math.sin(phi1)
    cos_phi1 = math.cos(phi1)
    tan_phi1 = math.tan(phi1)

    n1 = SEMI_MAJOR_AXIS_M / math.sqrt(1 - E2 * sin_phi1**2)
    r1 = SEMI_MAJOR_AXIS_M * (1 - E2) / (1 - E2 * sin_phi1**2) ** 1.5
    c1 = EP2 * cos_phi1**2
    t1 = tan_phi1**2
    d = easting / (n1 * k0)

    phi = phi1 - (n1 * tan_phi1 / r1) * (
        d**2 / 2
        - (5 + 3 * t1 + 10 * c1 - 4 * c1**2 - 9 * EP2) * d**4 / 24
        + (61 + 90 * t1 + 298 * c1 + 45 * t1**2 - 252 * EP2 - 3 * c1**2) * d**6 / 720
    )
    lam = lon_0 + (
        d
        - (1 + 2 * t1 + c1) * d**3 / 6
        + (5 - 2 * c1 + 28 * t1 - 3 * c1**2 + 8 * EP2 + 24 * t1**2) * d**5 / 120
    ) / cos_phi1

    return math.degrees(phi), math.degrees(lam)


def dcs_to_latlon(theater: str | None, x: float, y: float) -> tuple[float, float]:
    """Mission planar ``x`` (northing) / ``y`` (easting) to WGS84 (lat, lon).

    Unknown theaters use the default theater's projection.
    """
    proj = get_projection(theater)
    northing = x - proj.false_northing
    easting = y - proj.false_easting
    return inverse_transverse_mercator(northing, easting, proj.central_meridian, proj.scale_factor)


def dcs_to_geopoint(theater: str | None, x: float, y: float) -> GeoPoint:
    lat, lon = dcs_to_latlon(theater, x, y)
    return GeoPoint(latitude=lat, longitude=lon)
