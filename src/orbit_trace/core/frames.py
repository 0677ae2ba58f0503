from __future__ import annotations

import math
from typing import Tuple

from orbit_trace.core.constants import (
    R_EARTH_KM,
    E2_EARTH,
    JD_J2000,
    JD_UNIX_EPOCH,
    SECONDS_PER_DAY,
)

Vector3 = Tuple[float, float, float]


def rot3(angle_rad: float, v: Vector3) -> Vector3:
    c = math.cos(angle_rad)
    s = math.sin(angle_rad)
    x, y, z = v
    return (c * x - s * y, s * x + c * y, z)


def dot(a: Vector3, b: Vector3) -> float:
    return a[0]*b[0] + a[1]*b[1] + a[2]*b[2]


def norm(a: Vector3) -> float:
    return math.sqrt(dot(a, a))


def unix_to_julian_date(t_unix: float) -> float:
    return JD_UNIX_EPOCH + t_unix / SECONDS_PER_DAY


def julian_date_to_unix(jd: float) -> float:
    return (jd - JD_UNIX_EPOCH) * SECONDS_PER_DAY


def gmst_rad(jd_ut1: float) -> float:
    """
    Greenwich Mean Sidereal Time (IAU 1982) for a UT1 Julian date.

    Returns GMST in radians, normalized to [0, 2π).
    """
    d = jd_ut1 - JD_J2000
    t = d / 36525.0
    gmst_deg = (
        280.46061837
        + 360.98564736629 * d
        + 0.000387933 * t * t
        - t * t * t / 38710000.0
    )
    return math.radians(gmst_deg % 360.0)


def teme_to_ecef_km(r_teme: Vector3, jd_ut1: float) -> Vector3:
    """
    ECEF = R3( -GMST ) * TEME

    Polar motion is neglected.
    """
    return rot3(-gmst_rad(jd_ut1), r_teme)


def ecef_to_geodetic_deg(r_ecef_km: Vector3) -> tuple[float, float, float]:
    """
    WGS-84 ECEF -> geodetic (lat_deg, lon_deg, alt_km).
    Iterative Bowring latitude. Returns lon in [0, 360) (east longitude).
    """
    x, y, z = r_ecef_km
    p = math.sqrt(x*x + y*y)
    if p == 0 and z == 0:
        raise ValueError("Zero ECEF vector.")

    lon = math.degrees(math.atan2(y, x)) % 360.0

    lat_rad = math.atan2(z, p * (1.0 - E2_EARTH))
    for _ in range(10):
        sin_lat = math.sin(lat_rad)
        n = R_EARTH_KM / math.sqrt(1.0 - E2_EARTH * sin_lat * sin_lat)
        lat_rad = math.atan2(z + E2_EARTH * n * sin_lat, p)

    sin_lat = math.sin(lat_rad)
    cos_lat = math.cos(lat_rad)
    n = R_EARTH_KM / math.sqrt(1.0 - E2_EARTH * sin_lat * sin_lat)
    if abs(cos_lat) > 1e-10:
        alt = p / cos_lat - n
    else:
        alt = abs(z) - n * (1.0 - E2_EARTH)

    return math.degrees(lat_rad), lon, alt


def ground_project(state) -> tuple[float, float]:
    """
    Sub-satellite point of a propagated state.

    Args:
        state: anything with ``position_km`` (TEME) and ``julian_date``

    Returns:
        (lat_deg, lon_deg) with lon in [0, 360)
    """
    r_ecef = teme_to_ecef_km(state.position_km, state.julian_date)
    lat, lon, _alt = ecef_to_geodetic_deg(r_ecef)
    return lat, lon


def normalize_longitude_deg(lon_deg: float) -> float:
    """East longitude in [0, 360) -> [-180, 180)."""
    return lon_deg - 360.0 if lon_deg >= 180.0 else lon_deg
