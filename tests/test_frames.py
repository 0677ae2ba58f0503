"""
Tests for time scales and frame transformations.
"""
import math
from types import SimpleNamespace

import pytest

from orbit_trace.core.constants import E2_EARTH, JD_J2000, JD_UNIX_EPOCH, R_EARTH_KM
from orbit_trace.core.frames import (
    dot,
    ecef_to_geodetic_deg,
    gmst_rad,
    ground_project,
    julian_date_to_unix,
    norm,
    normalize_longitude_deg,
    rot3,
    teme_to_ecef_km,
    unix_to_julian_date,
)


class TestVectorOperations:
    def test_dot_product(self):
        assert dot((1.0, 2.0, 3.0), (4.0, 5.0, 6.0)) == 32.0

    def test_norm(self):
        assert norm((3.0, 4.0, 0.0)) == 5.0


class TestRotations:
    def test_rot3_90_degrees(self):
        x, y, z = rot3(math.pi / 2, (1.0, 0.0, 0.0))
        assert abs(x) < 1e-12
        assert abs(y - 1.0) < 1e-12
        assert z == 0.0

    def test_rot3_preserves_norm(self):
        v = (7000.0, -1200.0, 300.0)
        assert math.isclose(norm(rot3(1.234, v)), norm(v), rel_tol=1e-12)


class TestTimeScales:
    def test_unix_epoch_julian_date(self):
        assert unix_to_julian_date(0) == JD_UNIX_EPOCH

    def test_julian_date_roundtrip(self):
        t = 1633176881
        assert math.isclose(julian_date_to_unix(unix_to_julian_date(t)), t, abs_tol=1e-3)

    def test_gmst_at_j2000(self):
        assert math.isclose(math.degrees(gmst_rad(JD_J2000)), 280.46061837, abs_tol=1e-9)

    def test_gmst_is_normalized(self):
        for jd in (JD_J2000 - 10000.3, JD_J2000 + 0.7, JD_J2000 + 9131.25):
            assert 0.0 <= gmst_rad(jd) < 2 * math.pi

    def test_sidereal_day(self):
        # One sidereal day later Earth is back at the same angle
        sidereal_day = 0.99726956633
        assert math.isclose(gmst_rad(JD_J2000 + sidereal_day), gmst_rad(JD_J2000), abs_tol=1e-6)


class TestGeodetic:
    def test_equator(self):
        lat, lon, alt = ecef_to_geodetic_deg((R_EARTH_KM + 400.0, 0.0, 0.0))
        assert abs(lat) < 1e-9
        assert lon == 0.0
        assert math.isclose(alt, 400.0, abs_tol=1e-6)

    def test_north_pole(self):
        polar_radius = R_EARTH_KM * math.sqrt(1.0 - E2_EARTH)
        lat, _lon, alt = ecef_to_geodetic_deg((0.0, 0.0, polar_radius + 100.0))
        assert math.isclose(lat, 90.0, abs_tol=1e-9)
        assert math.isclose(alt, 100.0, abs_tol=1e-6)

    def test_east_longitude_range(self):
        _lat, lon, _alt = ecef_to_geodetic_deg((0.0, -R_EARTH_KM, 0.0))
        assert math.isclose(lon, 270.0)

    def test_zero_vector_rejected(self):
        with pytest.raises(ValueError, match="Zero ECEF"):
            ecef_to_geodetic_deg((0.0, 0.0, 0.0))


class TestGroundProjection:
    def test_teme_to_ecef_keeps_radius(self):
        r = (-4000.0, 5000.0, 1500.0)
        assert math.isclose(norm(teme_to_ecef_km(r, JD_J2000 + 123.4)), norm(r), rel_tol=1e-12)

    def test_projection_subtracts_earth_rotation(self):
        state = SimpleNamespace(position_km=(R_EARTH_KM + 500.0, 0.0, 0.0), julian_date=JD_J2000)
        lat, lon = ground_project(state)
        assert abs(lat) < 1e-9
        assert math.isclose(lon, 360.0 - 280.46061837, abs_tol=1e-6)


class TestLongitudeNormalization:
    @pytest.mark.parametrize("lon, expected", [
        (0.0, 0.0),
        (179.9, 179.9),
        (180.0, -180.0),
        (200.0, -160.0),
        (359.5, -0.5),
    ])
    def test_normalize(self, lon, expected):
        assert math.isclose(normalize_longitude_deg(lon), expected, abs_tol=1e-12)
