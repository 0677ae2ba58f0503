from __future__ import annotations

# Equatorial Earth radius in km (WGS-84)
R_EARTH_KM: float = 6378.137

# WGS-84 flattening and first eccentricity squared
F_EARTH: float = 1.0 / 298.257223563
E2_EARTH: float = F_EARTH * (2.0 - F_EARTH)

SECONDS_PER_MINUTE: float = 60.0
SECONDS_PER_DAY: float = 86400.0
MINUTES_PER_DAY: float = 1440.0

# Julian dates of the UNIX epoch and of J2000.0
JD_UNIX_EPOCH: float = 2440587.5
JD_J2000: float = 2451545.0
