from __future__ import annotations
import sys

AU_KM = 149597870.7
SECONDS_PER_DAY = 86400.0
SECONDS_PER_HOUR = 3600.0
DAYS_PER_YEAR = 365.25
DAYS_PER_CENTURY = 36525.0
GM_SUN_AU3_YR2 = 4.0 * 3.141592653589793 ** 2

# Julian Date of the J2000.0 epoch (2000-01-01 12:00 TT)
J2000_JD = 2451545.0
MIN_JULIAN_DATE = 0.0
MAX_JULIAN_DATE = 2.0e7

MAX_TIME_SCALE = 1.0e7

KEPLER_TOLERANCE = 1e-10
MAX_KEPLER_ITERATIONS = 100
HIGH_ECCENTRICITY = 0.8
MACHINE_EPSILON = sys.float_info.epsilon
MAX_ECCENTRICITY = 1.0 - MACHINE_EPSILON

# Phobos sits at ~6e-5 AU, the scattered disc well inside 1e5 AU
MIN_SEMI_MAJOR_AXIS_AU = 1e-5
MAX_SEMI_MAJOR_AXIS_AU = 1e5

MAX_BODIES = 200
BODY_KINDS = ("star", "planet", "dwarf_planet", "moon", "asteroid", "comet", "spacecraft")
