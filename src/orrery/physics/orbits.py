from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Optional
import numpy as np
from .constants import (
	AU_KM,
	DAYS_PER_YEAR,
	GM_SUN_AU3_YR2,
	J2000_JD,
	MAX_ECCENTRICITY,
	MAX_JULIAN_DATE,
	MAX_SEMI_MAJOR_AXIS_AU,
	MIN_JULIAN_DATE,
	MIN_SEMI_MAJOR_AXIS_AU,
)
from .invariants import (
	ConfigurationError,
	NumericalDivergenceError,
	assert_bounds,
	assert_finite,
	assert_open_bounds,
	assert_positive,
	invariant,
)
from .kepler import normalize_degrees, radius_from_true_anomaly, solve_kepler, true_anomaly


@dataclass(frozen=True)
class OrbitalElements:
	"""Keplerian elements of a closed orbit, relative to whatever it orbits.

	a in AU, angles in degrees, mean_motion in degrees/day, epoch as a Julian
	Date. When mean_motion is None it is derived from a with Kepler's third law
	(solar mass, AU/year units). A supplied mean_motion always wins.
	"""
	a: float
	e: float
	i: float = 0.0
	Omega: float = 0.0
	omega: float = 0.0
	M0: float = 0.0
	mean_motion: Optional[float] = None
	epoch: float = J2000_JD

	def __post_init__(self) -> None:
		assert_bounds(self.a, MIN_SEMI_MAJOR_AXIS_AU, MAX_SEMI_MAJOR_AXIS_AU, "Semi-major axis", ConfigurationError)
		assert_bounds(self.e, 0.0, MAX_ECCENTRICITY, "Eccentricity", ConfigurationError)
		assert_finite(self.i, "Inclination", ConfigurationError)
		assert_finite(self.Omega, "Longitude of ascending node", ConfigurationError)
		assert_finite(self.omega, "Argument of periapsis", ConfigurationError)
		assert_finite(self.M0, "Mean anomaly at epoch", ConfigurationError)
		if self.mean_motion is not None:
			assert_positive(self.mean_motion, "Mean motion", ConfigurationError)
		assert_open_bounds(self.epoch, MIN_JULIAN_DATE, MAX_JULIAN_DATE, "Epoch", ConfigurationError)


@dataclass(frozen=True)
class CartesianPosition:
	x: float
	y: float
	z: float

	def as_array(self) -> np.ndarray:
		return np.array([self.x, self.y, self.z], dtype=np.float64)

	def as_tuple(self) -> tuple:
		return (self.x, self.y, self.z)

	def norm(self) -> float:
		return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

	def distance_to(self, other: "CartesianPosition") -> float:
		return distance(self, other)

	@classmethod
	def from_array(cls, arr) -> "CartesianPosition":
		x, y, z = (float(v) for v in arr)
		return cls(x=x, y=y, z=z)


ORIGIN = CartesianPosition(0.0, 0.0, 0.0)


def implied_mean_motion(a: float) -> float:
	"""Mean motion in deg/day for a heliocentric orbit of semi-major axis a (AU)."""
	assert_positive(a, "Semi-major axis")
	n = 360.0 / (a ** 1.5 * DAYS_PER_YEAR)
	return assert_positive(n, "Mean motion", NumericalDivergenceError)


def mean_motion(elements: OrbitalElements) -> float:
	if elements.mean_motion is not None:
		return elements.mean_motion
	return implied_mean_motion(elements.a)


def orbital_period_days(a: float) -> float:
	assert_positive(a, "Semi-major axis")
	period = math.sqrt(a * a * a) * DAYS_PER_YEAR
	return assert_positive(period, "Orbital period", NumericalDivergenceError)


def period_days(elements: OrbitalElements) -> float:
	return 360.0 / mean_motion(elements)


def mean_anomaly_at(elements: OrbitalElements, jd: float) -> float:
	"""Mean anomaly in degrees, normalized into [0, 360)."""
	assert_finite(jd, "Julian date")
	n = mean_motion(elements)
	dt = assert_finite(jd - elements.epoch, "Days since epoch")
	M = assert_finite(elements.M0 + n * dt, "Mean anomaly")
	return normalize_degrees(M)


def position_at_mean_anomaly(elements: OrbitalElements, M_deg: float) -> CartesianPosition:
	a, e = elements.a, elements.e
	E = solve_kepler(M_deg, e)
	nu = true_anomaly(E, e)
	r = radius_from_true_anomaly(a, e, nu)

	x_o = assert_finite(r * math.cos(nu), "Orbital plane x")
	y_o = assert_finite(r * math.sin(nu), "Orbital plane y")

	w = math.radians(elements.omega)
	O = math.radians(elements.Omega)
	inc = math.radians(elements.i)
	cw, sw = math.cos(w), math.sin(w)
	cO, sO = math.cos(O), math.sin(O)
	ci, si = math.cos(inc), math.sin(inc)

	# perifocal -> ecliptic: Rz(Omega) Rx(i) Rz(omega)
	x = (cw * cO - sw * sO * ci) * x_o + (-sw * cO - cw * sO * ci) * y_o
	y = (cw * sO + sw * cO * ci) * x_o + (-sw * sO + cw * cO * ci) * y_o
	z = (sw * si) * x_o + (cw * si) * y_o
	return CartesianPosition(
		x=assert_finite(x, "Position x"),
		y=assert_finite(y, "Position y"),
		z=assert_finite(z, "Position z"),
	)


def orbital_position(elements: OrbitalElements, jd: float) -> CartesianPosition:
	"""Position (AU, ecliptic frame) relative to the orbit's focus at Julian Date jd."""
	invariant(elements is not None, "Orbital elements must be provided", error=ConfigurationError)
	return position_at_mean_anomaly(elements, mean_anomaly_at(elements, jd))


def orbit_path(elements: OrbitalElements, segments: int = 256) -> np.ndarray:
	"""Closed polyline of segments+1 points sampled uniformly in mean anomaly."""
	invariant(0 < segments <= 1000, "Orbit segment count out of range", {"segments": segments})
	pts = np.empty((segments + 1, 3), dtype=np.float64)
	for k in range(segments + 1):
		p = position_at_mean_anomaly(elements, 360.0 * k / segments)
		pts[k] = (p.x, p.y, p.z)
	return pts


def orbital_speed(a: float, e: float, nu: float) -> float:
	"""Vis-viva speed in AU/day around a solar-mass focus."""
	r = radius_from_true_anomaly(a, e, nu)
	arg = GM_SUN_AU3_YR2 * (2.0 / r - 1.0 / a)
	assert_finite(arg, "Vis-viva argument")
	invariant(arg >= 0.0, "Vis-viva argument must be non-negative", {"arg": arg, "r": r, "a": a}, NumericalDivergenceError)
	return math.sqrt(arg) / DAYS_PER_YEAR


def distance(p: CartesianPosition, q: CartesianPosition) -> float:
	dx = q.x - p.x
	dy = q.y - p.y
	dz = q.z - p.z
	return assert_finite(math.sqrt(dx * dx + dy * dy + dz * dz), "Distance")


def au_to_km(au: float) -> float:
	return assert_finite(assert_finite(au, "AU value") * AU_KM, "Kilometres")


def km_to_au(km: float) -> float:
	return assert_finite(assert_finite(km, "Kilometre value") / AU_KM, "AU")
