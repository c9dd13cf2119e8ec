from __future__ import annotations
import logging
import math
from .constants import (
	HIGH_ECCENTRICITY,
	KEPLER_TOLERANCE,
	MACHINE_EPSILON,
	MAX_ECCENTRICITY,
	MAX_KEPLER_ITERATIONS,
)
from .invariants import (
	ConfigurationError,
	NumericalDivergenceError,
	assert_bounds,
	assert_finite,
	assert_positive,
	invariant,
)

logger = logging.getLogger(__name__)


def normalize_degrees(angle_deg: float) -> float:
	"""Wrap an angle into [0, 360)."""
	a = math.fmod(angle_deg, 360.0)
	if a < 0.0:
		a += 360.0
	# fmod of a tiny negative value can round back up to exactly 360
	if a >= 360.0:
		a = 0.0
	return a


def solve_kepler(
	mean_anomaly_deg: float,
	e: float,
	tol: float = KEPLER_TOLERANCE,
	max_iter: int = MAX_KEPLER_ITERATIONS,
) -> float:
	"""Solve M = E - e*sin(E) for the eccentric anomaly E.

	Mean anomaly is in degrees (any finite value), the result in radians.
	Newton-Raphson seeded at M, or at pi above e = 0.8. Raises
	NumericalDivergenceError if the iteration cap is hit or a step is not finite.
	"""
	assert_finite(mean_anomaly_deg, "Mean anomaly", ConfigurationError)
	assert_bounds(e, 0.0, MAX_ECCENTRICITY, "Eccentricity")
	assert_positive(tol, "Kepler tolerance")
	invariant(max_iter > 0, "Kepler iteration cap must be positive", {"max_iter": max_iter})

	M = math.radians(normalize_degrees(mean_anomaly_deg))
	E = math.pi if e > HIGH_ECCENTRICITY else M

	for i in range(max_iter):
		denom = 1.0 - e * math.cos(E)
		invariant(
			abs(denom) > MACHINE_EPSILON,
			"Kepler equation denominator must not vanish",
			{"denominator": denom, "e": e, "E": E, "iteration": i},
			NumericalDivergenceError,
		)
		dE = (E - e * math.sin(E) - M) / denom
		assert_finite(dE, f"Kepler step {i}")
		E -= dE
		if abs(dE) < tol:
			return assert_finite(E, "Eccentric anomaly")

	context = {"mean_anomaly_deg": mean_anomaly_deg, "e": e, "E": E, "max_iter": max_iter}
	logger.error("invariant violated: Kepler equation did not converge %s", context)
	raise NumericalDivergenceError("Kepler equation did not converge", context)


def kepler_residual(E: float, e: float, mean_anomaly_deg: float) -> float:
	M = math.radians(normalize_degrees(mean_anomaly_deg))
	return E - e * math.sin(E) - M


def true_anomaly(E: float, e: float) -> float:
	"""True anomaly (radians) from eccentric anomaly via the half-angle tangent form."""
	assert_finite(E, "Eccentric anomaly")
	assert_bounds(e, 0.0, MAX_ECCENTRICITY, "Eccentricity")
	k = math.sqrt((1.0 + e) / (1.0 - e))
	assert_finite(k, "Half-angle factor")
	t = k * math.tan(E / 2.0)
	assert_finite(t, "tan(nu/2)")
	return assert_finite(2.0 * math.atan(t), "True anomaly")


def radius_from_true_anomaly(a: float, e: float, nu: float) -> float:
	assert_positive(a, "Semi-major axis")
	assert_bounds(e, 0.0, MAX_ECCENTRICITY, "Eccentricity")
	assert_finite(nu, "True anomaly")
	denom = 1.0 + e * math.cos(nu)
	invariant(
		denom > 0.0,
		"Radius denominator must be positive",
		{"denominator": denom, "e": e, "nu": nu},
		NumericalDivergenceError,
	)
	r = a * (1.0 - e * e) / denom
	return assert_positive(r, "Orbital radius", NumericalDivergenceError)
