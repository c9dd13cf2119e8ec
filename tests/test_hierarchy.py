import logging
import math
import numpy as np
import pytest
from orrery.bodies.body import Body
from orrery.config import ScaleConfig
from orrery.physics.constants import J2000_JD
from orrery.physics.invariants import ConfigurationError, HierarchyError, NumericalDivergenceError
from orrery.physics.orbits import OrbitalElements, orbital_position
from orrery.sim.hierarchy import BodyHierarchy, slerp_direction, topological_order

SUN = Body("Sun", "star", 696340.0)
EARTH = Body("Earth", "planet", 6371.0, orbit=OrbitalElements(a=1.0, e=0.0167, M0=30.0), rotation_period_hours=23.9345)
MOON = Body("Moon", "moon", 1737.4, orbit=OrbitalElements(a=0.00257, e=0.0, M0=90.0, mean_motion=13.176358), parent="Earth", tidally_locked=True)


def test_world_is_parent_plus_scaled_local():
	scale = ScaleConfig(orbit_scale=100.0, child_orbit_scale=5000.0)
	h = BodyHierarchy([SUN, EARTH, MOON], scale)
	jd = J2000_JD + 17.25
	h.update(jd, 0.0, 1.0)
	earth = orbital_position(EARTH.orbit, jd).as_array()
	moon = orbital_position(MOON.orbit, jd).as_array()
	np.testing.assert_allclose(h.world_position("Sun").as_array(), [0.0, 0.0, 0.0])
	np.testing.assert_allclose(h.world_position("Earth").as_array(), earth * 100.0, rtol=1e-14)
	np.testing.assert_allclose(h.world_position("Moon").as_array(), earth * 100.0 + moon * 5000.0, rtol=1e-14)
	assert set(h.positions()) == {"Sun", "Earth", "Moon"}


def test_parents_sorted_before_children():
	h = BodyHierarchy([MOON, EARTH, SUN])
	assert h.index_of("Earth") < h.index_of("Moon")
	assert [b.name for b in h.children_of("Earth")] == ["Moon"]
	assert [b.name for b in h.roots()] == ["Earth", "Sun"]
	assert topological_order([SUN, EARTH, MOON]) == [0, 1, 2]


def test_assembly_errors():
	with pytest.raises(ConfigurationError):
		BodyHierarchy([SUN, MOON])
	a = Body("A", "planet", 1.0, parent="B")
	b = Body("B", "planet", 1.0, parent="A")
	with pytest.raises(ConfigurationError):
		BodyHierarchy([SUN, a, b])
	with pytest.raises(ConfigurationError):
		BodyHierarchy([SUN, SUN])
	with pytest.raises(ConfigurationError):
		BodyHierarchy([])


def test_query_before_first_pass():
	h = BodyHierarchy([SUN, EARTH])
	with pytest.raises(HierarchyError):
		h.world_position("Earth")
	h.update(J2000_JD, 0.0, 1.0)
	with pytest.raises(HierarchyError):
		h.world_position("Pluto")


def test_spin_accumulates_and_wraps():
	fast = Body("Fast", "planet", 1.0, rotation_period_hours=1.0)
	retro = Body("Retro", "planet", 1.0, rotation_period_hours=-1.0)
	h = BodyHierarchy([fast, retro])
	h.update(J2000_JD, 3600.0 * 1.25, 1.0)
	assert math.isclose(h.spin_angle("Fast"), 0.5 * math.pi, rel_tol=1e-12)
	assert math.isclose(h.spin_angle("Retro"), -0.5 * math.pi, rel_tol=1e-12)
	h.update(J2000_JD, 1800.0, 0.0)
	assert math.isclose(h.spin_angle("Fast"), 0.5 * math.pi, rel_tol=1e-12)


def test_non_finite_spin_resets(caplog):
	odd = Body("Odd", "asteroid", 1.0, rotation_period_hours=1e-310)
	h = BodyHierarchy([odd])
	with caplog.at_level(logging.WARNING, logger="orrery.sim.hierarchy"):
		h.update(J2000_JD, 3600.0, 1.0)
	assert h.spin_angle("Odd") == 0.0
	assert "non-finite" in caplog.text


def test_tidal_lock_turns_toward_parent():
	h = BodyHierarchy([SUN, EARTH, MOON])
	h.update(J2000_JD, 0.0, 1.0)
	to_parent = h.world_position("Earth").as_array() - h.world_position("Moon").as_array()
	to_parent /= np.linalg.norm(to_parent)
	# facing starts at +x, 90 degrees off; one pass closes a tenth of the gap
	angle = math.degrees(math.acos(float(np.dot(h.facing("Moon"), to_parent))))
	assert math.isclose(angle, 81.0, abs_tol=1e-6)
	for _ in range(200):
		h.update(J2000_JD, 0.0, 1.0)
	assert float(np.dot(h.facing("Moon"), to_parent)) > 1 - 1e-9


def test_tidal_lock_degenerate_direction_keeps_facing():
	rider = Body("Rider", "spacecraft", 0.01, parent="Earth", tidally_locked=True)
	h = BodyHierarchy([SUN, EARTH, rider])
	h.update(J2000_JD, 0.0, 1.0)
	np.testing.assert_array_equal(h.facing("Rider"), [1.0, 0.0, 0.0])
	np.testing.assert_array_equal(h.world_position("Rider").as_array(), h.world_position("Earth").as_array())


def test_slerp_antiparallel():
	out = slerp_direction(np.array([1.0, 0.0, 0.0]), np.array([-1.0, 0.0, 0.0]), 0.5)
	assert math.isclose(float(np.linalg.norm(out)), 1.0)
	assert abs(out[0]) < 1e-12


def test_scaled_radius():
	h = BodyHierarchy([SUN], ScaleConfig(size_scale=1e-5, size_exaggeration=30.0))
	assert math.isclose(h.scaled_radius("Sun"), 696340.0 * 1e-5 * 30.0)


def test_failed_pass_keeps_previous_state(monkeypatch):
	from orrery.sim import hierarchy
	h = BodyHierarchy([SUN, EARTH, MOON])
	h.update(J2000_JD, 0.0, 1.0)
	earth_before = h.world_position("Earth").as_array()
	real_position = hierarchy.orbital_position

	def failing_position(elements, jd):
		if elements is MOON.orbit:
			raise NumericalDivergenceError("Moon diverged")
		return real_position(elements, jd)

	monkeypatch.setattr(hierarchy, "orbital_position", failing_position)
	with pytest.raises(NumericalDivergenceError):
		h.update(J2000_JD + 50.0, 3600.0, 1.0)
	assert h.julian_date == J2000_JD
	np.testing.assert_array_equal(h.world_position("Earth").as_array(), earth_before)
	assert h.spin_angle("Earth") == 0.0


def test_out_of_band_instant_rejected():
	h = BodyHierarchy([SUN, EARTH])
	for jd in (0.0, -1.0, 2.0e7, float("inf")):
		with pytest.raises(NumericalDivergenceError):
			h.update(jd, 0.0, 1.0)
	with pytest.raises(HierarchyError):
		h.world_position("Earth")
