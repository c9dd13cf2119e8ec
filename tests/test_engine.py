import numpy as np
import pytest
from orrery.bodies.body import Body
from orrery.physics.calendar import CalendarDate
from orrery.physics.constants import J2000_JD
from orrery.physics.invariants import ConfigurationError
from orrery.physics.orbits import OrbitalElements, orbital_position
from orrery.sim.clock import TimeController
from orrery.sim.engine import Simulation
from orrery.sim.hierarchy import BodyHierarchy

SUN = Body("Sun", "star", 696340.0)
EARTH = Body("Earth", "planet", 6371.0, orbit=OrbitalElements(a=1.0, e=0.0167, M0=100.46), rotation_period_hours=23.9345)


def _sim():
	return Simulation(BodyHierarchy([SUN, EARTH]), TimeController(initial_jd=J2000_JD, time_scale=86400.0))


def test_tick_advances_clock_then_positions():
	sim = _sim()
	assert sim.advance(2.0) == J2000_JD + 2.0
	np.testing.assert_allclose(sim.current_world_position("Earth"), orbital_position(EARTH.orbit, J2000_JD + 2.0).as_tuple())
	assert sim.ticks == 1


def test_jump_to_repositions_without_spinning():
	sim = _sim()
	sim.tick(0.5)
	spin = sim.hierarchy.spin_angle("Earth")
	target = J2000_JD + 1234.5
	sim.jump_to(target)
	assert sim.current_julian_date() == target
	assert sim.current_calendar_date() == CalendarDate(2003, 5, 20, 0, 0, 0)
	np.testing.assert_array_equal(sim.current_world_position("Earth"), orbital_position(EARTH.orbit, target).as_tuple())
	assert sim.hierarchy.spin_angle("Earth") == spin
	assert sim.hierarchy.julian_date == target


def test_jump_out_of_band_keeps_state():
	sim = _sim()
	before = sim.current_world_position("Earth")
	with pytest.raises(ConfigurationError):
		sim.jump_to(-10.0)
	assert sim.current_julian_date() == J2000_JD
	assert sim.current_world_position("Earth") == before
