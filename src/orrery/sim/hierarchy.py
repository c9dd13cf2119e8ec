"""Body hierarchy: a flat arena of bodies sorted so parents precede children.

Each pass evaluates local orbital offsets and composes world positions top-down.
Positions are recomputed from scratch every pass; spin angle and tidal-lock
facing are the only state carried between passes.
"""
from __future__ import annotations
import logging
import math
from typing import Dict, Iterable, List, Optional, Sequence, Union
import numpy as np
from ..bodies.body import Body
from ..config import ScaleConfig
from ..physics.constants import MAX_BODIES, MAX_JULIAN_DATE, MIN_JULIAN_DATE, SECONDS_PER_HOUR
from ..physics.invariants import (
	HierarchyError,
	NumericalDivergenceError,
	assert_finite,
	assert_non_negative,
	assert_open_bounds,
	invariant,
)
from ..physics.orbits import CartesianPosition, orbital_position

logger = logging.getLogger(__name__)

BodyRef = Union[str, int]

TIDAL_LOCK_BLEND = 0.1
DEGENERATE_DIRECTION = 1e-12
TWO_PI = 2.0 * math.pi


def topological_order(bodies: Sequence[Body]) -> List[int]:
	"""Indices of `bodies` with every parent ahead of its children.

	Stable with respect to input order. Missing parents, duplicate names and
	cycles raise ConfigurationError.
	"""
	index: Dict[str, int] = {}
	for k, b in enumerate(bodies):
		invariant(b.name not in index, "Duplicate body name", {"name": b.name})
		index[b.name] = k
	for b in bodies:
		if b.parent is not None:
			invariant(b.parent in index, f"{b.name} references a missing parent", {"parent": b.parent})

	order: List[int] = []
	placed = [False] * len(bodies)
	remaining = list(range(len(bodies)))
	while remaining:
		progressed = False
		pending: List[int] = []
		for k in remaining:
			parent = bodies[k].parent
			if parent is None or placed[index[parent]]:
				placed[k] = True
				order.append(k)
				progressed = True
			else:
				pending.append(k)
		invariant(progressed, "Parent references form a cycle", {"bodies": [bodies[k].name for k in pending]})
		remaining = pending
	return order


def slerp_direction(current: np.ndarray, target: np.ndarray, t: float) -> np.ndarray:
	"""Rotate unit vector `current` a fraction t of the way toward unit vector `target`."""
	cos_angle = float(np.clip(np.dot(current, target), -1.0, 1.0))
	angle = math.acos(cos_angle)
	if angle < 1e-9:
		return target.copy()
	axis = np.cross(current, target)
	axis_norm = float(np.linalg.norm(axis))
	if axis_norm < DEGENERATE_DIRECTION:
		# antiparallel: any axis perpendicular to current will do
		helper = np.array([0.0, 0.0, 1.0]) if abs(current[2]) < 0.9 else np.array([1.0, 0.0, 0.0])
		axis = np.cross(current, helper)
		axis_norm = float(np.linalg.norm(axis))
	axis = axis / axis_norm
	theta = angle * t
	c, s = math.cos(theta), math.sin(theta)
	# Rodrigues rotation
	out = current * c + np.cross(axis, current) * s + axis * float(np.dot(axis, current)) * (1.0 - c)
	return out / float(np.linalg.norm(out))


class BodyHierarchy:
	"""Arena of bodies plus their per-pass transient state."""

	def __init__(self, bodies: Iterable[Body], scale: Optional[ScaleConfig] = None) -> None:
		roster = list(bodies)
		invariant(len(roster) > 0, "Body hierarchy needs at least one body")
		invariant(len(roster) <= MAX_BODIES, "Too many bodies", {"count": len(roster), "max": MAX_BODIES})
		order = topological_order(roster)
		self.bodies: List[Body] = [roster[k] for k in order]
		self.scale: ScaleConfig = scale or ScaleConfig()
		self._index: Dict[str, int] = {b.name: k for k, b in enumerate(self.bodies)}
		self.parent_index: List[Optional[int]] = [
			None if b.parent is None else self._index[b.parent] for b in self.bodies
		]
		for k, p in enumerate(self.parent_index):
			invariant(p is None or p < k, "Parent sorted after child", {"body": self.bodies[k].name})

		n = len(self.bodies)
		self._local = np.zeros((n, 3), dtype=np.float64)
		self._world = np.zeros((n, 3), dtype=np.float64)
		self._spin = np.zeros(n, dtype=np.float64)
		self._facing = np.tile(np.array([1.0, 0.0, 0.0]), (n, 1))
		self._passes = 0
		self.julian_date: Optional[float] = None
		logger.debug("hierarchy assembled: %d bodies, %d roots", n, sum(p is None for p in self.parent_index))

	def __len__(self) -> int:
		return len(self.bodies)

	@property
	def names(self) -> List[str]:
		return [b.name for b in self.bodies]

	def index_of(self, ref: BodyRef) -> int:
		if isinstance(ref, str):
			invariant(ref in self._index, "Unknown body", {"name": ref}, HierarchyError)
			return self._index[ref]
		invariant(0 <= ref < len(self.bodies), "Body index out of range", {"index": ref}, HierarchyError)
		return int(ref)

	def body(self, ref: BodyRef) -> Body:
		return self.bodies[self.index_of(ref)]

	def children_of(self, ref: BodyRef) -> List[Body]:
		k = self.index_of(ref)
		return [self.bodies[c] for c, p in enumerate(self.parent_index) if p == k]

	def roots(self) -> List[Body]:
		return [self.bodies[k] for k, p in enumerate(self.parent_index) if p is None]

	def update(self, jd: float, elapsed_real_seconds: float, time_scale: float) -> None:
		"""One position pass at Julian Date jd, plus spin and tidal-lock updates.

		The pass is computed into scratch arrays and committed only once every
		body has resolved; a failure leaves the previous pass intact.
		"""
		assert_open_bounds(jd, MIN_JULIAN_DATE, MAX_JULIAN_DATE, "Julian date", NumericalDivergenceError)
		assert_non_negative(elapsed_real_seconds, "Elapsed real seconds", NumericalDivergenceError)
		assert_finite(time_scale, "Time scale")

		n = len(self.bodies)
		local = np.zeros((n, 3), dtype=np.float64)
		world = np.zeros((n, 3), dtype=np.float64)
		spin = self._spin.copy()
		facing = self._facing.copy()
		resolved = [False] * n
		for k, b in enumerate(self.bodies):
			p = self.parent_index[k]
			if b.orbit is not None:
				pos = orbital_position(b.orbit, jd)
				local[k] = (pos.x, pos.y, pos.z)

			if p is None:
				world[k] = local[k] * self.scale.orbit_scale
			else:
				invariant(resolved[p], f"{b.name} evaluated before its parent", {"parent": self.bodies[p].name}, HierarchyError)
				world[k] = world[p] + local[k] * self.scale.child_orbit_scale
			for v in world[k]:
				assert_finite(float(v), f"{b.name} world position")
			resolved[k] = True

			spin[k] = self._advance_spin(k, float(spin[k]), elapsed_real_seconds, time_scale)
			if b.tidally_locked and p is not None:
				facing[k] = self._face_parent(facing[k], world[p] - world[k])

		self._local = local
		self._world = world
		self._spin = spin
		self._facing = facing
		self.julian_date = jd
		self._passes += 1

	def _advance_spin(self, k: int, angle: float, elapsed_real_seconds: float, time_scale: float) -> float:
		period = self.bodies[k].rotation_period_hours
		if period == 0.0:
			return angle
		delta = TWO_PI * (elapsed_real_seconds / SECONDS_PER_HOUR) / period * time_scale
		angle += delta
		if math.isfinite(angle):
			return math.fmod(angle, TWO_PI)
		logger.warning("spin phase of %s became non-finite; resetting", self.bodies[k].name)
		return 0.0

	@staticmethod
	def _face_parent(current: np.ndarray, direction: np.ndarray) -> np.ndarray:
		length = float(np.linalg.norm(direction))
		if not math.isfinite(length) or length < DEGENERATE_DIRECTION:
			return current
		return slerp_direction(current, direction / length, TIDAL_LOCK_BLEND)

	def _require_pass(self) -> None:
		invariant(self._passes > 0, "No position pass has run yet", error=HierarchyError)

	def world_position(self, ref: BodyRef) -> CartesianPosition:
		self._require_pass()
		return CartesianPosition.from_array(self._world[self.index_of(ref)])

	def local_position(self, ref: BodyRef) -> CartesianPosition:
		self._require_pass()
		return CartesianPosition.from_array(self._local[self.index_of(ref)])

	def positions(self) -> Dict[str, CartesianPosition]:
		self._require_pass()
		return {b.name: CartesianPosition.from_array(self._world[k]) for k, b in enumerate(self.bodies)}

	def world_array(self) -> np.ndarray:
		self._require_pass()
		return self._world.copy()

	def spin_angle(self, ref: BodyRef) -> float:
		return float(self._spin[self.index_of(ref)])

	def facing(self, ref: BodyRef) -> np.ndarray:
		return self._facing[self.index_of(ref)].copy()

	def scaled_radius(self, ref: BodyRef) -> float:
		b = self.body(ref)
		return b.radius_km * self.scale.size_scale * self.scale.size_exaggeration
