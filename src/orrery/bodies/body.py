from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
from ..physics.constants import BODY_KINDS
from ..physics.invariants import assert_finite, assert_non_negative, assert_positive, invariant, ConfigurationError
from ..physics.orbits import OrbitalElements


@dataclass(frozen=True)
class Body:
	"""A star, planet, moon, ... as assembled from the dataset.

	`parent` names the body this one orbits; it is resolved to an index when the
	hierarchy is built. rotation_period_hours is signed (negative = retrograde)
	and 0 means no autonomous spin.
	"""
	name: str
	kind: str
	radius_km: float
	orbit: Optional[OrbitalElements] = None
	parent: Optional[str] = None
	rotation_period_hours: float = 0.0
	axial_tilt_deg: float = 0.0
	tidally_locked: bool = False
	mass_kg: Optional[float] = None

	def __post_init__(self) -> None:
		invariant(isinstance(self.name, str) and self.name.strip() != "", "Body name must not be empty", {"name": self.name})
		invariant(self.kind in BODY_KINDS, f"{self.name} has an unknown body kind", {"kind": self.kind, "valid": BODY_KINDS})
		assert_positive(self.radius_km, f"{self.name} radius")
		invariant(
			self.orbit is None or isinstance(self.orbit, OrbitalElements),
			f"{self.name} orbit must be OrbitalElements",
			{"type": type(self.orbit).__name__},
		)
		invariant(self.parent != self.name, f"{self.name} cannot orbit itself")
		assert_finite(self.rotation_period_hours, f"{self.name} rotation period", ConfigurationError)
		assert_finite(self.axial_tilt_deg, f"{self.name} axial tilt", ConfigurationError)
		if self.mass_kg is not None:
			assert_non_negative(self.mass_kg, f"{self.name} mass")
		invariant(
			not self.tidally_locked or self.parent is not None,
			f"{self.name} is tidally locked but has no parent",
		)

	@property
	def is_retrograde(self) -> bool:
		return self.rotation_period_hours < 0
