from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal, Optional
from ..physics.orbits import OrbitalElements
from ..physics.constants import J2000_JD
from .body import Body

BodyKind = Literal["star", "planet", "dwarf_planet", "moon", "asteroid", "comet", "spacecraft"]


class OrbitRecord(BaseModel):
	model_config = ConfigDict(extra="forbid")

	a_AU: float
	e: float
	i_deg: float = 0.0
	Omega_deg: float = 0.0
	omega_deg: float = 0.0
	M0_deg: float = 0.0
	mean_motion_deg_day: Optional[float] = None
	epoch_jd: float = J2000_JD

	def to_elements(self) -> OrbitalElements:
		return OrbitalElements(
			a=self.a_AU,
			e=self.e,
			i=self.i_deg,
			Omega=self.Omega_deg,
			omega=self.omega_deg,
			M0=self.M0_deg,
			mean_motion=self.mean_motion_deg_day,
			epoch=self.epoch_jd,
		)


class BodyRecord(BaseModel):
	model_config = ConfigDict(extra="forbid")

	name: str = Field(min_length=1)
	type: BodyKind
	radius_km: float
	mass_kg: Optional[float] = None
	rot_period_hours: float = 0.0
	axial_tilt_deg: float = 0.0
	parent: Optional[str] = None
	tidally_locked: bool = False
	orbit: Optional[OrbitRecord] = None

	def to_body(self) -> Body:
		return Body(
			name=self.name,
			kind=self.type,
			radius_km=self.radius_km,
			orbit=self.orbit.to_elements() if self.orbit is not None else None,
			parent=self.parent,
			rotation_period_hours=self.rot_period_hours,
			axial_tilt_deg=self.axial_tilt_deg,
			tidally_locked=self.tidally_locked,
			mass_kg=self.mass_kg,
		)


class BodiesFile(BaseModel):
	bodies: List[BodyRecord]
	required: List[str] = Field(default_factory=list)
