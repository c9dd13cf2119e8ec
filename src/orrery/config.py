from __future__ import annotations
import yaml
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict
from .physics.invariants import ConfigurationError, assert_positive, invariant


def load_yaml_config(path: str | Path) -> Dict[str, Any]:
	p = Path(path)
	with p.open("r", encoding="utf-8") as f:
		cfg = yaml.safe_load(f)
	if cfg is None:
		return {}
	invariant(isinstance(cfg, dict), "Scenario file must contain a mapping", {"path": str(p)})
	return cfg


def get_path(cfg: Dict[str, Any], path: str, default: Any = None) -> Any:
	"""Nested lookup by dotted key, e.g. get_path(cfg, "time.scale", 1.0)."""
	cur: Any = cfg
	for part in path.split("."):
		if not isinstance(cur, dict) or part not in cur:
			return default
		cur = cur[part]
	return cur


@dataclass(frozen=True)
class ScaleConfig:
	"""Visual exaggeration applied when composing world positions.

	orbit_scale multiplies root orbits, child_orbit_scale multiplies orbits of
	bodies that have a parent, and the size factors turn km radii into display
	units.
	"""
	orbit_scale: float = 1.0
	child_orbit_scale: float = 1.0
	size_scale: float = 1.0
	size_exaggeration: float = 1.0

	def __post_init__(self) -> None:
		for f in fields(self):
			assert_positive(getattr(self, f.name), f"Scale {f.name}")

	@classmethod
	def from_dict(cls, data: Dict[str, Any] | None) -> "ScaleConfig":
		data = dict(data or {})
		known = {f.name for f in fields(cls)}
		unknown = sorted(set(data) - known)
		invariant(not unknown, "Unknown scale settings", {"unknown": unknown})
		try:
			values = {k: float(v) for k, v in data.items()}
		except (TypeError, ValueError) as exc:
			raise ConfigurationError("Scale settings must be numbers", {"scale": data}) from exc
		return cls(**values)


# 100 scene units per AU, moon orbits pushed out a further 50x
EXPLORER_SCALE = ScaleConfig(orbit_scale=100.0, child_orbit_scale=5000.0, size_scale=1e-5, size_exaggeration=30.0)
