from __future__ import annotations
from pathlib import Path
from typing import Dict, Any, List, Optional
from ..bodies.body import Body
from ..bodies.loaders import DEFAULT_DATASET, load_roster
from ..config import EXPLORER_SCALE, ScaleConfig, get_path
from ..physics.calendar import now_julian, parse_calendar_date, calendar_to_julian
from ..physics.constants import J2000_JD, MAX_JULIAN_DATE, MIN_JULIAN_DATE
from ..physics.invariants import ConfigurationError, assert_open_bounds, invariant
from .clock import TimeController


def select_bodies(bodies: List[Body], include: Optional[List[str]]) -> List[Body]:
	"""Subset of the roster named in `include`, plus every ancestor they need."""
	if not include:
		return list(bodies)
	by_name = {b.name: b for b in bodies}
	wanted = set()
	for name in include:
		invariant(name in by_name, "Scenario includes an unknown body", {"name": name})
		cur: Optional[str] = name
		while cur is not None and cur not in wanted:
			wanted.add(cur)
			cur = by_name[cur].parent
	return [b for b in bodies if b.name in wanted]


def resolve_start_jd(cfg: Dict[str, Any]) -> float:
	start = cfg.get("start", "j2000")
	if isinstance(start, (int, float)) and not isinstance(start, bool):
		jd = float(start)
	elif isinstance(start, str) and start.lower() == "j2000":
		jd = J2000_JD
	elif isinstance(start, str) and start.lower() == "now":
		jd = now_julian()
	elif isinstance(start, str):
		jd = calendar_to_julian(parse_calendar_date(start))
	else:
		raise ConfigurationError("Scenario start must be a Julian date, a date string, 'j2000' or 'now'", {"start": start})
	return assert_open_bounds(jd, MIN_JULIAN_DATE, MAX_JULIAN_DATE, "Scenario start", ConfigurationError)


def resolve_scale(value: Any) -> ScaleConfig:
	"""A `scale` section: a mapping of factors, the preset name "explorer", or nothing (true scale)."""
	if isinstance(value, str):
		invariant(value.lower() == "explorer", "Unknown scale preset", {"scale": value})
		return EXPLORER_SCALE
	invariant(value is None or isinstance(value, dict), "Scale section must be a mapping or a preset name", {"scale": value})
	return ScaleConfig.from_dict(value)


def build_scenario(cfg: Dict[str, Any]) -> Dict[str, Any]:
	dataset = Path(get_path(cfg, "system.dataset", None) or DEFAULT_DATASET)
	roster = load_roster(dataset)
	bodies = select_bodies(roster, get_path(cfg, "system.include", None))
	track = cfg.get("track")
	if track:
		names = {b.name for b in bodies}
		unknown = [t for t in track if t not in names]
		invariant(not unknown, "Scenario tracks bodies that are not simulated", {"unknown": unknown})
	time_cfg = dict(cfg.get("time") or {})
	if "scale" in time_cfg:
		time_cfg["scale"] = TimeController.resolve_time_scale(time_cfg["scale"])
	scenario = dict(cfg)
	scenario.update({
		"bodies": bodies,
		"scale": resolve_scale(cfg.get("scale")),
		"start_jd": resolve_start_jd(cfg),
		"time": time_cfg,
		"dataset": str(dataset),
	})
	return scenario
