from __future__ import annotations
import logging
from typing import Dict, Any, List, Tuple
import pandas as pd
from tqdm import tqdm
from ..config import get_path
from ..physics.calendar import CalendarDate, julian_to_calendar
from .clock import TimeController
from .hierarchy import BodyHierarchy, BodyRef
from .metrics import summarize_distances

logger = logging.getLogger(__name__)


class Simulation:
	"""One clock driving one hierarchy. A tick advances time, then runs a position pass."""

	def __init__(self, hierarchy: BodyHierarchy, clock: TimeController) -> None:
		self.hierarchy = hierarchy
		self.clock = clock
		self.ticks = 0
		self.refresh()

	def refresh(self) -> None:
		"""Position pass at the current instant without advancing time or spin."""
		self.hierarchy.update(self.clock.julian_date, 0.0, self.clock.effective_time_scale)

	def tick(self, elapsed_seconds: float) -> float:
		self.clock.advance(elapsed_seconds)
		self.hierarchy.update(self.clock.julian_date, elapsed_seconds, self.clock.effective_time_scale)
		self.ticks += 1
		return self.clock.julian_date

	advance = tick

	def current_world_position(self, ref: BodyRef) -> Tuple[float, float, float]:
		return self.hierarchy.world_position(ref).as_tuple()

	def current_julian_date(self) -> float:
		return self.clock.julian_date

	def current_calendar_date(self) -> CalendarDate:
		return self.clock.calendar_date()

	def set_time_scale(self, scale: float) -> None:
		self.clock.set_time_scale(scale)

	def pause(self) -> None:
		self.clock.pause()

	def resume(self) -> None:
		self.clock.resume()

	def toggle_pause(self) -> bool:
		return self.clock.toggle_pause()

	def reverse(self) -> None:
		self.clock.reverse()

	def forward(self) -> None:
		self.clock.forward()

	def jump_to(self, jd: float) -> None:
		self.clock.set_julian_date(jd)
		self.refresh()


def run_simulation(scenario: Dict[str, Any], progress: bool = True) -> Dict[str, Any]:
	hierarchy = BodyHierarchy(scenario["bodies"], scenario["scale"])
	clock = TimeController(initial_jd=scenario["start_jd"], time_scale=TimeController.resolve_time_scale(get_path(scenario, "time.scale", 86400.0)))
	if get_path(scenario, "time.reverse", False):
		clock.reverse()
	sim = Simulation(hierarchy, clock)

	ticks = int(get_path(scenario, "time.ticks", 365))
	frame_s = float(get_path(scenario, "time.frame_seconds", 1.0))
	record_every = max(1, int(get_path(scenario, "time.record_every", 1)))
	tracked: List[str] = list(scenario.get("track") or hierarchy.names)
	tracked_idx = [hierarchy.index_of(name) for name in tracked]

	rows: List[Dict[str, Any]] = []
	rappend = rows.append

	def _record(tick: int) -> None:
		jd = clock.julian_date
		world = hierarchy.world_array()
		for k in tracked_idx:
			body = hierarchy.bodies[k]
			local = hierarchy.local_position(k)
			rappend({
				"tick": tick,
				"julian_date": jd,
				"body": body.name,
				"parent": body.parent,
				"x": float(world[k, 0]),
				"y": float(world[k, 1]),
				"z": float(world[k, 2]),
				"local_distance_AU": local.norm(),
				"spin_rad": hierarchy.spin_angle(k),
			})

	_record(0)
	for tick in tqdm(range(1, ticks + 1), desc=f"Sim {scenario.get('name', 'scenario')}", disable=not progress, miniters=max(1, ticks // 200)):
		sim.tick(frame_s)
		if tick % record_every == 0 or tick == ticks:
			_record(tick)

	ts = pd.DataFrame(rows)
	start = scenario["start_jd"]
	end = clock.julian_date
	summary = {
		"name": scenario.get("name", "scenario"),
		"ticks": ticks,
		"start_jd": start,
		"end_jd": end,
		"start_date": julian_to_calendar(start).isoformat(),
		"end_date": clock.calendar_date().isoformat(),
		"elapsed_days": end - start,
		"time_scale": clock.time_scale,
		"bodies_simulated": len(hierarchy),
		"bodies_tracked": tracked,
		"distances": summarize_distances(ts),
	}
	parameters = {
		"time.scale": clock.time_scale,
		"time.frame_seconds": frame_s,
		"time.ticks": ticks,
		"time.record_every": record_every,
		"scale.orbit_scale": hierarchy.scale.orbit_scale,
		"scale.child_orbit_scale": hierarchy.scale.child_orbit_scale,
	}
	logger.info("simulated %d ticks, JD %.5f -> %.5f", ticks, start, end)
	return {"timeseries": ts, "summary": summary, "parameters": parameters}
