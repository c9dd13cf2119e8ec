from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Union
from ..physics.calendar import CalendarDate, calendar_to_julian, julian_to_calendar, now_julian
from ..physics.constants import (
	DAYS_PER_CENTURY,
	J2000_JD,
	MAX_JULIAN_DATE,
	MAX_TIME_SCALE,
	MIN_JULIAN_DATE,
	SECONDS_PER_DAY,
)
from ..physics.invariants import (
	ConfigurationError,
	NumericalDivergenceError,
	assert_bounds,
	assert_finite,
	assert_non_negative,
	assert_open_bounds,
	invariant,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimeState:
	julian_date: float
	simulation_seconds: float
	calendar_date: CalendarDate
	time_scale: float
	is_paused: bool
	is_reversed: bool


Listener = Callable[[TimeState], None]


class TimeController:
	"""Owns the simulated instant (a Julian Date), the signed playback rate and the pause flag."""

	TIME_SCALES: Dict[str, float] = {
		"realtime": 1.0,
		"minute_per_second": 60.0,
		"hour_per_second": 3600.0,
		"day_per_second": 86400.0,
		"week_per_second": 7 * 86400.0,
		"month_per_second": 30 * 86400.0,
		"max": MAX_TIME_SCALE,
	}

	@classmethod
	def resolve_time_scale(cls, value: Union[str, float]) -> float:
		"""A preset name from TIME_SCALES, or a number of simulated seconds per real second."""
		if isinstance(value, str):
			invariant(value in cls.TIME_SCALES, "Unknown time scale preset", {"scale": value, "valid": sorted(cls.TIME_SCALES)})
			return cls.TIME_SCALES[value]
		return assert_finite(value, "Time scale", ConfigurationError)

	def __init__(self, initial_jd: Optional[float] = None, time_scale: float = 1.0, paused: bool = False) -> None:
		jd = now_julian() if initial_jd is None else initial_jd
		self._jd: float = assert_open_bounds(jd, MIN_JULIAN_DATE, MAX_JULIAN_DATE, "Initial Julian date", ConfigurationError)
		self._time_scale: float = 1.0
		self._paused: bool = bool(paused)
		self._simulation_seconds: float = 0.0
		self._listeners: List[Listener] = []
		self.set_time_scale(time_scale)

	@property
	def julian_date(self) -> float:
		return self._jd

	@property
	def time_scale(self) -> float:
		return self._time_scale

	@property
	def is_paused(self) -> bool:
		return self._paused

	@property
	def is_reversed(self) -> bool:
		return self._time_scale < 0

	@property
	def effective_time_scale(self) -> float:
		"""Rate at which simulated time actually flows: zero while paused."""
		return 0.0 if self._paused else self._time_scale

	@property
	def simulation_seconds(self) -> float:
		"""Wall-clock seconds fed through advance() while running."""
		return self._simulation_seconds

	def advance(self, elapsed_seconds: float) -> float:
		assert_non_negative(elapsed_seconds, "Elapsed seconds")
		if self._paused:
			return self._jd
		delta_days = assert_finite(elapsed_seconds * self._time_scale / SECONDS_PER_DAY, "Delta days")
		jd = assert_finite(self._jd + delta_days, "Julian date after advance")
		assert_open_bounds(jd, MIN_JULIAN_DATE, MAX_JULIAN_DATE, "Julian date after advance", NumericalDivergenceError)
		self._jd = jd
		self._simulation_seconds += elapsed_seconds
		self._notify()
		return self._jd

	def set_time_scale(self, scale: float) -> None:
		assert_finite(scale, "Time scale", ConfigurationError)
		assert_bounds(abs(scale), 0.0, MAX_TIME_SCALE, "Absolute time scale")
		self._time_scale = float(scale)
		logger.debug("time scale set to %s", self._time_scale)
		self._notify()

	def pause(self) -> None:
		self._paused = True
		self._notify()

	def resume(self) -> None:
		self._paused = False
		self._notify()

	def toggle_pause(self) -> bool:
		self._paused = not self._paused
		self._notify()
		return self._paused

	def reverse(self) -> None:
		self._time_scale = -abs(self._time_scale)
		self._notify()

	def forward(self) -> None:
		self._time_scale = abs(self._time_scale)
		self._notify()

	def set_julian_date(self, jd: float) -> None:
		self._jd = assert_open_bounds(jd, MIN_JULIAN_DATE, MAX_JULIAN_DATE, "Julian date", ConfigurationError)
		self._notify()

	def set_calendar_date(self, date: CalendarDate) -> None:
		self.set_julian_date(calendar_to_julian(date))

	def jump_to_j2000(self) -> None:
		self.set_julian_date(J2000_JD)

	def jump_to_now(self) -> None:
		self.set_julian_date(now_julian())

	def add_days(self, days: float) -> None:
		assert_finite(days, "Days to add", ConfigurationError)
		self.set_julian_date(self._jd + days)

	def days_since_j2000(self) -> float:
		return self._jd - J2000_JD

	def centuries_since_j2000(self) -> float:
		return (self._jd - J2000_JD) / DAYS_PER_CENTURY

	def calendar_date(self) -> CalendarDate:
		return julian_to_calendar(self._jd)

	def state(self) -> TimeState:
		return TimeState(
			julian_date=self._jd,
			simulation_seconds=self._simulation_seconds,
			calendar_date=self.calendar_date(),
			time_scale=self._time_scale,
			is_paused=self._paused,
			is_reversed=self.is_reversed,
		)

	def add_listener(self, callback: Listener) -> None:
		if callback not in self._listeners:
			self._listeners.append(callback)

	def remove_listener(self, callback: Listener) -> None:
		if callback in self._listeners:
			self._listeners.remove(callback)

	def _notify(self) -> None:
		if not self._listeners:
			return
		snapshot = self.state()
		for cb in list(self._listeners):
			cb(snapshot)
