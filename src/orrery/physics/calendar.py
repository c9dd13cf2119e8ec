from __future__ import annotations
import math
from datetime import datetime, timezone
from typing import NamedTuple
from .constants import MAX_JULIAN_DATE, MIN_JULIAN_DATE, SECONDS_PER_DAY
from .invariants import ConfigurationError, assert_open_bounds, invariant


class CalendarDate(NamedTuple):
	"""Proleptic Gregorian UTC date, one-second resolution."""
	year: int
	month: int
	day: int
	hour: int = 0
	minute: int = 0
	second: int = 0

	def isoformat(self) -> str:
		return f"{self.year:04d}-{self.month:02d}-{self.day:02d}T{self.hour:02d}:{self.minute:02d}:{self.second:02d}"


def is_leap_year(year: int) -> bool:
	return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(year: int, month: int) -> int:
	if month == 2:
		return 29 if is_leap_year(year) else 28
	return 30 if month in (4, 6, 9, 11) else 31


def validate_calendar_date(d: CalendarDate) -> None:
	for field in d._fields:
		v = getattr(d, field)
		invariant(isinstance(v, int) and not isinstance(v, bool), f"Calendar {field} must be an integer", {"actual": v})
	invariant(1 <= d.month <= 12, "Month out of range", {"month": d.month})
	invariant(1 <= d.day <= days_in_month(d.year, d.month), "Day out of range", {"year": d.year, "month": d.month, "day": d.day})
	invariant(0 <= d.hour <= 23, "Hour out of range", {"hour": d.hour})
	invariant(0 <= d.minute <= 59, "Minute out of range", {"minute": d.minute})
	invariant(0 <= d.second <= 59, "Second out of range", {"second": d.second})


def calendar_to_julian(d: CalendarDate) -> float:
	"""Julian Date of a proleptic Gregorian date (Meeus, Astronomical Algorithms ch. 7)."""
	validate_calendar_date(d)
	y, m = d.year, d.month
	if m <= 2:
		y -= 1
		m += 12
	A = math.floor(y / 100)
	B = 2 - A + math.floor(A / 4)
	day_fraction = (d.hour * 3600 + d.minute * 60 + d.second) / SECONDS_PER_DAY
	jd = math.floor(365.25 * (y + 4716)) + math.floor(30.6001 * (m + 1)) + d.day + B - 1524.5 + day_fraction
	return assert_open_bounds(jd, MIN_JULIAN_DATE, MAX_JULIAN_DATE, "Julian date", ConfigurationError)


def julian_to_calendar(jd: float) -> CalendarDate:
	"""Inverse of calendar_to_julian. The time of day is rounded to the nearest second."""
	assert_open_bounds(jd, MIN_JULIAN_DATE, MAX_JULIAN_DATE, "Julian date", ConfigurationError)
	Z = math.floor(jd + 0.5)
	F = jd + 0.5 - Z
	seconds = int(round(F * SECONDS_PER_DAY))
	if seconds >= SECONDS_PER_DAY:
		Z += 1
		seconds -= int(SECONDS_PER_DAY)

	alpha = math.floor((Z - 1867216.25) / 36524.25)
	A = Z + 1 + alpha - math.floor(alpha / 4)
	B = A + 1524
	C = math.floor((B - 122.1) / 365.25)
	D = math.floor(365.25 * C)
	E = math.floor((B - D) / 30.6001)
	day = int(B - D - math.floor(30.6001 * E))
	month = int(E - 1 if E < 14 else E - 13)
	year = int(C - 4716 if month > 2 else C - 4715)

	hour, rem = divmod(seconds, 3600)
	minute, second = divmod(rem, 60)
	return CalendarDate(year, month, day, hour, minute, second)


def datetime_to_julian(dt: datetime) -> float:
	"""Naive datetimes are taken as UTC."""
	if dt.tzinfo is not None:
		dt = dt.astimezone(timezone.utc)
	return calendar_to_julian(CalendarDate(dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second))


def julian_to_datetime(jd: float) -> datetime:
	d = julian_to_calendar(jd)
	invariant(1 <= d.year <= 9999, "Julian date outside the datetime range", {"jd": jd, "year": d.year})
	return datetime(d.year, d.month, d.day, d.hour, d.minute, d.second, tzinfo=timezone.utc)


def now_julian() -> float:
	return datetime_to_julian(datetime.now(timezone.utc))


def parse_calendar_date(text: str) -> CalendarDate:
	"""Parse 'YYYY-MM-DD' or 'YYYY-MM-DDTHH:MM[:SS]' (a space also separates date and time)."""
	s = text.strip().replace(" ", "T")
	date_part, _, time_part = s.partition("T")
	try:
		y, mo, d = (int(p) for p in date_part.split("-"))
		hms = [int(p) for p in time_part.split(":")] if time_part else []
	except ValueError as exc:
		raise ConfigurationError("Unparseable calendar date", {"text": text}) from exc
	invariant(len(hms) <= 3, "Unparseable calendar time", {"text": text})
	hms += [0] * (3 - len(hms))
	d_ = CalendarDate(y, mo, d, *hms)
	validate_calendar_date(d_)
	return d_
