from datetime import datetime, timedelta, timezone
import pytest
from orrery.physics.calendar import (
	CalendarDate,
	calendar_to_julian,
	datetime_to_julian,
	is_leap_year,
	julian_to_calendar,
	julian_to_datetime,
	parse_calendar_date,
)
from orrery.physics.constants import J2000_JD
from orrery.physics.invariants import ConfigurationError


def test_j2000():
	assert calendar_to_julian(CalendarDate(2000, 1, 1, 12)) == J2000_JD
	assert julian_to_calendar(J2000_JD) == CalendarDate(2000, 1, 1, 12, 0, 0)


def test_known_dates():
	# Meeus examples
	assert calendar_to_julian(CalendarDate(1957, 10, 4, 19, 26, 24)) == pytest.approx(2436116.31, abs=1e-6)
	assert calendar_to_julian(CalendarDate(1987, 1, 27)) == 2446822.5
	assert calendar_to_julian(CalendarDate(1600, 12, 31)) == 2305812.5


def test_round_trip_1900_2100():
	times = [(0, 0, 0), (0, 0, 1), (11, 59, 59), (12, 0, 0), (23, 59, 59)]
	for year in range(1900, 2101, 3):
		for month, day in ((1, 1), (2, 28), (3, 1), (6, 30), (12, 31)):
			for h, m, s in times:
				d = CalendarDate(year, month, day, h, m, s)
				assert julian_to_calendar(calendar_to_julian(d)) == d
		if is_leap_year(year):
			d = CalendarDate(year, 2, 29, 23, 59, 59)
			assert julian_to_calendar(calendar_to_julian(d)) == d


def test_midnight_crossing():
	jd = calendar_to_julian(CalendarDate(1999, 12, 31, 23, 59, 59))
	assert julian_to_calendar(jd + 1.0 / 86400.0) == CalendarDate(2000, 1, 1, 0, 0, 0)


def test_leap_rules():
	assert is_leap_year(2000) and is_leap_year(2024)
	assert not is_leap_year(1900) and not is_leap_year(2100)


def test_invalid_dates_rejected():
	for d in (CalendarDate(2023, 2, 29), CalendarDate(2000, 13, 1), CalendarDate(2000, 4, 31), CalendarDate(2000, 1, 1, 24)):
		with pytest.raises(ConfigurationError):
			calendar_to_julian(d)
	for text in ("garbage", "2000-13-01", "2000-01-01T10:00:00:00"):
		with pytest.raises(ConfigurationError):
			parse_calendar_date(text)
	with pytest.raises(ConfigurationError):
		julian_to_calendar(-1.0)


def test_datetime_bridge():
	dt = datetime(2024, 3, 15, 6, 30, 0, tzinfo=timezone.utc)
	assert julian_to_datetime(datetime_to_julian(dt)) == dt
	# naive is UTC
	assert datetime_to_julian(dt.replace(tzinfo=None)) == datetime_to_julian(dt)
	shifted = dt.astimezone(timezone(timedelta(hours=5)))
	assert datetime_to_julian(shifted) == datetime_to_julian(dt)


def test_parse():
	assert parse_calendar_date("2024-02-29") == CalendarDate(2024, 2, 29)
	assert parse_calendar_date("2024-02-29 13:05") == CalendarDate(2024, 2, 29, 13, 5, 0)
	assert parse_calendar_date("2024-02-29T13:05:07").isoformat() == "2024-02-29T13:05:07"
