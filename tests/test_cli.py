import json
import sys
import pytest
from orrery import cli
from orrery.physics.constants import J2000_JD


def _run(monkeypatch, capsys, *argv):
	monkeypatch.setattr(sys, "argv", ["orrery", *argv])
	cli.main()
	return json.loads(capsys.readouterr().out)


def test_date_conversion(monkeypatch, capsys):
	out = _run(monkeypatch, capsys, "date", "--date", "2000-01-01T12:00:00")
	assert out["julian_date"] == J2000_JD
	out = _run(monkeypatch, capsys, "date", "--jd", str(J2000_JD + 0.5))
	assert out["date"] == "2000-01-02T00:00:00"


def test_position(monkeypatch, capsys):
	out = _run(monkeypatch, capsys, "position", "--body", "Earth", "--body", "Moon", "--jd", str(J2000_JD))
	assert set(out["positions_AU"]) == {"Earth", "Moon"}
	x, y, z = out["positions_AU"]["Earth"]
	assert 0.98 < (x * x + y * y + z * z) ** 0.5 < 1.02


def test_bad_input_exits(monkeypatch, capsys):
	monkeypatch.setattr(sys, "argv", ["orrery", "position", "--body", "Vulcan", "--jd", str(J2000_JD)])
	with pytest.raises(SystemExit) as exc:
		cli.main()
	assert exc.value.code == 2
	assert "Vulcan" in capsys.readouterr().err
