import argparse
import json
import logging
from pathlib import Path
from .config import load_yaml_config
from .bodies.loaders import DEFAULT_DATASET, load_roster
from .physics.calendar import calendar_to_julian, julian_to_calendar, now_julian, parse_calendar_date
from .physics.invariants import OrreryError
from .sim.clock import TimeController
from .sim.engine import Simulation, run_simulation
from .sim.hierarchy import BodyHierarchy
from .sim.outputs import write_outputs, plot_run
from .sim.scenarios import build_scenario, select_bodies


def _resolve_jd(args: argparse.Namespace) -> float:
	if args.jd is not None:
		return args.jd
	if args.date is not None:
		return calendar_to_julian(parse_calendar_date(args.date))
	return now_julian()


def main() -> None:
	parser = argparse.ArgumentParser(prog="orrery", description="Solar system orrery CLI")
	parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
	sub = parser.add_subparsers(dest="cmd", required=True)

	p_run = sub.add_parser("run", help="Run a scenario")
	p_run.add_argument("--scenario", required=True, type=str)
	p_run.add_argument("--out", required=True, type=str)
	p_run.add_argument("--no-progress", action="store_true")

	p_plot = sub.add_parser("plot", help="Plot a prior run")
	p_plot.add_argument("--run", required=True, type=str)

	p_pos = sub.add_parser("position", help="Heliocentric position of bodies at an instant")
	p_pos.add_argument("--body", action="append", help="Body name; repeatable. Default: all bodies")
	p_pos.add_argument("--date", type=str, help="YYYY-MM-DD[THH:MM[:SS]] UTC")
	p_pos.add_argument("--jd", type=float, help="Julian date (overrides --date)")
	p_pos.add_argument("--dataset", type=str, default=str(DEFAULT_DATASET))

	p_date = sub.add_parser("date", help="Convert between calendar dates and Julian dates")
	p_date.add_argument("--date", type=str, help="YYYY-MM-DD[THH:MM[:SS]] UTC")
	p_date.add_argument("--jd", type=float, help="Julian date (overrides --date)")

	args = parser.parse_args()
	logging.basicConfig(level=getattr(logging, args.log_level), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

	try:
		if args.cmd == "run":
			cfg = load_yaml_config(args.scenario)
			scenario = build_scenario(cfg)
			results = run_simulation(scenario, progress=not args.no_progress)
			write_outputs(results, Path(args.out))
			print(json.dumps(results["summary"], indent=2))
		elif args.cmd == "plot":
			plot_run(Path(args.run))
		elif args.cmd == "position":
			jd = _resolve_jd(args)
			bodies = select_bodies(load_roster(args.dataset), args.body)
			sim = Simulation(BodyHierarchy(bodies), TimeController(initial_jd=jd, paused=True))
			names = args.body or sim.hierarchy.names
			out = {
				"julian_date": jd,
				"date": julian_to_calendar(jd).isoformat(),
				"positions_AU": {n: list(sim.current_world_position(n)) for n in names},
			}
			print(json.dumps(out, indent=2))
		elif args.cmd == "date":
			jd = _resolve_jd(args)
			print(json.dumps({"julian_date": jd, "date": julian_to_calendar(jd).isoformat()}, indent=2))
	except OrreryError as exc:
		parser.exit(2, f"orrery: error: {exc}\n")

if __name__ == "__main__":
	main()
