from __future__ import annotations
from pathlib import Path
from typing import Dict, Any
import pandas as pd
import json
import matplotlib.pyplot as plt
plt.style.use("seaborn-v0_8-darkgrid")


def _plot_orbits_xy(ts: pd.DataFrame, ax) -> None:
	for name, grp in ts.groupby("body", sort=False):
		ax.plot(grp["x"], grp["y"], linewidth=1.0, label=str(name))
		ax.scatter(grp["x"].iloc[-1:], grp["y"].iloc[-1:], s=12)
	ax.set_aspect("equal", adjustable="datalim")
	ax.set_xlabel("x (scene units)")
	ax.set_ylabel("y (scene units)")


def write_outputs(results: Dict[str, Any], out_dir: Path) -> None:
	out_dir.mkdir(parents=True, exist_ok=True)
	fig_dir = out_dir / "figs"
	fig_dir.mkdir(parents=True, exist_ok=True)
	ts: pd.DataFrame = results["timeseries"]
	ts.to_csv(out_dir / "timeseries.csv", index=False)
	with (out_dir / "summary.json").open("w", encoding="utf-8") as f:
		json.dump(results["summary"], f, indent=2)
	if "parameters" in results:
		with (out_dir / "parameters.json").open("w", encoding="utf-8") as f:
			json.dump(results["parameters"], f, indent=2)
	if ts.empty:
		return

	fig, ax = plt.subplots(figsize=(7.5, 7.5))
	_plot_orbits_xy(ts, ax)
	if ts["body"].nunique() <= 12:
		ax.legend(loc="best", fontsize=8)
	fig.tight_layout()
	fig.savefig(fig_dir / "orbits_xy.png", dpi=150)
	plt.close(fig)

	plt.figure(figsize=(9,4.8))
	days = ts["julian_date"] - ts["julian_date"].iloc[0]
	for name, grp in ts.assign(days=days).groupby("body", sort=False):
		if (grp["local_distance_AU"] == 0).all():
			continue
		plt.plot(grp["days"], grp["local_distance_AU"], label=str(name))
	plt.xlabel("Days since start")
	plt.ylabel("Distance from parent (AU)")
	plt.legend(loc="best", fontsize=8)
	plt.grid(True)
	plt.tight_layout()
	plt.savefig(fig_dir / "distance_vs_time.png", dpi=150)
	plt.close()


def plot_run(out_dir: Path) -> None:
	ts = pd.read_csv(out_dir / "timeseries.csv")
	fig, ax = plt.subplots(figsize=(7,7))
	_plot_orbits_xy(ts, ax)
	ax.legend(loc="best", fontsize=8)
	fig.tight_layout()
	plt.show()
