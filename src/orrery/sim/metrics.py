from __future__ import annotations
from typing import Any, Dict
import numpy as np
import pandas as pd


def summarize_distances(ts: pd.DataFrame) -> Dict[str, Dict[str, Any]]:
	"""Per body: min/max/mean distance (AU, unscaled) from whatever it orbits."""
	if ts.empty:
		return {}
	out: Dict[str, Dict[str, Any]] = {}
	for name, grp in ts.groupby("body", sort=False):
		d = grp["local_distance_AU"].to_numpy(dtype=float)
		out[str(name)] = {
			"parent": grp["parent"].iloc[0],
			"min_AU": float(np.min(d)),
			"max_AU": float(np.max(d)),
			"mean_AU": float(np.mean(d)),
		}
	return out
