from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Dict, Any, List
from pydantic import ValidationError
from ..physics.invariants import ConfigurationError, invariant
from .bodies_schema import BodiesFile
from .body import Body

logger = logging.getLogger(__name__)

DEFAULT_DATASET = Path(__file__).resolve().parent / "solar_system.json"


def load_json(path: str | Path) -> Dict[str, Any]:
	p = Path(path)
	with p.open("r", encoding="utf-8") as f:
		return json.load(f)


def parse_bodies(data: Dict[str, Any]) -> BodiesFile:
	try:
		return BodiesFile(**data)
	except ValidationError as exc:
		raise ConfigurationError("Body dataset failed schema validation", {"errors": exc.error_count()}) from exc


def load_bodies(path: str | Path = DEFAULT_DATASET) -> BodiesFile:
	return parse_bodies(load_json(path))


def build_bodies(bodies_file: BodiesFile) -> List[Body]:
	"""Convert schema records into validated Body objects; element validation fails closed."""
	bodies = [rec.to_body() for rec in bodies_file.bodies]
	names = {b.name for b in bodies}
	missing = [n for n in bodies_file.required if n not in names]
	invariant(not missing, "Dataset is missing required bodies", {"missing": missing})
	logger.info("loaded %d bodies", len(bodies))
	return bodies


def load_roster(path: str | Path = DEFAULT_DATASET) -> List[Body]:
	return build_bodies(load_bodies(path))
