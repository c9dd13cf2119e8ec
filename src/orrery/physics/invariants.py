"""Validation boundary shared by the element constructors and the numeric core.

Every check either passes silently or logs the violation and raises. The error
class tells the caller which side of the boundary failed: bad input data
(ConfigurationError) or a numeric step that went wrong mid-tick
(NumericalDivergenceError).
"""
from __future__ import annotations
import logging
import math
import numbers
from typing import Any, Dict, Optional, Type

logger = logging.getLogger(__name__)


class OrreryError(Exception):
	def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
		self.context: Dict[str, Any] = dict(context or {})
		detail = f" ({', '.join(f'{k}={v!r}' for k, v in self.context.items())})" if self.context else ""
		super().__init__(f"{message}{detail}")
		self.message = message


class ConfigurationError(OrreryError, ValueError):
	"""Invalid elements, bodies, scenario data or calendar input."""


class NumericalDivergenceError(OrreryError, ArithmeticError):
	"""A numeric step produced a non-finite or unconverged value."""


class HierarchyError(OrreryError):
	"""The body hierarchy was used out of order."""


def invariant(
	condition: Any,
	message: str,
	context: Optional[Dict[str, Any]] = None,
	error: Type[OrreryError] = ConfigurationError,
) -> None:
	if condition:
		return
	logger.error("invariant violated: %s %s", message, context or {})
	raise error(message, context)


def assert_finite(value: float, name: str, error: Type[OrreryError] = NumericalDivergenceError) -> float:
	invariant(
		isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(value),
		f"{name} must be finite",
		{"actual": value},
		error,
	)
	return float(value)


def assert_positive(value: float, name: str, error: Type[OrreryError] = ConfigurationError) -> float:
	v = assert_finite(value, name, error)
	invariant(v > 0.0, f"{name} must be positive", {"actual": v}, error)
	return v


def assert_non_negative(value: float, name: str, error: Type[OrreryError] = ConfigurationError) -> float:
	v = assert_finite(value, name, error)
	invariant(v >= 0.0, f"{name} must be non-negative", {"actual": v}, error)
	return v


def assert_bounds(value: float, lo: float, hi: float, name: str, error: Type[OrreryError] = ConfigurationError) -> float:
	v = assert_finite(value, name, error)
	invariant(lo <= v <= hi, f"{name} must be between {lo} and {hi}", {"actual": v}, error)
	return v


def assert_open_bounds(value: float, lo: float, hi: float, name: str, error: Type[OrreryError] = ConfigurationError) -> float:
	v = assert_finite(value, name, error)
	invariant(lo < v < hi, f"{name} must be strictly between {lo} and {hi}", {"actual": v}, error)
	return v
