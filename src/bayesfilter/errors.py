"""Exception hierarchy shared by the classifier core and its adapters."""

from __future__ import annotations

import math

PROBABILITY_TOLERANCE = 1e-9


class BayesFilterError(Exception):
    """Base class for all bayesfilter errors."""


class RangeError(BayesFilterError, ValueError):
    """Raised when a numeric argument lies outside its permitted range."""


class DuplicateDataSetError(BayesFilterError, ValueError):
    """Raised when a second data set is registered for the same class."""


class UnknownClassError(BayesFilterError, KeyError):
    """Raised when no data set is registered for a requested class."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable.
        return str(self.args[0]) if self.args else ""


class UnsupportedOperationError(BayesFilterError, TypeError):
    """Raised when mutating a data set that cannot hold tokens."""


class ConfigError(BayesFilterError, ValueError):
    """Raised when configuration is invalid or missing."""


class CorpusError(BayesFilterError, ValueError):
    """Raised when a training corpus cannot be parsed."""


def require_non_negative(name: str, value: float) -> None:
    if math.isnan(value) or value < 0:
        raise RangeError(f"{name} must be greater than or equal to zero, got {value!r}.")


def require_finite(name: str, value: float) -> None:
    if not math.isfinite(value):
        raise RangeError(f"{name} must be a finite number, got {value!r}.")


def require_probability(name: str, value: float) -> None:
    # NaN marks the "no information" case and is passed through.
    if math.isnan(value):
        return
    if value < -PROBABILITY_TOLERANCE or value > 1.0 + PROBABILITY_TOLERANCE:
        raise RangeError(f"{name} must lie within [0, 1], got {value!r}.")


__all__ = [
    "BayesFilterError",
    "ConfigError",
    "CorpusError",
    "DuplicateDataSetError",
    "PROBABILITY_TOLERANCE",
    "RangeError",
    "UnknownClassError",
    "UnsupportedOperationError",
    "require_finite",
    "require_non_negative",
    "require_probability",
]
