"""Post-hoc corrections applied to class-given-token probabilities."""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any, Protocol, runtime_checkable

from .dataset import DataSetAccessor
from .errors import RangeError, require_finite
from .types import Class

DEFAULT_BACKGROUND_STRENGTH = 3.0


@runtime_checkable
class ProbabilityCorrection(Protocol):
    """Adjusts P(class | token) once it has been computed."""

    def correct_probability(
        self,
        cls: Class,
        data_set: DataSetAccessor,
        token: Hashable,
        probability: float,
        occurrence_threshold: int,
    ) -> float:
        """Return the corrected probability."""


class NoCorrection:
    """Identity correction."""

    def correct_probability(
        self,
        cls: Class,
        data_set: DataSetAccessor,
        token: Hashable,
        probability: float,
        occurrence_threshold: int,
    ) -> float:
        return probability

    def __repr__(self) -> str:
        return "NoCorrection()"


class BetaCorrection:
    """Shrinks rarely seen tokens towards the class prior.

    ``corrected = (s * prior + n * p) / (s + n)`` where ``s`` is the strength
    of the background information and ``n`` the number of times the token
    was seen in the class. With few observations the result stays close to
    the prior; with many it converges to the computed probability.
    """

    def __init__(self, background_strength: float = DEFAULT_BACKGROUND_STRENGTH) -> None:
        self._background_strength = DEFAULT_BACKGROUND_STRENGTH
        self.background_strength = background_strength

    @property
    def background_strength(self) -> float:
        return self._background_strength

    @background_strength.setter
    def background_strength(self, value: float) -> None:
        require_finite("Background information strength", value)
        if value <= 0:
            raise RangeError(
                f"Background information strength must be greater than zero, got {value!r}."
            )
        self._background_strength = float(value)

    def correct_probability(
        self,
        cls: Class,
        data_set: DataSetAccessor,
        token: Hashable,
        probability: float,
        occurrence_threshold: int,
    ) -> float:
        s = self._background_strength
        n = data_set.get_count(token)
        if n <= occurrence_threshold:
            n = 0
        return (s * cls.probability + n * probability) / (s + n)

    def __repr__(self) -> str:
        return f"BetaCorrection(background_strength={self._background_strength!r})"


NO_CORRECTION = NoCorrection()

_CORRECTIONS: dict[str, type] = {
    "none": NoCorrection,
    "beta": BetaCorrection,
}


def correction_from_name(name: str, **options: Any) -> ProbabilityCorrection:
    """Instantiate a correction by its configuration name."""

    key = name.strip().lower()
    try:
        factory = _CORRECTIONS[key]
    except KeyError as exc:
        known = ", ".join(sorted(_CORRECTIONS))
        raise ValueError(
            f"Unknown probability correction '{name}' (expected one of: {known})."
        ) from exc
    if factory is NoCorrection:
        if options:
            raise ValueError("The 'none' correction takes no options.")
        return NO_CORRECTION
    return factory(**options)


__all__ = [
    "BetaCorrection",
    "DEFAULT_BACKGROUND_STRENGTH",
    "NO_CORRECTION",
    "NoCorrection",
    "ProbabilityCorrection",
    "correction_from_name",
]
