"""Classifier protocol and the settings shared by all implementations."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Collection, Hashable
from typing import Protocol, runtime_checkable

from ..correction import NO_CORRECTION, ProbabilityCorrection
from ..errors import require_finite, require_non_negative
from ..trainingset import TrainingSet
from ..types import Class, CombinedConditionalProbability, ConditionalProbability

DEFAULT_SMOOTHING_ALPHA = 0.01
DEFAULT_NORM_LENGTH = 1.0


@runtime_checkable
class Classifier(Protocol):
    """Common interface shared by all classifiers."""

    def calculate_probability(
        self, cls: Class, token: Hashable, alpha: float | None = None
    ) -> float:
        """Return P(cls | token)."""

    def calculate_probabilities(
        self, token: Hashable, alpha: float | None = None
    ) -> list[ConditionalProbability]:
        """Return P(class | token) for every registered class."""

    def calculate_document_probabilities(
        self, tokens: Collection[Hashable], alpha: float | None = None
    ) -> list[CombinedConditionalProbability]:
        """Return P(class | document) for every registered class."""

    def classify(
        self, tokens: Collection[Hashable], alpha: float | None = None
    ) -> CombinedConditionalProbability | None:
        """Return the most probable class for a document, or None if it is empty."""


class ClassifierSettings(ABC):
    """Configuration surface common to the naive and complement classifiers."""

    def __init__(
        self,
        training_set: TrainingSet,
        *,
        smoothing_alpha: float = DEFAULT_SMOOTHING_ALPHA,
        norm_length: float = DEFAULT_NORM_LENGTH,
        probability_correction: ProbabilityCorrection = NO_CORRECTION,
    ) -> None:
        if training_set is None:
            raise ValueError("training_set cannot be None")
        self._training_set = training_set
        self._smoothing_alpha = DEFAULT_SMOOTHING_ALPHA
        self._norm_length = DEFAULT_NORM_LENGTH
        self.smoothing_alpha = smoothing_alpha
        self.norm_length = norm_length
        self.probability_correction = probability_correction

    @property
    def training_set(self) -> TrainingSet:
        return self._training_set

    @property
    def smoothing_alpha(self) -> float:
        """Additive smoothing parameter; zero disables smoothing."""
        return self._smoothing_alpha

    @smoothing_alpha.setter
    def smoothing_alpha(self, value: float) -> None:
        require_non_negative("Smoothing alpha", value)
        self._smoothing_alpha = float(value)

    @property
    def norm_length(self) -> float:
        """Reference document length; zero disables length normalisation."""
        return self._norm_length

    @norm_length.setter
    def norm_length(self, value: float) -> None:
        require_non_negative("Norm length", value)
        require_finite("Norm length", value)
        self._norm_length = float(value)

    @property
    def occurrence_threshold(self) -> int:
        return self._training_set.occurrence_threshold

    @occurrence_threshold.setter
    def occurrence_threshold(self, value: int) -> None:
        self._training_set.occurrence_threshold = value

    @property
    def percentage_threshold(self) -> float:
        return self._training_set.percentage_threshold

    @percentage_threshold.setter
    def percentage_threshold(self, value: float) -> None:
        self._training_set.percentage_threshold = value

    @property
    def probability_correction(self) -> ProbabilityCorrection:
        return self._probability_correction

    @probability_correction.setter
    def probability_correction(self, value: ProbabilityCorrection | None) -> None:
        self._probability_correction = NO_CORRECTION if value is None else value

    def _alpha(self, alpha: float | None) -> float:
        if alpha is None:
            return self._smoothing_alpha
        require_non_negative("Smoothing alpha", alpha)
        return float(alpha)

    @abstractmethod
    def calculate_document_probabilities(
        self, tokens: Collection[Hashable], alpha: float | None = None
    ) -> list[CombinedConditionalProbability]:
        """Return P(class | document) for every registered class."""

    def classify(
        self, tokens: Collection[Hashable], alpha: float | None = None
    ) -> CombinedConditionalProbability | None:
        results = self.calculate_document_probabilities(tokens, alpha)
        if not results:
            return None
        return max(results, key=_ranking_key)


def _ranking_key(result: CombinedConditionalProbability) -> float:
    # NaN never wins
    return -1.0 if math.isnan(result.probability) else result.probability


__all__ = [
    "Classifier",
    "ClassifierSettings",
    "DEFAULT_NORM_LENGTH",
    "DEFAULT_SMOOTHING_ALPHA",
]
