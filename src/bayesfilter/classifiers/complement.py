"""Complement Naive Bayes: estimates a class from the statistics of all other classes."""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable

import numpy as np

from ..types import Class, CombinedConditionalProbability, ConditionalProbability
from .base import ClassifierSettings
from .combine import combine_log_odds

LOGGER = logging.getLogger(__name__)


class ComplementNaiveClassifier(ClassifierSettings):
    """Complement Naive Bayes classifier.

    For each class ``c`` the likelihood of a token is approximated from the
    complement, i.e. every other class ``k``::

        P(t | c) ~ 1 - prod_{k != c} P(t | k)

    The product is accumulated in log space. This estimator helps when a
    class has little training data compared to the rest.
    """

    def calculate_probability(
        self, cls: Class, token: Hashable, alpha: float | None = None
    ) -> float:
        """Return P(cls | token); 0.0 when ``cls`` has no data set."""

        for conditional in self.calculate_probabilities(token, alpha):
            if conditional.cls == cls:
                return conditional.probability
        return 0.0

    def calculate_probabilities(
        self, token: Hashable, alpha: float | None = None
    ) -> list[ConditionalProbability]:
        correction = self.probability_correction
        threshold = self.occurrence_threshold

        joint = self._complement_probabilities(token, self._alpha(alpha))
        total_probability = sum(cp.probability for cp in joint)

        results: list[ConditionalProbability] = []
        for cp in joint:
            conditional = cp.probability / total_probability if total_probability > 0 else 0.0
            data_set = self._training_set.get_set_for_class(cp.cls)
            corrected = correction.correct_probability(
                cp.cls, data_set, token, conditional, threshold
            )
            results.append(
                ConditionalProbability(
                    cls=cp.cls, token=token, probability=corrected, occurrence=cp.occurrence
                )
            )
        return results

    def calculate_document_probabilities(
        self, tokens: Iterable[Hashable], alpha: float | None = None
    ) -> list[CombinedConditionalProbability]:
        document = list(tokens)
        smoothing_alpha = self._alpha(alpha)
        groups: dict[Class, list[ConditionalProbability]] = {}
        for token in document:
            for conditional in self.calculate_probabilities(token, smoothing_alpha):
                groups.setdefault(conditional.cls, []).append(conditional)

        norm_length = self.norm_length
        return [
            CombinedConditionalProbability(
                cls=cls,
                probability=combine_log_odds(
                    [cp.probability for cp in conditionals],
                    norm_length=norm_length,
                    document_length=len(document),
                ),
                token_probabilities=tuple(conditionals),
            )
            for cls, conditionals in groups.items()
        ]

    def _complement_probabilities(
        self, token: Hashable, alpha: float
    ) -> list[ConditionalProbability]:
        """Return ``P(token | class) * P(class)`` estimated from each complement."""

        data_sets = list(self._training_set)
        percentages = np.array(
            [data_set.get_stats(token, alpha).probability for data_set in data_sets],
            dtype=np.float64,
        )
        with np.errstate(divide="ignore"):
            logs = np.log(percentages)

        results: list[ConditionalProbability] = []
        for index, data_set in enumerate(data_sets):
            current = data_set.cls
            # sum over every class except the current one
            log_probability = float(np.sum(np.delete(logs, index)))
            likelihood = 1.0 - float(np.exp(log_probability))
            LOGGER.debug(
                "Complement likelihood of %r for class '%s': %s", token, current.name, likelihood
            )
            results.append(
                ConditionalProbability(
                    cls=current,
                    token=token,
                    probability=likelihood * current.probability,
                    occurrence=data_set.get_count(token),
                )
            )
        return results


__all__ = ["ComplementNaiveClassifier"]
