"""Naive Bayes classifier assuming conditionally independent tokens."""

from __future__ import annotations

import logging
import math
from collections.abc import Hashable, Iterable

from ..dataset import DataSetAccessor, EmptyDataSet
from ..types import Class, CombinedConditionalProbability, ConditionalProbability
from .base import ClassifierSettings
from .combine import combine_log_odds

LOGGER = logging.getLogger(__name__)


class NaiveClassifier(ClassifierSettings):
    """Applies Bayes' theorem directly to per-class token percentages.

    For a token ``t`` and class ``c``::

        P(c | t) = P(t | c) P(c) / sum_k P(t | k) P(k)

    where ``P(t | c)`` is the smoothed percentage of ``t`` in the data set of
    ``c``. Document probabilities combine the per-token values with
    :func:`~bayesfilter.classifiers.combine.combine_log_odds`.
    """

    def calculate_probability(
        self, cls: Class, token: Hashable, alpha: float | None = None
    ) -> float:
        """Return P(cls | token).

        If no class has seen the token and smoothing is disabled the
        probability is undefined and NaN is returned; callers treat it as
        "no information".
        """

        smoothing_alpha = self._alpha(alpha)
        occurrence_threshold = self.occurrence_threshold
        own_set, remaining_sets = self._split_data_sets(cls)

        own_probability = own_set.get_percentage(token, smoothing_alpha) * cls.probability
        remaining = self._joint_probabilities(token, remaining_sets, smoothing_alpha)
        remaining_probability = sum(joint for _data_set, joint, _count in remaining)
        total_probability = own_probability + remaining_probability
        if total_probability > 0:
            probability = own_probability / total_probability
        else:
            LOGGER.debug("Token %r has zero total probability; result is undefined", token)
            probability = math.nan

        return self.probability_correction.correct_probability(
            cls, own_set, token, probability, occurrence_threshold
        )

    def calculate_probabilities(
        self, token: Hashable, alpha: float | None = None
    ) -> list[ConditionalProbability]:
        smoothing_alpha = self._alpha(alpha)
        correction = self.probability_correction
        threshold = self.occurrence_threshold

        joint = self._joint_probabilities(token, self._training_set, smoothing_alpha)
        total_probability = sum(probability for _data_set, probability, _count in joint)

        results: list[ConditionalProbability] = []
        for data_set, probability, count in joint:
            conditional = probability / total_probability if total_probability > 0 else 0.0
            corrected = correction.correct_probability(
                data_set.cls, data_set, token, conditional, threshold
            )
            results.append(
                ConditionalProbability(
                    cls=data_set.cls, token=token, probability=corrected, occurrence=count
                )
            )
        return results

    def calculate_document_probabilities(
        self, tokens: Iterable[Hashable], alpha: float | None = None
    ) -> list[CombinedConditionalProbability]:
        smoothing_alpha = self._alpha(alpha)
        groups: dict[Class, list[ConditionalProbability]] = {}
        for token in tokens:
            for conditional in self.calculate_probabilities(token, smoothing_alpha):
                groups.setdefault(conditional.cls, []).append(conditional)

        norm_length = self.norm_length
        return [
            CombinedConditionalProbability(
                cls=cls,
                probability=combine_log_odds(
                    [cp.probability for cp in conditionals],
                    norm_length=norm_length,
                    document_length=len(conditionals),
                ),
                token_probabilities=tuple(conditionals),
            )
            for cls, conditionals in groups.items()
        ]

    def _joint_probabilities(
        self,
        token: Hashable,
        data_sets: Iterable[DataSetAccessor],
        alpha: float,
    ) -> list[tuple[DataSetAccessor, float, int]]:
        """Return ``(data_set, P(token | class) * P(class), occurrence)`` per set."""

        joint: list[tuple[DataSetAccessor, float, int]] = []
        for data_set in data_sets:
            stats = data_set.get_stats(token, alpha)
            joint.append((data_set, stats.probability * data_set.cls.probability, stats.occurrence))
        return joint

    def _split_data_sets(self, cls: Class) -> tuple[DataSetAccessor, list[DataSetAccessor]]:
        """Separate the data set of ``cls`` from all other data sets.

        A class without a registered data set gets an :class:`EmptyDataSet`.
        """

        own: DataSetAccessor | None = None
        remaining: list[DataSetAccessor] = []
        for data_set in self._training_set:
            if data_set.cls == cls:
                own = data_set
            else:
                remaining.append(data_set)
        return (own if own is not None else EmptyDataSet(cls)), remaining


__all__ = ["NaiveClassifier"]
