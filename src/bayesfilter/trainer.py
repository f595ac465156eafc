"""Training and evaluation workflow over labelled samples."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Hashable, Iterable
from dataclasses import dataclass

from .classifiers.base import Classifier
from .corpus import Sample
from .dataset import DataSet
from .trainingset import TrainingSet
from .types import ClassProbabilities, StringClass, TokenCount

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Misprediction:
    """A sample the classifier assigned to the wrong class."""

    sample: Sample
    predicted: str
    probability: float


@dataclass(frozen=True)
class EvaluationResult:
    """Outcome of classifying a labelled set of samples."""

    correct: int
    wrong: int
    skipped: int
    mispredictions: tuple[Misprediction, ...]

    @property
    def total(self) -> int:
        return self.correct + self.wrong

    @property
    def accuracy(self) -> float:
        return self.correct / self.total if self.total else 0.0


class Trainer:
    """Feeds labelled samples into a training set, one data set per label."""

    def __init__(
        self,
        labels: Iterable[str] = (),
        *,
        training_set: TrainingSet | None = None,
    ) -> None:
        self.training_set = training_set if training_set is not None else TrainingSet()
        self._classes: dict[str, StringClass] = {}
        self._message_counts: Counter[str] = Counter()
        self._stop_words: set[Hashable] = set()
        self._default_prior: float | None = None
        for label in labels:
            self._ensure_class(label)

    @property
    def classes(self) -> dict[str, StringClass]:
        return dict(self._classes)

    @property
    def message_counts(self) -> dict[str, int]:
        return dict(self._message_counts)

    @property
    def stop_words(self) -> frozenset[Hashable]:
        return frozenset(self._stop_words)

    def data_set(self, label: str) -> DataSet:
        return self.training_set.get_set_for_class(self._ensure_class(label))

    def train_tokens(self, label: str, tokens: Iterable[Hashable]) -> None:
        """Add one training example given as a (class, token sequence) pair."""

        self.data_set(label).add_tokens(tokens)
        self._message_counts[label] += 1

    def train(self, samples: Iterable[Sample]) -> int:
        trained = 0
        for sample in samples:
            self.train_tokens(sample.label, sample.tokens())
            trained += 1
        LOGGER.info("Trained %s sample(s) across %s class(es)", trained, len(self._classes))
        return trained

    def eliminate_stop_words(self, count: int) -> list[TokenCount]:
        """Purge the ``count`` most frequent tokens (summed over all classes)."""

        if count <= 0:
            return []
        totals: Counter[Hashable] = Counter()
        for data_set in self.training_set:
            for entry in data_set.most_frequent(data_set.token_count):
                totals[entry.token] += entry.count
        stop_words = [TokenCount(token=token, count=n) for token, n in totals.most_common(count)]
        for data_set in self.training_set:
            data_set.purge_tokens(entry.token for entry in stop_words)
        self._stop_words.update(entry.token for entry in stop_words)
        LOGGER.info("Eliminated %s stop word(s)", len(stop_words))
        return stop_words

    def assign_class_probabilities(self, policy: str = "messages") -> None:
        """Set class priors after training.

        ``messages`` uses the share of training messages per class,
        ``automatic`` and ``equal`` delegate to
        :meth:`TrainingSet.set_class_probabilities`, ``none`` keeps the
        current priors.
        """

        if policy == "none":
            return
        if policy != "messages":
            self.training_set.set_class_probabilities(ClassProbabilities(policy))
            return
        total = sum(self._message_counts.values())
        if total == 0:
            LOGGER.warning("No training messages; keeping class priors.")
            return
        for label, cls in self._classes.items():
            cls.probability = self._message_counts[label] / total
            LOGGER.info("Base probability of '%s': %.2f%%", label, cls.probability * 100)

    def prepare(self, tokens: Iterable[Hashable]) -> list[Hashable]:
        """Drop stop words from a document."""

        return [token for token in tokens if token not in self._stop_words]

    def evaluate(self, samples: Iterable[Sample], classifier: Classifier) -> EvaluationResult:
        correct = wrong = skipped = 0
        mispredictions: list[Misprediction] = []
        for sample in samples:
            tokens = self.prepare(sample.tokens())
            best = classifier.classify(tokens) if tokens else None
            if best is None:
                skipped += 1
                continue
            if best.cls.name == sample.label:
                correct += 1
                continue
            wrong += 1
            mispredictions.append(
                Misprediction(sample=sample, predicted=best.cls.name, probability=best.probability)
            )
        result = EvaluationResult(
            correct=correct,
            wrong=wrong,
            skipped=skipped,
            mispredictions=tuple(mispredictions),
        )
        LOGGER.info(
            "Evaluated %s sample(s): %s correct, %s wrong, %s skipped",
            result.total,
            correct,
            wrong,
            skipped,
        )
        return result

    def _ensure_class(self, label: str) -> StringClass:
        cls = self._classes.get(label)
        if cls is not None:
            return cls
        cls = StringClass(label)
        untouched = all(
            existing.probability == self._default_prior
            for existing in self.training_set.classes
        )
        self.training_set.create_data_set(cls)
        self._classes[label] = cls
        if untouched:
            # priors nobody assigned yet stay equal across all classes
            self.training_set.set_class_probabilities(ClassProbabilities.EQUAL_DISTRIBUTED)
            self._default_prior = cls.probability
        else:
            LOGGER.warning(
                "Class '%s' starts with prior 0; existing priors are kept until "
                "class probabilities are assigned again",
                label,
            )
        return cls


__all__ = ["EvaluationResult", "Misprediction", "Trainer"]
