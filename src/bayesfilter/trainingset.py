"""Registry of per-class data sets and the aggregates derived from them."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from collections.abc import Iterable, Iterator

from .dataset import DataSet
from .errors import (
    DuplicateDataSetError,
    RangeError,
    UnknownClassError,
    require_finite,
    require_non_negative,
    require_probability,
)
from .types import Class, ClassProbabilities

LOGGER = logging.getLogger(__name__)


class TrainingSet:
    """Maps every class to exactly one data set.

    The training set is the single source of truth for the occurrence and
    percentage thresholds; member data sets read them from here.
    """

    def __init__(self, *data_sets: DataSet) -> None:
        self._data_sets: OrderedDict[Class, DataSet] = OrderedDict()
        self._lock = threading.Lock()
        self._occurrence_threshold = 0
        self._percentage_threshold = 0.0
        if data_sets:
            self.add_all(data_sets)

    @property
    def occurrence_threshold(self) -> int:
        return self._occurrence_threshold

    @occurrence_threshold.setter
    def occurrence_threshold(self, value: int) -> None:
        if isinstance(value, bool) or not float(value).is_integer():
            raise RangeError(f"Occurrence threshold must be an integer, got {value!r}.")
        require_non_negative("Occurrence threshold", value)
        self._occurrence_threshold = int(value)

    @property
    def percentage_threshold(self) -> float:
        return self._percentage_threshold

    @percentage_threshold.setter
    def percentage_threshold(self, value: float) -> None:
        require_non_negative("Percentage threshold", value)
        require_finite("Percentage threshold", value)
        self._percentage_threshold = float(value)

    @property
    def vocabulary_size(self) -> int:
        """Sum of distinct-token counts over all data sets, recomputed on every access."""
        return sum(data_set.token_count for data_set in self._values())

    @property
    def classes(self) -> list[Class]:
        return [data_set.cls for data_set in self._values()]

    def create_data_set(self, cls: Class) -> DataSet:
        data_set = DataSet(cls, self)
        self.add(data_set)
        return data_set

    def add(self, data_set: DataSet, *additional: DataSet) -> None:
        self.add_all((data_set, *additional))

    def add_all(self, data_sets: Iterable[DataSet]) -> None:
        """Register data sets in order.

        Entries preceding a duplicate stay registered; there is no rollback.
        """

        for data_set in data_sets:
            self._add_single(data_set)

    def get_set_for_class(self, cls: Class) -> DataSet:
        try:
            return self._data_sets[cls]
        except KeyError as exc:
            raise UnknownClassError(
                f"No data set was registered for class '{cls.name}'."
            ) from exc

    def set_class_probabilities(
        self, mode: ClassProbabilities, factor: float = 1.0
    ) -> None:
        """Assign class priors from the current training state.

        Every prior is computed before any is assigned; if one falls outside
        [0, 1] a ``RangeError`` is raised and all priors stay unchanged.
        """

        require_non_negative("Factor", factor)
        require_finite("Factor", factor)
        data_sets = self._values()
        if not data_sets:
            return
        mode = ClassProbabilities(mode)
        if mode is ClassProbabilities.AUTOMATIC:
            total = sum(data_set.token_count for data_set in data_sets)
            if total == 0:
                LOGGER.warning("Cannot derive class priors from empty data sets; keeping them.")
                return
            priors = [data_set.token_count / total * factor for data_set in data_sets]
        else:
            priors = [factor / len(data_sets)] * len(data_sets)
        for data_set, prior in zip(data_sets, priors):
            require_probability(f"Prior of class '{data_set.cls.name}'", prior)
        for data_set, prior in zip(data_sets, priors):
            data_set.cls.probability = prior
        LOGGER.debug(
            "Class probabilities (%s): %s",
            mode.value,
            ", ".join(f"{ds.cls.name}={ds.cls.probability:.4f}" for ds in data_sets),
        )

    def clear_tokens(self) -> None:
        for data_set in self._values():
            data_set.clear()

    def _add_single(self, data_set: DataSet) -> None:
        with self._lock:
            if data_set.cls in self._data_sets:
                raise DuplicateDataSetError(
                    f"A data set for class '{data_set.cls.name}' was already registered."
                )
            data_set.attach(self)
            self._data_sets[data_set.cls] = data_set

    def _values(self) -> list[DataSet]:
        with self._lock:
            return list(self._data_sets.values())

    def __getitem__(self, cls: Class) -> DataSet:
        return self.get_set_for_class(cls)

    def __contains__(self, cls: object) -> bool:
        return cls in self._data_sets

    def __iter__(self) -> Iterator[DataSet]:
        return iter(self._values())

    def __len__(self) -> int:
        return len(self._data_sets)


__all__ = ["TrainingSet"]
