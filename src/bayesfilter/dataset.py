"""Per-class token occurrence store with smoothed statistics."""

from __future__ import annotations

import heapq
import logging
from collections.abc import Callable, Hashable, Iterable, Iterator
from typing import Protocol, runtime_checkable

from .concurrency import AtomicCounter, ConcurrentCounterMap
from .errors import UnsupportedOperationError, require_non_negative
from .types import Class, TokenCount, TokenInformation, TokenStats

LOGGER = logging.getLogger(__name__)

DEFAULT_SMOOTHING_ALPHA = 0.0


class TrainingSetView(Protocol):
    """What a data set needs from the training set that owns it."""

    @property
    def occurrence_threshold(self) -> int: ...

    @property
    def percentage_threshold(self) -> float: ...

    @property
    def vocabulary_size(self) -> int: ...


@runtime_checkable
class DataSetAccessor(Protocol):
    """Read-only view of a data set used by the classifiers."""

    @property
    def cls(self) -> Class: ...

    @property
    def token_count(self) -> int: ...

    @property
    def set_size(self) -> int: ...

    def get_count(self, token: Hashable) -> int: ...

    def get_percentage(self, token: Hashable, alpha: float = DEFAULT_SMOOTHING_ALPHA) -> float: ...

    def get_stats(self, token: Hashable, alpha: float = DEFAULT_SMOOTHING_ALPHA) -> TokenStats: ...

    def __iter__(self) -> Iterator[TokenCount]: ...


class DataSet:
    """Occurrence counts of every token seen for a single class.

    Counts live in a :class:`ConcurrentCounterMap` and the aggregate
    ``set_size`` in a separate :class:`AtomicCounter`. Several training threads
    may add, remove and purge tokens on the same data set without losing
    updates, but a reader can briefly see ``set_size`` out of step with the
    map while a mutation is in flight.

    Thresholds and the vocabulary size used for smoothing come from the
    owning training set. A data set that has not been registered yet uses
    zero thresholds and its own distinct-token count as vocabulary.
    """

    def __init__(self, cls: Class, training_set: TrainingSetView | None = None) -> None:
        if cls is None:
            raise ValueError("class cannot be None")
        self._cls = cls
        self._training_set = training_set
        self._counts = ConcurrentCounterMap()
        self._set_size = AtomicCounter()

    @property
    def cls(self) -> Class:
        return self._cls

    @property
    def training_set(self) -> TrainingSetView | None:
        return self._training_set

    @property
    def token_count(self) -> int:
        """Number of distinct tokens with a non-zero count."""
        return len(self._counts)

    @property
    def set_size(self) -> int:
        """Sum of all token counts, including repetitions."""
        return self._set_size.value

    @property
    def occurrence_threshold(self) -> int:
        if self._training_set is None:
            return 0
        return self._training_set.occurrence_threshold

    @property
    def percentage_threshold(self) -> float:
        if self._training_set is None:
            return 0.0
        return self._training_set.percentage_threshold

    @property
    def vocabulary_size(self) -> int:
        if self._training_set is None:
            return self.token_count
        return self._training_set.vocabulary_size

    def attach(self, training_set: TrainingSetView) -> None:
        """Link the data set to the training set that registered it."""

        if self._training_set is not None and self._training_set is not training_set:
            raise ValueError(
                f"Data set for class '{self._cls.name}' already belongs to a training set."
            )
        self._training_set = training_set

    # -- statistics --------------------------------------------------------

    def get_count(self, token: Hashable) -> int:
        """Return the occurrence count, or 0 when at or below the occurrence threshold."""

        count = self._counts.try_get(token)
        if count is None or count <= self.occurrence_threshold:
            return 0
        return count

    def get_percentage(self, token: Hashable, alpha: float = DEFAULT_SMOOTHING_ALPHA) -> float:
        """Return the additively smoothed share of ``token`` in this class."""

        return self.get_stats(token, alpha).probability

    def get_stats(self, token: Hashable, alpha: float = DEFAULT_SMOOTHING_ALPHA) -> TokenStats:
        """Return the smoothed percentage together with the thresholded count."""

        require_non_negative("Smoothing parameter alpha", alpha)
        count = self.get_count(token)
        if count > 0 and self._percentage(count, 0.0) <= self.percentage_threshold:
            count = 0
        return TokenStats(probability=self._percentage(count, alpha), occurrence=count)

    def token_information(
        self, token: Hashable, alpha: float = DEFAULT_SMOOTHING_ALPHA
    ) -> TokenInformation:
        """Raw count and smoothed percentage, ignoring both thresholds."""

        require_non_negative("Smoothing parameter alpha", alpha)
        count = self._counts.try_get(token)
        if count is None:
            return TokenInformation(token=token, count=0, percentage=0.0)
        return TokenInformation(token=token, count=count, percentage=self._percentage(count, alpha))

    def laplace_smoothing(
        self, token_count: int, total_count: int, alpha: float | None = None
    ) -> float:
        a = DEFAULT_SMOOTHING_ALPHA if alpha is None else alpha
        require_non_negative("Smoothing parameter alpha", a)
        denominator = total_count + a * self.vocabulary_size
        if denominator <= 0:
            return 0.0
        return (token_count + a) / denominator

    def _percentage(self, count: int, alpha: float) -> float:
        return self.laplace_smoothing(count, self.set_size, alpha)

    # -- mutation ----------------------------------------------------------

    def add_token(self, token: Hashable, *additional: Hashable) -> None:
        self.add_tokens((token, *additional))

    def add_tokens(self, tokens: Iterable[Hashable]) -> None:
        for token in tokens:
            self._counts.add_or_increment(token)
            self._set_size.increment()

    def remove_token_once(self, token: Hashable, *additional: Hashable) -> None:
        self.remove_tokens_once((token, *additional))

    def remove_tokens_once(self, tokens: Iterable[Hashable]) -> None:
        for token in tokens:
            self._remove_single(token)

    def purge_token(self, token: Hashable, *additional: Hashable) -> None:
        self.purge_tokens((token, *additional))

    def purge_tokens(self, tokens: Iterable[Hashable]) -> None:
        purged = 0
        for token in tokens:
            count = self._counts.try_remove(token)
            if count is None:
                continue
            self._set_size.decrement(count)
            purged += 1
        if purged:
            LOGGER.debug("Purged %s token(s) from data set '%s'", purged, self._cls.name)

    def purge_where(self, predicate: Callable[[TokenCount], bool]) -> None:
        """Purge every token whose current (token, count) snapshot matches."""

        candidates = [
            token
            for token, count in self._counts.snapshot()
            if predicate(TokenCount(token=token, count=count))
        ]
        self.purge_tokens(candidates)

    def clear(self) -> None:
        self._counts.clear()
        self._set_size.reset()

    def _remove_single(self, token: Hashable) -> None:
        while True:
            count = self._counts.try_get(token)
            if count is None or count <= 0:
                return
            new_value = count - 1
            if not self._counts.try_update(token, new_value, expected=count):
                continue
            self._set_size.decrement()
            if new_value == 0:
                # another writer may have re-incremented it meanwhile
                self._counts.remove_if_equal(token, 0)
            return

    # -- enumeration -------------------------------------------------------

    def most_frequent(self, n: int) -> list[TokenCount]:
        """Return the ``n`` tokens with the highest raw counts."""

        top = heapq.nlargest(n, self._counts.snapshot(), key=lambda item: item[1])
        return [TokenCount(token=token, count=count) for token, count in top]

    def __iter__(self) -> Iterator[TokenCount]:
        threshold = self.occurrence_threshold
        for token, count in self._counts.snapshot():
            yield TokenCount(token=token, count=0 if count <= threshold else count)

    def __contains__(self, token: object) -> bool:
        return token in self._counts

    def __len__(self) -> int:
        return self.token_count

    def __repr__(self) -> str:
        return (
            f"DataSet(cls={self._cls.name!r}, prior={self._cls.probability!r}, "
            f"tokens={self.token_count}, size={self.set_size})"
        )


class EmptyDataSet:
    """Placeholder for a class without registered data; always reports zero."""

    def __init__(self, cls: Class) -> None:
        if cls is None:
            raise ValueError("class cannot be None")
        self._cls = cls

    @property
    def cls(self) -> Class:
        return self._cls

    @property
    def token_count(self) -> int:
        return 0

    @property
    def set_size(self) -> int:
        return 0

    def get_count(self, token: Hashable) -> int:
        return 0

    def get_percentage(self, token: Hashable, alpha: float = DEFAULT_SMOOTHING_ALPHA) -> float:
        require_non_negative("Smoothing parameter alpha", alpha)
        return 0.0

    def get_stats(self, token: Hashable, alpha: float = DEFAULT_SMOOTHING_ALPHA) -> TokenStats:
        require_non_negative("Smoothing parameter alpha", alpha)
        return TokenStats(probability=0.0, occurrence=0)

    def token_information(
        self, token: Hashable, alpha: float = DEFAULT_SMOOTHING_ALPHA
    ) -> TokenInformation:
        return TokenInformation(token=token, count=0, percentage=0.0)

    def add_token(self, token: Hashable, *additional: Hashable) -> None:
        raise UnsupportedOperationError("Adding data to the empty data set is not allowed.")

    def add_tokens(self, tokens: Iterable[Hashable]) -> None:
        raise UnsupportedOperationError("Adding data to the empty data set is not allowed.")

    # Nothing to remove; these are no-ops.
    def remove_token_once(self, token: Hashable, *additional: Hashable) -> None:
        return None

    def remove_tokens_once(self, tokens: Iterable[Hashable]) -> None:
        return None

    def purge_token(self, token: Hashable, *additional: Hashable) -> None:
        return None

    def purge_tokens(self, tokens: Iterable[Hashable]) -> None:
        return None

    def __iter__(self) -> Iterator[TokenCount]:
        return iter(())

    def __len__(self) -> int:
        return 0

    def __repr__(self) -> str:
        return f"EmptyDataSet(cls={self._cls.name!r})"


__all__ = [
    "DEFAULT_SMOOTHING_ALPHA",
    "DataSet",
    "DataSetAccessor",
    "EmptyDataSet",
    "TrainingSetView",
]
