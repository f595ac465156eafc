"""Core value types shared by data sets, training sets and classifiers."""

from __future__ import annotations

import math
from collections.abc import Hashable
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, runtime_checkable

from .errors import RangeError, require_probability


@runtime_checkable
class Token(Protocol):
    """Opaque unit of vocabulary; only equality and hashing are required."""

    def __eq__(self, other: object) -> bool: ...

    def __hash__(self) -> int: ...


@runtime_checkable
class Class(Protocol):
    """A mutually exclusive category carrying a mutable prior probability."""

    @property
    def name(self) -> str: ...

    probability: float


@dataclass(frozen=True)
class StringToken:
    """Token backed by a plain string."""

    value: str

    def __str__(self) -> str:
        return self.value


class StringClass:
    """Class identified by its name; the prior may change after registration."""

    __slots__ = ("_name", "_probability")

    def __init__(self, name: str, probability: float = 0.0) -> None:
        if not name:
            raise ValueError("class name cannot be empty")
        self._name = str(name)
        self._probability = 0.0
        self.probability = probability

    @property
    def name(self) -> str:
        return self._name

    @property
    def probability(self) -> float:
        return self._probability

    @probability.setter
    def probability(self, value: float) -> None:
        value = float(value)
        if not math.isfinite(value):
            raise RangeError(f"Class probability must be finite, got {value!r}.")
        require_probability("Class probability", value)
        self._probability = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StringClass):
            return NotImplemented
        return self._name == other._name

    def __hash__(self) -> int:
        return hash(self._name)

    def __repr__(self) -> str:
        return f"StringClass({self._name!r}, probability={self._probability!r})"

    def __str__(self) -> str:
        return self._name


class ClassProbabilities(str, Enum):
    """Policies for assigning class priors after training."""

    AUTOMATIC = "automatic"
    EQUAL_DISTRIBUTED = "equal"


@dataclass(frozen=True)
class TokenStats:
    """Smoothed percentage and thresholded occurrence of a token in one class."""

    probability: float
    occurrence: int


@dataclass(frozen=True)
class TokenCount:
    """Snapshot of a single token entry."""

    token: Hashable
    count: int

    def __post_init__(self) -> None:
        if self.count < 0:
            raise RangeError(f"Count must be positive or zero, got {self.count}.")


@dataclass(frozen=True)
class TokenInformation:
    """Raw count and smoothed percentage of a token."""

    token: Hashable
    count: int
    percentage: float

    def __post_init__(self) -> None:
        if self.count < 0:
            raise RangeError(f"Count must be positive or zero, got {self.count}.")
        if self.percentage < 0:
            raise RangeError(f"Percentage must be positive or zero, got {self.percentage}.")


@dataclass(frozen=True)
class ConditionalProbability:
    """P(class | token) after Bayes normalisation and correction."""

    cls: Class
    token: Hashable
    probability: float
    occurrence: int

    def __post_init__(self) -> None:
        require_probability("Probability", self.probability)
        if self.occurrence < 0:
            raise RangeError(f"Occurrence must be positive or zero, got {self.occurrence}.")

    def __str__(self) -> str:
        return f"P({self.cls.name}|{self.token})={self.probability:.2%}"


@dataclass(frozen=True)
class CombinedConditionalProbability:
    """P(class | document) combined from per-token evidence."""

    cls: Class
    probability: float
    token_probabilities: tuple[ConditionalProbability, ...] = field(default=())

    def __post_init__(self) -> None:
        require_probability("Probability", self.probability)
        object.__setattr__(self, "token_probabilities", tuple(self.token_probabilities))

    def __str__(self) -> str:
        return (
            f"P({self.cls.name}|{len(self.token_probabilities)} tokens)"
            f"={self.probability:.2%}"
        )


__all__ = [
    "Class",
    "ClassProbabilities",
    "CombinedConditionalProbability",
    "ConditionalProbability",
    "StringClass",
    "StringToken",
    "Token",
    "TokenCount",
    "TokenInformation",
    "TokenStats",
]
