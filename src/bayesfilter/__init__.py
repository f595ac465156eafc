"""Naive Bayes and Complement Naive Bayes text classification."""

from importlib import metadata

from .classifiers import ComplementNaiveClassifier, NaiveClassifier
from .correction import BetaCorrection, NoCorrection, ProbabilityCorrection
from .dataset import DataSet, EmptyDataSet
from .errors import (
    BayesFilterError,
    DuplicateDataSetError,
    RangeError,
    UnknownClassError,
    UnsupportedOperationError,
)
from .trainingset import TrainingSet
from .types import (
    ClassProbabilities,
    CombinedConditionalProbability,
    ConditionalProbability,
    StringClass,
    StringToken,
    TokenStats,
)


def _discover_version() -> str:
    """Return the installed package version, falling back to dev marker."""
    try:
        return metadata.version("bayesfilter")
    except metadata.PackageNotFoundError:  # pragma: no cover - occurs in editable installs
        return "0.0.0"


__all__ = [
    "BayesFilterError",
    "BetaCorrection",
    "ClassProbabilities",
    "CombinedConditionalProbability",
    "ComplementNaiveClassifier",
    "ConditionalProbability",
    "DataSet",
    "DuplicateDataSetError",
    "EmptyDataSet",
    "NaiveClassifier",
    "NoCorrection",
    "ProbabilityCorrection",
    "RangeError",
    "StringClass",
    "StringToken",
    "TokenStats",
    "TrainingSet",
    "UnknownClassError",
    "UnsupportedOperationError",
    "__version__",
]
__version__ = _discover_version()
