"""Classifier implementations and infrastructure."""

from .base import Classifier, ClassifierSettings
from .combine import combine_log_odds
from .complement import ComplementNaiveClassifier
from .naive import NaiveClassifier

__all__ = [
    "Classifier",
    "ClassifierSettings",
    "ComplementNaiveClassifier",
    "NaiveClassifier",
    "combine_log_odds",
]
