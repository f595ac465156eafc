from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler

import pytest

from bayesfilter.logging import ConsoleFormatter
from bayesfilter.trainingset import TrainingSet
from bayesfilter.types import StringClass, StringToken

SPAM_WORDS = ["rolex", "watches", "viagra", "prince", "money", "send", "xyzzy"]
HAM_WORDS = ["love", "flowers", "unicorn", "friendship", "money", "send", "send"]


@dataclass
class SpamHam:
    training_set: TrainingSet
    spam: StringClass
    ham: StringClass


@pytest.fixture
def spam_ham() -> SpamHam:
    """Two classes with seven tokens each and equal priors."""

    training_set = TrainingSet()
    spam = StringClass("spam", 0.5)
    ham = StringClass("ham", 0.5)
    training_set.create_data_set(spam).add_tokens(StringToken(word) for word in SPAM_WORDS)
    training_set.create_data_set(ham).add_tokens(StringToken(word) for word in HAM_WORDS)
    return SpamHam(training_set=training_set, spam=spam, ham=ham)


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Drop handlers installed by configure_logging during a test."""

    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if isinstance(handler, RotatingFileHandler) or isinstance(
            handler.formatter, ConsoleFormatter
        ):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
