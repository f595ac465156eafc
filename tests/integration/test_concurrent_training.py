from __future__ import annotations

import pytest

from bayesfilter.classifiers import NaiveClassifier
from bayesfilter.corpus import tokenize
from bayesfilter.trainer import Trainer
from bayesfilter.trainingset import TrainingSet
from bayesfilter.types import StringClass, StringToken
from tests.integration.conftest import CORPUS_LINES

WORKERS = 8
ROUNDS = 250


def test_parallel_additions_are_not_lost(thread_gate) -> None:
    training_set = TrainingSet()
    data_set = training_set.create_data_set(StringClass("spam", 1.0))
    tokens = [StringToken(f"t{index}") for index in range(10)]
    gate = thread_gate(WORKERS)

    def add() -> None:
        for _ in range(ROUNDS):
            data_set.add_tokens(tokens)

    for _ in range(WORKERS):
        gate.spawn(add)
    gate.join()

    assert data_set.set_size == WORKERS * ROUNDS * len(tokens)
    assert data_set.token_count == len(tokens)
    assert all(data_set.get_count(token) == WORKERS * ROUNDS for token in tokens)


def test_parallel_add_and_remove_settle_consistently(thread_gate) -> None:
    data_set = TrainingSet().create_data_set(StringClass("ham", 1.0))
    token = StringToken("shared")
    data_set.add_tokens([token] * (WORKERS * ROUNDS))
    gate = thread_gate(WORKERS * 2)

    def add() -> None:
        for _ in range(ROUNDS):
            data_set.add_token(token)

    def remove() -> None:
        for _ in range(ROUNDS):
            data_set.remove_token_once(token)

    for _ in range(WORKERS):
        gate.spawn(add)
        gate.spawn(remove)
    gate.join()

    assert data_set.get_count(token) == WORKERS * ROUNDS
    assert data_set.set_size == WORKERS * ROUNDS


def test_removals_never_drive_counts_negative(thread_gate) -> None:
    data_set = TrainingSet().create_data_set(StringClass("ham", 1.0))
    token = StringToken("scarce")
    data_set.add_tokens([token] * ROUNDS)
    gate = thread_gate(WORKERS)

    def remove() -> None:
        for _ in range(ROUNDS):
            data_set.remove_token_once(token)

    for _ in range(WORKERS):
        gate.spawn(remove)
    gate.join()

    assert data_set.get_count(token) == 0
    assert token not in data_set
    assert data_set.set_size == 0


def test_classification_during_training_stays_bounded(thread_gate) -> None:
    trainer = Trainer(["ham", "spam"])
    classifier = NaiveClassifier(trainer.training_set, smoothing_alpha=1.0)
    document = tokenize("free lunch meeting now")
    observed: list[float] = []
    gate = thread_gate(WORKERS + 1)

    def train() -> None:
        for label, text in CORPUS_LINES * 20:
            trainer.data_set(label).add_tokens(tokenize(text))

    def classify() -> None:
        for _ in range(200):
            for result in classifier.calculate_document_probabilities(document):
                observed.append(result.probability)

    for _ in range(WORKERS):
        gate.spawn(train)
    gate.spawn(classify)
    gate.join()

    assert observed
    assert all(0.0 <= value <= 1.0 for value in observed)
    expected = sum(len(tokenize(text)) for _, text in CORPUS_LINES) * 20 * WORKERS
    assert sum(data_set.set_size for data_set in trainer.training_set) == expected
    assert trainer.classes["ham"].probability == pytest.approx(0.5)
