from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from bayesfilter.logging import ConsoleFormatter

CORPUS_LINES = [
    ("ham", "Are we still meeting for lunch today?"),
    ("ham", "The project meeting moved to Friday afternoon"),
    ("ham", "Lunch at noon works for me, see you there"),
    ("ham", "Can you send me the meeting notes from Friday"),
    ("ham", "Happy birthday! Dinner with the family tonight"),
    ("ham", "I will call you after the project review"),
    ("spam", "WIN a FREE Rolex watch now!!! Call 0800 123 456"),
    ("spam", "Free money waiting, claim your prize now"),
    ("spam", "Cheap rolex watches, free shipping, order now"),
    ("spam", "Congratulations you won a cash prize, claim now"),
]


class ThreadGate:
    """Starts worker threads together and re-raises the first failure."""

    def __init__(self, workers: int) -> None:
        self._barrier = threading.Barrier(workers)
        self._errors: list[BaseException] = []
        self._lock = threading.Lock()
        self._threads: list[threading.Thread] = []

    def spawn(self, target: Callable[[], None]) -> None:
        def run() -> None:
            self._barrier.wait()
            try:
                target()
            except BaseException as exc:  # noqa: BLE001 - surfaced in join()
                with self._lock:
                    self._errors.append(exc)

        thread = threading.Thread(target=run)
        self._threads.append(thread)
        thread.start()

    def join(self, timeout: float = 30.0) -> None:
        for thread in self._threads:
            thread.join(timeout=timeout)
        if self._errors:
            raise self._errors[0]


@pytest.fixture(scope="session")
def corpus_file(tmp_path_factory: pytest.TempPathFactory) -> Path:
    path = tmp_path_factory.mktemp("corpus") / "messages.tsv"
    path.write_text(
        "".join(f"{label}\t{text}\n" for label, text in CORPUS_LINES),
        encoding="utf-8",
    )
    return path


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
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


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Automatically mark tests in this package as integration."""

    package_root = Path(__file__).resolve().parent
    integration_mark = pytest.mark.integration
    for item in items:
        try:
            path = Path(item.fspath).resolve()
        except OSError:
            continue
        if package_root in path.parents:
            item.add_marker(integration_mark)


@pytest.fixture
def thread_gate() -> type[ThreadGate]:
    return ThreadGate
