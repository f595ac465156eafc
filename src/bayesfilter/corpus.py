"""Reading labelled message corpora and turning text into tokens."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from .errors import CorpusError
from .types import StringToken

LOGGER = logging.getLogger(__name__)

PUNCTUATION = ".,!?:;&'\"`´-+"
_CLEANUP = str.maketrans({char: " " for char in PUNCTUATION + "0123456789"})
_SEPARATORS = re.compile(r"[\s()]+")


@dataclass(frozen=True)
class Sample:
    """A labelled message, e.g. one line of the SMS Spam Collection."""

    label: str
    text: str

    def tokens(self) -> list[StringToken]:
        return tokenize(self.text)


def tokenize(text: str) -> list[StringToken]:
    """Lowercase ``text``, blank out punctuation and digits and split into tokens."""

    cleaned = text.lower().translate(_CLEANUP)
    return [StringToken(word) for word in _SEPARATORS.split(cleaned) if word]


def read_corpus(source: Path | str | Iterable[str]) -> list[Sample]:
    """Parse ``<label>\\t<text>`` lines into samples.

    ``source`` is a file path or an iterable of lines. Blank lines are
    skipped; duplicate lines are kept once, in first-seen order.
    """

    if isinstance(source, (str, Path)):
        path = Path(source).expanduser()
        if not path.is_file():
            raise CorpusError(f"Corpus file not found: {path}")
        try:
            with path.open("r", encoding="utf-8") as handle:
                return _parse_lines(handle)
        except UnicodeDecodeError as exc:
            raise CorpusError(f"Corpus file {path} is not valid UTF-8: {exc}") from exc
    return _parse_lines(source)


def _parse_lines(lines: Iterable[str]) -> list[Sample]:
    samples: list[Sample] = []
    seen: set[Sample] = set()
    for number, line in enumerate(lines, start=1):
        stripped = line.rstrip("\r\n")
        if not stripped.strip():
            continue
        label, separator, text = stripped.partition("\t")
        label = label.strip().lower()
        if not separator or not label:
            raise CorpusError(f"Line {number}: expected '<label>\\t<text>'.")
        sample = Sample(label=label, text=text)
        if sample in seen:
            continue
        seen.add(sample)
        samples.append(sample)
    LOGGER.debug("Read %s distinct sample(s)", len(samples))
    return samples


__all__ = ["PUNCTUATION", "Sample", "read_corpus", "tokenize"]
