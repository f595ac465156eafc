"""Combination of per-token evidence into a document-level probability."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from scipy import special


def combine_log_odds(
    probabilities: Sequence[float],
    *,
    norm_length: float = 0.0,
    document_length: int | None = None,
) -> float:
    """Combine independent P(class | token) values via log-odds summation.

    ``eta = sum(ln(1 - p) - ln(p))`` and the combined probability is
    ``1 / (1 + exp(eta))``. When ``norm_length`` is positive the result is
    raised to ``norm_length / document_length`` so long documents do not
    drift towards 0 or 1 merely because they contain more tokens.

    Probabilities of exactly 0 or 1 give infinite log-odds and therefore the
    limiting values 0 or 1; conflicting certainties (both present) give NaN.
    """

    values = np.asarray(probabilities, dtype=np.float64)
    if values.size == 0:
        raise ValueError("At least one probability is required.")
    with np.errstate(divide="ignore", invalid="ignore"):
        eta = float(np.sum(np.log1p(-values) - np.log(values)))
    probability = float(special.expit(-eta))
    length = values.size if document_length is None else document_length
    if norm_length > 0 and length > 0:
        probability = probability ** (norm_length / length)
    return probability


__all__ = ["combine_log_odds"]
