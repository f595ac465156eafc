from __future__ import annotations

import pytest

from bayesfilter.correction import (
    NO_CORRECTION,
    BetaCorrection,
    NoCorrection,
    ProbabilityCorrection,
    correction_from_name,
)
from bayesfilter.dataset import DataSet
from bayesfilter.errors import RangeError
from bayesfilter.types import StringClass, StringToken


def _data_set(prior: float, *tokens: str) -> DataSet:
    data_set = DataSet(StringClass("spam", prior))
    data_set.add_tokens(StringToken(token) for token in tokens)
    return data_set


def test_no_correction_is_identity() -> None:
    data_set = _data_set(0.5, "a")

    assert NO_CORRECTION.correct_probability(
        data_set.cls, data_set, StringToken("a"), 0.8, 0
    ) == pytest.approx(0.8)
    assert isinstance(NoCorrection(), ProbabilityCorrection)


def test_beta_correction_blends_prior_and_observation() -> None:
    data_set = _data_set(0.5, "a", "a", "a")
    correction = BetaCorrection(background_strength=3.0)

    corrected = correction.correct_probability(data_set.cls, data_set, StringToken("a"), 0.9, 0)

    assert corrected == pytest.approx((3 * 0.5 + 3 * 0.9) / (3 + 3))
    assert isinstance(correction, ProbabilityCorrection)


def test_beta_correction_returns_prior_for_unseen_tokens() -> None:
    data_set = _data_set(0.3, "a")
    correction = BetaCorrection()

    corrected = correction.correct_probability(data_set.cls, data_set, StringToken("zzz"), 0.9, 0)

    assert corrected == pytest.approx(0.3)


def test_beta_correction_treats_rare_tokens_as_unseen() -> None:
    data_set = _data_set(0.4, "a", "a")
    correction = BetaCorrection(background_strength=1.0)

    corrected = correction.correct_probability(data_set.cls, data_set, StringToken("a"), 0.9, 2)

    assert corrected == pytest.approx(0.4)


def test_beta_correction_converges_with_more_observations() -> None:
    correction = BetaCorrection(background_strength=3.0)
    few = _data_set(0.5, "a")
    many = _data_set(0.5, *(["a"] * 500))

    near_prior = correction.correct_probability(few.cls, few, StringToken("a"), 0.95, 0)
    near_observed = correction.correct_probability(many.cls, many, StringToken("a"), 0.95, 0)

    assert abs(near_observed - 0.95) < abs(near_prior - 0.95)
    assert near_observed == pytest.approx(0.95, abs=0.01)


@pytest.mark.parametrize("strength", [0.0, -1.0, float("nan"), float("inf")])
def test_background_strength_must_be_positive_and_finite(strength: float) -> None:
    with pytest.raises(RangeError):
        BetaCorrection(background_strength=strength)


def test_correction_from_name() -> None:
    assert correction_from_name("none") is NO_CORRECTION
    beta = correction_from_name(" Beta ", background_strength=2.0)
    assert isinstance(beta, BetaCorrection)
    assert beta.background_strength == pytest.approx(2.0)

    with pytest.raises(ValueError):
        correction_from_name("gamma")
    with pytest.raises(ValueError):
        correction_from_name("none", background_strength=1.0)
