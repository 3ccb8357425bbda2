# tests/test_distribution.py
from __future__ import annotations

import math

import pytest

from widenum import APPLY
from widenum.distribution import binomial_fit, binomial_mean, binomial_pmf, estimate_p
from widenum.errors import EmptySample, InvalidRange
from widenum.verify import check_pmf
from widenum.widefloat import WideFloat

SAMPLES = [1, 0, 1, 1, 0]

EXPECTED = [0.0256, 0.1536, 0.3456, 0.3456, 0.1296]


def _floats(xs) -> list[float]:
    return [float(x) for x in xs]


def test_pmf_worked_example():
    pmf = binomial_pmf(SAMPLES, 1, 4)
    assert len(pmf) == 5
    assert all(isinstance(x, WideFloat) for x in pmf)
    assert _floats(pmf) == pytest.approx(EXPECTED, abs=1e-12)
    assert abs(float(sum(pmf)) - 1.0) < 1e-9


def test_pmf_entries_lie_in_unit_interval():
    for samples, trials in (([1, 0, 0], 30), ([2, 2, 2, 7], 17), (list(range(11)), 50)):
        pmf = binomial_pmf(samples, samples[0], trials)
        assert len(pmf) == trials + 1
        assert all(0 <= x <= 1 for x in pmf)
        assert abs(float(sum(pmf)) - 1.0) < 1e-9


def test_mean_worked_example():
    m = binomial_mean(SAMPLES, 1, 4)
    assert float(m) == pytest.approx(2.4, abs=1e-12)


def test_p_is_an_empirical_frequency():
    assert float(estimate_p(["H", "T", "H", "H"], "H")) == pytest.approx(0.75)
    assert estimate_p([0.5, 0.25], 1.0) == 0


def test_degenerate_probabilities():
    assert _floats(binomial_pmf([0, 0], 1, 3)) == [1.0, 0.0, 0.0, 0.0]
    assert _floats(binomial_pmf([1, 1], 1, 3)) == [0.0, 0.0, 0.0, 1.0]


def test_zero_trials():
    assert _floats(binomial_pmf(SAMPLES, 1, 0)) == [1.0]
    assert binomial_mean(SAMPLES, 1, 0) == 0


def test_empty_samples():
    with pytest.raises(EmptySample):
        binomial_pmf([], 1, 4)
    with pytest.raises(EmptySample):
        binomial_mean([], 1, 4)


def test_negative_trial_count():
    with pytest.raises(InvalidRange):
        binomial_pmf(SAMPLES, 1, -1)
    with pytest.raises(InvalidRange):
        binomial_mean(SAMPLES, 1, -2)


def test_parallel_terms_keep_order():
    seq = binomial_pmf(SAMPLES, 1, 12, workers=1)
    par = binomial_pmf(SAMPLES, 1, 12, workers=2)
    assert par == seq


def test_float_width_from_profile():
    APPLY({"DISTRIBUTION": {"FLOAT_WIDTH": 64}})
    assert binomial_mean(SAMPLES, 1, 4).width == 64
    assert binomial_pmf(SAMPLES, 1, 4, width=1024)[0].width == 1024


def test_pmf_ignores_integer_result_width():
    APPLY({"BEHAVIOUR": {"DEFAULT_WIDTH": 64}})
    pmf = binomial_pmf([1, 0], 1, 70)
    assert len(pmf) == 71
    assert float(pmf[35]) == pytest.approx(math.comb(70, 35) / 2**70, rel=1e-12)
    assert abs(float(sum(pmf)) - 1.0) < 1e-9


def test_pmf_large_trial_count():
    n = 1000
    pmf = binomial_pmf([1, 0], 1, n, width=64)
    assert len(pmf) == n + 1
    assert float(pmf[n // 2]) == pytest.approx(math.comb(n, n // 2) / 2**n, rel=1e-9)
    assert float(pmf[0]) == pytest.approx(2.0**-n, rel=1e-9)
    assert abs(float(sum(pmf)) - 1.0) < 1e-9


def test_fit_bundles_p_pmf_and_mean():
    fit = binomial_fit(SAMPLES, 1, 4)
    assert float(fit.p) == pytest.approx(0.6)
    assert len(fit.pmf) == 5
    assert float(fit.mean) == pytest.approx(2.4)


def test_repeat_calls_are_identical():
    a = binomial_pmf(SAMPLES, 1, 9)
    b = binomial_pmf(SAMPLES, 1, 9)
    assert [(x.mantissa.limbs, x.exponent.limbs) for x in a] == [(x.mantissa.limbs, x.exponent.limbs) for x in b]


def test_against_exact_rationals():
    assert check_pmf([1, 0, 1, 1, 0, 0, 1], 1, 25) == []
