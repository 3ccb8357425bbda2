# src/widenum/verify.py
"""
Cross-check the limb arithmetic against sympy / gmpy2.

Used by `widenum verify` and the test suite; returns human-readable
mismatch lines (empty list = all good).
"""

from __future__ import annotations

from fractions import Fraction

import gmpy2
from sympy import Rational, binomial, factorial, ff

from widenum.distribution import binomial_mean, binomial_pmf
from widenum.number_theory import (
    combination,
    divisibility_theorem,
    gauss_sum,
    permutation,
)
from widenum.number_theory import factorial as wide_factorial


def euclid_divmod(a: int, b: int) -> tuple[int, int]:
    """Reference Euclidean (q, r), 0 <= r < |b|, from gmpy2's floor division."""
    q, r = gmpy2.f_divmod(gmpy2.mpz(a), gmpy2.mpz(b))
    q, r = int(q), int(r)
    if r < 0:
        q, r = q + 1, r - b
    return q, r


def cross_check(n_max: int = 30, *, width: int = 8192) -> list[str]:
    bad: list[str] = []

    for n in range(n_max + 1):
        if int(wide_factorial(n, width=width)) != int(factorial(n)):
            bad.append(f"factorial({n})")
        if int(gauss_sum(n, width=width)) != n * (n + 1) // 2:
            bad.append(f"gauss_sum({n})")
        for r in range(n + 1):
            if int(combination(n, r, width=width)) != int(binomial(n, r)):
                bad.append(f"combination({n}, {r})")
            if int(permutation(n, r, width=width)) != int(ff(n, r)):
                bad.append(f"permutation({n}, {r})")

    for a in range(-n_max, n_max + 1):
        for b in (-7, -3, -1, 1, 2, 5, 13):
            got = divisibility_theorem(a, b, width, width=width)
            if (int(got[0]), int(got[1])) != euclid_divmod(a, b):
                bad.append(f"divisibility_theorem({a}, {b})")

    return bad


def check_pmf(samples, target_value, trial_count: int, *, width: int | None = None, tol: float = 1e-12) -> list[str]:
    """Compare binomial_pmf / binomial_mean against exact sympy rationals."""
    bad: list[str] = []
    hits = sum(1 for s in samples if s == target_value)
    p = Rational(hits, len(samples))
    got = binomial_pmf(samples, target_value, trial_count, width=width)
    for k, val in enumerate(got):
        exact = binomial(trial_count, k) * p**k * (1 - p) ** (trial_count - k)
        if abs(Fraction(*val.as_integer_ratio()) - Fraction(int(exact.p), int(exact.q))) > tol:
            bad.append(f"pmf[{k}]")
    mean = binomial_mean(samples, target_value, trial_count, width=width)
    exact_mean = trial_count * p
    if abs(float(mean) - float(exact_mean)) > tol * max(1, trial_count):
        bad.append("mean")
    return bad
