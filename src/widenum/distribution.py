# -----------------------------------------------------------------------------
#  distribution.py
#  Empirical binomial fitting: p is the match frequency of a sample set.
# -----------------------------------------------------------------------------

from __future__ import annotations

import time
from collections.abc import Sequence
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from typing import Any

from widenum.errors import EmptySample, InvalidRange
from widenum.runtime import CFG, debug_print
from widenum.widefloat import WideFloat, check_float_width
from widenum.wideint import IntLike, WideInt


@dataclass(frozen=True)
class BinomialFit:
    p: WideFloat
    pmf: tuple[WideFloat, ...]
    mean: WideFloat


def float_width() -> int:
    return check_float_width(CFG("DISTRIBUTION.FLOAT_WIDTH", 512))


def _trial_count(trial_count: IntLike) -> int:
    n = int(trial_count) if isinstance(trial_count, WideInt) else trial_count
    if isinstance(n, bool) or not isinstance(n, int):
        raise TypeError(f"trial_count must be an integer, got {type(trial_count).__name__}")
    if n < 0:
        raise InvalidRange(f"trial_count must be >= 0 (got {n})")
    return n


def estimate_p(samples: Sequence[Any], target_value: Any, *, width: int | None = None) -> WideFloat:
    """Fraction of ``samples`` equal to ``target_value``, rounded to ``width``."""
    size = len(samples)
    if size == 0:
        raise EmptySample("cannot estimate p from an empty sample set")
    hits = sum(1 for s in samples if s == target_value)
    return WideFloat.from_ratio(hits, size, width if width is not None else float_width())


def _coefficients(n: int, width: int) -> list[WideFloat]:
    """C(n, k) for k = 0..n as floats: c_k = c_{k-1} * (n-k+1) / k."""
    c = WideFloat.one(width)
    out = [c]
    for k in range(1, n + 1):
        c = c * (n - k + 1) / k
        out.append(c)
    return out


def _pmf_term(job: tuple[int, int, WideFloat, WideFloat, WideFloat]) -> WideFloat:
    # Module-level so process pools can pickle it.
    n, k, c, p, q = job
    return c * p.pow_int(k) * q.pow_int(n - k)


def _normalize(terms: list[WideFloat], width: int) -> list[WideFloat]:
    """Rescale so the mass sums to one and clamp every entry into [0, 1]."""
    zero, one = WideFloat.zero(width), WideFloat.one(width)
    total = sum(terms, zero)
    if not total.is_zero() and total != one:
        terms = [t / total for t in terms]
    return [t.clamp(zero, one) for t in terms]


def binomial_pmf(
    samples: Sequence[Any],
    target_value: Any,
    trial_count: IntLike,
    *,
    width: int | None = None,
    workers: int | None = None,
) -> list[WideFloat]:
    """
    P(k) = C(n, k) p**k (1-p)**(n-k) for k = 0..trial_count, with p the
    frequency of ``target_value`` in ``samples``.

    Returns ``trial_count + 1`` WideFloats ordered by k that sum to one and
    lie in [0, 1]. With ``workers > 1`` the terms are computed in a process
    pool; order is preserved regardless.
    """
    n = _trial_count(trial_count)
    fw = width if width is not None else float_width()
    p = estimate_p(samples, target_value, width=fw)
    q = WideFloat.one(fw) - p
    jobs = [(n, k, c, p, q) for k, c in enumerate(_coefficients(n, fw))]

    nworkers = int(workers if workers is not None else CFG("DISTRIBUTION.WORKERS", 1))
    if nworkers < 1:
        raise InvalidRange(f"workers must be >= 1 (got {nworkers})")

    t0 = time.perf_counter()
    if nworkers > 1 and len(jobs) > 1:
        with ProcessPoolExecutor(max_workers=nworkers) as pool:
            terms = list(pool.map(_pmf_term, jobs))
    else:
        terms = [_pmf_term(job) for job in jobs]

    out = _normalize(terms, fw)
    debug_print(
        "pmf",
        f"n={n} p={float(p):.6g} f{fw} workers={nworkers} "
        f"t={(time.perf_counter() - t0) * 1000:.2f} ms",
    )
    return out


def binomial_mean(
    samples: Sequence[Any],
    target_value: Any,
    trial_count: IntLike,
    *,
    width: int | None = None,
) -> WideFloat:
    """trial_count * p, with p estimated exactly as in binomial_pmf."""
    n = _trial_count(trial_count)
    fw = width if width is not None else float_width()
    p = estimate_p(samples, target_value, width=fw)
    return WideFloat.from_int(n, fw) * p


def binomial_fit(
    samples: Sequence[Any],
    target_value: Any,
    trial_count: IntLike,
    *,
    width: int | None = None,
    workers: int | None = None,
) -> BinomialFit:
    fw = width if width is not None else float_width()
    pmf = binomial_pmf(samples, target_value, trial_count, width=fw, workers=workers)
    return BinomialFit(
        p=estimate_p(samples, target_value, width=fw),
        pmf=tuple(pmf),
        mean=binomial_mean(samples, target_value, trial_count, width=fw),
    )
