# -----------------------------------------------------------------------------
#  number_theory.py
#  Factorial, nCr, nPr, Gauss sums and bounded Euclidean division on WideInt.
# -----------------------------------------------------------------------------

from __future__ import annotations

from math import gcd

from widenum.errors import DivisionByZero, InvalidRange, NonConvergence
from widenum.runtime import CFG, debug_print
from widenum.wideint import IntLike, WideInt
from widenum.widths import check_width


def default_width() -> int:
    return check_width(CFG("BEHAVIOUR.DEFAULT_WIDTH", 8192))


def _width(width: int | None) -> int:
    return check_width(width) if width is not None else default_width()


def _as_int(x: IntLike, name: str) -> int:
    if isinstance(x, WideInt):
        return int(x)
    if isinstance(x, bool) or not isinstance(x, int):
        raise TypeError(f"{name} must be an integer, got {type(x).__name__}")
    return x


def _check_nr(n: int, r: int, op: str) -> None:
    if n < 0:
        raise InvalidRange(f"{op}: n must be >= 0 (got n={n})")
    if r < 0 or r > n:
        raise InvalidRange(f"{op}: r must satisfy 0 <= r <= n (got n={n}, r={r})")


def factorial(n: IntLike, *, width: int | None = None) -> WideInt:
    """n! by a flat multiply loop; factorial(0) == 1."""
    n = _as_int(n, "n")
    if n < 0:
        raise InvalidRange(f"factorial: n must be >= 0 (got {n})")
    acc = WideInt.one(_width(width))
    for i in range(2, n + 1):
        acc = acc * i
    return acc


def combination(n: IntLike, r: IntLike, *, width: int | None = None) -> WideInt:
    """
    C(n, r) without materializing n!.

    After step i the accumulator equals C(n-k+i, i) (k = min(r, n-r)).
    Multiplying by (n-k+i) and dividing by i is exact; dividing out
    g = gcd(n-k+i, i) first lets the division happen before the multiply,
    so no intermediate exceeds the final value.
    """
    n, r = _as_int(n, "n"), _as_int(r, "r")
    _check_nr(n, r, "combination")
    k = min(r, n - r)
    acc = WideInt.one(_width(width))
    for i in range(1, k + 1):
        num = n - k + i
        g = gcd(num, i)
        acc = (acc // (i // g)) * (num // g)
    return acc


def permutation(n: IntLike, r: IntLike, *, width: int | None = None) -> WideInt:
    """n! / (n-r)! as the falling product n (n-1) ... (n-r+1)."""
    n, r = _as_int(n, "n"), _as_int(r, "r")
    _check_nr(n, r, "permutation")
    acc = WideInt.one(_width(width))
    for i in range(r):
        acc = acc * (n - i)
    return acc


def gauss_sum(n: IntLike, *, width: int | None = None) -> WideInt:
    """0 + 1 + ... + n = n(n+1)/2, halving the even factor before multiplying."""
    n = _as_int(n, "n")
    if n < 0:
        raise InvalidRange(f"gauss_sum: n must be >= 0 (got {n})")
    w = _width(width)
    if n % 2 == 0:
        return WideInt.of(n // 2, w) * (n + 1)
    return WideInt.of(n, w) * ((n + 1) // 2)


def divisibility_theorem(
    a: IntLike,
    b: IntLike,
    max_iterations: int | None = None,
    *,
    width: int | None = None,
) -> tuple[WideInt, WideInt]:
    """
    Return ``(q, r)`` with ``a = q*b + r`` and ``0 <= r < |b|``.

    Uses shift, subtract and compare only: every iteration removes the
    largest ``|b| << k`` that still fits in the running remainder, so the
    iteration count equals the number of set bits in ``|a| // |b|``. Values are
    signed WideInts of ``width`` (default ``BEHAVIOUR.DEFAULT_WIDTH``).

    Raises DivisionByZero for b == 0, InvalidRange for max_iterations < 1 and
    NonConvergence when the bound is hit before ``r < |b|``.
    """
    w = _width(width)
    if max_iterations is None:
        max_iterations = int(CFG("DIVISION.MAX_ITERATIONS", w))
    if max_iterations < 1:
        raise InvalidRange(f"max_iterations must be >= 1 (got {max_iterations})")

    a_w = _signed(a, w)
    b_w = _signed(b, w)
    if b_w.is_zero():
        raise DivisionByZero("divisibility_theorem: b == 0")

    num = a_w.magnitude()
    den = b_w.magnitude()
    q = WideInt.zero(w)
    r = num
    unit = WideInt.one(w)
    iterations = 0
    while r >= den:
        if iterations == max_iterations:
            raise NonConvergence(
                f"divisibility_theorem({a_w}, {b_w}) did not converge in {max_iterations} iterations "
                f"(partial q={q}, r={r})",
                iterations=iterations,
            )
        shift = r.bit_length() - den.bit_length()
        step = den.shl(shift)
        if step > r:
            shift -= 1
            step = den.shl(shift)
        r = r - step
        q = q + unit.shl(shift)
        iterations += 1

    # |a| = q|b| + r  ->  Euclidean form for the signs of a and b
    if a_w.negative and not r.is_zero():
        q = q + 1
        r = den - r
    q_s = WideInt.from_sign_magnitude(a_w.negative != b_w.negative, q.limbs, w, True)
    r_s = r.as_signed()

    if int(q_s) * int(b_w) + int(r_s) != int(a_w):
        raise NonConvergence(f"divisibility_theorem({a_w}, {b_w}): a != q*b + r", iterations=iterations)
    debug_print("divide", f"{a_w} = {q_s}*{b_w} + {r_s} after {iterations} iteration(s)")
    return q_s, r_s


def _signed(x: IntLike, width: int) -> WideInt:
    if isinstance(x, WideInt):
        return WideInt.of(x, width, True)
    return WideInt.of(_as_int(x, "operand"), width, True)
