# -----------------------------------------------------------------------------
#  _limbs.py
#  Magnitude kernels over little-endian 64-bit limb vectors.
# -----------------------------------------------------------------------------
#
# A magnitude is a list[int] of limbs, least significant first, each limb in
# [0, 2**64). Kernels take and return *trimmed* vectors (no high zero limbs;
# zero is []). Fixed-length padding is the caller's business (see WideInt).

from __future__ import annotations

from collections.abc import Sequence

from widenum.widths import LIMB_BITS, LIMB_MASK

Limbs = list[int]

_DEC_CHUNK = 10 ** 19          # largest power of ten below 2**64
_DEC_CHUNK_DIGITS = 19
_HEX_PER_LIMB = LIMB_BITS // 4


def trim(a: Sequence[int]) -> Limbs:
    out = list(a)
    while out and out[-1] == 0:
        out.pop()
    return out


def pad(a: Sequence[int], count: int) -> tuple[int, ...]:
    if len(a) > count:
        raise ValueError(f"magnitude needs {len(a)} limbs, only {count} available")
    return tuple(a) + (0,) * (count - len(a))


def from_int(n: int) -> Limbs:
    """Split a non-negative Python int into limbs."""
    if n < 0:
        raise ValueError("magnitude must be non-negative")
    out: Limbs = []
    while n:
        out.append(n & LIMB_MASK)
        n >>= LIMB_BITS
    return out


def to_int(a: Sequence[int]) -> int:
    n = 0
    for limb in reversed(a):
        n = (n << LIMB_BITS) | limb
    return n


def is_zero(a: Sequence[int]) -> bool:
    return not any(a)


def bit_length(a: Sequence[int]) -> int:
    a = trim(a)
    if not a:
        return 0
    return (len(a) - 1) * LIMB_BITS + a[-1].bit_length()


def power_of_two(k: int) -> Limbs:
    out = [0] * (k // LIMB_BITS + 1)
    out[-1] = 1 << (k % LIMB_BITS)
    return out


def compare(a: Sequence[int], b: Sequence[int]) -> int:
    a, b = trim(a), trim(b)
    if len(a) != len(b):
        return -1 if len(a) < len(b) else 1
    for x, y in zip(reversed(a), reversed(b)):
        if x != y:
            return -1 if x < y else 1
    return 0


# ---------- add / sub / mul --------------------------------------------------

def add(a: Sequence[int], b: Sequence[int]) -> Limbs:
    if len(a) < len(b):
        a, b = b, a
    out: Limbs = []
    carry = 0
    for i, x in enumerate(a):
        s = x + (b[i] if i < len(b) else 0) + carry
        out.append(s & LIMB_MASK)
        carry = s >> LIMB_BITS
    if carry:
        out.append(carry)
    return trim(out)


def sub(a: Sequence[int], b: Sequence[int]) -> Limbs:
    """a - b for a >= b."""
    if compare(a, b) < 0:
        raise ValueError("limb subtraction underflow (a < b)")
    out: Limbs = []
    borrow = 0
    for i, x in enumerate(a):
        d = x - (b[i] if i < len(b) else 0) - borrow
        if d < 0:
            d += 1 << LIMB_BITS
            borrow = 1
        else:
            borrow = 0
        out.append(d)
    return trim(out)


def mul(a: Sequence[int], b: Sequence[int]) -> Limbs:
    """Schoolbook product, O(len(a) * len(b))."""
    a, b = trim(a), trim(b)
    if not a or not b:
        return []
    out = [0] * (len(a) + len(b))
    for i, x in enumerate(a):
        if x == 0:
            continue
        carry = 0
        for j, y in enumerate(b):
            t = out[i + j] + x * y + carry
            out[i + j] = t & LIMB_MASK
            carry = t >> LIMB_BITS
        k = i + len(b)
        while carry:
            t = out[k] + carry
            out[k] = t & LIMB_MASK
            carry = t >> LIMB_BITS
            k += 1
    return trim(out)


def mul_small(a: Sequence[int], m: int) -> Limbs:
    """a * m for a single-limb m."""
    if not 0 <= m <= LIMB_MASK:
        raise ValueError("multiplier must fit one limb")
    out: Limbs = []
    carry = 0
    for x in a:
        t = x * m + carry
        out.append(t & LIMB_MASK)
        carry = t >> LIMB_BITS
    if carry:
        out.append(carry)
    return trim(out)


def add_small(a: Sequence[int], m: int) -> Limbs:
    return add(a, from_int(m))


# ---------- shifts -----------------------------------------------------------

def shl(a: Sequence[int], k: int) -> Limbs:
    if k < 0:
        return shr(a, -k)
    a = trim(a)
    if not a:
        return []
    whole, bits = divmod(k, LIMB_BITS)
    out = [0] * whole
    if bits == 0:
        out.extend(a)
        return out
    carry = 0
    for x in a:
        out.append(((x << bits) & LIMB_MASK) | carry)
        carry = x >> (LIMB_BITS - bits)
    if carry:
        out.append(carry)
    return trim(out)


def shr(a: Sequence[int], k: int) -> Limbs:
    if k < 0:
        return shl(a, -k)
    whole, bits = divmod(k, LIMB_BITS)
    a = trim(a)[whole:]
    if not a or bits == 0:
        return list(a)
    out: Limbs = []
    for i, x in enumerate(a):
        hi = a[i + 1] if i + 1 < len(a) else 0
        out.append((x >> bits) | ((hi << (LIMB_BITS - bits)) & LIMB_MASK))
    return trim(out)


def low_bits_zero(a: Sequence[int], k: int) -> bool:
    """True if the k least significant bits of a are all zero."""
    whole, bits = divmod(k, LIMB_BITS)
    a = list(a)
    if any(a[:whole]):
        return False
    if bits and whole < len(a):
        return a[whole] & ((1 << bits) - 1) == 0
    return True


def test_bit(a: Sequence[int], k: int) -> bool:
    whole, bits = divmod(k, LIMB_BITS)
    return whole < len(a) and bool((a[whole] >> bits) & 1)


# ---------- division ---------------------------------------------------------

def divmod_small(a: Sequence[int], d: int) -> tuple[Limbs, int]:
    """Short division by a single-limb divisor d > 0."""
    if d <= 0 or d > LIMB_MASK:
        raise ValueError("divisor must be a non-zero single limb")
    q = [0] * len(a)
    r = 0
    for i in range(len(a) - 1, -1, -1):
        cur = (r << LIMB_BITS) | a[i]
        q[i], r = divmod(cur, d)
    return trim(q), r


def divmod_limbs(a: Sequence[int], b: Sequence[int]) -> tuple[Limbs, Limbs]:
    """
    (q, r) with a = q*b + r, 0 <= r < b. Raises ZeroDivisionError for b == 0.

    Single-limb divisors use short division; wider divisors use binary
    shift-subtract long division, O(bits(a) * limbs).
    """
    a, b = trim(a), trim(b)
    if not b:
        raise ZeroDivisionError("limb division by zero")
    if compare(a, b) < 0:
        return [], a
    if len(b) == 1:
        q, r = divmod_small(a, b[0])
        return q, from_int(r)

    shift = bit_length(a) - bit_length(b)
    d = shl(b, shift)
    r = a
    q = [0] * (shift // LIMB_BITS + 1)
    for s in range(shift, -1, -1):
        if compare(r, d) >= 0:
            r = sub(r, d)
            q[s // LIMB_BITS] |= 1 << (s % LIMB_BITS)
        d = shr(d, 1)
    return trim(q), r


# ---------- text codecs ------------------------------------------------------

def parse_decimal(digits: str) -> Limbs:
    """Digits only (no sign, no separators)."""
    if not digits or not digits.isdigit() or not digits.isascii():
        raise ValueError(f"invalid decimal literal: {digits!r}")
    out: Limbs = []
    head = len(digits) % _DEC_CHUNK_DIGITS or _DEC_CHUNK_DIGITS
    chunks = [digits[:head]] + [
        digits[i:i + _DEC_CHUNK_DIGITS] for i in range(head, len(digits), _DEC_CHUNK_DIGITS)
    ]
    for ch in chunks:
        scale = 10 ** len(ch)
        out = add_small(mul_small(out, scale), int(ch))
    return out


def format_decimal(a: Sequence[int]) -> str:
    a = trim(a)
    if not a:
        return "0"
    parts: list[str] = []
    while a:
        a, r = divmod_small(a, _DEC_CHUNK)
        parts.append(f"{r:0{_DEC_CHUNK_DIGITS}d}" if a else str(r))
    return "".join(reversed(parts))


def parse_hex(digits: str) -> Limbs:
    if not digits or any(c not in "0123456789abcdefABCDEF" for c in digits):
        raise ValueError(f"invalid hex literal: {digits!r}")
    out: Limbs = []
    for end in range(len(digits), 0, -_HEX_PER_LIMB):
        out.append(int(digits[max(0, end - _HEX_PER_LIMB):end], 16))
    return trim(out)


def format_hex(a: Sequence[int]) -> str:
    a = trim(a)
    if not a:
        return "0"
    head = f"{a[-1]:x}"
    return head + "".join(f"{x:0{_HEX_PER_LIMB}x}" for x in reversed(a[:-1]))
