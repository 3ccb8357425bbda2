# -----------------------------------------------------------------------------
#  widefloat.py
#  Binary floating point over WideInt: value = mantissa * 2**exponent.
# -----------------------------------------------------------------------------

from __future__ import annotations

import math
from dataclasses import dataclass
from fractions import Fraction
from functools import total_ordering

from widenum import _limbs as L
from widenum.errors import DivisionByZero, InvalidRange, Overflow
from widenum.wideint import WideInt

# float width -> exponent width; precision = width - exponent width
FLOAT_FORMATS: dict[int, int] = {
    32: 8,
    64: 16,
    128: 16,
    512: 32,
    1024: 32,
    2048: 64,
    4096: 64,
    8192: 64,
}
FLOAT_WIDTHS: tuple[int, ...] = tuple(FLOAT_FORMATS)


def check_float_width(width: int) -> int:
    w = int(width)
    if w not in FLOAT_FORMATS:
        allowed = ", ".join(str(x) for x in FLOAT_WIDTHS)
        raise ValueError(f"unsupported float width {w} (allowed: {allowed})")
    return w


def precision(width: int) -> int:
    return width - FLOAT_FORMATS[width]


def exponent_bounds(width: int) -> tuple[int, int]:
    ew = FLOAT_FORMATS[width]
    return -(1 << (ew - 1)), (1 << (ew - 1)) - 1


@total_ordering
@dataclass(frozen=True, eq=False, slots=True)
class WideFloat:
    """
    Normalized float: ``|mantissa|`` has exactly ``precision(width)`` bits
    (leading bit set) unless the value is zero, in which case mantissa and
    exponent are both zero. Rounding is round-half-to-even; exponent
    overflow raises Overflow, underflow flushes to zero.
    """
    width: int
    mantissa: WideInt
    exponent: WideInt

    def __post_init__(self) -> None:
        w = check_float_width(self.width)
        if self.mantissa.width != w or not self.mantissa.signed:
            raise ValueError(f"mantissa must be a signed {w}-bit WideInt")
        if self.exponent.width != FLOAT_FORMATS[w] or not self.exponent.signed:
            raise ValueError(f"exponent must be a signed {FLOAT_FORMATS[w]}-bit WideInt")
        bits = self.mantissa.bit_length()
        if bits not in (0, precision(w)):
            raise ValueError(f"mantissa not normalized ({bits} bits, expected {precision(w)})")
        if bits == 0 and not self.exponent.is_zero():
            raise ValueError("zero must carry a zero exponent")

    # ---------- construction ----------

    @classmethod
    def zero(cls, width: int) -> WideFloat:
        return _pack(check_float_width(width), False, [], 0)

    @classmethod
    def one(cls, width: int) -> WideFloat:
        return _pack(check_float_width(width), False, [1], 0)

    @classmethod
    def from_int(cls, value: int, width: int) -> WideFloat:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"expected int, got {type(value).__name__}")
        return _pack(check_float_width(width), value < 0, L.from_int(abs(value)), 0)

    @classmethod
    def from_wide_int(cls, value: WideInt, width: int) -> WideFloat:
        return _pack(check_float_width(width), value.negative, list(value.limbs), 0)

    @classmethod
    def from_ratio(cls, numerator: int | WideInt, denominator: int | WideInt, width: int) -> WideFloat:
        """Correctly rounded numerator / denominator."""
        n_neg, n_mag = _int_parts(numerator)
        d_neg, d_mag = _int_parts(denominator)
        if L.is_zero(d_mag):
            raise DivisionByZero("ratio with zero denominator")
        return _divide(check_float_width(width), n_neg != d_neg, n_mag, 0, d_mag, 0)

    @classmethod
    def from_float(cls, value: float, width: int) -> WideFloat:
        if not math.isfinite(value):
            raise InvalidRange(f"cannot represent {value!r}")
        num, den = float(value).as_integer_ratio()
        return cls.from_ratio(num, den, width)

    # ---------- introspection ----------

    @property
    def precision(self) -> int:
        return precision(self.width)

    def is_zero(self) -> bool:
        return self.mantissa.is_zero()

    @property
    def negative(self) -> bool:
        return self.mantissa.negative

    def _parts(self) -> tuple[bool, list[int], int]:
        return self.mantissa.negative, L.trim(self.mantissa.limbs), int(self.exponent)

    def as_integer_ratio(self) -> tuple[int, int]:
        neg, mag, exp = self._parts()
        n = L.to_int(mag)
        if neg:
            n = -n
        if exp >= 0:
            return n << exp, 1
        f = Fraction(n, 1 << -exp)
        return f.numerator, f.denominator

    def __float__(self) -> float:
        neg, mag, exp = self._parts()
        if not mag:
            return 0.0
        drop = max(0, L.bit_length(mag) - 64)
        top = L.to_int(L.shr(mag, drop))
        out = math.ldexp(float(top), exp + drop)
        return -out if neg else out

    def to_decimal_string(self, digits: int = 20) -> str:
        """Fixed-point rendering with ``digits`` fractional digits (half-up)."""
        neg, mag, exp = self._parts()
        if digits < 0:
            raise ValueError("digits must be >= 0")
        scaled = L.mul(mag, L.from_int(10 ** digits)) if mag else []
        if exp >= 0:
            scaled = L.shl(scaled, exp)
        else:
            round_up = L.test_bit(scaled, -exp - 1)
            scaled = L.shr(scaled, -exp)
            if round_up:
                scaled = L.add_small(scaled, 1)
        body = L.format_decimal(scaled).rjust(digits + 1, "0")
        text = body if digits == 0 else f"{body[:-digits]}.{body[-digits:]}"
        return f"-{text}" if neg and not L.is_zero(scaled) else text

    def __str__(self) -> str:
        return repr(float(self))

    def __repr__(self) -> str:
        return f"WideFloat(f{self.width}: {float(self)!r})"

    # ---------- arithmetic ----------

    def _coerce(self, other: object) -> WideFloat:
        if isinstance(other, WideFloat):
            return other
        if isinstance(other, WideInt):
            return WideFloat.from_wide_int(other, self.width)
        if isinstance(other, bool):
            return NotImplemented
        if isinstance(other, int):
            return WideFloat.from_int(other, self.width)
        if isinstance(other, float):
            return WideFloat.from_float(other, self.width)
        return NotImplemented

    def add(self, other: WideFloat) -> WideFloat:
        return _add(self, other, negate_b=False)

    def sub(self, other: WideFloat) -> WideFloat:
        return _add(self, other, negate_b=True)

    def mul(self, other: WideFloat) -> WideFloat:
        an, am, ae = self._parts()
        bn, bm, be = other._parts()
        return _pack(max(self.width, other.width), an != bn, L.mul(am, bm), ae + be)

    def div(self, other: WideFloat) -> WideFloat:
        an, am, ae = self._parts()
        bn, bm, be = other._parts()
        if not bm:
            raise DivisionByZero(f"f{other.width} division by zero")
        return _divide(max(self.width, other.width), an != bn, am, ae, bm, be)

    def pow_int(self, k: int) -> WideFloat:
        """self**k by square-and-multiply; 0**0 == 1."""
        if k < 0:
            return WideFloat.one(self.width).div(self.pow_int(-k))
        result = WideFloat.one(self.width)
        base = self
        while k:
            if k & 1:
                result = result.mul(base)
            k >>= 1
            if k:
                base = base.mul(base)
        return result

    def neg(self) -> WideFloat:
        return WideFloat(self.width, self.mantissa.neg(), self.exponent)

    def compare(self, other: WideFloat) -> int:
        an, am, ae = self._parts()
        bn, bm, be = other._parts()
        if not am and not bm:
            return 0
        if not am:
            return 1 if bn else -1
        if not bm:
            return -1 if an else 1
        if an != bn:
            return -1 if an else 1
        c = _compare_mag(am, ae, bm, be)
        return -c if an else c

    def clamp(self, lo: WideFloat, hi: WideFloat) -> WideFloat:
        if self.compare(lo) < 0:
            return lo
        if self.compare(hi) > 0:
            return hi
        return self

    # ---------- Python operators ----------

    def __add__(self, other):
        o = self._coerce(other)
        return NotImplemented if o is NotImplemented else self.add(o)

    __radd__ = __add__

    def __sub__(self, other):
        o = self._coerce(other)
        return NotImplemented if o is NotImplemented else self.sub(o)

    def __rsub__(self, other):
        o = self._coerce(other)
        return NotImplemented if o is NotImplemented else o.sub(self)

    def __mul__(self, other):
        o = self._coerce(other)
        return NotImplemented if o is NotImplemented else self.mul(o)

    __rmul__ = __mul__

    def __truediv__(self, other):
        o = self._coerce(other)
        return NotImplemented if o is NotImplemented else self.div(o)

    def __rtruediv__(self, other):
        o = self._coerce(other)
        return NotImplemented if o is NotImplemented else o.div(self)

    def __pow__(self, k: int) -> WideFloat:
        if not isinstance(k, int):
            return NotImplemented
        return self.pow_int(k)

    def __neg__(self) -> WideFloat:
        return self.neg()

    def __abs__(self) -> WideFloat:
        return self.neg() if self.negative else self

    def __bool__(self) -> bool:
        return not self.is_zero()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, WideFloat):
            return self.compare(other) == 0
        if isinstance(other, (int, float, Fraction, WideInt)) and not isinstance(other, bool):
            if isinstance(other, float) and not math.isfinite(other):
                return False
            return Fraction(*self.as_integer_ratio()) == Fraction(int(other) if isinstance(other, WideInt) else other)
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if isinstance(other, WideFloat):
            return self.compare(other) < 0
        if isinstance(other, (int, float, Fraction, WideInt)) and not isinstance(other, bool):
            return Fraction(*self.as_integer_ratio()) < Fraction(int(other) if isinstance(other, WideInt) else other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(Fraction(*self.as_integer_ratio()))


# ---------- kernels ----------------------------------------------------------

def _int_parts(x: int | WideInt) -> tuple[bool, list[int]]:
    if isinstance(x, WideInt):
        return x.negative, L.trim(x.limbs)
    if isinstance(x, bool) or not isinstance(x, int):
        raise TypeError(f"expected int, got {type(x).__name__}")
    return x < 0, L.from_int(abs(x))


def _pack(width: int, negative: bool, mag: list[int], exp: int, *, sticky: bool = False) -> WideFloat:
    """Round ``(-1)**negative * mag * 2**exp`` to ``width`` and build the value."""
    prec = precision(width)
    ew = FLOAT_FORMATS[width]
    mag = L.trim(mag)
    bits = L.bit_length(mag)
    if bits == 0:
        return WideFloat(width, WideInt.zero(width, True), WideInt.zero(ew, True))

    if bits > prec:
        shift = bits - prec
        kept = L.shr(mag, shift)
        half = L.test_bit(mag, shift - 1)
        rest_zero = L.low_bits_zero(mag, shift - 1) and not sticky
        if half and (not rest_zero or L.test_bit(kept, 0)):
            kept = L.add_small(kept, 1)
            if L.bit_length(kept) > prec:
                kept = L.shr(kept, 1)
                shift += 1
        mag, exp = kept, exp + shift
    elif bits < prec:
        mag, exp = L.shl(mag, prec - bits), exp - (prec - bits)

    lo, hi = exponent_bounds(width)
    if exp > hi:
        raise Overflow(f"f{width} exponent overflow (2**{exp})")
    if exp < lo:
        return WideFloat(width, WideInt.zero(width, True), WideInt.zero(ew, True))
    return WideFloat(
        width,
        WideInt.from_sign_magnitude(negative, mag, width, True),
        WideInt.of(exp, ew, True),
    )


def _divide(width: int, negative: bool, am: list[int], ae: int, bm: list[int], be: int) -> WideFloat:
    if not am:
        return _pack(width, False, [], 0)
    # quotient with >= prec + 2 bits, remainder folded into a sticky bit
    s = max(0, precision(width) + 2 + L.bit_length(bm) - L.bit_length(am))
    q, r = L.divmod_limbs(L.shl(am, s), bm)
    return _pack(width, negative, q, ae - be - s, sticky=not L.is_zero(r))


def _add(a: WideFloat, b: WideFloat, *, negate_b: bool) -> WideFloat:
    width = max(a.width, b.width)
    an, am, ae = a._parts()
    bn, bm, be = b._parts()
    if negate_b and bm:
        bn = not bn
    if not bm:
        return _pack(width, an, am, ae)
    if not am:
        return _pack(width, bn, bm, be)
    prec = precision(width)
    am, ae = _widen(am, ae, prec)
    bm, be = _widen(bm, be, prec)

    # An operand more than a full precision (plus guard bits) below the
    # other cannot move the rounded result.
    gap = prec + 2
    top_a, top_b = ae + L.bit_length(am), be + L.bit_length(bm)
    if top_a - top_b > gap:
        return _pack(width, an, am, ae, sticky=True) if an == bn else _nudge(width, an, am, ae)
    if top_b - top_a > gap:
        return _pack(width, bn, bm, be, sticky=True) if an == bn else _nudge(width, bn, bm, be)

    e = min(ae, be)
    am, bm = L.shl(am, ae - e), L.shl(bm, be - e)
    if an == bn:
        return _pack(width, an, L.add(am, bm), e)
    c = L.compare(am, bm)
    if c == 0:
        return _pack(width, False, [], 0)
    if c > 0:
        return _pack(width, an, L.sub(am, bm), e)
    return _pack(width, bn, L.sub(bm, am), e)


def _widen(mag: list[int], exp: int, prec: int) -> tuple[list[int], int]:
    # a narrower operand carries fewer mantissa bits than the result
    bits = L.bit_length(mag)
    if bits < prec:
        return L.shl(mag, prec - bits), exp - (prec - bits)
    return mag, exp


def _nudge(width: int, negative: bool, mag: list[int], exp: int) -> WideFloat:
    # big - tiny: step one guard bit below and let rounding settle it
    mag = L.sub(L.shl(mag, 2), [1])
    return _pack(width, negative, mag, exp - 2, sticky=True)


def _compare_mag(am: list[int], ae: int, bm: list[int], be: int) -> int:
    top_a, top_b = ae + L.bit_length(am), be + L.bit_length(bm)
    if top_a != top_b:
        return -1 if top_a < top_b else 1
    e = min(ae, be)
    return L.compare(L.shl(am, ae - e), L.shl(bm, be - e))
