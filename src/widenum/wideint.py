# src/widenum/wideint.py
from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering

from widenum import _limbs as L
from widenum.errors import DivisionByZero, Overflow
from widenum.widths import LIMB_BASE, check_width, limb_count, type_name


@total_ordering
@dataclass(frozen=True, eq=False, slots=True)
class WideInt:
    """
    Fixed-width integer stored as sign + magnitude limbs.

    Invariants (checked in __post_init__):
      - ``width`` is one of the declared widths
      - ``len(limbs) == ceil(width / 64)``, little-endian, each limb < 2**64
      - zero is never negative; unsigned values are never negative
      - value lies in [0, 2**w - 1] (unsigned) or [-2**(w-1), 2**(w-1) - 1]
        (signed); anything else raises Overflow

    Values are immutable. Every operation returns a fresh WideInt; results
    take the wider operand's width. Mixing signed and unsigned operands is a
    TypeError; use ``as_signed()`` / ``as_unsigned()`` explicitly.
    """
    width: int
    signed: bool
    negative: bool
    limbs: tuple[int, ...]

    def __post_init__(self) -> None:
        w = check_width(self.width)
        if len(self.limbs) != limb_count(w):
            raise ValueError(
                f"{type_name(w, self.signed)} needs {limb_count(w)} limbs, got {len(self.limbs)}"
            )
        if any(not 0 <= x < LIMB_BASE for x in self.limbs):
            raise ValueError("limb out of range")
        if self.negative and L.is_zero(self.limbs):
            object.__setattr__(self, "negative", False)
        if self.negative and not self.signed:
            raise Overflow(f"negative value does not fit {type_name(w, False)}")
        _check_range(self.limbs, w, self.signed, self.negative)

    # ---------- constructors ----------

    @classmethod
    def from_sign_magnitude(cls, negative: bool, magnitude, width: int, signed: bool = False) -> WideInt:
        w = check_width(width)
        mag = L.trim(magnitude)
        if L.bit_length(mag) > w:
            raise Overflow(f"magnitude of {L.bit_length(mag)} bits does not fit {type_name(w, signed)}")
        return cls(w, bool(signed), bool(negative), L.pad(mag, limb_count(w)))

    @classmethod
    def of(cls, value: int | WideInt, width: int, signed: bool = False) -> WideInt:
        """Build from a Python int (or re-type another WideInt, range-checked)."""
        if isinstance(value, WideInt):
            return cls.from_sign_magnitude(value.negative, value.limbs, width, signed)
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"expected int, got {type(value).__name__}")
        return cls.from_sign_magnitude(value < 0, L.from_int(abs(value)), width, signed)

    @classmethod
    def zero(cls, width: int, signed: bool = False) -> WideInt:
        return cls.from_sign_magnitude(False, [], width, signed)

    @classmethod
    def one(cls, width: int, signed: bool = False) -> WideInt:
        return cls.from_sign_magnitude(False, [1], width, signed)

    @classmethod
    def from_decimal_string(cls, text: str, width: int, signed: bool = False) -> WideInt:
        negative, body = _split_sign(text)
        return cls.from_sign_magnitude(negative, L.parse_decimal(body), width, signed)

    @classmethod
    def from_hex_string(cls, text: str, width: int, signed: bool = False) -> WideInt:
        negative, body = _split_sign(text)
        if body[:2].lower() == "0x":
            body = body[2:]
        return cls.from_sign_magnitude(negative, L.parse_hex(body), width, signed)

    # ---------- introspection ----------

    def bit_width(self) -> int:
        return self.width

    @property
    def type_name(self) -> str:
        return type_name(self.width, self.signed)

    def is_zero(self) -> bool:
        return L.is_zero(self.limbs)

    def bit_length(self) -> int:
        """Bits of the magnitude (like int.bit_length)."""
        return L.bit_length(self.limbs)

    def sign(self) -> int:
        if self.is_zero():
            return 0
        return -1 if self.negative else 1

    def magnitude(self) -> WideInt:
        """|self| as an unsigned value of the same width (never overflows)."""
        return WideInt.from_sign_magnitude(False, self.limbs, self.width, False)

    # ---------- conversions ----------

    def resize(self, width: int) -> WideInt:
        """Widen or narrow; narrowing raises Overflow if the value does not fit."""
        return WideInt.from_sign_magnitude(self.negative, self.limbs, width, self.signed)

    def as_signed(self) -> WideInt:
        return WideInt.from_sign_magnitude(self.negative, self.limbs, self.width, True)

    def as_unsigned(self) -> WideInt:
        return WideInt.from_sign_magnitude(self.negative, self.limbs, self.width, False)

    def to_decimal_string(self) -> str:
        body = L.format_decimal(self.limbs)
        return f"-{body}" if self.negative else body

    def to_hex_string(self) -> str:
        body = "0x" + L.format_hex(self.limbs)
        return f"-{body}" if self.negative else body

    def __int__(self) -> int:
        n = L.to_int(self.limbs)
        return -n if self.negative else n

    __index__ = __int__

    def __bool__(self) -> bool:
        return not self.is_zero()

    def __str__(self) -> str:
        return self.to_decimal_string()

    def __repr__(self) -> str:
        return f"WideInt({self.type_name}: {self.to_decimal_string()})"

    # ---------- arithmetic ----------

    def _coerce(self, other: object) -> WideInt:
        if isinstance(other, WideInt):
            if other.signed != self.signed:
                raise TypeError(
                    f"cannot mix {self.type_name} and {other.type_name}; convert explicitly"
                )
            return other
        if isinstance(other, int) and not isinstance(other, bool):
            return WideInt.of(other, self.width, self.signed)
        return NotImplemented

    def _result(self, other: WideInt, negative: bool, mag) -> WideInt:
        return WideInt.from_sign_magnitude(negative, mag, max(self.width, other.width), self.signed)

    def add(self, other: WideInt | int) -> WideInt:
        o = self._coerce(other)
        if o is NotImplemented:
            raise TypeError(f"cannot add {type(other).__name__} to WideInt")
        return self._signed_add(o, o.negative)

    def sub(self, other: WideInt | int) -> WideInt:
        o = self._coerce(other)
        if o is NotImplemented:
            raise TypeError(f"cannot subtract {type(other).__name__} from WideInt")
        return self._signed_add(o, not o.negative and not o.is_zero())

    def _signed_add(self, o: WideInt, o_negative: bool) -> WideInt:
        if self.negative == o_negative:
            return self._result(o, self.negative, L.add(self.limbs, o.limbs))
        c = L.compare(self.limbs, o.limbs)
        if c == 0:
            return self._result(o, False, [])
        if c > 0:
            return self._result(o, self.negative, L.sub(self.limbs, o.limbs))
        return self._result(o, o_negative, L.sub(o.limbs, self.limbs))

    def mul(self, other: WideInt | int) -> WideInt:
        o = self._coerce(other)
        if o is NotImplemented:
            raise TypeError(f"cannot multiply WideInt by {type(other).__name__}")
        return self._result(o, self.negative != o.negative, L.mul(self.limbs, o.limbs))

    def div_rem(self, other: WideInt | int) -> tuple[WideInt, WideInt]:
        """
        Euclidean division: ``self = q*other + r`` with ``0 <= r < |other|``
        for every sign combination (so q rounds toward -inf for positive
        divisors and toward +inf for negative ones).
        """
        o = self._coerce(other)
        if o is NotImplemented:
            raise TypeError(f"cannot divide WideInt by {type(other).__name__}")
        if o.is_zero():
            raise DivisionByZero(f"{self.type_name} division by zero")
        qm, rm = L.divmod_limbs(self.limbs, o.limbs)
        q_negative = self.negative != o.negative
        if self.negative and not L.is_zero(rm):
            qm = L.add_small(qm, 1)
            rm = L.sub(o.limbs, rm)
        return self._result(o, q_negative, qm), self._result(o, False, rm)

    def compare(self, other: WideInt | int) -> int:
        """-1, 0, 1. Ordering is by numeric value, independent of width."""
        if isinstance(other, int) and not isinstance(other, bool):
            o_neg, o_mag = other < 0, L.from_int(abs(other))
        elif isinstance(other, WideInt):
            o_neg, o_mag = other.negative, other.limbs
        else:
            raise TypeError(f"cannot compare WideInt with {type(other).__name__}")
        if self.negative != o_neg:
            return -1 if self.negative else 1
        c = L.compare(self.limbs, o_mag)
        return -c if self.negative else c

    def neg(self) -> WideInt:
        return WideInt.from_sign_magnitude(not self.negative, self.limbs, self.width, self.signed)

    def shl(self, k: int) -> WideInt:
        """self * 2**k; Overflow when bits leave the declared width."""
        if k < 0:
            raise ValueError("negative shift count")
        return WideInt.from_sign_magnitude(self.negative, L.shl(self.limbs, k), self.width, self.signed)

    def shr(self, k: int) -> WideInt:
        """floor(self / 2**k)."""
        if k < 0:
            raise ValueError("negative shift count")
        mag = L.shr(self.limbs, k)
        if self.negative and not L.low_bits_zero(self.limbs, k):
            mag = L.add_small(mag, 1)
        return WideInt.from_sign_magnitude(self.negative, mag, self.width, self.signed)

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

    def __divmod__(self, other):
        o = self._coerce(other)
        return NotImplemented if o is NotImplemented else self.div_rem(o)

    def __rdivmod__(self, other):
        o = self._coerce(other)
        return NotImplemented if o is NotImplemented else o.div_rem(self)

    def __floordiv__(self, other):
        r = self.__divmod__(other)
        return r if r is NotImplemented else r[0]

    def __mod__(self, other):
        r = self.__divmod__(other)
        return r if r is NotImplemented else r[1]

    def __neg__(self) -> WideInt:
        return self.neg()

    def __pos__(self) -> WideInt:
        return self

    def __abs__(self) -> WideInt:
        return self.neg() if self.negative else self

    def __lshift__(self, k: int) -> WideInt:
        return self.shl(k)

    def __rshift__(self, k: int) -> WideInt:
        return self.shr(k)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (WideInt, int)) and not isinstance(other, bool):
            return self.compare(other) == 0
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if isinstance(other, (WideInt, int)) and not isinstance(other, bool):
            return self.compare(other) < 0
        return NotImplemented

    def __hash__(self) -> int:
        return hash(int(self))


IntLike = int | WideInt


# ---------- helpers ----------------------------------------------------------

def _split_sign(text: str) -> tuple[bool, str]:
    s = str(text).strip().replace("_", "")
    negative = s.startswith("-")
    if s and s[0] in "+-":
        s = s[1:]
    return negative, s


def _check_range(limbs, width: int, signed: bool, negative: bool) -> None:
    bits = L.bit_length(limbs)
    if not signed:
        if bits > width:
            raise Overflow(f"value needs {bits} bits, {type_name(width, False)} holds {width}")
        return
    if bits < width:
        return
    # Only -2**(w-1) reaches w magnitude bits in a signed width.
    if negative and bits == width and L.compare(limbs, L.power_of_two(width - 1)) == 0:
        return
    raise Overflow(f"value does not fit {type_name(width, True)}")
