# src/widenum/widths.py
from __future__ import annotations

from enum import IntEnum


class Width(IntEnum):
    """Supported bit widths. Every WideInt/WideFloat carries one of these."""
    W4 = 4
    W8 = 8
    W16 = 16
    W32 = 32
    W64 = 64
    W128 = 128
    W512 = 512
    W1024 = 1024
    W2048 = 2048
    W3072 = 3072
    W4096 = 4096
    W8192 = 8192


WIDTHS: tuple[int, ...] = tuple(int(w) for w in Width)

LIMB_BITS = 64
LIMB_BASE = 1 << LIMB_BITS
LIMB_MASK = LIMB_BASE - 1


def check_width(width: int) -> int:
    """Return ``width`` as a plain int, or raise ValueError if it is not a declared width."""
    try:
        w = int(width)
    except (TypeError, ValueError):
        raise ValueError(f"bit width must be an integer, got {width!r}") from None
    if w not in WIDTHS:
        allowed = ", ".join(str(x) for x in WIDTHS)
        raise ValueError(f"unsupported bit width {w} (allowed: {allowed})")
    return w


def limb_count(width: int) -> int:
    return -(-int(width) // LIMB_BITS)


def type_name(width: int, signed: bool) -> str:
    """'u512', 'i64', ... as used in reprs and CLI output."""
    return f"{'i' if signed else 'u'}{int(width)}"

