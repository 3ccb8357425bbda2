# src/widenum/fmt.py
from __future__ import annotations

from colorama import Fore, Style

from widenum.runtime import CFG
from widenum.widefloat import WideFloat
from widenum.wideint import WideInt


def abbr_digits(s: str, head: int = 10, tail: int = 10, threshold: int = 35, ellipsis: str = "…") -> str:
    """Abbreviate a long decimal string as first<head>…last<tail> (sign kept)."""
    sign = "-" if s.startswith("-") else ""
    body = s[1:] if sign else s
    if threshold <= 0 or len(body) <= threshold or head + tail >= len(body):
        return s
    return f"{sign}{body[:head]}{ellipsis}{body[-tail:]}"


def format_wide_int(x: WideInt, *, full: bool = False) -> str:
    s = x.to_decimal_string()
    if full:
        return s
    return abbr_digits(
        s,
        int(CFG("FORMATTING.NUM_ABBR_HEAD", 20)),
        int(CFG("FORMATTING.NUM_ABBR_TAIL", 20)),
        int(CFG("FORMATTING.NUM_ABBR_THRESHOLD", 60)),
        CFG("FORMATTING.ELLIPSIS", "…"),
    )


def format_wide_float(x: WideFloat, digits: int | None = None) -> str:
    if digits is None:
        digits = int(CFG("FORMATTING.DIGITS", 12))
    return x.to_decimal_string(digits)


def label(text: str) -> str:
    return f"{Fore.CYAN}{text}{Style.RESET_ALL}"


def value(text: str) -> str:
    return f"{Fore.YELLOW}{Style.BRIGHT}{text}{Style.RESET_ALL}"


def digits_note(x: WideInt) -> str:
    n = len(x.to_decimal_string().lstrip("-"))
    return f"{Style.DIM}({n} digits, {x.bit_length()} bits of {x.type_name}){Style.RESET_ALL}"
