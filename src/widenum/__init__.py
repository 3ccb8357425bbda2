from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

# Version
try:
    __version__ = _pkg_version("widenum")
except PackageNotFoundError:
    __version__ = "0+unknown"

# Public API re-exports
from .distribution import BinomialFit, binomial_fit, binomial_mean, binomial_pmf
from .errors import (
    DivisionByZero,
    EmptySample,
    InvalidRange,
    NonConvergence,
    Overflow,
    WideNumError,
)
from .number_theory import combination, divisibility_theorem, factorial, gauss_sum, permutation
from .runtime import APPLY, CFG
from .widefloat import WideFloat
from .wideint import WideInt
from .widths import Width

__all__ = [
    "APPLY",
    "CFG",
    "BinomialFit",
    "DivisionByZero",
    "EmptySample",
    "InvalidRange",
    "NonConvergence",
    "Overflow",
    "WideFloat",
    "WideInt",
    "WideNumError",
    "Width",
    "__version__",
    "binomial_fit",
    "binomial_mean",
    "binomial_pmf",
    "combination",
    "divisibility_theorem",
    "factorial",
    "gauss_sum",
    "permutation",
]
