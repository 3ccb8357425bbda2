# src/widenum/errors.py
from __future__ import annotations


class WideNumError(Exception):
    """Base class for every failure raised by the numeric core."""


class DivisionByZero(WideNumError, ZeroDivisionError):
    pass


class Overflow(WideNumError, OverflowError):
    """Result does not fit the declared bit width (no silent wraparound)."""


class InvalidRange(WideNumError, ValueError):
    pass


class EmptySample(WideNumError, ValueError):
    pass


class NonConvergence(WideNumError, ArithmeticError):
    """Iterative division ran out of iterations before r < |b|."""

    def __init__(self, message: str, *, iterations: int = 0):
        super().__init__(message)
        self.iterations = iterations


# --- decompression collaborator ---------------------------------------------

class DecompressionError(WideNumError):
    pass


class BufferLimitError(DecompressionError):
    pass


# --- configuration / CLI -----------------------------------------------------

class UserInputError(Exception):
    pass
