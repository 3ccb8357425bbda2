# -----------------------------------------------------------------------------
#  decompression.py
#  Buffer-in / buffer-out decompression. Independent of the numeric core.
# -----------------------------------------------------------------------------

from __future__ import annotations

import zlib
from typing import Protocol, runtime_checkable

from widenum.errors import BufferLimitError, DecompressionError


@runtime_checkable
class Decompressor(Protocol):
    def decompress(self, buffer: bytes, max_length: int) -> bytes:
        """Return at most ``max_length`` decompressed bytes."""
        ...


class ZlibDecompressor:
    """Lossless zlib/deflate stream decoder with a hard output bound."""

    def __init__(self, wbits: int = zlib.MAX_WBITS):
        self.wbits = wbits

    def decompress(self, buffer: bytes, max_length: int) -> bytes:
        if max_length < 0:
            raise ValueError("max_length must be >= 0")
        d = zlib.decompressobj(self.wbits)
        try:
            # one byte of headroom tells "exactly max_length" from "more"
            out = d.decompress(bytes(buffer), max_length + 1)
        except zlib.error as e:
            raise DecompressionError(f"corrupt stream: {e}") from None
        if len(out) > max_length or d.unconsumed_tail:
            raise BufferLimitError(f"decompressed data exceeds {max_length} bytes")
        if not d.eof:
            raise DecompressionError("truncated stream")
        return out


class InterpolatingDecompressor:
    """
    Lossy decoder for a decimated 8-bit sample stream.

    The encoder kept every ``factor``-th sample; each gap between two kept
    neighbours is refilled on the straight line between them, so
    ``len(buffer)`` samples expand to ``(len(buffer) - 1) * factor + 1``.
    Detail dropped by the encoder is not recovered.
    """

    def __init__(self, factor: int = 2):
        if factor < 1:
            raise ValueError("factor must be >= 1")
        self.factor = factor

    def decompress(self, buffer: bytes, max_length: int) -> bytes:
        if max_length < 0:
            raise ValueError("max_length must be >= 0")
        data = bytes(buffer)
        if not data:
            return b""
        size = (len(data) - 1) * self.factor + 1
        if size > max_length:
            raise BufferLimitError(f"decompressed data ({size} bytes) exceeds {max_length} bytes")
        out = bytearray()
        for a, b in zip(data, data[1:]):
            out.extend(a + (b - a) * j // self.factor for j in range(self.factor))
        out.append(data[-1])
        return bytes(out)
