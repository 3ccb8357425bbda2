# tests/test_decompression.py
from __future__ import annotations

import zlib

import pytest

from widenum.decompression import Decompressor, InterpolatingDecompressor, ZlibDecompressor
from widenum.errors import BufferLimitError, DecompressionError

PAYLOAD = b"firmware image block " * 200


def test_protocol():
    assert isinstance(ZlibDecompressor(), Decompressor)
    assert isinstance(InterpolatingDecompressor(), Decompressor)


def test_lossless_within_bound():
    data = zlib.compress(PAYLOAD)
    assert ZlibDecompressor().decompress(data, len(PAYLOAD)) == PAYLOAD
    assert ZlibDecompressor().decompress(data, 10 * len(PAYLOAD)) == PAYLOAD


def test_bound_exceeded():
    data = zlib.compress(PAYLOAD)
    with pytest.raises(BufferLimitError):
        ZlibDecompressor().decompress(data, len(PAYLOAD) - 1)


def test_corrupt_and_truncated_streams():
    data = zlib.compress(PAYLOAD)
    with pytest.raises(DecompressionError):
        ZlibDecompressor().decompress(b"not zlib at all", 1000)
    with pytest.raises(DecompressionError):
        ZlibDecompressor().decompress(data[: len(data) // 2], 10_000)


def test_raw_deflate():
    c = zlib.compressobj(wbits=-15)
    raw = c.compress(PAYLOAD) + c.flush()
    assert ZlibDecompressor(wbits=-15).decompress(raw, len(PAYLOAD)) == PAYLOAD


def test_lossy_refills_gaps_between_kept_samples():
    d = InterpolatingDecompressor(factor=2)
    assert d.decompress(bytes([0, 10, 4]), 5) == bytes([0, 5, 10, 7, 4])
    assert InterpolatingDecompressor(factor=4).decompress(bytes([0, 8]), 5) == bytes([0, 2, 4, 6, 8])
    assert d.decompress(bytes([255, 0]), 3) == bytes([255, 127, 0])
    assert d.decompress(b"", 0) == b""


def test_lossy_is_lossy():
    original = bytes([0, 9, 10, 1, 4])
    kept = original[::2]
    restored = InterpolatingDecompressor().decompress(kept, len(original))
    assert len(restored) == len(original)
    assert restored[::2] == kept
    assert restored != original


def test_lossy_bound_exceeded():
    with pytest.raises(BufferLimitError):
        InterpolatingDecompressor(factor=3).decompress(bytes(10), 27)
    with pytest.raises(ValueError):
        InterpolatingDecompressor(factor=0)
