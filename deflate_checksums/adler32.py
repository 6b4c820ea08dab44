"""Adler-32 checksum as used by the zlib format."""

from __future__ import annotations

import functools
from collections.abc import Callable
from itertools import accumulate

from .cpufeatures import ArmFeature, get_arm_cpu_features

__all__ = [
    "DIVISOR",
    "MAX_CHUNK_LEN",
    "Adler32",
    "adler32",
    "adler32_generic",
    "adler32_blocked",
    "select_adler32_impl",
]

# The Adler-32 modulus.
DIVISOR = 65521

# Most bytes that can be summed before s2 could exceed 32 bits, assuming
# worst-case starting values and every byte equal to 0xFF.
MAX_CHUNK_LEN = 5552

_BLOCK = 64

Adler32Func = Callable[[int, bytes], int]


def _as_bytes(data) -> bytes:
    return bytes(memoryview(data).cast("B"))


def _check_value(value: int) -> int:
    if not 0 <= value <= 0xFFFFFFFF:
        raise ValueError(f"Adler-32 value {value!r} does not fit in 32 bits")
    return value


def _chunk(s1: int, s2: int, chunk: bytes) -> tuple[int, int]:
    """Fold ``chunk`` into ``(s1, s2)`` and reduce both modulo ``DIVISOR``.

    Whole groups of four bytes are summed column by column, then the
    remaining bytes are added one at a time.
    """
    n4 = len(chunk) & ~3
    if n4:
        quads = chunk[:n4]
        group_totals = [sum(q) for q in zip(*(quads[k::4] for k in range(4)))]
        prefix = list(accumulate(group_totals, initial=0))
        s1_sum = len(group_totals) * s1 + sum(prefix[:-1])
        s1 += prefix[-1]
        b0, b1, b2, b3 = (sum(quads[k::4]) for k in range(4))
        s2 += 4 * (s1_sum + b0) + 3 * b1 + 2 * b2 + b3
    for byte in chunk[n4:]:
        s1 += byte
        s2 += s1
    return s1 % DIVISOR, s2 % DIVISOR


def _chunks(data: bytes, size: int):
    for start in range(0, len(data), size):
        yield data[start:start + size]


def adler32_generic(value: int, data) -> int:
    """Update ``value`` with ``data`` using the portable chunked algorithm."""
    s1 = _check_value(value) & 0xFFFF
    s2 = value >> 16
    for chunk in _chunks(_as_bytes(data), MAX_CHUNK_LEN & ~3):
        s1, s2 = _chunk(s1, s2, chunk)
    return (s2 << 16) | s1


def adler32_blocked(value: int, data) -> int:
    """Update ``value`` with ``data``, summing 64-byte blocks at a time.

    Per-position byte sums are accumulated across all blocks of a chunk and
    weighted 64..1 at the end, as a vector implementation does.
    """
    s1 = _check_value(value) & 0xFFFF
    s2 = value >> 16
    for chunk in _chunks(_as_bytes(data), MAX_CHUNK_LEN & ~(_BLOCK - 1)):
        full = len(chunk) & ~(_BLOCK - 1)
        if full:
            blocks = chunk[:full]
            s2 += s1 * full
            block_totals = [sum(b) for b in _chunks(blocks, _BLOCK)]
            prefix = list(accumulate(block_totals, initial=0))
            v_s1 = prefix[-1]
            v_s2 = sum(prefix[:-1])
            weighted = sum(
                (_BLOCK - pos) * sum(blocks[pos::_BLOCK]) for pos in range(_BLOCK)
            )
            s1 += v_s1
            s2 += _BLOCK * v_s2 + weighted
        s1, s2 = _chunk(s1, s2, chunk[full:])
    return (s2 << 16) | s1


def select_adler32_impl(features: ArmFeature) -> Adler32Func:
    """Choose the Adler-32 routine suited to the given CPU features."""
    features = ArmFeature(features)
    if features & ArmFeature.NEON:
        return adler32_blocked
    return adler32_generic


@functools.lru_cache(maxsize=None)
def _default_impl() -> Adler32Func:
    return select_adler32_impl(get_arm_cpu_features())


def adler32(data=None, value: int = 1) -> int:
    """Update the running checksum ``value`` with ``data``.

    A new checksum starts at 1.  When ``data`` is None the initial value 1
    is returned.
    """
    if data is None:
        return 1
    return _default_impl()(value, data)


class Adler32:
    """Incremental Adler-32 checksum."""

    __slots__ = ("value",)

    def __init__(self, data=b"", *, value: int = 1) -> None:
        self.value = _check_value(value)
        if data:
            self.update(data)

    def update(self, data) -> None:
        """Fold more bytes into the checksum."""
        self.value = adler32(data, self.value)

    def copy(self) -> Adler32:
        """Return an independent checksum with the same state."""
        return Adler32(value=self.value)

    def __repr__(self) -> str:
        return f"Adler32(value=0x{self.value:08x})"