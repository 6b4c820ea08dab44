"""CRC-32 by checksumming four adjacent chunks separately and combining.

Each chunk's remainder is computed on its own. The four results are then
merged by multiplying the first three by precomputed powers of ``x`` modulo
``G(x)``. The routines work on the raw remainder state, like
``crc32_slice8``.
"""

from __future__ import annotations

import functools
from collections.abc import Callable

from .cpufeatures import ArmFeature
from .crc32 import crc32_slice1, crc32_slice8
from .crc32_fold import crc32_fold4, crc32_fold12
from .gf2 import (
    CRC32_FIXED_CHUNK_LEN,
    CRC32_MAX_VARIABLE_CHUNK_LEN,
    CRC32_MIN_VARIABLE_CHUNK_LEN,
    CRC32_NUM_CHUNKS,
    chunk_multipliers,
    clmul,
)

__all__ = [
    "MAX_CHUNK_INDEX",
    "combine_crcs_slow",
    "combine_crcs_fast",
    "crc32_chunked_fixed",
    "crc32_chunked_variable",
    "select_crc32_impl",
]

_MASK32 = 0xFFFFFFFF

# Largest chunk-length index accepted by combine_crcs_fast().
MAX_CHUNK_INDEX = CRC32_MAX_VARIABLE_CHUNK_LEN // CRC32_MIN_VARIABLE_CHUNK_LEN

Crc32Func = Callable[[int, bytes], int]


def _check_crc(crc: int) -> int:
    if not 0 <= crc <= _MASK32:
        raise ValueError(f"CRC-32 value {crc!r} does not fit in 32 bits")
    return crc


def _as_bytes(data) -> bytes:
    return bytes(memoryview(data).cast("B"))


def _crc32d(crc: int, word: int) -> int:
    """Fold one 64-bit little-endian word into the raw remainder."""
    return crc32_slice1(crc, word.to_bytes(8, "little"))


def _combine(crcs: tuple[int, int, int, int], mults: tuple[int, int, int]) -> int:
    for crc in crcs:
        _check_crc(crc)
    crc0, crc1, crc2, crc3 = crcs
    product = clmul(crc0, mults[0]) ^ clmul(crc1, mults[1]) ^ clmul(crc2, mults[2])
    return _crc32d(0, product) ^ crc3


@functools.lru_cache(maxsize=None)
def _multipliers_for(chunk_len: int) -> tuple[int, int, int]:
    return chunk_multipliers(chunk_len)


def combine_crcs_slow(crc0: int, crc1: int, crc2: int, crc3: int) -> int:
    """Combine the remainders of four adjacent fixed-length chunks.

    Each chunk is ``CRC32_FIXED_CHUNK_LEN`` bytes long. ``crc0`` may carry
    any starting state, while ``crc1`` to ``crc3`` must start from zero.
    """
    return _combine((crc0, crc1, crc2, crc3), _multipliers_for(CRC32_FIXED_CHUNK_LEN))


def combine_crcs_fast(crc0: int, crc1: int, crc2: int, crc3: int, i: int) -> int:
    """Combine four adjacent chunks of ``i * 128`` bytes each.

    ``i`` ranges from 1 to ``MAX_CHUNK_INDEX``.
    """
    if not 1 <= i <= MAX_CHUNK_INDEX:
        raise ValueError(f"chunk index must be in 1..{MAX_CHUNK_INDEX}, not {i!r}")
    return _combine(
        (crc0, crc1, crc2, crc3),
        _multipliers_for(i * CRC32_MIN_VARIABLE_CHUNK_LEN),
    )


def _four_chunks(crc: int, buf: bytes, pos: int, chunk_len: int) -> tuple[int, ...]:
    starts = (crc, 0, 0, 0)
    return tuple(
        crc32_slice8(start, buf[pos + k * chunk_len:pos + (k + 1) * chunk_len])
        for k, start in enumerate(starts)
    )


def crc32_chunked_fixed(crc: int, data) -> int:
    """Update the raw remainder ``crc`` using large fixed-length chunks.

    Groups of four ``CRC32_FIXED_CHUNK_LEN``-byte chunks are checksummed
    separately and combined. Whatever is left is processed directly.
    """
    crc = _check_crc(crc)
    buf = _as_bytes(data)
    group = CRC32_NUM_CHUNKS * CRC32_FIXED_CHUNK_LEN
    pos = 0
    while len(buf) - pos >= group:
        crc = combine_crcs_slow(*_four_chunks(crc, buf, pos, CRC32_FIXED_CHUNK_LEN))
        pos += group
    return crc32_slice8(crc, buf[pos:])


def crc32_chunked_variable(crc: int, data) -> int:
    """Update the raw remainder ``crc`` using variable-length chunks.

    Groups of four maximum-length chunks are processed first. Then at most
    one group of four chunks follows, each chunk a multiple of 128 bytes,
    and the remainder is processed directly.
    """
    crc = _check_crc(crc)
    buf = _as_bytes(data)
    n = len(buf)
    pos = 0
    min_group = CRC32_NUM_CHUNKS * CRC32_MIN_VARIABLE_CHUNK_LEN
    if n >= min_group:
        max_group = CRC32_NUM_CHUNKS * CRC32_MAX_VARIABLE_CHUNK_LEN
        while n - pos >= max_group:
            crcs = _four_chunks(crc, buf, pos, CRC32_MAX_VARIABLE_CHUNK_LEN)
            crc = combine_crcs_fast(*crcs, MAX_CHUNK_INDEX)
            pos += max_group
        if n - pos >= min_group:
            i = (n - pos) // min_group
            chunk_len = i * CRC32_MIN_VARIABLE_CHUNK_LEN
            crc = combine_crcs_fast(*_four_chunks(crc, buf, pos, chunk_len), i)
            pos += CRC32_NUM_CHUNKS * chunk_len
    return crc32_slice8(crc, buf[pos:])


def select_crc32_impl(features: ArmFeature) -> Crc32Func:
    """Choose the raw-remainder CRC-32 routine suited to the CPU features.

    If no specialised routine applies, ``crc32_slice8`` is returned.
    """
    features = ArmFeature(features)
    has_pmull = bool(features & ArmFeature.PMULL)
    has_crc32 = bool(features & ArmFeature.CRC32)
    prefer_pmull = bool(features & ArmFeature.PREFER_PMULL)
    if prefer_pmull and has_pmull and has_crc32:
        return crc32_fold12
    if has_crc32 and has_pmull:
        return crc32_chunked_variable
    if has_crc32:
        return crc32_chunked_fixed
    if has_pmull:
        return crc32_fold4
    return crc32_slice8