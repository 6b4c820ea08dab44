"""Polynomial arithmetic over GF(2) for the gzip CRC-32 generator.

CRC-32 values here use the bit-reflected convention of the gzip format.
In a 32-bit value, bit ``i`` holds the coefficient of ``x^(31 - i)``.
The folding and chunk-combining multipliers are powers of ``x`` reduced
modulo the generator polynomial ``G(x)``, stored in that convention.
"""

from __future__ import annotations

import functools

__all__ = [
    "G_NATURAL",
    "G_REFLECTED",
    "CRC32_NUM_CHUNKS",
    "CRC32_MIN_VARIABLE_CHUNK_LEN",
    "CRC32_MAX_VARIABLE_CHUNK_LEN",
    "CRC32_FIXED_CHUNK_LEN",
    "clmul",
    "x_pow_mod_g",
    "fold_multipliers",
    "chunk_multipliers",
    "barrett_constants",
]

# G(x) = x^32 + x^26 + x^23 + x^22 + x^16 + x^12 + x^11 + x^10 + x^8 + x^7
#        + x^5 + x^4 + x^2 + x + 1, with bit i holding the coefficient of x^i.
G_NATURAL = 0x104C11DB7
# The same polynomial bit-reflected over 33 bits.
G_REFLECTED = 0x1DB710641

CRC32_NUM_CHUNKS = 4
CRC32_MIN_VARIABLE_CHUNK_LEN = 128
CRC32_MAX_VARIABLE_CHUNK_LEN = 16384
CRC32_FIXED_CHUNK_LEN = 32768


def _reflect(v: int, nbits: int) -> int:
    return int(format(v, f"0{nbits}b")[::-1], 2)


def clmul(a: int, b: int) -> int:
    """Carry-less (GF(2) polynomial) product of two non-negative integers."""
    if a < 0 or b < 0:
        raise ValueError("carry-less multiplication needs non-negative operands")
    result = 0
    while b:
        low = b & -b
        result ^= a << (low.bit_length() - 1)
        b ^= low
    return result


def _polymod(a: int, m: int) -> int:
    mdeg = m.bit_length()
    while a.bit_length() >= mdeg:
        a ^= m << (a.bit_length() - mdeg)
    return a


def _polydiv(a: int, m: int) -> int:
    mdeg = m.bit_length()
    quotient = 0
    while a.bit_length() >= mdeg:
        shift = a.bit_length() - mdeg
        quotient |= 1 << shift
        a ^= m << shift
    return quotient


@functools.lru_cache(maxsize=None)
def _x_pow_mod_g_natural(n: int) -> int:
    result = 1
    base = 2  # the polynomial x
    while n:
        if n & 1:
            result = _polymod(clmul(result, base), G_NATURAL)
        base = _polymod(clmul(base, base), G_NATURAL)
        n >>= 1
    return result


def x_pow_mod_g(n: int) -> int:
    """``x^n mod G(x)`` as a bit-reflected 32-bit value."""
    if n < 0:
        raise ValueError(f"exponent must be non-negative, not {n!r}")
    return _reflect(_x_pow_mod_g_natural(n), 32)


def fold_multipliers(num_vecs: int) -> tuple[int, int]:
    """Multipliers for folding a 128-bit vector forward by ``num_vecs`` vectors.

    Returns ``(x^(128*num_vecs + 31) mod G, x^(128*num_vecs - 33) mod G)``.
    """
    if num_vecs < 1:
        raise ValueError(f"number of vectors must be at least 1, not {num_vecs!r}")
    distance = 128 * num_vecs
    return x_pow_mod_g(distance + 32 - 1), x_pow_mod_g(distance - 32 - 1)


def chunk_multipliers(chunk_len: int) -> tuple[int, int, int]:
    """Multipliers that combine the CRCs of four adjacent chunks.

    For chunks of ``chunk_len`` bytes, returns ``x^(j*8*chunk_len - 33) mod G``
    for ``j`` = 3, 2, 1, applied to the first three chunks' CRCs.
    """
    if chunk_len <= 0 or chunk_len % 8:
        raise ValueError(
            f"chunk length must be a positive multiple of 8, not {chunk_len!r}"
        )
    bits = 8 * chunk_len
    return tuple(
        x_pow_mod_g(j * bits - 33) for j in range(CRC32_NUM_CHUNKS - 1, 0, -1)
    )


def barrett_constants() -> tuple[int, int]:
    """Constants for Barrett reduction of a 64-bit remainder to 32 bits.

    Returns ``(floor(x^95 / G(x))`` bit-reflected over 64 bits, ``G(x)``
    bit-reflected over 33 bits``)``.
    """
    quotient = _polydiv(1 << 95, G_NATURAL)
    return _reflect(quotient, 64), _reflect(G_NATURAL, 33)