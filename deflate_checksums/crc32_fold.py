"""CRC-32 by folding 128-bit vectors with carry-less multiplication.

A vector is a 128-bit integer holding 16 message bytes in little-endian
order.  The routines work on the raw remainder state, like ``crc32_slice1``.
"""

from __future__ import annotations

from .crc32 import crc32_slice1
from .gf2 import barrett_constants, clmul, fold_multipliers, x_pow_mod_g

__all__ = [
    "fold_vec",
    "fold_partial_vec",
    "barrett_reduce",
    "crc32_fold4",
    "crc32_fold12",
]

_MASK64 = (1 << 64) - 1
_MASK32 = 0xFFFFFFFF

_M1 = fold_multipliers(1)
_M2 = fold_multipliers(2)
_M3 = fold_multipliers(3)
_M4 = fold_multipliers(4)
_M6 = fold_multipliers(6)
_M12 = fold_multipliers(12)

_X95 = x_pow_mod_g(95)
_BARRETT_1, _BARRETT_2 = barrett_constants()


def _check_vec(v: int) -> int:
    if not 0 <= v < (1 << 128):
        raise ValueError(f"vector {v!r} does not fit in 128 bits")
    return v


def _load(data: bytes, pos: int) -> int:
    return int.from_bytes(data[pos:pos + 16], "little")


def _clmul_low(a: int, b: int) -> int:
    return clmul(a & _MASK64, b & _MASK64)


def fold_vec(src: int, dst: int, multipliers: tuple[int, int]) -> int:
    """Fold ``src`` forward onto ``dst`` using a pair of multipliers."""
    _check_vec(src)
    _check_vec(dst)
    lo_mult, hi_mult = multipliers
    a = clmul(src & _MASK64, lo_mult)
    b = clmul(src >> 64, hi_mult)
    return a ^ b ^ dst


def fold_partial_vec(v: int, data, multipliers: tuple[int, int]) -> int:
    """Fold 1 to 15 further message bytes into the vector ``v``.

    The concatenation of ``v`` and ``data`` is split into a short leading
    part and a full 16-byte trailing part, and the former is folded into the
    latter.
    """
    _check_vec(v)
    tail = bytes(memoryview(data).cast("B"))
    n = len(tail)
    if not 1 <= n <= 15:
        raise ValueError(f"partial vector needs 1 to 15 bytes, not {n}")
    vb = v.to_bytes(16, "little")
    x0 = int.from_bytes(bytes(16 - n) + vb[:n], "little")
    x1 = int.from_bytes(vb[n:] + tail, "little")
    return fold_vec(x0, x1, multipliers)


def barrett_reduce(v: int) -> int:
    """Reduce a 128-bit vector to the 32-bit CRC remainder of its bytes."""
    _check_vec(v)
    v0 = _clmul_low(v, _X95) ^ (v >> 64)
    v1 = _clmul_low(v0, _BARRETT_1)
    v1 = _clmul_low(v1, _BARRETT_2)
    v0 ^= v1
    return (v0 >> 64) & _MASK32


def _check_crc(crc: int) -> int:
    if not 0 <= crc <= _MASK32:
        raise ValueError(f"CRC-32 value {crc!r} does not fit in 32 bits")
    return crc


def crc32_fold4(crc: int, data) -> int:
    """Update the raw remainder ``crc`` folding up to four vectors at a time."""
    crc = _check_crc(crc)
    buf = bytes(memoryview(data).cast("B"))
    n = len(buf)
    if n < 64 + 15:
        if n < 16:
            return crc32_slice1(crc, buf)
        v0 = _load(buf, 0) ^ crc
        pos = 16
        while n - pos >= 16:
            v0 = fold_vec(v0, _load(buf, pos), _M1)
            pos += 16
    else:
        v0 = _load(buf, 0) ^ crc
        v1, v2, v3 = (_load(buf, off) for off in (16, 32, 48))
        pos = 64
        while n - pos >= 64:
            v0 = fold_vec(v0, _load(buf, pos), _M4)
            v1 = fold_vec(v1, _load(buf, pos + 16), _M4)
            v2 = fold_vec(v2, _load(buf, pos + 32), _M4)
            v3 = fold_vec(v3, _load(buf, pos + 48), _M4)
            pos += 64
        v0 = fold_vec(v0, v2, _M2)
        v1 = fold_vec(v1, v3, _M2)
        if n - pos >= 32:
            v0 = fold_vec(v0, _load(buf, pos), _M2)
            v1 = fold_vec(v1, _load(buf, pos + 16), _M2)
            pos += 32
        v0 = fold_vec(v0, v1, _M1)
        if n - pos >= 16:
            v0 = fold_vec(v0, _load(buf, pos), _M1)
            pos += 16
    rest = buf[pos:]
    if rest:
        v0 = fold_partial_vec(v0, rest, _M1)
    return barrett_reduce(v0)


def _fold_group(vecs: list[int], buf: bytes, pos: int, mults) -> int:
    for i in range(len(vecs)):
        vecs[i] = fold_vec(vecs[i], _load(buf, pos + 16 * i), mults)
    return pos + 16 * len(vecs)


def crc32_fold12(crc: int, data) -> int:
    """Update the raw remainder ``crc`` folding up to twelve vectors at a time.

    The folded vector and any leftover bytes are finished with the
    byte-wise table method.
    """
    crc = _check_crc(crc)
    buf = bytes(memoryview(data).cast("B"))
    n = len(buf)
    if n < 3 * 192:
        if n < 64:
            return crc32_slice1(crc, buf)
        vecs = [_load(buf, off) for off in (0, 16, 32, 48)]
        vecs[0] ^= crc
        pos = 64
        while n - pos >= 64:
            pos = _fold_group(vecs, buf, pos, _M4)
        vecs = [fold_vec(vecs[0], vecs[2], _M2), fold_vec(vecs[1], vecs[3], _M2)]
        if n - pos >= 32:
            pos = _fold_group(vecs, buf, pos, _M2)
        v0 = fold_vec(vecs[0], vecs[1], _M1)
    else:
        vecs = [_load(buf, 16 * i) for i in range(12)]
        vecs[0] ^= crc
        pos = 192
        while n - pos >= 192:
            pos = _fold_group(vecs, buf, pos, _M12)
        vecs = [fold_vec(vecs[i], vecs[i + 6], _M6) for i in range(6)]
        if n - pos >= 96:
            pos = _fold_group(vecs, buf, pos, _M6)
        vecs = [fold_vec(vecs[i], vecs[i + 3], _M3) for i in range(3)]
        if n - pos >= 48:
            pos = _fold_group(vecs, buf, pos, _M3)
        v0 = fold_vec(vecs[0], vecs[1], _M1)
        v0 = fold_vec(v0, vecs[2], _M1)
    crc = crc32_slice1(0, v0.to_bytes(16, "little"))
    return crc32_slice1(crc, buf[pos:])