"""Byte-order, unaligned access and bit-scanning helpers on plain integers."""

from __future__ import annotations

__all__ = [
    "bswap16",
    "bswap32",
    "bswap64",
    "get_unaligned_le16",
    "get_unaligned_be16",
    "get_unaligned_le32",
    "get_unaligned_be32",
    "get_unaligned_le64",
    "put_unaligned_le16",
    "put_unaligned_be16",
    "put_unaligned_le32",
    "put_unaligned_be32",
    "put_unaligned_le64",
    "bsr32",
    "bsr64",
    "bsf32",
    "bsf64",
    "rbit32",
    "div_round_up",
    "align",
    "round_up",
]


def _check_width(v: int, bits: int) -> int:
    if not 0 <= v < (1 << bits):
        raise ValueError(f"value {v!r} does not fit in {bits} unsigned bits")
    return v


def _bswap(v: int, nbytes: int) -> int:
    _check_width(v, 8 * nbytes)
    return int.from_bytes(v.to_bytes(nbytes, "little"), "big")


def bswap16(v: int) -> int:
    """Swap the bytes of a 16-bit integer."""
    return _bswap(v, 2)


def bswap32(v: int) -> int:
    """Swap the bytes of a 32-bit integer."""
    return _bswap(v, 4)


def bswap64(v: int) -> int:
    """Swap the bytes of a 64-bit integer."""
    return _bswap(v, 8)


def _span(length: int, offset: int, nbytes: int) -> slice:
    if offset < 0 or offset + nbytes > length:
        raise IndexError(
            f"{nbytes}-byte access at offset {offset} is out of range "
            f"for a buffer of {length} bytes"
        )
    return slice(offset, offset + nbytes)


def _get(data, offset: int, nbytes: int, byteorder: str) -> int:
    view = memoryview(data).cast("B")
    return int.from_bytes(view[_span(len(view), offset, nbytes)], byteorder)


def _put(value: int, buf, offset: int, nbytes: int, byteorder: str) -> None:
    _check_width(value, 8 * nbytes)
    view = memoryview(buf).cast("B")
    if view.readonly:
        raise TypeError("buffer is read-only")
    view[_span(len(view), offset, nbytes)] = value.to_bytes(nbytes, byteorder)


def get_unaligned_le16(data, offset: int = 0) -> int:
    """Read a little-endian 16-bit integer at ``offset``."""
    return _get(data, offset, 2, "little")


def get_unaligned_be16(data, offset: int = 0) -> int:
    """Read a big-endian 16-bit integer at ``offset``."""
    return _get(data, offset, 2, "big")


def get_unaligned_le32(data, offset: int = 0) -> int:
    """Read a little-endian 32-bit integer at ``offset``."""
    return _get(data, offset, 4, "little")


def get_unaligned_be32(data, offset: int = 0) -> int:
    """Read a big-endian 32-bit integer at ``offset``."""
    return _get(data, offset, 4, "big")


def get_unaligned_le64(data, offset: int = 0) -> int:
    """Read a little-endian 64-bit integer at ``offset``."""
    return _get(data, offset, 8, "little")


def put_unaligned_le16(value: int, buf, offset: int = 0) -> None:
    """Write ``value`` as a little-endian 16-bit integer at ``offset``."""
    _put(value, buf, offset, 2, "little")


def put_unaligned_be16(value: int, buf, offset: int = 0) -> None:
    """Write ``value`` as a big-endian 16-bit integer at ``offset``."""
    _put(value, buf, offset, 2, "big")


def put_unaligned_le32(value: int, buf, offset: int = 0) -> None:
    """Write ``value`` as a little-endian 32-bit integer at ``offset``."""
    _put(value, buf, offset, 4, "little")


def put_unaligned_be32(value: int, buf, offset: int = 0) -> None:
    """Write ``value`` as a big-endian 32-bit integer at ``offset``."""
    _put(value, buf, offset, 4, "big")


def put_unaligned_le64(value: int, buf, offset: int = 0) -> None:
    """Write ``value`` as a little-endian 64-bit integer at ``offset``."""
    _put(value, buf, offset, 8, "little")


def _nonzero(v: int, bits: int) -> int:
    _check_width(v, bits)
    if v == 0:
        raise ValueError("bit scan of zero is undefined")
    return v


def bsr32(v: int) -> int:
    """Index of the most significant set bit of a nonzero 32-bit value."""
    return _nonzero(v, 32).bit_length() - 1


def bsr64(v: int) -> int:
    """Index of the most significant set bit of a nonzero 64-bit value."""
    return _nonzero(v, 64).bit_length() - 1


def bsf32(v: int) -> int:
    """Index of the least significant set bit of a nonzero 32-bit value."""
    v = _nonzero(v, 32)
    return (v & -v).bit_length() - 1


def bsf64(v: int) -> int:
    """Index of the least significant set bit of a nonzero 64-bit value."""
    v = _nonzero(v, 64)
    return (v & -v).bit_length() - 1


def rbit32(v: int) -> int:
    """Reverse the order of the bits in a 32-bit integer."""
    _check_width(v, 32)
    return int(format(v, "032b")[::-1], 2)


def div_round_up(n: int, d: int) -> int:
    """Divide ``n`` by ``d``, rounding up."""
    if d <= 0:
        raise ValueError("divisor must be positive")
    return (n + d - 1) // d


def align(n: int, a: int) -> int:
    """Round ``n`` up to a multiple of the power of two ``a``."""
    if a <= 0 or a & (a - 1):
        raise ValueError("alignment must be a positive power of two")
    return (n + a - 1) & ~(a - 1)


def round_up(n: int, d: int) -> int:
    """Round ``n`` up to a multiple of ``d``."""
    return d * div_round_up(n, d)