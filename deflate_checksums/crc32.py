"""CRC-32 checksum as used by the gzip format.

The routines ``crc32_bitwise``, ``crc32_slice1`` and ``crc32_slice8`` work on
the raw remainder state.  ``crc32`` and ``Crc32`` add the pre- and
post-inversion that the gzip format requires.
"""

from __future__ import annotations

import struct

__all__ = [
    "POLY_REFLECTED",
    "Crc32",
    "make_tables",
    "crc32",
    "crc32_bitwise",
    "crc32_slice1",
    "crc32_slice8",
]

# G(x) without its x^32 term, bit-reflected.
POLY_REFLECTED = 0xEDB88320

_MASK32 = 0xFFFFFFFF


def _as_bytes(data) -> bytes:
    return bytes(memoryview(data).cast("B"))


def _check_value(value: int) -> int:
    if not 0 <= value <= _MASK32:
        raise ValueError(f"CRC-32 value {value!r} does not fit in 32 bits")
    return value


def _byte_remainder(b: int) -> int:
    crc = b
    for _ in range(8):
        crc = (crc >> 1) ^ (POLY_REFLECTED if crc & 1 else 0)
    return crc


def make_tables() -> tuple[tuple[int, ...], ...]:
    """Build the eight 256-entry slice-by-8 tables.

    Table ``k`` holds, for each byte value, its CRC remainder followed by
    ``k`` zero bytes.  Table 0 is the ordinary byte-at-a-time table.
    """
    first = tuple(_byte_remainder(b) for b in range(256))
    tables = [first]
    for _ in range(7):
        prev = tables[-1]
        tables.append(tuple((c >> 8) ^ first[c & 0xFF] for c in prev))
    return tuple(tables)


_TABLES = make_tables()
_TABLE0 = _TABLES[0]


def crc32_bitwise(crc: int, data) -> int:
    """Update the raw remainder ``crc`` one bit at a time."""
    crc = _check_value(crc)
    for byte in _as_bytes(data):
        crc ^= byte
        for _ in range(8):
            crc = (crc >> 1) ^ (POLY_REFLECTED if crc & 1 else 0)
    return crc


def crc32_slice1(crc: int, data) -> int:
    """Update the raw remainder ``crc`` one byte at a time using a table."""
    crc = _check_value(crc)
    table = _TABLE0
    for byte in _as_bytes(data):
        crc = (crc >> 8) ^ table[(crc ^ byte) & 0xFF]
    return crc


def crc32_slice8(crc: int, data) -> int:
    """Update the raw remainder ``crc`` eight bytes at a time."""
    crc = _check_value(crc)
    view = _as_bytes(data)
    n8 = len(view) & ~7
    t0, t1, t2, t3, t4, t5, t6, t7 = _TABLES
    for v1, v2 in struct.iter_unpack("<II", view[:n8]):
        x = crc ^ v1
        crc = (
            t7[x & 0xFF]
            ^ t6[(x >> 8) & 0xFF]
            ^ t5[(x >> 16) & 0xFF]
            ^ t4[x >> 24]
            ^ t3[v2 & 0xFF]
            ^ t2[(v2 >> 8) & 0xFF]
            ^ t1[(v2 >> 16) & 0xFF]
            ^ t0[v2 >> 24]
        )
    return crc32_slice1(crc, view[n8:])


def crc32(data=None, value: int = 0) -> int:
    """Update the running checksum ``value`` with ``data``.

    A new checksum starts at 0.  When ``data`` is None the initial value 0
    is returned.
    """
    if data is None:
        return 0
    value = _check_value(value)
    return crc32_slice8(value ^ _MASK32, data) ^ _MASK32


class Crc32:
    """Incremental CRC-32 checksum."""

    __slots__ = ("value",)

    def __init__(self, data=b"", *, value: int = 0) -> None:
        self.value = _check_value(value)
        if data:
            self.update(data)

    def update(self, data) -> None:
        """Fold more bytes into the checksum."""
        self.value = crc32(data, self.value)

    def copy(self) -> Crc32:
        """Return an independent checksum with the same state."""
        return Crc32(value=self.value)

    def __repr__(self) -> str:
        return f"Crc32(value=0x{self.value:08x})"