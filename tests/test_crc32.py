import random
import zlib

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from deflate_checksums.crc32 import (
    POLY_REFLECTED,
    Crc32,
    crc32,
    crc32_bitwise,
    crc32_slice1,
    crc32_slice8,
    make_tables,
)


def _data(n, seed=1):
    return random.Random(seed).randbytes(n)


def test_check_value():
    assert crc32(b"123456789") == 0xCBF43926


def test_none_returns_initial_value():
    assert crc32(None) == 0
    assert crc32(None, 0x1234) == 0


def test_empty_data_keeps_value():
    assert crc32(b"", 0xDEADBEEF) == 0xDEADBEEF


def test_table_entry_for_high_bit_is_polynomial():
    tables = make_tables()
    assert tables[0][128] == POLY_REFLECTED
    assert tables[0][0] == 0


def test_tables_shape_and_meaning():
    tables = make_tables()
    assert len(tables) == 8
    assert all(len(t) == 256 for t in tables)
    for k in range(8):
        for b in (0, 1, 77, 255):
            assert tables[k][b] == crc32_bitwise(0, bytes([b]) + bytes(k))


@pytest.mark.parametrize("n", [0, 1, 7, 8, 9, 15, 16, 63, 64, 65, 1000])
def test_matches_zlib(n):
    data = _data(n, seed=n)
    assert crc32(data) == zlib.crc32(data)


@settings(max_examples=60)
@given(st.binary(max_size=200), st.integers(0, 0xFFFFFFFF))
def test_implementations_agree(data, crc):
    expected = crc32_bitwise(crc, data)
    assert crc32_slice1(crc, data) == expected
    assert crc32_slice8(crc, data) == expected


@settings(max_examples=60)
@given(st.binary(max_size=100), st.binary(max_size=100))
def test_incremental(a, b):
    assert crc32(b, crc32(a)) == crc32(a + b)
    assert crc32(a + b) == zlib.crc32(a + b)


def test_accepts_buffer_types():
    data = _data(50)
    assert crc32(bytearray(data)) == crc32(data)
    assert crc32(memoryview(data)) == crc32(data)


def test_out_of_range_value():
    with pytest.raises(ValueError):
        crc32(b"x", 1 << 32)
    with pytest.raises(ValueError):
        crc32_slice1(-1, b"x")


def test_class_update_and_copy():
    data = _data(300)
    c = Crc32(data[:100])
    snapshot = c.copy()
    c.update(data[100:])
    assert c.value == zlib.crc32(data)
    assert snapshot.value == zlib.crc32(data[:100])
    snapshot.update(data[100:])
    assert snapshot.value == c.value


def test_class_initial_value():
    assert Crc32().value == 0
    assert Crc32(b"abc", value=crc32(b"xy")).value == crc32(b"xyabc")
    with pytest.raises(ValueError):
        Crc32(value=1 << 33)