import pytest
from hypothesis import given
from hypothesis import strategies as st

from deflate_checksums import bits

u16 = st.integers(min_value=0, max_value=(1 << 16) - 1)
u32 = st.integers(min_value=0, max_value=(1 << 32) - 1)
u64 = st.integers(min_value=0, max_value=(1 << 64) - 1)


def test_bswap32_pinned():
    assert bits.bswap32(0x12345678) == 0x78563412


@given(u16)
def test_bswap16_involution(v):
    assert bits.bswap16(bits.bswap16(v)) == v


@given(u32)
def test_bswap32_involution(v):
    assert bits.bswap32(bits.bswap32(v)) == v


@given(u64)
def test_bswap64_involution(v):
    assert bits.bswap64(bits.bswap64(v)) == v


@given(st.integers(min_value=0, max_value=255))
def test_bswap_moves_low_byte_to_top(b):
    assert bits.bswap16(b) == b << 8
    assert bits.bswap32(b) == b << 24
    assert bits.bswap64(b) == b << 56


def test_bswap_rejects_out_of_range():
    with pytest.raises(ValueError):
        bits.bswap16(1 << 16)
    with pytest.raises(ValueError):
        bits.bswap32(-1)


def test_le32_pinned_bytes():
    buf = bytearray(4)
    bits.put_unaligned_le32(0x12345678, buf)
    assert bytes(buf) == b"\x78\x56\x34\x12"


@given(u16, st.integers(min_value=0, max_value=5))
def test_le16_round_trip(v, offset):
    buf = bytearray(offset + 2)
    bits.put_unaligned_le16(v, buf, offset)
    assert bits.get_unaligned_le16(buf, offset) == v
    assert bits.get_unaligned_be16(buf, offset) == bits.bswap16(v)


@given(u16)
def test_be16_round_trip(v):
    buf = bytearray(2)
    bits.put_unaligned_be16(v, buf)
    assert bits.get_unaligned_be16(buf) == v


@given(u32, st.integers(min_value=0, max_value=7))
def test_le32_round_trip(v, offset):
    buf = bytearray(offset + 4)
    bits.put_unaligned_le32(v, buf, offset)
    assert bits.get_unaligned_le32(buf, offset) == v
    assert bits.get_unaligned_be32(buf, offset) == bits.bswap32(v)


@given(u32)
def test_be32_round_trip(v):
    buf = bytearray(4)
    bits.put_unaligned_be32(v, buf)
    assert bits.get_unaligned_be32(buf) == v


@given(u64, st.integers(min_value=0, max_value=9))
def test_le64_round_trip(v, offset):
    buf = bytearray(offset + 8)
    bits.put_unaligned_le64(v, buf, offset)
    assert bits.get_unaligned_le64(buf, offset) == v


@given(st.binary(min_size=8, max_size=8))
def test_le64_halves(data):
    v = bits.get_unaligned_le64(data)
    assert v & 0xFFFFFFFF == bits.get_unaligned_le32(data, 0)
    assert v >> 32 == bits.get_unaligned_le32(data, 4)


def test_put_leaves_surrounding_bytes():
    buf = bytearray(b"\xaa" * 6)
    bits.put_unaligned_be16(0, buf, 2)
    assert bytes(buf) == b"\xaa\xaa\x00\x00\xaa\xaa"


def test_get_out_of_range():
    with pytest.raises(IndexError):
        bits.get_unaligned_le32(b"\x00\x00\x00", 0)
    with pytest.raises(IndexError):
        bits.get_unaligned_le16(b"\x00\x00", -1)


def test_put_out_of_range_does_not_grow():
    buf = bytearray(3)
    with pytest.raises(IndexError):
        bits.put_unaligned_le32(0, buf, 0)
    assert len(buf) == 3


def test_put_value_too_wide():
    with pytest.raises(ValueError):
        bits.put_unaligned_le16(1 << 16, bytearray(2))


def test_put_readonly_buffer():
    with pytest.raises(TypeError):
        bits.put_unaligned_le16(0, b"\x00\x00")


@given(st.integers(min_value=0, max_value=31))
def test_bsr_bsf_single_bit_32(k):
    assert bits.bsr32(1 << k) == k
    assert bits.bsf32(1 << k) == k


@given(st.integers(min_value=0, max_value=63))
def test_bsr_bsf_single_bit_64(k):
    assert bits.bsr64(1 << k) == k
    assert bits.bsf64(1 << k) == k


@given(st.integers(min_value=1, max_value=(1 << 32) - 1))
def test_bsr_bsf_bounds(v):
    hi = bits.bsr32(v)
    lo = bits.bsf32(v)
    assert lo <= hi
    assert (1 << hi) <= v < (1 << (hi + 1))
    assert v % (1 << lo) == 0 and (v >> lo) & 1 == 1


def test_bit_scan_zero_raises():
    for fn in (bits.bsr32, bits.bsr64, bits.bsf32, bits.bsf64):
        with pytest.raises(ValueError):
            fn(0)


@given(st.integers(min_value=0, max_value=31))
def test_rbit32_single_bit(k):
    assert bits.rbit32(1 << k) == 1 << (31 - k)


@given(u32)
def test_rbit32_involution(v):
    assert bits.rbit32(bits.rbit32(v)) == v


@given(st.integers(min_value=0, max_value=10**6), st.integers(min_value=1, max_value=1000))
def test_div_round_up_and_round_up(n, d):
    q = bits.div_round_up(n, d)
    assert (q - 1) * d < n <= q * d or (n == 0 and q == 0)
    r = bits.round_up(n, d)
    assert r % d == 0 and n <= r < n + d


@given(st.integers(min_value=0, max_value=10**6), st.integers(min_value=0, max_value=12))
def test_align(n, shift):
    a = 1 << shift
    r = bits.align(n, a)
    assert r == bits.round_up(n, a)


def test_align_rejects_non_power_of_two():
    with pytest.raises(ValueError):
        bits.align(10, 3)


def test_div_round_up_rejects_zero():
    with pytest.raises(ValueError):
        bits.div_round_up(5, 0)