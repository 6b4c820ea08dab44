# deflate-checksums

This package computes Adler-32 checksums (the zlib format) and CRC-32
checksums (the gzip format) in pure Python. It has several interchangeable
algorithms for each checksum. It also exposes the GF(2) polynomial
arithmetic that the faster CRC-32 algorithms depend on.

## Installation

```
pip install deflate-checksums
```

## Quick start

```python
from deflate_checksums.adler32 import adler32, Adler32
from deflate_checksums.crc32 import crc32, Crc32

adler32(b"hello")            # one-shot, starts from the initial value 1
crc32(b"hello")              # one-shot, starts from the initial value 0

# Running checksums
h = Crc32()
h.update(b"hel")
h.update(b"lo")
assert h.value == crc32(b"hello")

a = Adler32(b"hel")
snapshot = a.copy()           # independent copy of the running state
a.update(b"lo")
assert a.value == adler32(b"hello")
```

To continue a checksum from an earlier value, pass that value as the second
argument, for example `crc32(b"lo", crc32(b"hel"))`. If you pass `None` as
the data, you get the initial value back: `1` for Adler-32 and `0` for
CRC-32. A value outside the 32-bit range raises `ValueError`. Data can be
any object that supports the buffer protocol, such as `bytes`, `bytearray`
or `memoryview`.

## Modules

- `deflate_checksums.adler32` contains:
  - `adler32` and the `Adler32` running checksum;
  - the portable `adler32_generic`;
  - `adler32_blocked`, which sums 64-byte blocks;
  - `select_adler32_impl`, which returns `adler32_blocked` when the given
    features include `ArmFeature.NEON` and `adler32_generic` otherwise.

  `adler32` uses the routine selected for the running CPU.
- `deflate_checksums.crc32` contains:
  - `crc32` and the `Crc32` running checksum;
  - the raw-remainder algorithms `crc32_bitwise`, `crc32_slice1` and
    `crc32_slice8`;
  - `make_tables`, which builds the eight slice-by-8 tables.

  `crc32` inverts the value before and after `crc32_slice8`, as the gzip
  format requires.
- `deflate_checksums.crc32_fold` computes CRC-32 by folding 128-bit vectors
  with carry-less multiplication. It contains `crc32_fold4` and
  `crc32_fold12`, and the building blocks `fold_vec`, `fold_partial_vec`
  and `barrett_reduce`.
- `deflate_checksums.crc32_chunked` checksums four adjacent chunks
  separately and then combines their remainders. It contains:
  - `crc32_chunked_fixed`, which uses 32768-byte chunks;
  - `crc32_chunked_variable`, which uses chunks that are multiples of 128
    bytes, up to 16384;
  - `combine_crcs_slow` and `combine_crcs_fast`;
  - `select_crc32_impl`, which picks one of the raw-remainder routines from
    a set of `ArmFeature` flags and falls back to `crc32_slice8`.
- `deflate_checksums.gf2` does polynomial arithmetic modulo the CRC-32
  generator. It contains `clmul`, `x_pow_mod_g`, `fold_multipliers`,
  `chunk_multipliers` and `barrett_constants`, and the chunk-length
  constants.
- `deflate_checksums.cpufeatures` contains:
  - the `ArmFeature` flags;
  - `parse_auxv` and `features_from_hwcap`, which decode a Linux auxiliary
    vector;
  - `disable_features`, which clears features by comma-separated name, for
    example `"pmull,crc32"`. An unknown name raises `ValueError`;
  - `query_arm_cpu_features`, which reads an auxv file;
  - `get_arm_cpu_features`, which detects the features once and caches the
    result.

  `get_arm_cpu_features` returns `ArmFeature.NONE` except on ARM Linux.
  There it honours the `DEFLATE_DISABLE_CPU_FEATURES` environment variable.
- `deflate_checksums.bits` has byte swapping, little- and big-endian loads
  and stores at an offset in a byte buffer, bit scans (`bsr32`, `bsf64` and
  the like), `rbit32`, and the rounding helpers `div_round_up`, `align` and
  `round_up`.

## Raw remainder state

The `crc32_bitwise`, `crc32_slice*`, `crc32_fold*` and `crc32_chunked_*`
routines take the internal remainder and return it. They do not invert it.
To get a gzip CRC-32 from one of them, compute
`routine(value ^ 0xFFFFFFFF, data) ^ 0xFFFFFFFF`. For the same input, every
routine returns the same remainder. This means you can check the routines
against one another.

## What this package does not do

This package only computes checksums. It does not compress or decompress
DEFLATE, zlib or gzip data, and it does not parse or write those formats'
headers. It provides no command-line program.

## Running the tests

```
pip install -e ".[test]"
pytest
```