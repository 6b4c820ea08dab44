"""Adler-32 and gzip CRC-32 checksums with several interchangeable algorithms."""

__version__ = "1.23.0"

__all__ = [
    "adler32",
    "bits",
    "cpufeatures",
    "crc32",
    "crc32_chunked",
    "crc32_fold",
    "gf2",
]