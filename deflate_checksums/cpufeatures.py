"""Run-time detection of ARM CPU features from the ELF auxiliary vector."""

from __future__ import annotations

import enum
import functools
import os
import platform
import struct
import sys
from collections.abc import Iterator

__all__ = [
    "ArmFeature",
    "AT_HWCAP",
    "AT_HWCAP2",
    "DISABLE_ENV_VAR",
    "parse_auxv",
    "features_from_hwcap",
    "disable_features",
    "query_arm_cpu_features",
    "get_arm_cpu_features",
]

AT_HWCAP = 16
AT_HWCAP2 = 26

DEFAULT_AUXV_PATH = "/proc/self/auxv"

# Comma-separated feature names listed here are masked out of the result.
DISABLE_ENV_VAR = "DEFLATE_DISABLE_CPU_FEATURES"


class ArmFeature(enum.IntFlag):
    """ARM CPU feature bits."""

    NONE = 0
    NEON = 1 << 0
    PMULL = 1 << 1
    # Very high pmull throughput: the wide pmull CRC-32 beats crc32 instructions.
    PREFER_PMULL = 1 << 2
    CRC32 = 1 << 3
    SHA3 = 1 << 4
    DOTPROD = 1 << 5
    # Set once detection has run, so that a result of "no features" is
    # distinguishable from "not yet detected".
    KNOWN = 1 << 31


_FEATURE_NAMES: dict[str, ArmFeature] = {
    "neon": ArmFeature.NEON,
    "pmull": ArmFeature.PMULL,
    "prefer_pmull": ArmFeature.PREFER_PMULL,
    "crc32": ArmFeature.CRC32,
    "sha3": ArmFeature.SHA3,
    "dotprod": ArmFeature.DOTPROD,
}

# hwcap bit -> feature, for 32-bit and 64-bit ARM Linux respectively.
_ARM32_HWCAP_BITS = {
    1 << 12: ArmFeature.NEON,  # HWCAP_NEON
}
_ARM64_HWCAP_BITS = {
    1 << 1: ArmFeature.NEON,  # HWCAP_ASIMD
    1 << 4: ArmFeature.PMULL,  # HWCAP_PMULL
    1 << 7: ArmFeature.CRC32,  # HWCAP_CRC32
    1 << 17: ArmFeature.SHA3,  # HWCAP_SHA3
    1 << 20: ArmFeature.DOTPROD,  # HWCAP_ASIMDDP
}


def _auxv_entries(data: bytes, word_size: int) -> Iterator[tuple[int, int]]:
    fmt = "=" + ("I" if word_size == 4 else "Q") * 2
    pair = 2 * word_size
    usable = len(data) - len(data) % pair
    yield from struct.iter_unpack(fmt, data[:usable])


def parse_auxv(data: bytes, word_size: int = 8) -> tuple[int, int]:
    """Return ``(hwcap, hwcap2)`` from raw auxiliary-vector bytes.

    Entries are native-endian ``(type, value)`` pairs of ``word_size``-byte
    words.  A trailing incomplete pair is ignored; missing entries yield 0.
    """
    if word_size not in (4, 8):
        raise ValueError(f"word size must be 4 or 8, not {word_size!r}")
    hwcap = hwcap2 = 0
    for entry_type, value in _auxv_entries(bytes(data), word_size):
        if entry_type == AT_HWCAP:
            hwcap = value
        elif entry_type == AT_HWCAP2:
            hwcap2 = value
    return hwcap, hwcap2


def features_from_hwcap(hwcap: int, is_arm32: bool = False) -> ArmFeature:
    """Translate a Linux ``AT_HWCAP`` value into feature flags."""
    table = _ARM32_HWCAP_BITS if is_arm32 else _ARM64_HWCAP_BITS
    features = ArmFeature.NONE
    for bit, feature in table.items():
        if hwcap & bit:
            features |= feature
    return features


def disable_features(features: ArmFeature, spec: str | None) -> ArmFeature:
    """Clear the features named in the comma-separated ``spec``.

    Empty items are skipped.  An unrecognised name raises ``ValueError``.
    """
    result = ArmFeature(features)
    if not spec:
        return result
    for name in filter(None, spec.split(",")):
        try:
            result &= ~_FEATURE_NAMES[name]
        except KeyError:
            raise ValueError(
                f"unrecognized feature in {DISABLE_ENV_VAR}: {name!r}"
            ) from None
    return result


def query_arm_cpu_features(
    auxv_path: str | os.PathLike[str] = DEFAULT_AUXV_PATH,
    disable_spec: str | None = None,
) -> ArmFeature:
    """Detect features from an auxiliary-vector file.

    An unreadable file counts as no features.  The result always carries
    ``ArmFeature.KNOWN``.
    """
    word_size = struct.calcsize("P")
    try:
        with open(auxv_path, "rb") as f:
            data = f.read()
    except OSError:
        data = b""
    hwcap, _hwcap2 = parse_auxv(data, word_size)
    features = features_from_hwcap(hwcap, is_arm32=word_size == 4)
    features = disable_features(features, disable_spec)
    return features | ArmFeature.KNOWN


def _detection_supported() -> bool:
    machine = platform.machine().lower()
    is_arm = machine.startswith(("arm", "aarch64"))
    return is_arm and sys.platform.startswith("linux")


@functools.lru_cache(maxsize=None)
def get_arm_cpu_features() -> ArmFeature:
    """Features of the running CPU, detected once and cached.

    Returns ``ArmFeature.NONE`` where run-time detection is unsupported.
    """
    if not _detection_supported():
        return ArmFeature.NONE
    return query_arm_cpu_features(
        DEFAULT_AUXV_PATH, os.environ.get(DISABLE_ENV_VAR)
    )