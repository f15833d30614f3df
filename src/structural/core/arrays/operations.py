"""Pure scalar rules shared by every engine.

Hash contributions and float comparisons work on bit patterns so that
ordering, equality and hashing agree on NaN and signed zero. Integer
arithmetic wraps to signed 32/64 bits to keep hashes bounded and stable
across processes.
"""

from __future__ import annotations

import math
import struct

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF

_CANONICAL_NAN64 = 0x7FF8000000000000
_CANONICAL_NAN32 = 0x7FC00000


def to_int32(value: int) -> int:
    """Wrap an integer to signed 32-bit two's complement."""
    value &= _MASK32
    return value - (1 << 32) if value > _INT32_MAX else value


def to_int64(value: int) -> int:
    """Wrap an integer to signed 64-bit two's complement."""
    value &= _MASK64
    return value - (1 << 64) if value > _INT64_MAX else value


def sign(value: int) -> int:
    """Normalise a comparison result to -1, 0 or 1."""
    return (value > 0) - (value < 0)


def double_bits(value: float) -> int:
    """IEEE-754 binary64 bit pattern as a signed 64-bit integer, NaN canonical."""
    if math.isnan(value):
        return _CANONICAL_NAN64
    return struct.unpack(">q", struct.pack(">d", value))[0]


def float_bits(value: float) -> int:
    """IEEE-754 binary32 bit pattern as a signed 32-bit integer, NaN canonical."""
    if math.isnan(value):
        return _CANONICAL_NAN32
    return struct.unpack(">i", struct.pack(">f", value))[0]


def fold_long(value: int) -> int:
    """Fold a 64-bit value into 32 bits: ``(int)(v ^ (v >> 32))``."""
    value = to_int64(value)
    return to_int32(value ^ (value >> 32))


def compare_ints(lhs: int, rhs: int) -> int:
    return (lhs > rhs) - (lhs < rhs)


def compare_floats(lhs: float, rhs: float) -> int:
    """Total order over floats: -0.0 < 0.0 and NaN above everything, NaN == NaN."""
    if lhs < rhs:
        return -1
    if lhs > rhs:
        return 1
    return compare_ints(double_bits(lhs), double_bits(rhs))


def floats_equal(lhs: float, rhs: float) -> bool:
    """Bit-pattern equality: NaN equals NaN, 0.0 differs from -0.0."""
    return double_bits(lhs) == double_bits(rhs)


def bool_hash(value: bool) -> int:
    # Inverted on purpose: true contributes 0, false contributes 1.
    return 0 if value else 1


def int_hash(value: int) -> int:
    """Hash contribution of an integer of any size."""
    if _INT32_MIN <= value <= _INT32_MAX:
        return value
    if _INT64_MIN <= value <= _INT64_MAX:
        return fold_long(value)
    folded = 0
    while not _INT64_MIN <= value <= _INT64_MAX:
        folded ^= value & _MASK64
        value >>= 64
    return fold_long(folded ^ (value & _MASK64))


def double_hash(value: float) -> int:
    return fold_long(double_bits(value))


def float32_hash(value: float) -> int:
    return float_bits(value)


def string_hash(value: str) -> int:
    """Polynomial string hash over code points, stable across processes."""
    result = 0
    for char in value:
        result = to_int32(31 * result + ord(char))
    return result


def bool_text(value: bool) -> str:
    return "true" if value else "false"


def float32_text(value: float) -> str:
    """Shortest decimal text that round-trips through binary32."""
    if math.isnan(value) or math.isinf(value):
        return str(value)
    packed = struct.pack(">f", value)
    for precision in range(1, 10):
        candidate = float(f"{value:.{precision}g}")
        if struct.pack(">f", candidate) == packed:
            return str(candidate)
    return str(value)
