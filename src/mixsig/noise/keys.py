"""
64-bit key derivation and the non-cryptographic mixing hashes.

Every noise sample re-derives its random state from ``(seed, time or
frame, index)``; nothing here keeps a cursor, so sampling can be
repeated, reordered or skipped without changing any value.
"""

from __future__ import annotations

import math

from ..core.context import U64_MASK, SignalContext
from ..core.ranges import finite_or

U64_MAX = U64_MASK

SEED_MULTIPLIER = 0x517CC1B727220A95
GOLDEN_GAMMA = 0x9E3779B97F4A7C15
_MIX_1 = 0xBF58476D1CE4E5B9
_MIX_2 = 0x94D049BB133111EB


def wrap_u64(value: int) -> int:
    """Reduce an integer modulo 2**64."""
    return int(value) & U64_MASK


def saturate_u64(value: float) -> int:
    """
    Truncate a float toward zero and saturate into the unsigned 64-bit range.

    Negative and NaN values become 0; values past 2**64 - 1 saturate.

    Example:
        >>> saturate_u64(12.9), saturate_u64(-3.0), saturate_u64(float("nan"))
        (12, 0, 0)
    """
    if math.isnan(value) or value <= 0.0:
        return 0
    if value >= 1.8446744073709552e19:
        return U64_MAX
    return int(value)


def derive_seed(base: int, value: int) -> int:
    """Mix a base seed with an input key: ``(base + value) * K mod 2**64``."""
    return ((int(base) + int(value)) * SEED_MULTIPLIER) & U64_MASK


def splitmix64(value: int) -> int:
    """SplitMix64 finalizer over a 64-bit state (gamma already added by callers)."""
    z = value & U64_MASK
    z = ((z ^ (z >> 30)) * _MIX_1) & U64_MASK
    z = ((z ^ (z >> 27)) * _MIX_2) & U64_MASK
    return z ^ (z >> 31)


def fast_random(seed: int, value: int) -> float:
    """
    Fast deterministic uniform in [0, 1) from a seed and an input key.

    Uses the top 24 bits of a SplitMix64 mix.

    Example:
        >>> fast_random(42, 7) == fast_random(42, 7)
        True
        >>> 0.0 <= fast_random(1, 2) < 1.0
        True
    """
    h = ((int(seed) + int(value)) * GOLDEN_GAMMA) & U64_MASK
    return (splitmix64(h) >> 40) / float(1 << 24)


def hash_pair(a: int, b: int) -> int:
    """Mix two 64-bit keys into one."""
    x = ((int(a) + int(b)) * SEED_MULTIPLIER) & U64_MASK
    x ^= x >> 32
    x = (x * GOLDEN_GAMMA) & U64_MASK
    x ^= x >> 32
    return x


def hash_to_index(seed_a: int, seed_b: int, length: int) -> int:
    """
    Deterministically pick an index in ``[0, length)`` from two keys.

    Returns 0 for an empty collection.

    Example:
        >>> hash_to_index(3, 9, 0)
        0
        >>> hash_to_index(3, 9, 5) == hash_to_index(3, 9, 5)
        True
    """
    if length <= 0:
        return 0
    return hash_pair(seed_a, seed_b) % length


def _rotl(value: int, bits: int) -> int:
    return ((value << bits) | (value >> (64 - bits))) & U64_MASK


def spatial_key(base_seed: int, x: int, y: int) -> int:
    """Key for grid cell ``(x, y)``; negative coordinates use two's complement."""
    h = int(base_seed) & U64_MASK
    h ^= ((int(x) & U64_MASK) * SEED_MULTIPLIER) & U64_MASK
    h = _rotl(h, 31)
    h ^= ((int(y) & U64_MASK) * GOLDEN_GAMMA) & U64_MASK
    h = _rotl(h, 31)
    h ^= h >> 32
    h = (h * SEED_MULTIPLIER) & U64_MASK
    h ^= h >> 32
    return h


def time_key(t: float) -> int:
    """Millisecond key for ``t``; non-finite and negative times map to 0."""
    return saturate_u64(finite_or(t, 0.0) * 1000.0)


def time_seed(seed: int, t: float) -> int:
    """Derived key for time-only sampling."""
    return derive_seed(seed, time_key(t))


def context_seed(seed: int, t: float, ctx: SignalContext) -> int:
    """Derived key for context-aware sampling: seeds add, time key and frame add."""
    effective_seed = wrap_u64(int(seed) + ctx.seed)
    combined = wrap_u64(time_key(t) + ctx.frame)
    return derive_seed(effective_seed, combined)
