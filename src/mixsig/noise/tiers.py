"""
Random draw streams for the two noise tiers.

A stream is opened from one derived 64-bit key and yields a short,
deterministic sequence of draws. Streams are created per sample and
thrown away; no state survives between samples.

- ``Tier.STANDARD`` (default): the key is expanded through BLAKE2b into
  a 128-bit key for numpy's counter-based Philox generator, and draws
  come from ``numpy.random.Generator``.
- ``Tier.FAST``: a SplitMix64 counter stream with closed-form inverse
  transforms. Same distributional shape, a fraction of the cost, no
  unpredictability guarantees.
"""

from __future__ import annotations

import enum
import hashlib
import math
from typing import Optional, Union

import numpy as np

from .. import config
from .keys import GOLDEN_GAMMA, U64_MASK, splitmix64

# Poisson rates above this use a rounded normal approximation in the fast tier.
POISSON_TABLE_LIMIT = 30.0
# numpy rejects very large rates; the standard tier approximates above this.
POISSON_NORMAL_LIMIT = 1e12

_TWO_PI = 2.0 * math.pi
_UNIT_53 = 1.0 / float(1 << 53)


class Tier(enum.Enum):
    STANDARD = "standard"
    FAST = "fast"

    @classmethod
    def resolve(cls, tier: Optional[Union["Tier", str]]) -> "Tier":
        """Accept a ``Tier``, its name, or ``None`` for the configured default."""
        if tier is None:
            return cls(config.default_tier_name())
        if isinstance(tier, Tier):
            return tier
        try:
            return cls(str(tier).lower())
        except ValueError:
            raise ValueError(f"Unknown noise tier {tier!r}; expected 'standard' or 'fast'") from None


class StandardStream:
    """Philox-backed draws keyed by a BLAKE2b expansion of the derived key."""

    __slots__ = ("_gen",)

    def __init__(self, key: int):
        digest = hashlib.blake2b(
            (key & U64_MASK).to_bytes(8, "little"),
            digest_size=16,
            person=b"mixsig.standard",
        ).digest()
        self._gen = np.random.Generator(np.random.Philox(key=int.from_bytes(digest, "little")))

    def uniform(self) -> float:
        return float(self._gen.random())

    def normal(self) -> float:
        return float(self._gen.standard_normal())

    def poisson(self, lam: float) -> float:
        if lam > POISSON_NORMAL_LIMIT:
            return float(max(0.0, round(lam + math.sqrt(lam) * self.normal())))
        return float(self._gen.poisson(lam))

    def student_t(self, df: float) -> float:
        return float(self._gen.standard_t(df))

    def exponential(self, rate: float) -> float:
        return float(self._gen.exponential(1.0 / rate))


class FastStream:
    """SplitMix64 counter stream with rejection-free inverse transforms."""

    __slots__ = ("_state",)

    def __init__(self, key: int):
        self._state = key & U64_MASK

    def _next(self) -> int:
        self._state = (self._state + GOLDEN_GAMMA) & U64_MASK
        return splitmix64(self._state)

    def uniform(self) -> float:
        # Open interval (0, 1): safe for logarithms and negative powers.
        return ((self._next() >> 11) + 0.5) * _UNIT_53

    def normal(self) -> float:
        # Box-Muller, cosine branch.
        u1 = self.uniform()
        u2 = self.uniform()
        return math.sqrt(-2.0 * math.log(u1)) * math.cos(_TWO_PI * u2)

    def poisson(self, lam: float) -> float:
        if lam > POISSON_TABLE_LIMIT:
            return float(max(0, math.floor(lam + math.sqrt(lam) * self.normal() + 0.5)))
        # Cumulative-probability walk.
        u = self.uniform()
        k = 0
        p = math.exp(-lam)
        cumulative = p
        # The tail past ~lam + 12 sqrt(lam) holds no representable mass.
        limit = int(lam + 12.0 * math.sqrt(lam) + 12.0)
        while u > cumulative and k < limit:
            k += 1
            p *= lam / k
            cumulative += p
        return float(k)

    def student_t(self, df: float) -> float:
        # Bailey's trigonometric method: T = sqrt(df (U1^(-2/df) - 1)) cos(2 pi U2).
        u1 = self.uniform()
        u2 = self.uniform()
        try:
            radius = math.sqrt(df * (u1 ** (-2.0 / df) - 1.0))
        except OverflowError:
            return math.copysign(math.inf, math.cos(_TWO_PI * u2))
        return radius * math.cos(_TWO_PI * u2)

    def exponential(self, rate: float) -> float:
        return -math.log(self.uniform()) / rate


DrawStream = Union[StandardStream, FastStream]


def open_stream(tier: Tier, key: int) -> DrawStream:
    """Open a fresh draw stream for ``key`` in the given tier."""
    if tier is Tier.FAST:
        return FastStream(key)
    return StandardStream(key)
