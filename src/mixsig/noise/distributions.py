"""
Distribution-shaped noise: Gaussian, Poisson, Student-t, impulse trains
and the unit-range seeded uniform.

Each sample opens a fresh draw stream keyed by ``(seed, time_ms)`` or,
with a context, ``(seed + ctx.seed, time_ms + ctx.frame)``, then maps
the draw into the bipolar range:

- Gaussian: three-sigma rule, ``clamp(x / 3 sigma, -1, 1)``
- Poisson: z-score over three, ``clamp((k - lambda) / sqrt(lambda) / 3, -1, 1)``
- Student-t: soft bound, ``tanh(x * scale / 3)``
"""

from __future__ import annotations

import math
from typing import Optional, Union

from ..core.context import SignalContext
from ..core.ranges import UNIT, SignalRange, finite_or, finite_or_clamp, finite_or_min
from ..core.signal import finite_time
from .base import MIN_SCALE, NoiseSource
from .keys import context_seed, derive_seed, saturate_u64, time_seed
from .tiers import DrawStream, Tier


def _clamp_unit_bipolar(value: float) -> float:
    return min(max(value, -1.0), 1.0)


class _KeyedDraw(NoiseSource):
    """Noise whose sample is a single mapped draw from a time/context-keyed stream."""

    def _draw(self, stream: DrawStream) -> float:
        raise NotImplementedError

    def _sample(self, t: float) -> float:
        return self._scaled(self._draw(self._stream(time_seed(self.seed, t))))

    def _sample_with_context(self, t: float, ctx: SignalContext) -> float:
        return self._scaled(self._draw(self._stream(context_seed(self.seed, t, ctx))))


class GaussianNoise(_KeyedDraw):
    """
    Normally distributed noise folded into the bipolar range.

    A ``std_dev`` at or below zero is floored to a tiny positive value;
    since the mapping divides by three sigma, the folded shape is the
    same for every positive ``std_dev``.

    Example:
        >>> noise = GaussianNoise(seed=1, tier="fast")
        >>> noise.sample(0.1) == noise.sample(0.1)
        True
    """

    def __init__(
        self,
        seed: int = 0,
        std_dev: float = 1.0,
        amplitude: float = 1.0,
        offset: float = 0.0,
        tier: Optional[Union[Tier, str]] = None,
    ):
        super().__init__(seed, amplitude, offset, tier)
        self.std_dev = finite_or_min(std_dev, MIN_SCALE, 1.0)

    def _draw(self, stream: DrawStream) -> float:
        value = stream.normal() * self.std_dev
        if not math.isfinite(value):
            return 0.0
        return _clamp_unit_bipolar(value / (3.0 * self.std_dev))


class PoissonNoise(_KeyedDraw):
    """Discrete-event counts, z-scored and folded into the bipolar range."""

    def __init__(
        self,
        seed: int = 0,
        lam: float = 2.0,
        amplitude: float = 1.0,
        offset: float = 0.0,
        tier: Optional[Union[Tier, str]] = None,
    ):
        super().__init__(seed, amplitude, offset, tier)
        self.lam = finite_or_min(lam, MIN_SCALE, 2.0)

    def _draw(self, stream: DrawStream) -> float:
        count = stream.poisson(self.lam)
        z = (count - self.lam) / math.sqrt(self.lam)
        return _clamp_unit_bipolar(z / 3.0)


class StudentTNoise(_KeyedDraw):
    """
    Heavy-tailed noise: more extreme outliers than Gaussian for the same spread.

    Args:
        seed: Base seed
        degrees_of_freedom: Tail weight, lower is heavier (default 3, floored above zero)
        scale: Spread before the tanh fold (default 1.0)
        amplitude: Peak deviation (default 1.0)
        offset: Center value (default 0.0)
        tier: Noise tier
    """

    def __init__(
        self,
        seed: int = 0,
        degrees_of_freedom: float = 3.0,
        scale: float = 1.0,
        amplitude: float = 1.0,
        offset: float = 0.0,
        tier: Optional[Union[Tier, str]] = None,
    ):
        super().__init__(seed, amplitude, offset, tier)
        self.degrees_of_freedom = finite_or_min(degrees_of_freedom, MIN_SCALE, 3.0)
        self.scale = finite_or(scale, 1.0)

    def _draw(self, stream: DrawStream) -> float:
        value = stream.student_t(self.degrees_of_freedom)
        if math.isnan(value):
            return 0.0
        return math.tanh(value * self.scale / 3.0)


class ImpulseNoise(NoiseSource):
    """
    Sparse impulse train with exponential (Poisson-process) spacing.

    Time is cut into buckets; each bucket's arrivals are drawn from a
    stream keyed by the bucket index, and the previous bucket is checked
    for impulses that spill over. Output is ``offset + amplitude`` inside
    an impulse and ``offset - amplitude`` elsewhere, including negative time.

    Args:
        seed: Base seed
        rate_hz: Mean impulses per second (default 10, negative -> 0)
        impulse_width: Impulse length in seconds (default 0.001, minimum 0.0001)
        bucket_size: Bucket length in seconds, clamped to [0.01, 1.0]
        amplitude: Half the high/low swing (default 1.0)
        offset: Center value (default 0.0)
        tier: Noise tier
    """

    def __init__(
        self,
        seed: int = 0,
        rate_hz: float = 10.0,
        impulse_width: float = 0.001,
        bucket_size: float = 0.1,
        amplitude: float = 1.0,
        offset: float = 0.0,
        tier: Optional[Union[Tier, str]] = None,
    ):
        super().__init__(seed, amplitude, offset, tier)
        self.rate_hz = finite_or_min(rate_hz, 0.0, 0.0)
        self.impulse_width = finite_or_min(impulse_width, 0.0001, 0.001)
        self.bucket_size = finite_or_clamp(bucket_size, 0.01, 1.0, 0.1)

    def _bucket_hit(self, t: float, seed: int, bucket_index: int, max_checks: int) -> bool:
        bucket_start = bucket_index * self.bucket_size
        bucket_end = bucket_start + self.bucket_size
        stream = self._stream(derive_seed(seed, bucket_index))
        impulse_time = bucket_start
        for _ in range(max_checks):
            impulse_time += stream.exponential(self.rate_hz)
            if impulse_time > bucket_end:
                return False
            if impulse_time <= t < impulse_time + self.impulse_width:
                return True
        return False

    def in_impulse(self, t: float, seed: Optional[int] = None) -> bool:
        """True when ``t`` falls inside an impulse for ``seed`` (default: own seed)."""
        if self.rate_hz <= 0.0 or t < 0.0:
            return False
        seed = self.seed if seed is None else seed
        bucket_index = saturate_u64(t / self.bucket_size)
        expected = min(self.rate_hz * self.bucket_size * 3.0, 10.0)
        max_checks = max(int(math.ceil(expected)), 1)
        if self._bucket_hit(t, seed, bucket_index, max_checks):
            return True
        return bucket_index > 0 and self._bucket_hit(t, seed, bucket_index - 1, max_checks)

    def _level(self, t: float, seed: int) -> float:
        if self.in_impulse(finite_time(t), seed):
            return self.offset + self.amplitude
        return self.offset - self.amplitude

    def _sample(self, t: float) -> float:
        return self._level(t, self.seed)

    def _sample_with_context(self, t: float, ctx: SignalContext) -> float:
        return self._level(t, self._effective_seed(ctx))


class SeededRandom(NoiseSource):
    """
    Uniform value in the normalized range, held per millisecond.

    Output is ``clamp(offset + u * amplitude, 0, 1)`` for a uniform ``u``.

    Example:
        >>> rnd = SeededRandom(seed=42)
        >>> 0.0 <= rnd.sample(1.234) <= 1.0
        True
        >>> rnd.output_range() == UNIT
        True
    """

    def output_range(self) -> SignalRange:
        return UNIT

    def _unit(self, key: int) -> float:
        u = self._stream(key).uniform()
        return min(max(self.offset + u * self.amplitude, 0.0), 1.0)

    def _sample(self, t: float) -> float:
        return self._unit(time_seed(self.seed, t))

    def _sample_with_context(self, t: float, ctx: SignalContext) -> float:
        return self._unit(context_seed(self.seed, t, ctx))


__all__ = [
    "GaussianNoise",
    "PoissonNoise",
    "StudentTNoise",
    "ImpulseNoise",
    "SeededRandom",
]
