"""
Time-keyed noise: white, Perlin-style value noise, pink and correlated.

White noise holds one value per ``1 / sample_rate`` slot. Pink and
correlated noise operate on 60 fps frames (or the context frame), so the
same frame always yields the same value.
"""

from __future__ import annotations

import math
from typing import Callable, Optional, Union

from ..core.context import SignalContext
from ..core.ranges import SignalRange, finite_or, finite_or_clamp, finite_or_min
from ..core.signal import Signal, finite_time
from .base import NoiseSource
from .keys import GOLDEN_GAMMA, SEED_MULTIPLIER, U64_MASK, U64_MAX, derive_seed, saturate_u64, wrap_u64
from .tiers import Tier

FRAMES_PER_SECOND = 60.0
PINK_OCTAVES = 5
CORRELATION_WINDOW = 10


class WhiteNoise(NoiseSource):
    """
    Uniform bipolar noise, constant within each ``1 / sample_rate`` slot.

    Args:
        seed: Base seed
        amplitude: Peak deviation (default 1.0)
        sample_rate: Slots per second (default 60, minimum 1)
        offset: Center value (default 0.0)
        tier: Noise tier

    Example:
        >>> noise = WhiteNoise(seed=7)
        >>> noise.sample(0.5) == noise.sample(0.5)
        True
        >>> -1.0 <= noise.sample(0.5) <= 1.0
        True
    """

    def __init__(
        self,
        seed: int = 0,
        amplitude: float = 1.0,
        sample_rate: float = 60.0,
        offset: float = 0.0,
        tier: Optional[Union[Tier, str]] = None,
    ):
        super().__init__(seed, amplitude, offset, tier)
        self.sample_rate = finite_or_min(sample_rate, 1.0, 60.0)

    def _value(self, seed: int, index: int) -> float:
        u = self._stream(derive_seed(seed, index)).uniform()
        return self._scaled(u * 2.0 - 1.0)

    def _sample(self, t: float) -> float:
        index = saturate_u64(finite_time(t) * self.sample_rate)
        return self._value(self.seed, index)

    def _sample_with_context(self, t: float, ctx: SignalContext) -> float:
        index = saturate_u64(finite_time(t) * self.sample_rate)
        return self._value(self._effective_seed(ctx), wrap_u64(index + ctx.frame))


def _lattice_value(seed: int, x: int) -> float:
    n = ((seed + (x & U64_MASK)) * SEED_MULTIPLIER) & U64_MASK
    n ^= n >> 32
    n = (n * GOLDEN_GAMMA) & U64_MASK
    n ^= n >> 32
    return (n / U64_MAX) * 2.0 - 1.0


def _smoothstep(x: float) -> float:
    return x * x * (3.0 - 2.0 * x)


def _value_noise_1d(seed: int, x: float) -> float:
    # Lattice coordinates past float range fold onto cell 0.
    x = finite_or(x, 0.0)
    x0 = math.floor(x)
    frac = x - x0
    g0 = _lattice_value(seed, x0)
    g1 = _lattice_value(seed, x0 + 1)
    return g0 + (g1 - g0) * _smoothstep(frac)


class PerlinNoise(Signal):
    """
    Coherent multi-octave noise.

    Octave ``i`` runs at ``scale * 2**i`` with weight ``persistence**i``;
    the weighted sum is normalized so the result stays in
    ``[offset - amplitude, offset + amplitude]``. A context only
    contributes its seed, keeping the curve continuous in time.

    Args:
        seed: Base seed
        scale: Base frequency in lattice cells per second (default 1.0)
        amplitude: Peak deviation (default 1.0)
        offset: Center value (default 0.0)
        octaves: Number of octaves (minimum 1)
        persistence: Amplitude falloff per octave (default 0.5)

    Example:
        >>> perlin = PerlinNoise(seed=3, octaves=4)
        >>> abs(perlin.sample(1.0) - perlin.sample(1.0001)) < 0.01
        True
    """

    def __init__(
        self,
        seed: int = 0,
        scale: float = 1.0,
        amplitude: float = 1.0,
        offset: float = 0.0,
        octaves: int = 1,
        persistence: float = 0.5,
    ):
        self.seed = wrap_u64(seed)
        self.scale = finite_or(scale, 1.0)
        self.amplitude = finite_or(amplitude, 1.0)
        self.offset = finite_or(offset, 0.0)
        self.octaves = max(1, int(octaves))
        self.persistence = finite_or(persistence, 0.5)

    def output_range(self) -> SignalRange:
        return SignalRange.around(self.amplitude, self.offset)

    def _fractal(self, seed: int, t: float) -> float:
        t = finite_time(t)
        total = 0.0
        max_value = 0.0
        frequency = self.scale
        weight = 1.0
        for i in range(self.octaves):
            octave_seed = wrap_u64(seed + i * 31337)
            total += _value_noise_1d(octave_seed, t * frequency) * weight
            max_value += abs(weight)
            weight *= self.persistence
            frequency *= 2.0
        bipolar = total / max_value if max_value > 0.0 else 0.0
        return self.offset + bipolar * self.amplitude

    def _sample(self, t: float) -> float:
        return self._fractal(self.seed, t)

    def _sample_with_context(self, t: float, ctx: SignalContext) -> float:
        return self._fractal(wrap_u64(self.seed + ctx.seed), t)


def octave_sum(seed: int, frame: int, octaves: int, value_at: Callable[[int, int], float]) -> float:
    """Weighted 1/f sum over octaves; octave ``o`` holds each value for ``2**o`` frames."""
    total = 0.0
    normalizer = 0.0
    for octave in range(octaves):
        octave_seed = wrap_u64(seed + octave * 1000)
        weight = 1.0 / (octave + 1.0)
        total += value_at(octave_seed, frame >> octave) * weight
        normalizer += weight
    return total / normalizer if normalizer > 0.0 else 0.0


def ema_smoothing(frame: int, correlation: float, window: int, value_at: Callable[[int], float]) -> float:
    """Exponentially weighted mean of the last ``window`` frames (fewer near frame 0)."""
    smoothed = 0.0
    weight_sum = 0.0
    weight = 1.0
    for i in range(window):
        if frame < i:
            break
        smoothed += value_at(frame - i) * weight
        weight_sum += weight
        weight *= correlation
    return smoothed / weight_sum if weight_sum > 0.0 else 0.0


class PinkNoise(NoiseSource):
    """
    Fractal (1/f) noise from five summed octaves of frame-held white noise.

    Without a context the frame is ``int(t * 60)``; with one, ``ctx.frame``.
    """

    def _bipolar_at(self, seed: int, frame: int) -> float:
        return self._stream(derive_seed(seed, frame)).uniform() * 2.0 - 1.0

    def _sample(self, t: float) -> float:
        frame = saturate_u64(finite_time(t) * FRAMES_PER_SECOND)
        return self._scaled(octave_sum(self.seed, frame, PINK_OCTAVES, self._bipolar_at))

    def _sample_with_context(self, t: float, ctx: SignalContext) -> float:
        seed = self._effective_seed(ctx)
        return self._scaled(octave_sum(seed, ctx.frame, PINK_OCTAVES, self._bipolar_at))


class CorrelatedNoise(NoiseSource):
    """
    Smoothed random walk bounded by its averaging window.

    Each frame's value is an exponentially weighted mean of the last ten
    frame-keyed uniforms, so it never drifts outside the bipolar range.

    Args:
        seed: Base seed
        correlation: Weight decay per past frame, clamped to [0, 1] (default 0.95)
        amplitude: Peak deviation (default 1.0)
        offset: Center value (default 0.0)
        tier: Noise tier
    """

    def __init__(
        self,
        seed: int = 0,
        correlation: float = 0.95,
        amplitude: float = 1.0,
        offset: float = 0.0,
        tier: Optional[Union[Tier, str]] = None,
    ):
        super().__init__(seed, amplitude, offset, tier)
        self.correlation = finite_or_clamp(correlation, 0.0, 1.0, 0.95)

    def _smoothed(self, seed: int, frame: int) -> float:
        def value_at(past_frame: int) -> float:
            return self._stream(derive_seed(seed, past_frame)).uniform() * 2.0 - 1.0

        return self._scaled(ema_smoothing(frame, self.correlation, CORRELATION_WINDOW, value_at))

    def _sample(self, t: float) -> float:
        return self._smoothed(self.seed, saturate_u64(finite_time(t) * FRAMES_PER_SECOND))

    def _sample_with_context(self, t: float, ctx: SignalContext) -> float:
        return self._smoothed(self._effective_seed(ctx), ctx.frame)
