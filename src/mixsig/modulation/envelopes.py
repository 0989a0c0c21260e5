"""
Envelope generators over normalized time.

Envelopes read ``t`` as progress through the envelope (0 to 1) rather
than seconds; times outside that span are clamped. Output is clamped to
the normalized range.
"""

from __future__ import annotations

import math
from typing import Tuple

from ..core.ranges import UNIT, SignalRange, finite_or, finite_or_clamp
from ..core.signal import Signal, finite_time


def _fit_segments(*segments: float) -> Tuple[float, ...]:
    """Clamp segment lengths to [0, 1] and rescale them when their sum exceeds 1."""
    clamped = [finite_or_clamp(s, 0.0, 1.0, 0.0) for s in segments]
    total = sum(clamped)
    if total > 1.0:
        clamped = [s / total for s in clamped]
    return tuple(clamped)


def _unit(value: float) -> float:
    return min(max(value, 0.0), 1.0)


class Adsr(Signal):
    """
    Attack-decay-sustain-release envelope.

    Args:
        attack: Attack length as a fraction of the envelope (default 0.1)
        decay: Decay length as a fraction of the envelope (default 0.1)
        sustain: Sustain level relative to ``peak`` (default 0.7)
        release: Release length as a fraction of the envelope (default 0.2)
        peak: Level reached at the end of the attack (default 1.0)

    When ``attack + decay + release`` exceeds 1 the three lengths are
    scaled down proportionally.

    Example:
        >>> env = Adsr(attack=0.25, decay=0.25, sustain=0.5, release=0.25)
        >>> env.sample(0.25), env.sample(0.6), env.sample(1.0)
        (1.0, 0.5, 0.0)
    """

    def __init__(
        self,
        attack: float = 0.1,
        decay: float = 0.1,
        sustain: float = 0.7,
        release: float = 0.2,
        peak: float = 1.0,
    ):
        self.attack, self.decay, self.release = _fit_segments(attack, decay, release)
        self.sustain = finite_or_clamp(sustain, 0.0, 1.0, 0.7)
        self.peak = finite_or(peak, 1.0)

    def output_range(self) -> SignalRange:
        return UNIT

    def _sample(self, t: float) -> float:
        t = _unit(finite_time(t))
        attack_end = self.attack
        decay_end = attack_end + self.decay
        release_start = 1.0 - self.release
        sustain_level = self.sustain * self.peak

        if t < attack_end:
            value = (t / self.attack) * self.peak
        elif t < decay_end:
            progress = (t - attack_end) / self.decay
            value = self.peak - (self.peak - sustain_level) * progress
        elif t < release_start:
            value = sustain_level
        elif self.release > 0.0:
            value = sustain_level * (1.0 - (t - release_start) / self.release)
        else:
            value = 0.0
        return _unit(value)


class LinearEnvelope(Signal):
    """
    Linear attack, hold at ``peak``, linear release.

    Example:
        >>> env = LinearEnvelope(attack=0.5, release=0.25)
        >>> env.sample(0.25), env.sample(0.6)
        (0.5, 1.0)
    """

    def __init__(self, attack: float = 0.1, release: float = 0.1, peak: float = 1.0):
        self.attack, self.release = _fit_segments(attack, release)
        self.peak = finite_or(peak, 1.0)

    @classmethod
    def symmetric(cls, time: float) -> "LinearEnvelope":
        return cls(time, time)

    def output_range(self) -> SignalRange:
        return UNIT

    def _sample(self, t: float) -> float:
        t = _unit(finite_time(t))
        release_start = 1.0 - self.release
        if t < self.attack:
            value = (t / self.attack) * self.peak
        elif t < release_start:
            value = self.peak
        elif self.release > 0.0:
            value = self.peak * (1.0 - (t - release_start) / self.release)
        else:
            value = 0.0
        return _unit(value)


class Impact(Signal):
    """
    Instant hit with exponential decay: ``intensity * exp(-decay * t)``.

    Times before zero hold the initial intensity.

    Args:
        intensity: Level at ``t = 0`` (default 1.0)
        decay: Decay rate per second, negative treated as 0 (default 3.0)
    """

    def __init__(self, intensity: float = 1.0, decay: float = 3.0):
        self.intensity = finite_or(intensity, 1.0)
        self.decay = max(finite_or(decay, 3.0), 0.0)

    def output_range(self) -> SignalRange:
        return UNIT

    def _sample(self, t: float) -> float:
        t = finite_time(t)
        if t < 0.0:
            return _unit(self.intensity)
        return _unit(self.intensity * math.exp(-self.decay * t))
