"""Shared plumbing for seeded noise sources."""

from __future__ import annotations

from typing import Optional, Union

from ..core.context import SignalContext
from ..core.ranges import SignalRange, finite_or
from ..core.signal import Signal
from .keys import wrap_u64
from .tiers import DrawStream, Tier, open_stream

# Floor for scale-like parameters (std_dev, lambda, degrees of freedom).
MIN_SCALE = 1e-6


class NoiseSource(Signal):
    """
    Base for bipolar noise generators: ``offset + amplitude * noise``.

    Args:
        seed: Base seed (wrapped to unsigned 64-bit)
        amplitude: Peak deviation from ``offset`` (non-finite -> 1.0)
        offset: Center value (non-finite -> 0.0)
        tier: ``Tier.STANDARD``, ``Tier.FAST``, their names, or None for the configured default
    """

    def __init__(
        self,
        seed: int = 0,
        amplitude: float = 1.0,
        offset: float = 0.0,
        tier: Optional[Union[Tier, str]] = None,
    ):
        self.seed = wrap_u64(seed)
        self.amplitude = finite_or(amplitude, 1.0)
        self.offset = finite_or(offset, 0.0)
        self.tier = Tier.resolve(tier)

    def output_range(self) -> SignalRange:
        return SignalRange.around(self.amplitude, self.offset)

    def _stream(self, key: int) -> DrawStream:
        return open_stream(self.tier, key)

    def _scaled(self, bipolar: float) -> float:
        return self.offset + self.amplitude * bipolar

    def _effective_seed(self, ctx: SignalContext) -> int:
        return wrap_u64(self.seed + ctx.seed)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(seed={self.seed}, amplitude={self.amplitude}, "
            f"offset={self.offset}, tier={self.tier.value!r})"
        )
