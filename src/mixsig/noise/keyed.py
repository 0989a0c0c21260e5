"""
Index-keyed noise: values tied to a position or a character index
rather than to time.
"""

from __future__ import annotations

import math
from typing import Optional, Union

from ..core.context import SignalContext
from ..core.ranges import finite_or_min
from ..core.signal import finite_time
from .base import NoiseSource
from .keys import derive_seed, saturate_u64, spatial_key, wrap_u64
from .tiers import Tier


def _to_i32(value: float) -> int:
    """Truncate toward zero, saturating into the signed 32-bit range (NaN is 0)."""
    if math.isnan(value):
        return 0
    return int(max(-2147483648.0, min(value, 2147483647.0)))


class SpatialNoise(NoiseSource):
    """
    Position-keyed noise: the same ``(x, y)`` cell always gives the same value.

    With a context, the cell is ``(ctx.width, ctx.height)`` and time is
    ignored. Without one, time stands in for x at ``frequency`` cells per
    second. ``sample_at`` addresses a cell directly.

    Args:
        seed: Base seed
        frequency: Cells per second along x for time-only sampling (minimum 0.01)
        amplitude: Peak deviation (default 1.0)
        offset: Center value (default 0.0)
        tier: Noise tier

    Example:
        >>> from mixsig.core import SignalContext
        >>> noise = SpatialNoise(seed=5)
        >>> ctx = SignalContext().with_dimensions(4, 9)
        >>> noise.sample_with_context(0.0, ctx) == noise.sample_with_context(12.5, ctx)
        True
        >>> noise.sample_at(4, 9) == noise.sample_with_context(0.0, ctx)
        True
    """

    def __init__(
        self,
        seed: int = 0,
        frequency: float = 1.0,
        amplitude: float = 1.0,
        offset: float = 0.0,
        tier: Optional[Union[Tier, str]] = None,
    ):
        super().__init__(seed, amplitude, offset, tier)
        self.frequency = finite_or_min(frequency, 0.01, 1.0)

    def _cell(self, seed: int, x: int, y: int) -> float:
        u = self._stream(spatial_key(seed, x, y)).uniform()
        return self._scaled(u * 2.0 - 1.0)

    def sample_at(self, x: int, y: int, ctx: Optional[SignalContext] = None) -> float:
        """Value for grid cell ``(x, y)``; a context only contributes its seed."""
        seed = self.seed if ctx is None else self._effective_seed(ctx)
        return self._finish(self._cell(seed, int(x), int(y)))

    def _sample(self, t: float) -> float:
        return self._cell(self.seed, _to_i32(finite_time(t) * self.frequency), 0)

    def _sample_with_context(self, t: float, ctx: SignalContext) -> float:
        return self._cell(self._effective_seed(ctx), ctx.width, ctx.height)


class PerCharacterNoise(NoiseSource):
    """
    Per-glyph noise keyed by ``ctx.char_index``, independent of time.

    Contexts without a character index fall back to ``ctx.frame``; plain
    ``sample(t)`` uses ``int(t * 100)`` as a pseudo index.

    Example:
        >>> from mixsig.core import SignalContext
        >>> jitter = PerCharacterNoise(seed=11)
        >>> base = SignalContext(frame=3, seed=1)
        >>> a = jitter.sample_with_context(0.0, base.with_char_index(2))
        >>> a == jitter.sample_with_context(9.0, base.with_char_index(2))
        True
        >>> a == jitter.sample_with_context(0.0, base.with_char_index(3))
        False
    """

    def _glyph(self, seed: int, index: int) -> float:
        u = self._stream(derive_seed(seed, index)).uniform()
        return self._scaled(u * 2.0 - 1.0)

    def _sample(self, t: float) -> float:
        return self._glyph(self.seed, saturate_u64(finite_time(t) * 100.0))

    def _sample_with_context(self, t: float, ctx: SignalContext) -> float:
        index = ctx.char_index if ctx.char_index is not None else ctx.frame
        return self._glyph(self._effective_seed(ctx), wrap_u64(index))
