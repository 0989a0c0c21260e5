"""
The Signal contract.

A signal maps a time value (seconds, or normalized progress for
envelopes) and an optional ``SignalContext`` to a finite float. Every
composition and processing operator is itself a ``Signal``, so chains
nest without special cases.

Subclasses implement ``_sample`` (and ``_sample_with_context`` when the
context matters). The public entry points apply the totality rule: a
non-finite result is replaced by the center of ``output_range()``,
i.e. 0.0 for bipolar signals and 0.5 for normalized ones.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Callable, Iterable, Optional, Union

import numpy as np

from .context import SignalContext
from .ranges import UNBOUNDED, UNIT, SignalRange, finite_or


def finite_time(t: float) -> float:
    """Sampling-boundary time sanitizer: NaN and +/-inf become 0.0."""
    return finite_or(t, 0.0)


class Signal(ABC):
    """
    Base class for everything that can be sampled.

    Non-filter signals are pure: the same ``t`` and context always give
    the same value, and they hold no mutable state.

    Example:
        >>> from mixsig.generators import Sine
        >>> Sine(frequency=1.0).sample(0.25)
        1.0
        >>> Sine().normalized().sample(0.0)
        0.5
    """

    #: True for signals whose output depends on the history of calls.
    stateful = False

    def output_range(self) -> SignalRange:
        """Declared bounds of ``sample``; defaults to the normalized range."""
        return UNIT

    def period(self) -> Optional[float]:
        """Repeat interval in seconds for strictly periodic signals, else None."""
        return None

    @abstractmethod
    def _sample(self, t: float) -> float:
        """Raw value at ``t``; may be non-finite, the caller sanitizes."""

    def _sample_with_context(self, t: float, ctx: SignalContext) -> float:
        return self._sample(t)

    def sample(self, t: float) -> float:
        return self._finish(self._sample(t))

    def sample_with_context(self, t: float, ctx: Optional[SignalContext]) -> float:
        if ctx is None:
            return self.sample(t)
        return self._finish(self._sample_with_context(t, ctx))

    def _finish(self, value: float) -> float:
        try:
            value = float(value)
        except (TypeError, ValueError):
            return self.output_range().center
        if math.isfinite(value):
            return value
        return self.output_range().center

    # Batch helpers -------------------------------------------------------

    def sample_many(self, times: Iterable[float], ctx: Optional[SignalContext] = None) -> np.ndarray:
        """Sample at each time in order, returning a float64 array."""
        return np.fromiter(
            (self.sample_with_context(float(t), ctx) for t in times),
            dtype=np.float64,
        )

    def sample_sweep(
        self,
        t_start: float,
        dt: float,
        count: int,
        ctx: Optional[SignalContext] = None,
    ) -> np.ndarray:
        """Sample ``count`` values at ``t_start + i * dt``."""
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        return self.sample_many(t_start + dt * np.arange(count), ctx)

    def render(self, duration: float, sample_rate: int = 44100, ctx: Optional[SignalContext] = None) -> np.ndarray:
        """
        Render ``duration`` seconds at ``sample_rate`` into a mono array.

        Args:
            duration: Duration in seconds (positive)
            sample_rate: Sample rate in Hz (default 44100)
            ctx: Optional context passed to every sample

        Returns:
            numpy.ndarray: Sampled values (float64)

        Example:
            >>> from mixsig.generators import Sine
            >>> len(Sine(frequency=2.0).render(0.5, sample_rate=1000))
            500
        """
        if duration <= 0:
            raise ValueError(f"Duration must be positive, got {duration}")
        if sample_rate <= 0:
            raise ValueError(f"Sample rate must be positive, got {sample_rate}")
        num_samples = int(duration * sample_rate)
        t = np.linspace(0, duration, num_samples, endpoint=False)
        return self.sample_many(t, ctx)

    # Fluent builders -----------------------------------------------------

    def add(self, other: "Signal") -> "Signal":
        from ..composition.operators import Add
        return Add(self, other)

    def multiply(self, other: "Signal") -> "Signal":
        from ..composition.operators import Multiply
        return Multiply(self, other)

    def scale(self, factor: Union[float, "Signal"]) -> "Signal":
        from ..composition.operators import Scale
        return Scale(self, factor)

    def mix(self, other: "Signal", blend: float = 0.5) -> "Signal":
        from ..composition.operators import Mix
        return Mix(self, other, blend)

    def map(self, fn: Callable[[float], float], output_range: Optional[SignalRange] = None) -> "Signal":
        return Map(self, fn, output_range)

    def invert(self) -> "Signal":
        from ..processing.operators import Invert
        return Invert(self)

    def abs(self) -> "Signal":
        from ..processing.operators import Abs
        return Abs(self)

    def normalized(self) -> "Signal":
        from ..processing.operators import Normalized
        return Normalized(self)

    def normalized_from(self, source: SignalRange) -> "Signal":
        from ..processing.operators import NormalizedFrom
        return NormalizedFrom(self, source)

    def clamp(self, low: float = 0.0, high: float = 1.0) -> "Signal":
        from ..processing.operators import Clamp
        return Clamp(self, low, high)

    def quantize(self, levels: int = 4) -> "Signal":
        from ..processing.operators import Quantize
        return Quantize(self, levels)

    def remap(self, in_min: float, in_max: float, out_min: float = 0.0, out_max: float = 1.0) -> "Signal":
        from ..processing.operators import Remap
        return Remap(self, in_min, in_max, out_min, out_max)


class Map(Signal):
    """
    Apply an arbitrary scalar function to another signal's output.

    ``fn`` must be pure for the result to stay deterministic. Without an
    explicit ``output_range`` the result is declared unbounded.

    Example:
        >>> from mixsig.generators import Constant
        >>> Constant(0.5).map(lambda v: v * 4).sample(0.0)
        2.0
    """

    def __init__(self, signal: Signal, fn: Callable[[float], float], output_range: Optional[SignalRange] = None):
        if not callable(fn):
            raise TypeError("fn must be callable")
        self.signal = signal
        self.fn = fn
        self._range = output_range

    def output_range(self) -> SignalRange:
        return self._range if self._range is not None else UNBOUNDED

    def _sample(self, t: float) -> float:
        return self.fn(self.signal.sample(t))

    def _sample_with_context(self, t: float, ctx: SignalContext) -> float:
        return self.fn(self.signal.sample_with_context(t, ctx))


__all__ = ["Signal", "Map", "finite_time"]
