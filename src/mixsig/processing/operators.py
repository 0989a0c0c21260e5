"""
Stateless processing operators.

Only ``Clamp``, ``Normalized``/``NormalizedFrom``, ``Quantize`` and
``Clipper`` restrict their output; ``Remap``, ``Invert`` and ``Abs``
pass overshoot through.
"""

from __future__ import annotations

import enum
import math
from typing import Union

from ..core.context import SignalContext
from ..core.ranges import UNIT, SignalRange, finite_or, remap_range
from ..core.signal import Signal

# Input spans narrower than this are treated as a single point by Remap.
REMAP_EPSILON = 1e-4


class _Unary(Signal):
    """Operator applying a scalar function to one wrapped signal."""

    def __init__(self, signal: Signal):
        self.signal = signal

    def _apply(self, value: float) -> float:
        raise NotImplementedError

    def _sample(self, t: float) -> float:
        return self._apply(self.signal.sample(t))

    def _sample_with_context(self, t: float, ctx: SignalContext) -> float:
        return self._apply(self.signal.sample_with_context(t, ctx))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.signal!r})"


class Clamp(_Unary):
    """
    Hard limit to ``[low, high]``.

    Reversed bounds are swapped; a non-finite bound resets both to [0, 1].

    Example:
        >>> from mixsig.generators import Constant
        >>> Clamp(Constant(3.0), -1.0, 1.0).sample(0.0)
        1.0
    """

    def __init__(self, signal: Signal, low: float = 0.0, high: float = 1.0):
        super().__init__(signal)
        self.bounds = SignalRange.new(low, high)

    @property
    def low(self) -> float:
        return self.bounds.min

    @property
    def high(self) -> float:
        return self.bounds.max

    def output_range(self) -> SignalRange:
        source = self.signal.output_range()
        return SignalRange(self.bounds.clamp_value(source.min), self.bounds.clamp_value(source.max))

    def _apply(self, value: float) -> float:
        return self.bounds.clamp_value(value)


class Remap(_Unary):
    """
    Affine map from ``[in_min, in_max]`` to ``[out_min, out_max]``.

    Values outside the input span extrapolate. Reversed output bounds
    invert the mapping. An input span narrower than ``1e-4`` returns the
    output midpoint, and each non-finite parameter falls back to its
    default (0, 1, 0, 1).

    Example:
        >>> from mixsig.generators import Constant
        >>> Remap(Constant(0.0), -1.0, 1.0, 0.0, 10.0).sample(0.0)
        5.0
        >>> Remap(Constant(123.0), 2.0, 2.0, 0.0, 1.0).sample(0.0)
        0.5
    """

    def __init__(
        self,
        signal: Signal,
        in_min: float = 0.0,
        in_max: float = 1.0,
        out_min: float = 0.0,
        out_max: float = 1.0,
    ):
        super().__init__(signal)
        self.in_min = finite_or(in_min, 0.0)
        self.in_max = finite_or(in_max, 1.0)
        self.out_min = finite_or(out_min, 0.0)
        self.out_max = finite_or(out_max, 1.0)

    @classmethod
    def to_unit(cls, signal: Signal) -> "Remap":
        return cls(signal, -1.0, 1.0, 0.0, 1.0)

    @classmethod
    def to_bipolar(cls, signal: Signal) -> "Remap":
        return cls(signal, 0.0, 1.0, -1.0, 1.0)

    def output_range(self) -> SignalRange:
        return SignalRange.new(self.out_min, self.out_max)

    def _apply(self, value: float) -> float:
        span = self.in_max - self.in_min
        if abs(span) < REMAP_EPSILON:
            return (self.out_min + self.out_max) * 0.5
        return self.out_min + (value - self.in_min) / span * (self.out_max - self.out_min)


class NormalizedFrom(_Unary):
    """
    Map an explicit source range onto [0, 1], clamped.

    A degenerate or unbounded source yields 0.5.
    """

    def __init__(self, signal: Signal, source: SignalRange):
        super().__init__(signal)
        self.source = source

    def _source(self) -> SignalRange:
        return self.source

    def output_range(self) -> SignalRange:
        return UNIT

    def _apply(self, value: float) -> float:
        return UNIT.clamp_value(remap_range(value, self._source(), UNIT))


class Normalized(NormalizedFrom):
    """
    Map a signal's own declared range onto [0, 1].

    The canonical bridge from the bipolar core to UI-consumable values.

    Example:
        >>> from mixsig.generators import Sine
        >>> Normalized(Sine()).sample(0.0)
        0.5
        >>> Normalized(Sine()).sample(0.25)
        1.0
    """

    def __init__(self, signal: Signal):
        super().__init__(signal, signal.output_range())

    def _source(self) -> SignalRange:
        return self.signal.output_range()


class Quantize(_Unary):
    """
    Snap to the nearest of ``levels`` evenly spaced values across the input range.

    Output is restricted to the input range. An unbounded or single-point
    range passes the value through.

    Example:
        >>> from mixsig.generators import Sine
        >>> Quantize(Sine(), levels=3).sample(0.2)
        1.0
        >>> Quantize(Sine(), levels=3).sample(0.04)
        0.0
    """

    def __init__(self, signal: Signal, levels: int = 4):
        super().__init__(signal)
        self.levels = max(int(levels), 2)

    def output_range(self) -> SignalRange:
        return self.signal.output_range()

    def _apply(self, value: float) -> float:
        source = self.signal.output_range()
        span = source.width
        if not source.is_bounded or span <= 0.0:
            return value
        position = min(max((value - source.min) / span, 0.0), 1.0)
        steps = self.levels - 1
        index = math.floor(position * steps + 0.5)
        return source.min + (index / steps) * span


class Invert(_Unary):
    """
    Bipolar negation, ``-value`` (not ``1 - value``).

    Example:
        >>> from mixsig.generators import Constant
        >>> Invert(Constant(0.25)).sample(0.0)
        -0.25
    """

    def output_range(self) -> SignalRange:
        source = self.signal.output_range()
        return SignalRange(-source.max, -source.min)

    def _apply(self, value: float) -> float:
        return -value


class Abs(_Unary):
    """Absolute value: folds a bipolar oscillator into a one-directional pulse."""

    def output_range(self) -> SignalRange:
        source = self.signal.output_range()
        low, high = abs(source.min), abs(source.max)
        if source.min <= 0.0 <= source.max:
            return SignalRange(0.0, max(low, high))
        return SignalRange(min(low, high), max(low, high))

    def _apply(self, value: float) -> float:
        return abs(value)


class ClipMode(enum.Enum):
    HARD = "hard"
    SOFT = "soft"


class Clipper(_Unary):
    """
    Asymmetric hard or soft clipper.

    Hard mode clamps to ``[negative, positive]``. Soft mode passes values
    between the thresholds unchanged and saturates beyond them with an
    exponential knee that approaches +/-1 asymptotically.

    Args:
        signal: Input signal
        positive: Upper threshold (default 1.0)
        negative: Lower threshold (default -1.0)
        mode: ``ClipMode`` or its name (default hard)

    Example:
        >>> from mixsig.generators import Constant
        >>> Clipper.symmetric(Constant(2.0), 0.5).sample(0.0)
        0.5
        >>> 0.5 < Clipper.soft_symmetric(Constant(2.0), 0.5).sample(0.0) < 1.0
        True
    """

    def __init__(
        self,
        signal: Signal,
        positive: float = 1.0,
        negative: float = -1.0,
        mode: Union[ClipMode, str] = ClipMode.HARD,
    ):
        super().__init__(signal)
        positive = finite_or(positive, 1.0)
        negative = finite_or(negative, -1.0)
        self.negative, self.positive = min(positive, negative), max(positive, negative)
        self.mode = mode if isinstance(mode, ClipMode) else ClipMode(str(mode).lower())

    @classmethod
    def symmetric(cls, signal: Signal, threshold: float) -> "Clipper":
        return cls(signal, threshold, -threshold, ClipMode.HARD)

    @classmethod
    def soft(cls, signal: Signal, positive: float, negative: float) -> "Clipper":
        return cls(signal, positive, negative, ClipMode.SOFT)

    @classmethod
    def soft_symmetric(cls, signal: Signal, threshold: float) -> "Clipper":
        return cls(signal, threshold, -threshold, ClipMode.SOFT)

    def output_range(self) -> SignalRange:
        # Both modes are monotonic, so the clipped endpoints bound the output.
        source = self.signal.output_range()
        return SignalRange.new(self._apply(source.min), self._apply(source.max))

    def _soft(self, value: float) -> float:
        if value > self.positive:
            headroom = 1.0 - self.positive
            if headroom <= 0.0:
                return self.positive
            return self.positive + headroom * (1.0 - math.exp(-(value - self.positive) / headroom))
        if value < self.negative:
            headroom = 1.0 + self.negative
            if headroom <= 0.0:
                return self.negative
            return self.negative - headroom * (1.0 - math.exp(-(self.negative - value) / headroom))
        return value

    def _apply(self, value: float) -> float:
        if self.mode is ClipMode.SOFT:
            return self._soft(value)
        return min(max(value, self.negative), self.positive)
