"""
Numeric range conventions and finite-value sanitizers.

Two conventions meet in this library: the bipolar core ([-1, 1]) used by
oscillators and noise, and the normalized range ([0, 1]) consumed by UI
code. ``SignalRange`` describes the declared bounds of any signal so that
range-aware stages can bridge the two without re-deriving bounds.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

# Width below which a source range is treated as a single point.
RANGE_EPSILON = 1.1920929e-07


def finite_or(value: float, fallback: float) -> float:
    """Return ``value`` if it is a finite number, otherwise ``fallback``.

    Example:
        >>> finite_or(float("nan"), 0.5)
        0.5
        >>> finite_or(2.0, 0.5)
        2.0
    """
    try:
        value = float(value)
    except (TypeError, ValueError):
        return fallback
    return value if math.isfinite(value) else fallback


def finite_or_min(value: float, minimum: float, fallback: float) -> float:
    """Finite ``value`` raised to at least ``minimum``; ``fallback`` otherwise."""
    value = finite_or(value, math.nan)
    if math.isnan(value):
        return fallback
    return max(value, minimum)


def finite_or_clamp(value: float, low: float, high: float, fallback: float) -> float:
    """Finite ``value`` clamped to ``[low, high]``; ``fallback`` otherwise."""
    value = finite_or(value, math.nan)
    if math.isnan(value):
        return fallback
    return min(max(value, low), high)


@dataclass(frozen=True)
class SignalRange:
    """
    Declared output bounds of a signal.

    The plain constructor stores bounds as given (``UNBOUNDED`` relies on
    this); use ``SignalRange.new`` for untrusted input.

    Example:
        >>> SignalRange.new(1.0, -1.0) == SignalRange.BIPOLAR
        True
        >>> SignalRange.new(float("nan"), 1.0) == SignalRange.UNIT
        True
        >>> SignalRange.BIPOLAR.remap_to(0.0, SignalRange.UNIT)
        0.5
    """

    min: float
    max: float

    @classmethod
    def new(cls, low: float, high: float) -> "SignalRange":
        """Build a range, swapping reversed bounds; non-finite bounds give ``UNIT``."""
        try:
            low = float(low)
            high = float(high)
        except (TypeError, ValueError):
            return cls.UNIT
        if not (math.isfinite(low) and math.isfinite(high)):
            return cls.UNIT
        if low <= high:
            return cls(low, high)
        return cls(high, low)

    @classmethod
    def around(cls, amplitude: float, offset: float) -> "SignalRange":
        """Range ``[offset - |amplitude|, offset + |amplitude|]`` with sanitized parameters."""
        amplitude = finite_or(amplitude, 1.0)
        offset = finite_or(offset, 0.0)
        return cls.new(offset - amplitude, offset + amplitude)

    @property
    def width(self) -> float:
        return self.max - self.min

    @property
    def center(self) -> float:
        """Neutral default: 0.0 for bipolar, 0.5 for unit, 0.0 when unbounded."""
        mid = (self.min + self.max) * 0.5
        return mid if math.isfinite(mid) else 0.0

    @property
    def is_bounded(self) -> bool:
        return math.isfinite(self.min) and math.isfinite(self.max)

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max

    def clamp_value(self, value: float) -> float:
        return min(max(value, self.min), self.max)

    def remap_to(self, value: float, to: "SignalRange") -> float:
        return remap_range(value, self, to)

    def scaled(self, factor: float) -> "SignalRange":
        """Range of ``v * factor`` for ``v`` in this range."""
        factor = finite_or(factor, 0.0)
        if not self.is_bounded:
            return self if factor != 0.0 else SignalRange(0.0, 0.0)
        return SignalRange.new(self.min * factor, self.max * factor)

    def plus(self, other: "SignalRange") -> "SignalRange":
        """Range of ``a + b``."""
        if not (self.is_bounded and other.is_bounded):
            return UNBOUNDED
        return SignalRange(self.min + other.min, self.max + other.max)

    def times(self, other: "SignalRange") -> "SignalRange":
        """Range of ``a * b`` from the four corner products."""
        if not (self.is_bounded and other.is_bounded):
            return UNBOUNDED
        corners = (
            self.min * other.min,
            self.min * other.max,
            self.max * other.min,
            self.max * other.max,
        )
        return SignalRange(min(corners), max(corners))


UNIT = SignalRange(0.0, 1.0)
BIPOLAR = SignalRange(-1.0, 1.0)
UNBOUNDED = SignalRange(-math.inf, math.inf)

SignalRange.UNIT = UNIT
SignalRange.BIPOLAR = BIPOLAR
SignalRange.UNBOUNDED = UNBOUNDED


def remap_range(value: float, source: SignalRange, target: SignalRange) -> float:
    """
    Affine map of ``value`` from ``source`` to ``target``.

    A degenerate or unbounded source yields the target center instead of
    dividing by zero.

    Example:
        >>> remap_range(0.3, SignalRange(2.0, 2.0), SignalRange(0.0, 10.0))
        5.0
    """
    width = source.max - source.min
    if not math.isfinite(width) or abs(width) < RANGE_EPSILON:
        return target.center
    normalized = (value - source.min) / width
    return target.min + normalized * (target.max - target.min)


def unit_to_bipolar(value: float) -> float:
    return value * 2.0 - 1.0


def bipolar_to_unit(value: float) -> float:
    return (value + 1.0) * 0.5
