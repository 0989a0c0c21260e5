"""
Periodic oscillators: sine, triangle, square and sawtooth.

All four share the same parameters and the same bipolar convention:
``offset + amplitude * wave(cycle)`` where ``cycle = (t * frequency + phase) mod 1``.
"""

from __future__ import annotations

import math
from typing import Optional

from ..core.ranges import SignalRange, finite_or, finite_or_clamp
from ..core.signal import Signal, finite_time

TAU = 2.0 * math.pi


class Oscillator(Signal):
    """
    Base for periodic waveforms.

    Args:
        frequency: Cycles per second (default 1.0)
        amplitude: Peak deviation from ``offset`` (default 1.0)
        offset: Center value (default 0.0)
        phase: Phase offset in cycles (default 0.0)
    """

    def __init__(self, frequency: float = 1.0, amplitude: float = 1.0, offset: float = 0.0, phase: float = 0.0):
        self.frequency = finite_or(frequency, 1.0)
        self.amplitude = finite_or(amplitude, 1.0)
        self.offset = finite_or(offset, 0.0)
        self.phase = finite_or(phase, 0.0)

    def output_range(self) -> SignalRange:
        return SignalRange.around(self.amplitude, self.offset)

    def cycle_position(self, t: float) -> float:
        """Position within the current cycle, in [0, 1); an overflowing cycle count counts as 0."""
        cycles = finite_or(finite_time(t) * self.frequency, 0.0)
        return (cycles + self.phase) % 1.0

    def period(self) -> Optional[float]:
        if self.frequency == 0.0:
            return None
        period = 1.0 / abs(self.frequency)
        return period if math.isfinite(period) else None

    def _wave(self, t: float) -> float:
        raise NotImplementedError

    def _sample(self, t: float) -> float:
        return self.offset + self.amplitude * self._wave(t)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(frequency={self.frequency}, amplitude={self.amplitude}, "
            f"offset={self.offset}, phase={self.phase})"
        )


class Sine(Oscillator):
    """
    Sine oscillator: ``offset + amplitude * sin(2 pi (f t + phase))``.

    Example:
        >>> Sine(frequency=1.0).sample(0.25)
        1.0
        >>> Sine(frequency=1.0).sample(0.75)
        -1.0
        >>> Sine(frequency=2.0, amplitude=0.5, offset=0.5).output_range()
        SignalRange(min=0.0, max=1.0)
    """

    def _wave(self, t: float) -> float:
        return math.sin(TAU * self.cycle_position(t))


class Triangle(Oscillator):
    """
    Triangle oscillator: -1 at the cycle start, +1 at mid-cycle.

    Example:
        >>> Triangle().sample(0.5)
        1.0
        >>> Triangle().sample(0.0)
        -1.0
    """

    def _wave(self, t: float) -> float:
        cycle = self.cycle_position(t)
        if cycle < 0.5:
            return 4.0 * cycle - 1.0
        return 3.0 - 4.0 * cycle


class Square(Oscillator):
    """
    Square oscillator, high for the first ``duty`` fraction of each cycle.

    Args:
        frequency: Cycles per second (default 1.0)
        amplitude: Peak deviation from ``offset`` (default 1.0)
        offset: Center value (default 0.0)
        phase: Phase offset in cycles (default 0.0)
        duty: High fraction of the cycle, clamped to [0, 1] (default 0.5)

    Example:
        >>> sq = Square(duty=0.25)
        >>> sq.sample(0.1), sq.sample(0.3)
        (1.0, -1.0)
    """

    def __init__(
        self,
        frequency: float = 1.0,
        amplitude: float = 1.0,
        offset: float = 0.0,
        phase: float = 0.0,
        duty: float = 0.5,
    ):
        super().__init__(frequency, amplitude, offset, phase)
        self.duty = finite_or_clamp(duty, 0.0, 1.0, 0.5)

    def _wave(self, t: float) -> float:
        return 1.0 if self.cycle_position(t) < self.duty else -1.0


class Sawtooth(Oscillator):
    """
    Rising ramp from -1 to +1 each cycle; ``inverted`` makes it fall instead.

    Example:
        >>> Sawtooth().sample(0.5)
        0.0
        >>> Sawtooth(inverted=True).sample(0.0)
        1.0
    """

    def __init__(
        self,
        frequency: float = 1.0,
        amplitude: float = 1.0,
        offset: float = 0.0,
        phase: float = 0.0,
        inverted: bool = False,
    ):
        super().__init__(frequency, amplitude, offset, phase)
        self.inverted = bool(inverted)

    def _wave(self, t: float) -> float:
        cycle = self.cycle_position(t)
        if self.inverted:
            return 1.0 - 2.0 * cycle
        return 2.0 * cycle - 1.0
