"""
Utility shapes: constants, ramps, steps, windows and keyframe curves.
"""

from __future__ import annotations

import bisect
from typing import Iterable, List, Tuple

from ..core.ranges import SignalRange, finite_or
from ..core.signal import Signal, finite_time

MIN_RAMP_DURATION = 0.001


class Constant(Signal):
    """
    Fixed value; the output range is the single point ``[value, value]``.

    Example:
        >>> Constant(0.42).sample(100.0)
        0.42
    """

    def __init__(self, value: float = 0.0):
        self.value = finite_or(value, 0.0)

    def output_range(self) -> SignalRange:
        return SignalRange(self.value, self.value)

    def _sample(self, t: float) -> float:
        return self.value

    def __repr__(self) -> str:
        return f"Constant({self.value})"


class Ramp(Signal):
    """
    Linear ramp from ``start`` to ``end`` over ``duration`` seconds, holding after.

    Example:
        >>> ramp = Ramp(0.2, 0.8, duration=2.0)
        >>> ramp.sample(0.0), ramp.sample(2.0), ramp.sample(5.0)
        (0.2, 0.8, 0.8)
    """

    def __init__(self, start: float = 0.0, end: float = 1.0, duration: float = 1.0):
        self.start = finite_or(start, 0.0)
        self.end = finite_or(end, 1.0)
        self.duration = max(finite_or(duration, MIN_RAMP_DURATION), MIN_RAMP_DURATION)

    def output_range(self) -> SignalRange:
        return SignalRange.new(self.start, self.end)

    def _sample(self, t: float) -> float:
        progress = min(max(finite_time(t) / self.duration, 0.0), 1.0)
        return self.start * (1.0 - progress) + self.end * progress


class Step(Signal):
    """``before`` until ``threshold``, ``after`` from the threshold on."""

    def __init__(self, before: float = 0.0, after: float = 1.0, threshold: float = 0.5):
        self.before = finite_or(before, 0.0)
        self.after = finite_or(after, 1.0)
        self.threshold = finite_or(threshold, 0.5)

    def output_range(self) -> SignalRange:
        return SignalRange.new(self.before, self.after)

    def _sample(self, t: float) -> float:
        return self.before if finite_time(t) < self.threshold else self.after


class Pulse(Signal):
    """
    ``high`` inside the half-open window ``[start, end)``, ``low`` elsewhere.

    Example:
        >>> pulse = Pulse(start=0.25, end=0.75)
        >>> pulse.sample(0.25), pulse.sample(0.75)
        (1.0, 0.0)
    """

    def __init__(self, low: float = 0.0, high: float = 1.0, start: float = 0.25, end: float = 0.75):
        self.low = finite_or(low, 0.0)
        self.high = finite_or(high, 1.0)
        self.start = finite_or(start, 0.25)
        self.end = finite_or(end, 0.75)

    def output_range(self) -> SignalRange:
        return SignalRange.new(self.low, self.high)

    def _sample(self, t: float) -> float:
        t = finite_time(t)
        return self.high if self.start <= t < self.end else self.low


class Keyframes(Signal):
    """
    Piecewise-linear curve through ``(time, value)`` pairs.

    Pairs are sorted by time; before the first and after the last key
    the end values are held. An empty list behaves like ``[(0, 0)]``.
    Non-finite times or values are dropped.

    Args:
        keyframes: Iterable of ``(time, value)`` pairs

    Example:
        >>> curve = Keyframes([(1.0, 1.0), (0.0, 0.0), (2.0, 0.0)])
        >>> curve.sample(0.5), curve.sample(1.5), curve.sample(9.0)
        (0.5, 0.5, 0.0)
        >>> curve.output_range()
        SignalRange(min=0.0, max=1.0)
    """

    def __init__(self, keyframes: Iterable[Tuple[float, float]] = ()):
        cleaned: List[Tuple[float, float]] = []
        for time, value in keyframes:
            time = finite_or(time, float("nan"))
            value = finite_or(value, float("nan"))
            if time == time and value == value:
                cleaned.append((time, value))
        cleaned.sort(key=lambda pair: pair[0])
        if not cleaned:
            cleaned.append((0.0, 0.0))
        self.keyframes = cleaned
        self._times = [time for time, _ in cleaned]

    def __len__(self) -> int:
        return len(self.keyframes)

    def output_range(self) -> SignalRange:
        values = [value for _, value in self.keyframes]
        return SignalRange(min(values), max(values))

    def _sample(self, t: float) -> float:
        t = finite_time(t)
        frames = self.keyframes
        if t <= frames[0][0]:
            return frames[0][1]
        if t >= frames[-1][0]:
            return frames[-1][1]
        index = bisect.bisect_right(self._times, t) - 1
        t0, v0 = frames[index]
        t1, v1 = frames[index + 1]
        span = t1 - t0
        if span <= 1e-10:
            return v1
        return v0 + (v1 - v0) * (t - t0) / span
