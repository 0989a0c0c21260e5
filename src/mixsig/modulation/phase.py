"""
Phase integration for true frequency modulation.

``PhaseAccumulator`` integrates a frequency signal (Hz) into a phase in
cycles; ``PhaseSine`` turns that phase back into a waveform. The
integral is recomputed from zero on every sample with the trapezoidal
rule, so the accumulator stays a pure function of ``t``. Integrands
that declare a ``period()`` are integrated over one period and the
remainder only, so their cost does not grow with ``t``.
"""

from __future__ import annotations

import math
from typing import Callable, Optional

import numpy as np

from .. import config
from ..core.context import SignalContext
from ..core.ranges import BIPOLAR, SignalRange, finite_or
from ..core.signal import Signal

TAU = 2.0 * math.pi


def integration_steps(t: float) -> int:
    """Trapezoid steps for an integral over ``[0, t]``, capped for bounded cost."""
    steps = t * config.phase_steps_per_second()
    if math.isnan(steps) or steps <= 1.0:
        return 1
    if steps >= config.MAX_INTEGRATION_STEPS:
        return config.MAX_INTEGRATION_STEPS
    return int(math.ceil(steps))


def _trapezoid(
    signal: Signal,
    t: float,
    ctx: Optional[SignalContext],
    transform: Optional[Callable[[np.ndarray], np.ndarray]],
) -> float:
    if not t > 0.0:
        return 0.0
    steps = integration_steps(t)
    times = np.linspace(0.0, t, steps + 1)
    values = signal.sample_many(times, ctx)
    if transform is not None:
        values = transform(values)
    values = np.where(np.isfinite(values), values, 0.0)
    dt = t / steps
    return float(np.sum(values[:-1] + values[1:]) * 0.5 * dt)


def integrate_signal(
    signal: Signal,
    t: float,
    ctx: Optional[SignalContext] = None,
    transform: Optional[Callable[[np.ndarray], np.ndarray]] = None,
) -> float:
    """
    Trapezoidal integral of ``signal`` over ``[0, t]``.

    A periodic integrand contributes ``whole cycles * one-period integral``
    plus the integral over the leftover fraction of a period.

    Args:
        signal: Integrand
        t: Upper bound, finite and non-negative
        ctx: Context passed to every sample of the integrand
        transform: Optional vectorized map applied to the samples first

    Returns:
        float: Approximate integral (0.0 for ``t <= 0``; may overflow to inf
        for huge ``t``)

    Example:
        >>> from mixsig.generators import Constant, Sine
        >>> round(integrate_signal(Constant(2.0), 0.5), 9)
        1.0
        >>> abs(integrate_signal(Sine(frequency=2.0), 1e6)) < 1e-6
        True
    """
    if not t > 0.0:
        return 0.0
    period = signal.period()
    if period is None or t <= period:
        return _trapezoid(signal, t, ctx, transform)
    remainder = math.fmod(t, period)
    cycles = (t - remainder) / period
    per_cycle = _trapezoid(signal, period, ctx, transform)
    return cycles * per_cycle + _trapezoid(signal, remainder, ctx, transform)


def bipolar_from(source: SignalRange) -> Callable[[np.ndarray], np.ndarray]:
    """Vectorized remap from ``source`` into the bipolar range (zeros for degenerate sources)."""
    width = source.max - source.min
    if not math.isfinite(width) or width <= 0.0:
        return np.zeros_like
    return lambda values: BIPOLAR.min + (values - source.min) / width * BIPOLAR.width


def wrap_phase(phase: float) -> float:
    """Wrap to [0, 1); values within 1e-6 of 1.0 snap to 0.0."""
    wrapped = phase % 1.0
    if abs(wrapped - 1.0) < 1e-6:
        return 0.0
    return wrapped


class PhaseAccumulator(Signal):
    """
    Accumulated phase of a frequency signal, wrapped to [0, 1).

    Args:
        frequency: Signal producing frequency values in Hz
        initial_phase: Starting phase in cycles (wrapped to [0, 1))

    Negative or non-finite times return ``initial_phase``.

    Example:
        >>> from mixsig.generators import Constant
        >>> acc = PhaseAccumulator(Constant(1.0))
        >>> abs(acc.sample(0.25) - 0.25) < 1e-9
        True
        >>> acc.sample(-1.0)
        0.0
    """

    def __init__(self, frequency: Signal, initial_phase: float = 0.0):
        self.frequency = frequency
        self.initial_phase = finite_or(initial_phase, 0.0) % 1.0

    def _accumulate(self, t: float, ctx: Optional[SignalContext]) -> float:
        if not math.isfinite(t) or t < 0.0:
            return self.initial_phase
        return wrap_phase(self.initial_phase + integrate_signal(self.frequency, t, ctx))

    def _sample(self, t: float) -> float:
        return self._accumulate(t, None)

    def _sample_with_context(self, t: float, ctx: SignalContext) -> float:
        return self._accumulate(t, ctx)


class PhaseSine(Signal):
    """
    Sine of a phase signal: ``sin(2 pi phase)``, with the phase reduced to one cycle first.

    Example:
        >>> from mixsig.generators import Constant
        >>> PhaseSine(Constant(0.25)).sample(0.0)
        1.0
    """

    def __init__(self, phase: Signal):
        self.phase = phase

    def output_range(self) -> SignalRange:
        return BIPOLAR

    def _sample(self, t: float) -> float:
        return math.sin(TAU * (self.phase.sample(t) % 1.0))

    def _sample_with_context(self, t: float, ctx: SignalContext) -> float:
        return math.sin(TAU * (self.phase.sample_with_context(t, ctx) % 1.0))
