"""
Composition operators: combine signals without clamping.

Intermediate stages never clamp; overshoot is preserved so later stages
(normalization, FM, envelope gating) see the true values. Declared
ranges are combined exactly so downstream normalization stays correct.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional, Union

from ..core.context import SignalContext
from ..core.ranges import UNIT, SignalRange, finite_or
from ..core.signal import Signal, finite_time
from ..modulation.phase import bipolar_from, integrate_signal


class Add(Signal):
    """
    Unclamped sum ``a + b``.

    Example:
        >>> from mixsig.generators import Constant
        >>> Add(Constant(0.75), Constant(0.5)).sample(0.0)
        1.25
    """

    def __init__(self, a: Signal, b: Signal):
        self.a = a
        self.b = b

    def output_range(self) -> SignalRange:
        return self.a.output_range().plus(self.b.output_range())

    def _sample(self, t: float) -> float:
        return self.a.sample(t) + self.b.sample(t)

    def _sample_with_context(self, t: float, ctx: SignalContext) -> float:
        return self.a.sample_with_context(t, ctx) + self.b.sample_with_context(t, ctx)


class Sum(Signal):
    """
    Unclamped sum of any number of signals; an empty sum is 0.

    Example:
        >>> from mixsig.generators import Constant
        >>> Sum([Constant(1.0), Constant(2.0), Constant(3.0)]).sample(0.0)
        6.0
        >>> Sum([]).sample(0.0)
        0.0
    """

    def __init__(self, signals: Iterable[Signal]):
        self.signals = list(signals)

    def output_range(self) -> SignalRange:
        total = SignalRange(0.0, 0.0)
        for signal in self.signals:
            total = total.plus(signal.output_range())
        return total

    def _sample(self, t: float) -> float:
        return math.fsum(signal.sample(t) for signal in self.signals)

    def _sample_with_context(self, t: float, ctx: SignalContext) -> float:
        return math.fsum(signal.sample_with_context(t, ctx) for signal in self.signals)


class Multiply(Signal):
    """Unclamped product ``a * b``, typically an oscillator gated by an envelope."""

    def __init__(self, a: Signal, b: Signal):
        self.a = a
        self.b = b

    def output_range(self) -> SignalRange:
        return self.a.output_range().times(self.b.output_range())

    def _sample(self, t: float) -> float:
        return self.a.sample(t) * self.b.sample(t)

    def _sample_with_context(self, t: float, ctx: SignalContext) -> float:
        return self.a.sample_with_context(t, ctx) * self.b.sample_with_context(t, ctx)


class Scale(Signal):
    """
    Unclamped multiply by a constant factor or by a driving signal.

    Args:
        signal: Signal to scale
        factor: Float factor (non-finite -> 1.0) or a Signal sampled alongside

    Example:
        >>> from mixsig.generators import Constant
        >>> Scale(Constant(0.5), 4.0).sample(0.0)
        2.0
    """

    def __init__(self, signal: Signal, factor: Union[float, Signal] = 1.0):
        self.signal = signal
        self.factor = factor if isinstance(factor, Signal) else finite_or(factor, 1.0)

    def output_range(self) -> SignalRange:
        source = self.signal.output_range()
        if isinstance(self.factor, Signal):
            return source.times(self.factor.output_range())
        return source.scaled(self.factor)

    def _factor_at(self, t: float, ctx: Optional[SignalContext]) -> float:
        if isinstance(self.factor, Signal):
            return self.factor.sample_with_context(t, ctx)
        return self.factor

    def _sample(self, t: float) -> float:
        return self.signal.sample(t) * self._factor_at(t, None)

    def _sample_with_context(self, t: float, ctx: SignalContext) -> float:
        return self.signal.sample_with_context(t, ctx) * self._factor_at(t, ctx)


class Mix(Signal):
    """
    Linear interpolation ``a * (1 - blend) + b * blend``.

    ``blend`` is not clamped: values outside [0, 1] extrapolate past
    either operand. A non-finite blend becomes 0.5.

    Example:
        >>> from mixsig.generators import Constant
        >>> Mix(Constant(0.0), Constant(1.0), 0.25).sample(0.0)
        0.25
        >>> Mix(Constant(0.0), Constant(1.0), 1.5).sample(0.0)
        1.5
    """

    def __init__(self, a: Signal, b: Signal, blend: float = 0.5):
        self.a = a
        self.b = b
        self.blend = finite_or(blend, 0.5)

    def output_range(self) -> SignalRange:
        a_part = self.a.output_range().scaled(1.0 - self.blend)
        b_part = self.b.output_range().scaled(self.blend)
        return a_part.plus(b_part)

    def _combine(self, va: float, vb: float) -> float:
        return va * (1.0 - self.blend) + vb * self.blend

    def _sample(self, t: float) -> float:
        return self._combine(self.a.sample(t), self.b.sample(t))

    def _sample_with_context(self, t: float, ctx: SignalContext) -> float:
        return self._combine(self.a.sample_with_context(t, ctx), self.b.sample_with_context(t, ctx))


class FrequencyMod(Signal):
    """
    Frequency modulation by warping the carrier's time axis.

    The carrier is evaluated at::

        tau(t) = t + (depth / carrier_freq) * integral_0^t m(s) ds

    where ``m`` is the modulator remapped from its declared range to
    [-1, 1]. For a carrier at ``carrier_freq`` Hz this shifts the
    instantaneous frequency by ``depth * m(t)`` Hz, and since ``tau`` is
    an integral it is continuous: no phase jumps at modulator zero
    crossings.

    The integral is recomputed from zero on every sample. For a periodic
    modulator (one whose ``period()`` is not None, e.g. any oscillator)
    only one period and the leftover fraction are integrated, so cost is
    flat in ``t``. Other modulators cost ``t * MIXSIG_PHASE_STEPS``
    modulator samples per call, capped at ``config.MAX_INTEGRATION_STEPS``;
    past that cap accuracy drops instead of cost growing. Rendering long
    audio with such a modulator is slow.

    Args:
        carrier: Signal whose time axis is modulated
        modulator: Modulating signal
        depth: Peak frequency deviation in Hz (default 1.0)
        carrier_freq: Carrier frequency in Hz; zero or non-finite disables modulation

    Example:
        >>> from mixsig.generators import Constant, Sine
        >>> fm = FrequencyMod(Sine(frequency=2.0), Constant(0.0), depth=5.0, carrier_freq=2.0)
        >>> fm.sample(0.3) == Sine(frequency=2.0).sample(0.3)
        True
    """

    def __init__(self, carrier: Signal, modulator: Signal, depth: float = 1.0, carrier_freq: float = 1.0):
        self.carrier = carrier
        self.modulator = modulator
        self.depth = finite_or(depth, 0.0)
        self.carrier_freq = finite_or(carrier_freq, 0.0)

    def output_range(self) -> SignalRange:
        return self.carrier.output_range()

    def effective_time(self, t: float, ctx: Optional[SignalContext] = None) -> float:
        """Warped time ``tau(t)`` fed to the carrier."""
        t = finite_time(t)
        if self.carrier_freq == 0.0 or self.depth == 0.0:
            return t
        to_bipolar = bipolar_from(self.modulator.output_range())
        integral = integrate_signal(self.modulator, t, ctx, transform=to_bipolar)
        return t + (self.depth / self.carrier_freq) * integral

    def _sample(self, t: float) -> float:
        return self.carrier.sample(self.effective_time(t))

    def _sample_with_context(self, t: float, ctx: SignalContext) -> float:
        return self.carrier.sample_with_context(self.effective_time(t, ctx), ctx)


class VcaCentered(Signal):
    """
    Amplifier that rests at 0.5 instead of 0.

    Output is ``c * a + 0.5 * (1 - a)`` with the carrier ``c`` and the
    amount ``a`` both clamped to [0, 1]; at zero amount the output sits at
    the normalized midpoint, suited to gauges whose neutral value is half.

    Example:
        >>> from mixsig.generators import Constant
        >>> VcaCentered(Constant(1.0), Constant(0.0)).sample(0.0)
        0.5
        >>> VcaCentered(Constant(1.0), Constant(1.0)).sample(0.0)
        1.0
    """

    def __init__(self, carrier: Signal, amount: Signal):
        self.carrier = carrier
        self.amount = amount

    def output_range(self) -> SignalRange:
        return UNIT

    @staticmethod
    def _apply(c: float, a: float) -> float:
        c = min(max(c, 0.0), 1.0) if math.isfinite(c) else 0.5
        a = min(max(a, 0.0), 1.0) if math.isfinite(a) else 0.0
        return c * a + 0.5 * (1.0 - a)

    def _sample(self, t: float) -> float:
        return self._apply(self.carrier.sample(t), self.amount.sample(t))

    def _sample_with_context(self, t: float, ctx: SignalContext) -> float:
        return self._apply(self.carrier.sample_with_context(t, ctx), self.amount.sample_with_context(t, ctx))
