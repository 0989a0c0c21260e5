"""
Stateful IIR filters: one-pole low-pass, RBJ biquad and Chamberlin SVF.

Unlike every other signal, a filter's ``sample`` reads and updates a
small history (previous inputs/outputs and the previous time). That
history is guarded by a ``threading.Lock`` so one instance can be shared
between threads; only the history update is serialized, the wrapped
signal is sampled outside the lock.

Determinism holds for a single caller feeding increasing times. Callers
that interleave on one instance see results that depend on call order.
Time handling is the same for all three filters:

- a later time advances the filter by one step
- the same time returns the cached output
- an earlier time resets the history and returns the input
- a non-finite time or input returns the last output unchanged

Filters step once per call regardless of the gap between times;
``sample_rate`` only shapes the coefficients. Sample at ``1 / sample_rate``
spacing for the designed response.
"""

from __future__ import annotations

import enum
import logging
import math
import threading
from typing import NamedTuple, Optional, Tuple, Union

import numpy as np
from scipy import signal as scipy_signal

from ..core.context import SignalContext
from ..core.ranges import UNBOUNDED, SignalRange, finite_or
from ..core.signal import Signal

_LOGGER = logging.getLogger(__name__)

# prev_time before the first sample; t = 0 counts as advancing.
INITIAL_TIME = -1.0
BUTTERWORTH_Q = 1.0 / math.sqrt(2.0)
MIN_Q = 0.001
MIN_SVF_Q = 0.5
MIN_SVF_CUTOFF = 20.0
# Impulse window bounds for the biquad L1 gain; the length follows the pole radius.
IMPULSE_LENGTH = 4096
MAX_IMPULSE_LENGTH = 1 << 22
IMPULSE_TOLERANCE = 1e-12


def _valid_rate(sample_rate: float) -> bool:
    return math.isfinite(sample_rate) and sample_rate > 0.0


class Filter(Signal):
    """
    Base for history-carrying filters.

    Subclasses provide ``_fresh_history`` and ``_advance``; this class
    owns the lock, the time bookkeeping and ``reset``. ``_drive`` computes
    any extra per-sample input (e.g. a modulated cutoff) outside the lock.
    """

    stateful = True

    def __init__(self, signal: Signal):
        self.signal = signal
        self._lock = threading.Lock()
        self._clear()

    def _clear(self):
        self._history = self._fresh_history()
        self._prev_time = INITIAL_TIME
        self._last = 0.0

    def _fresh_history(self):
        raise NotImplementedError

    def _advance(self, value: float, drive) -> float:
        raise NotImplementedError

    def _restart(self, value: float) -> float:
        """History after a backwards seek; returns the output for that sample."""
        self._history = self._fresh_history()
        return value

    def _drive(self, t: float, ctx: Optional[SignalContext]):
        return None

    def reset(self):
        """Forget all history, as if freshly constructed."""
        with self._lock:
            self._clear()

    def _step_locked(self, t: float, value: float, drive) -> float:
        if not (math.isfinite(t) and math.isfinite(value)):
            return self._last
        if t > self._prev_time:
            self._last = self._advance(value, drive)
        elif t < self._prev_time:
            _LOGGER.debug(
                "%s: time moved backwards (%s -> %s), resetting history",
                type(self).__name__, self._prev_time, t,
            )
            self._last = self._restart(value)
        self._prev_time = t
        return self._last

    def _step(self, t: float, ctx: Optional[SignalContext]) -> float:
        value = self.signal.sample_with_context(t, ctx)
        drive = self._drive(t, ctx)
        with self._lock:
            return self._step_locked(t, value, drive)

    def _sample(self, t: float) -> float:
        return self._step(t, None)

    def _sample_with_context(self, t: float, ctx: SignalContext) -> float:
        return self._step(t, ctx)


class LowPass(Filter):
    """
    One-pole low-pass: ``y = alpha * x + (1 - alpha) * y_prev``.

    ``alpha = 1 - exp(-2 pi cutoff / sample_rate)``, clamped to [0, 1]; a
    non-finite alpha (bad cutoff or sample rate) becomes 1, passing the
    input straight through. History starts at ``(0.0, -1.0)``.

    Args:
        signal: Input signal
        cutoff_hz: Cutoff frequency in Hz
        sample_rate: Rate at which the filter is stepped (Hz)

    Example:
        >>> from mixsig.generators import Constant
        >>> lp = LowPass(Constant(0.8), cutoff_hz=50.0, sample_rate=1000.0)
        >>> out = [lp.sample(i / 1000.0) for i in range(2000)]
        >>> abs(out[-1] - 0.8) < 1e-6
        True
    """

    def __init__(self, signal: Signal, cutoff_hz: float = 1000.0, sample_rate: float = 44100.0):
        self.cutoff_hz = cutoff_hz
        self.sample_rate = sample_rate
        alpha = math.nan
        if _valid_rate(sample_rate):
            alpha = 1.0 - math.exp(-2.0 * math.pi * finite_or(cutoff_hz, math.nan) / sample_rate)
        self.alpha = min(max(alpha, 0.0), 1.0) if math.isfinite(alpha) else 1.0
        super().__init__(signal)

    @classmethod
    def with_alpha(cls, signal: Signal, alpha: float) -> "LowPass":
        """Build from a smoothing coefficient directly (clamped to [0, 1])."""
        lp = cls(signal)
        alpha = finite_or(alpha, 1.0)
        lp.alpha = min(max(alpha, 0.0), 1.0)
        return lp

    def coefficients(self) -> Tuple[np.ndarray, np.ndarray]:
        """``(b, a)`` for ``scipy.signal.lfilter``."""
        return np.array([self.alpha]), np.array([1.0, self.alpha - 1.0])

    def output_range(self) -> SignalRange:
        source = self.signal.output_range()
        return SignalRange(min(source.min, 0.0), max(source.max, 0.0))

    def _fresh_history(self) -> float:
        return 0.0

    def _advance(self, value: float, drive) -> float:
        self._history = self.alpha * value + (1.0 - self.alpha) * self._history
        return self._history

    def _restart(self, value: float) -> float:
        self._history = value
        return value


class BiquadMode(enum.Enum):
    LOWPASS = "lowpass"
    HIGHPASS = "highpass"
    BANDPASS = "bandpass"
    NOTCH = "notch"
    ALLPASS = "allpass"


def rbj_coefficients(
    mode: BiquadMode, cutoff_hz: float, q: float, sample_rate: float
) -> Optional[Tuple[np.ndarray, np.ndarray]]:
    """
    Audio-EQ-cookbook biquad coefficients, normalized so ``a[0] == 1``.

    Returns None when the parameters produce non-finite coefficients.

    Example:
        >>> b, a = rbj_coefficients(BiquadMode.LOWPASS, 1000.0, 0.7071, 48000.0)
        >>> float(a[0]), bool(abs(sum(b) / sum(a) - 1.0) < 1e-9)
        (1.0, True)
    """
    if not _valid_rate(sample_rate):
        return None
    omega = 2.0 * math.pi * finite_or(cutoff_hz, math.nan) / sample_rate
    if not math.isfinite(omega):
        return None
    cos_w = math.cos(omega)
    alpha = math.sin(omega) / (2.0 * max(finite_or(q, BUTTERWORTH_Q), MIN_Q))

    if mode is BiquadMode.LOWPASS:
        b = [(1.0 - cos_w) / 2.0, 1.0 - cos_w, (1.0 - cos_w) / 2.0]
    elif mode is BiquadMode.HIGHPASS:
        b = [(1.0 + cos_w) / 2.0, -(1.0 + cos_w), (1.0 + cos_w) / 2.0]
    elif mode is BiquadMode.BANDPASS:
        b = [alpha, 0.0, -alpha]
    elif mode is BiquadMode.NOTCH:
        b = [1.0, -2.0 * cos_w, 1.0]
    else:
        b = [1.0 - alpha, -2.0 * cos_w, 1.0 + alpha]
    a = [1.0 + alpha, -2.0 * cos_w, 1.0 - alpha]

    b = np.array(b) / a[0]
    a = np.array(a) / a[0]
    if not (np.all(np.isfinite(b)) and np.all(np.isfinite(a))):
        return None
    return b, a


class _BiquadHistory(NamedTuple):
    x1: float = 0.0
    x2: float = 0.0
    y1: float = 0.0
    y2: float = 0.0


class Biquad(Filter):
    """
    Second-order IIR section (direct form I) with RBJ cookbook coefficients.

    Args:
        signal: Input signal
        mode: ``BiquadMode`` or its name (lowpass, highpass, bandpass, notch, allpass)
        cutoff_hz: Cutoff or center frequency in Hz
        q: Quality factor, at least 0.001 (default 1/sqrt(2))
        sample_rate: Rate at which the filter is stepped (Hz)

    Parameters giving non-finite coefficients degrade the filter to a
    passthrough and log a warning.

    Example:
        >>> from mixsig.generators import Constant
        >>> bq = Biquad(Constant(1.0), "lowpass", cutoff_hz=100.0, sample_rate=8000.0)
        >>> out = [bq.sample(i / 8000.0) for i in range(4000)]
        >>> abs(out[-1] - 1.0) < 1e-6
        True
    """

    def __init__(
        self,
        signal: Signal,
        mode: Union[BiquadMode, str] = BiquadMode.LOWPASS,
        cutoff_hz: float = 1000.0,
        q: float = BUTTERWORTH_Q,
        sample_rate: float = 44100.0,
    ):
        self.mode = mode if isinstance(mode, BiquadMode) else BiquadMode(str(mode).lower())
        self.cutoff_hz = cutoff_hz
        self.q = max(finite_or(q, BUTTERWORTH_Q), MIN_Q)
        self.sample_rate = sample_rate
        coefficients = rbj_coefficients(self.mode, cutoff_hz, self.q, sample_rate)
        self.passthrough = coefficients is None
        if self.passthrough:
            _LOGGER.warning(
                "Biquad %s(cutoff=%s, q=%s, sample_rate=%s) has non-finite coefficients; passing input through",
                self.mode.value, cutoff_hz, q, sample_rate,
            )
            coefficients = (np.array([1.0, 0.0, 0.0]), np.array([1.0, 0.0, 0.0]))
        self._b, self._a = coefficients
        self._l1_gain = None
        super().__init__(signal)

    @classmethod
    def lowpass(cls, signal: Signal, cutoff_hz: float, sample_rate: float) -> "Biquad":
        return cls(signal, BiquadMode.LOWPASS, cutoff_hz, BUTTERWORTH_Q, sample_rate)

    @classmethod
    def highpass(cls, signal: Signal, cutoff_hz: float, sample_rate: float) -> "Biquad":
        return cls(signal, BiquadMode.HIGHPASS, cutoff_hz, BUTTERWORTH_Q, sample_rate)

    @classmethod
    def bandpass(cls, signal: Signal, center_hz: float, q: float, sample_rate: float) -> "Biquad":
        return cls(signal, BiquadMode.BANDPASS, center_hz, q, sample_rate)

    @classmethod
    def notch(cls, signal: Signal, center_hz: float, q: float, sample_rate: float) -> "Biquad":
        return cls(signal, BiquadMode.NOTCH, center_hz, q, sample_rate)

    def coefficients(self) -> Tuple[np.ndarray, np.ndarray]:
        """``(b, a)`` arrays, ``a[0] == 1``, usable with ``scipy.signal.lfilter``."""
        return self._b.copy(), self._a.copy()

    def frequency_response(self, num_points: int = 512) -> Tuple[np.ndarray, np.ndarray]:
        """
        Complex response at ``num_points`` frequencies via ``scipy.signal.freqz``.

        Returns:
            tuple: (frequencies in Hz, or rad/sample without a valid rate; complex response)
        """
        if _valid_rate(self.sample_rate):
            return scipy_signal.freqz(self._b, self._a, worN=num_points, fs=self.sample_rate)
        return scipy_signal.freqz(self._b, self._a, worN=num_points)

    def pole_radius(self) -> float:
        """Largest pole magnitude; 1.0 or more means the filter is unstable."""
        poles = np.roots(self._a)
        if poles.size == 0:
            return 0.0
        return float(np.max(np.abs(poles)))

    def l1_gain(self) -> float:
        """
        Sum of absolute impulse-response taps: the worst-case peak gain.

        The impulse is run until the pole envelope ``r**n`` decays below
        ``IMPULSE_TOLERANCE`` (at least ``IMPULSE_LENGTH``, at most
        ``MAX_IMPULSE_LENGTH`` taps), and a geometric bound covers the taps
        past the computed window. Unstable filters have infinite gain.
        """
        if self._l1_gain is None:
            radius = self.pole_radius()
            if not radius < 1.0:
                self._l1_gain = math.inf
                return self._l1_gain
            length = IMPULSE_LENGTH
            if radius > 0.0:
                needed = math.log(IMPULSE_TOLERANCE) / math.log(radius)
                length = int(min(max(needed, IMPULSE_LENGTH), MAX_IMPULSE_LENGTH))
            impulse = np.zeros(length)
            impulse[0] = 1.0
            response = np.abs(scipy_signal.lfilter(self._b, self._a, impulse))
            envelope = float(np.max(response[-max(length // 8, 2):]))
            gain = float(np.sum(response)) + envelope * radius / (1.0 - radius)
            self._l1_gain = gain if math.isfinite(gain) else math.inf
        return self._l1_gain

    def output_range(self) -> SignalRange:
        source = self.signal.output_range()
        gain = self.l1_gain()
        if not (source.is_bounded and math.isfinite(gain)):
            return UNBOUNDED
        peak = max(abs(source.min), abs(source.max)) * max(gain, 1.0)
        return SignalRange(-peak, peak)

    def _fresh_history(self) -> _BiquadHistory:
        return _BiquadHistory()

    def _advance(self, value: float, drive) -> float:
        b, a, h = self._b, self._a, self._history
        output = b[0] * value + b[1] * h.x1 + b[2] * h.x2 - a[1] * h.y1 - a[2] * h.y2
        output = float(output)
        if not math.isfinite(output):
            return self._last
        self._history = _BiquadHistory(value, h.x1, output, h.y1)
        return output


class SvfMode(enum.Enum):
    LOWPASS = "lowpass"
    HIGHPASS = "highpass"
    BANDPASS = "bandpass"


class SvfTaps(NamedTuple):
    low: float
    high: float
    band: float


class _SvfHistory(NamedTuple):
    low: float = 0.0
    band: float = 0.0


class Svf(Filter):
    """
    Chamberlin state-variable filter with a modulatable cutoff.

    One evaluation yields low-pass, high-pass and band-pass taps at once;
    ``mode`` selects which one ``sample`` returns and ``sample_taps``
    returns all three. The cutoff is clamped to ``[20, 0.49 * sample_rate]``
    each step. The Chamberlin structure itself is only stable while
    ``2 sin(pi fc / fs) < sqrt(1/q**2 + 4) - 1/q`` (about ``fs / 6`` at the
    default q), so sweeps should stay below that.

    Args:
        signal: Input signal
        cutoff: Cutoff in Hz, a float or a Signal sampled at the same times
        q: Resonance, at least 0.5 (default 0.707)
        sample_rate: Rate at which the filter is stepped (Hz)
        mode: ``SvfMode`` or its name (default lowpass)
    """

    def __init__(
        self,
        signal: Signal,
        cutoff: Union[float, Signal] = 1000.0,
        q: float = BUTTERWORTH_Q,
        sample_rate: float = 44100.0,
        mode: Union[SvfMode, str] = SvfMode.LOWPASS,
    ):
        self.cutoff = cutoff if isinstance(cutoff, Signal) else finite_or(cutoff, 1000.0)
        self.q = max(finite_or(q, BUTTERWORTH_Q), MIN_SVF_Q)
        self.sample_rate = sample_rate
        self.mode = mode if isinstance(mode, SvfMode) else SvfMode(str(mode).lower())
        self.passthrough = not _valid_rate(sample_rate)
        if self.passthrough:
            _LOGGER.warning("Svf sample_rate=%s is not positive and finite; passing input through", sample_rate)
        super().__init__(signal)

    def output_range(self) -> SignalRange:
        return UNBOUNDED

    def _fresh_history(self) -> _SvfHistory:
        return _SvfHistory()

    def _clear(self):
        super()._clear()
        self._taps = SvfTaps(0.0, 0.0, 0.0)

    def _drive(self, t: float, ctx: Optional[SignalContext]) -> float:
        if isinstance(self.cutoff, Signal):
            return finite_or(self.cutoff.sample_with_context(t, ctx), MIN_SVF_CUTOFF)
        return self.cutoff

    def _select(self, taps: SvfTaps) -> float:
        if self.mode is SvfMode.HIGHPASS:
            return taps.high
        if self.mode is SvfMode.BANDPASS:
            return taps.band
        return taps.low

    def _advance(self, value: float, drive) -> float:
        if self.passthrough:
            self._taps = SvfTaps(value, value, value)
            return value
        fc = min(max(drive, MIN_SVF_CUTOFF), self.sample_rate * 0.49)
        f = 2.0 * math.sin(math.pi * fc / self.sample_rate)
        low = self._history.low + f * self._history.band
        high = value - low - self._history.band / self.q
        band = self._history.band + f * high
        taps = SvfTaps(low, high, band)
        if not all(math.isfinite(v) for v in taps):
            return self._last
        self._history = _SvfHistory(low, band)
        self._taps = taps
        return self._select(taps)

    def _restart(self, value: float) -> float:
        self._history = self._fresh_history()
        self._taps = SvfTaps(value, value, value)
        return value

    def sample_taps(self, t: float, ctx: Optional[SignalContext] = None) -> SvfTaps:
        """
        Step (or re-read) the filter at ``t`` and return all three taps.

        Example:
            >>> from mixsig.generators import Constant
            >>> svf = Svf(Constant(0.5), cutoff=200.0, sample_rate=8000.0)
            >>> taps = [svf.sample_taps(i / 8000.0) for i in range(8000)][-1]
            >>> abs(taps.low - 0.5) < 1e-3, abs(taps.high) < 1e-3
            (True, True)
        """
        value = self.signal.sample_with_context(t, ctx)
        drive = self._drive(t, ctx)
        with self._lock:
            self._step_locked(t, value, drive)
            return self._taps
