"""
Tests for the stateful filters against scipy reference implementations.
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest
from scipy import signal as scipy_signal

from mixsig.composition import Add
from mixsig.core import UNBOUNDED
from mixsig.generators import Constant, Ramp, Sine, Square
from mixsig.processing import Biquad, BiquadMode, LowPass, Svf, SvfMode, rbj_coefficients

FS = 1000.0
N = 1500
TIMES = np.arange(N) / FS


def _source():
    return Add(Sine(frequency=7.0), Square(frequency=90.0, amplitude=0.3))


def _run(filt, times=TIMES):
    return np.array([filt.sample(float(t)) for t in times])


class TestLowPass:
    """One-pole low-pass."""

    def test_converges_to_constant(self):
        lp = LowPass(Constant(0.8), cutoff_hz=20.0, sample_rate=FS)
        assert _run(lp)[-1] == pytest.approx(0.8, abs=1e-9)

    def test_matches_lfilter(self):
        lp = LowPass(_source(), cutoff_hz=30.0, sample_rate=FS)
        b, a = lp.coefficients()
        expected = scipy_signal.lfilter(b, a, _source().sample_many(TIMES))
        np.testing.assert_allclose(_run(lp), expected, rtol=1e-9, atol=1e-12)

    def test_invalid_parameters_pass_through(self):
        assert LowPass(Constant(1.0), cutoff_hz=math.nan).alpha == 1.0
        assert LowPass(Constant(1.0), sample_rate=0.0).alpha == 1.0
        assert LowPass(Constant(0.3), sample_rate=-5.0).sample(0.0) == 0.3

    def test_with_alpha(self):
        lp = LowPass.with_alpha(Constant(1.0), 0.5)
        assert lp.sample(0.0) == 0.5
        assert lp.sample(0.1) == 0.75

    def test_range_includes_zero(self):
        assert LowPass(Constant(2.0)).output_range().min == 0.0


class TestTimeHandling:
    """Forward, repeated, backward and non-finite times."""

    def test_repeated_time_returns_cached_output(self):
        lp = LowPass.with_alpha(Constant(1.0), 0.5)
        first = lp.sample(0.0)
        assert lp.sample(0.0) == first
        assert lp.sample(0.1) == 0.75

    def test_backward_time_resets_and_returns_input(self, caplog):
        lp = LowPass.with_alpha(Ramp(0.0, 1.0), 0.5)
        for t in (0.0, 0.5, 0.9):
            lp.sample(t)
        with caplog.at_level(logging.DEBUG, logger="mixsig.processing.filters"):
            assert lp.sample(0.2) == pytest.approx(0.2)
        assert "backwards" in caplog.text
        # History restarts at the input value.
        assert lp.sample(0.4) == pytest.approx(0.5 * 0.4 + 0.5 * 0.2)

    def test_non_finite_time_returns_last_output(self):
        lp = LowPass.with_alpha(Constant(1.0), 0.5)
        lp.sample(0.0)
        assert lp.sample(math.nan) == 0.5
        assert lp.sample(math.inf) == 0.5

    def test_reset_matches_fresh_filter(self):
        lp = LowPass(_source(), cutoff_hz=30.0, sample_rate=FS)
        first = _run(lp, TIMES[:50])
        lp.reset()
        np.testing.assert_array_equal(_run(lp, TIMES[:50]), first)

    def test_stateful_flag(self):
        assert LowPass(Constant(0.0)).stateful
        assert not Sine().stateful


class TestBiquad:
    """RBJ biquad."""

    @pytest.mark.parametrize("mode", list(BiquadMode))
    def test_matches_lfilter(self, mode):
        bq = Biquad(_source(), mode, cutoff_hz=60.0, q=1.2, sample_rate=FS)
        b, a = bq.coefficients()
        expected = scipy_signal.lfilter(b, a, _source().sample_many(TIMES))
        np.testing.assert_allclose(_run(bq), expected, rtol=1e-7, atol=1e-9)

    def test_lowpass_dc_gain(self):
        bq = Biquad.lowpass(Constant(1.0), 50.0, FS)
        assert _run(bq)[-1] == pytest.approx(1.0, abs=1e-6)
        _, response = bq.frequency_response(64)
        assert abs(response[0]) == pytest.approx(1.0)

    def test_highpass_blocks_dc(self):
        bq = Biquad.highpass(Constant(1.0), 50.0, FS)
        assert abs(_run(bq)[-1]) < 1e-6

    def test_normalized_coefficients(self):
        b, a = rbj_coefficients(BiquadMode.NOTCH, 100.0, 2.0, FS)
        assert a[0] == 1.0
        assert len(b) == len(a) == 3

    def test_invalid_coefficients_pass_through(self, caplog):
        with caplog.at_level(logging.WARNING, logger="mixsig.processing.filters"):
            bq = Biquad(Constant(0.4), "lowpass", cutoff_hz=math.nan, sample_rate=FS)
        assert bq.passthrough
        assert "passing input through" in caplog.text
        assert bq.sample(0.0) == 0.4
        assert rbj_coefficients(BiquadMode.LOWPASS, 100.0, 0.7, 0.0) is None

    def test_output_range_bounded_by_l1_gain(self):
        bq = Biquad.bandpass(Sine(), 100.0, 4.0, FS)
        declared = bq.output_range()
        assert declared.max >= 1.0
        values = _run(bq)
        assert np.all(np.abs(values) <= declared.max)

    def test_high_q_range_covers_resonant_peak(self):
        bq = Biquad(Sine(frequency=5.0), "lowpass", cutoff_hz=5.0, q=200.0, sample_rate=FS)
        declared = bq.output_range()
        b, a = bq.coefficients()
        times = np.arange(60000) / FS
        values = scipy_signal.lfilter(b, a, Sine(frequency=5.0).sample_many(times))
        assert np.max(np.abs(values)) > 150.0
        assert np.max(np.abs(values)) <= declared.max
        assert bq.l1_gain() >= 199.0

    def test_unstable_coefficients_are_unbounded(self):
        # Cutoff above Nyquist flips alpha negative and pushes a pole outside the unit circle
        bq = Biquad(Sine(), "lowpass", cutoff_hz=700.0, sample_rate=FS)
        assert not bq.passthrough
        assert bq.pole_radius() > 1.0
        assert bq.l1_gain() == math.inf
        assert bq.output_range() == UNBOUNDED

    def test_unbounded_source_range(self):
        assert Biquad(Constant(0.0).map(abs)).output_range() == UNBOUNDED


class TestSvf:
    """Chamberlin state-variable filter."""

    def test_dc_taps(self):
        svf = Svf(Constant(0.5), cutoff=100.0, sample_rate=FS)
        taps = [svf.sample_taps(float(t)) for t in TIMES][-1]
        assert taps.low == pytest.approx(0.5, abs=1e-4)
        assert taps.high == pytest.approx(0.0, abs=1e-4)
        assert taps.band == pytest.approx(0.0, abs=1e-4)

    def test_mode_selects_tap(self):
        low = Svf(_source(), cutoff=80.0, sample_rate=FS)
        high = Svf(_source(), cutoff=80.0, sample_rate=FS, mode=SvfMode.HIGHPASS)
        low_out = _run(low, TIMES[:200])
        high_out = _run(high, TIMES[:200])
        reference = Svf(_source(), cutoff=80.0, sample_rate=FS)
        taps = [reference.sample_taps(float(t)) for t in TIMES[:200]]
        np.testing.assert_array_equal(low_out, [tap.low for tap in taps])
        np.testing.assert_array_equal(high_out, [tap.high for tap in taps])

    def test_modulated_cutoff_is_stable(self):
        sweep = Ramp(20.0, 300.0, duration=1.0)
        svf = Svf(_source(), cutoff=sweep, q=4.0, sample_rate=FS, mode="bandpass")
        values = _run(svf)
        assert np.all(np.isfinite(values))
        assert np.max(np.abs(values)) < 20.0

    def test_invalid_rate_passes_through(self, caplog):
        with caplog.at_level(logging.WARNING, logger="mixsig.processing.filters"):
            svf = Svf(Constant(0.25), sample_rate=math.inf)
        assert svf.passthrough
        assert svf.sample(0.0) == 0.25
        assert "Svf" in caplog.text

    def test_backward_time_sets_taps_to_input(self):
        svf = Svf(Constant(0.5), cutoff=100.0, sample_rate=FS)
        for t in TIMES[:20]:
            svf.sample(float(t))
        taps = svf.sample_taps(0.0)
        assert taps == (0.5, 0.5, 0.5)


class TestThreadSafety:
    """Concurrent callers sharing one filter instance."""

    def test_concurrent_sampling_stays_finite(self):
        shared = Biquad.lowpass(_source(), 40.0, FS)

        def worker(offset):
            return [shared.sample(float(t) + offset) for t in TIMES[:300]]

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(worker, [i * 0.0001 for i in range(8)]))

        values = np.array(results)
        assert values.shape == (8, 300)
        assert np.all(np.isfinite(values))
        assert np.all(np.abs(values) <= shared.output_range().max)

    def test_single_caller_is_deterministic(self):
        first = _run(Svf(_source(), cutoff=120.0, sample_rate=FS))
        second = _run(Svf(_source(), cutoff=120.0, sample_rate=FS))
        np.testing.assert_array_equal(first, second)
