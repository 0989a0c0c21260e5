"""
Tests for composition and stateless processing operators.
"""

import math

import numpy as np
import pytest

from mixsig.composition import Add, FrequencyMod, Mix, Multiply, Scale, Sum, VcaCentered
from mixsig.core import BIPOLAR, UNBOUNDED, UNIT, SignalRange
from mixsig.generators import Constant, Ramp, Sine, Step, Triangle
from mixsig.noise import WhiteNoise
from mixsig.processing import Abs, Clamp, Clipper, ClipMode, Invert, Normalized, NormalizedFrom, Quantize, Remap

TIMES = np.linspace(0.0, 2.0, 97)


class TestArithmetic:
    """Add, Sum, Multiply, Scale."""

    def test_add_values_and_range(self):
        signal = Add(Sine(), Constant(0.5))
        assert signal.sample(0.25) == 1.5
        assert signal.output_range() == SignalRange(-0.5, 1.5)

    def test_sum_empty_is_zero(self):
        assert Sum([]).sample(1.0) == 0.0
        assert Sum([]).output_range() == SignalRange(0.0, 0.0)

    def test_sum_matches_chained_add(self):
        parts = [Sine(frequency=1.0), Triangle(frequency=2.0), Constant(0.25)]
        total = Sum(parts)
        chained = Add(Add(parts[0], parts[1]), parts[2])
        np.testing.assert_allclose(total.sample_many(TIMES), chained.sample_many(TIMES), atol=1e-12)

    def test_multiply_range_from_corners(self):
        product = Multiply(Sine(), Constant(-2.0))
        assert product.output_range() == SignalRange(-2.0, 2.0)
        assert product.sample(0.25) == -2.0

    def test_scale_by_signal(self):
        scaled = Scale(Constant(2.0), Ramp(0.0, 1.0))
        assert scaled.sample(0.5) == 1.0
        assert scaled.output_range() == SignalRange(0.0, 2.0)


class TestMix:
    """Linear blending."""

    def test_endpoints_are_identities(self):
        a, b = Sine(), Triangle(frequency=3.0)
        np.testing.assert_allclose(Mix(a, b, 0.0).sample_many(TIMES), a.sample_many(TIMES))
        np.testing.assert_allclose(Mix(a, b, 1.0).sample_many(TIMES), b.sample_many(TIMES))

    def test_blend_is_not_clamped(self):
        assert Mix(Constant(0.0), Constant(1.0), 2.0).sample(0.0) == 2.0

    def test_non_finite_blend_defaults_to_half(self):
        assert Mix(Constant(0.0), Constant(1.0), math.nan).sample(0.0) == 0.5


class TestFrequencyMod:
    """Integral-based FM."""

    def test_zero_depth_is_passthrough(self):
        carrier = Sine(frequency=3.0)
        fm = FrequencyMod(carrier, Sine(frequency=1.0), depth=0.0, carrier_freq=3.0)
        np.testing.assert_allclose(fm.sample_many(TIMES), carrier.sample_many(TIMES))

    def test_degenerate_modulator_range_contributes_nothing(self):
        fm = FrequencyMod(Sine(frequency=2.0), Constant(1.0), depth=1.0, carrier_freq=2.0)
        assert fm.effective_time(0.5) == pytest.approx(0.5)

    def test_held_modulator_shifts_frequency(self):
        # m = +1 until t = 10: tau = t + (depth / fc) t, i.e. fc + depth Hz
        modulator = Step(before=1.0, after=-1.0, threshold=10.0)
        fm = FrequencyMod(Sine(frequency=2.0), modulator, depth=1.0, carrier_freq=2.0)
        assert fm.effective_time(0.5) == pytest.approx(0.75)

    def test_unit_modulator_remapped_to_bipolar(self):
        # A unit-range ramp is remapped to [-1, 1]; integral over [0, 1] is 0
        fm = FrequencyMod(Sine(frequency=4.0), Ramp(0.0, 1.0), depth=2.0, carrier_freq=4.0)
        assert fm.effective_time(1.0) == pytest.approx(1.0, abs=1e-9)

    def test_output_stays_in_carrier_range(self):
        fm = FrequencyMod(Sine(frequency=5.0), Sine(frequency=0.5), depth=3.0, carrier_freq=5.0)
        values = fm.sample_many(TIMES)
        assert np.all(np.abs(values) <= 1.0)

    def test_periodic_modulator_over_long_spans(self):
        # int_0^t sin(pi s) ds = (1 - cos(pi t)) / pi, folded over whole 2 s periods
        fm = FrequencyMod(Sine(frequency=4.0), Sine(frequency=0.5), depth=3.0, carrier_freq=4.0)
        expected = 100.3 + 0.75 * (1.0 - math.cos(0.3 * math.pi)) / math.pi
        assert fm.effective_time(100.3) == pytest.approx(expected, abs=1e-5)
        assert fm.effective_time(1e7 + 1.0) - 1e7 == pytest.approx(1.0 + 1.5 / math.pi, abs=1e-4)


class TestVcaCentered:
    """Centered amplifier."""

    def test_half_amount(self):
        assert VcaCentered(Constant(1.0), Constant(0.5)).sample(0.0) == 0.75

    def test_inputs_clamped(self):
        assert VcaCentered(Constant(4.0), Constant(9.0)).sample(0.0) == 1.0
        assert VcaCentered(Constant(1.0), Constant(0.0)).output_range() == UNIT


class TestClampAndRemap:
    """Range shaping."""

    def test_clamp_swaps_reversed_bounds(self):
        clamp = Clamp(Sine(), 0.5, -0.5)
        assert clamp.sample(0.25) == 0.5
        assert clamp.sample(0.75) == -0.5
        assert clamp.output_range() == SignalRange(-0.5, 0.5)

    def test_remap_extrapolates(self):
        assert Remap(Constant(2.0), 0.0, 1.0, 0.0, 10.0).sample(0.0) == 20.0

    def test_remap_reversed_output(self):
        assert Remap(Constant(0.25), 0.0, 1.0, 1.0, 0.0).sample(0.0) == 0.75

    def test_remap_degenerate_input_gives_midpoint(self):
        remap = Remap(Sine(), 0.3, 0.3 + 1e-5, -4.0, 2.0)
        np.testing.assert_array_equal(remap.sample_many(TIMES), np.full(len(TIMES), -1.0))

    def test_to_unit_and_back(self):
        unit = Remap.to_unit(Sine())
        assert unit.sample(0.25) == 1.0
        assert Remap.to_bipolar(unit).sample(0.75) == -1.0


class TestNormalize:
    """Normalization onto [0, 1]."""

    def test_normalized_sine_sweep(self):
        values = Normalized(Sine()).sample_many(TIMES)
        assert np.all((values >= 0.0) & (values <= 1.0))

    def test_normalized_degenerate_source(self):
        assert Normalized(Constant(3.0)).sample(0.0) == 0.5

    def test_normalized_unbounded_source(self):
        assert NormalizedFrom(Constant(3.0), UNBOUNDED).sample(0.0) == 0.5

    def test_normalized_from_clamps(self):
        assert NormalizedFrom(Constant(5.0), BIPOLAR).sample(0.0) == 1.0


class TestQuantizeInvertAbs:
    """Quantize, Invert and Abs."""

    def test_quantize_levels(self):
        quantized = Quantize(Ramp(0.0, 1.0), levels=5)
        assert quantized.sample(0.3) == 0.25
        assert quantized.sample(0.4) == 0.5

    def test_quantize_minimum_two_levels(self):
        quantized = Quantize(Sine(), levels=0)
        assert quantized.levels == 2
        assert quantized.sample(0.1) == 1.0

    def test_invert_is_an_involution(self):
        source = Triangle(frequency=1.3, offset=0.2)
        twice = Invert(Invert(source))
        np.testing.assert_array_equal(twice.sample_many(TIMES), source.sample_many(TIMES))

    def test_invert_range(self):
        assert Invert(Add(Constant(2.0), Ramp(0.0, 1.0))).output_range() == SignalRange(-3.0, -2.0)

    def test_abs_range_spanning_zero(self):
        assert Abs(Sine(amplitude=2.0, offset=0.5)).output_range() == SignalRange(0.0, 2.5)
        assert Abs(Sine()).sample(0.75) == 1.0


class TestClipper:
    """Hard and soft clipping."""

    def test_hard_asymmetric(self):
        clipper = Clipper(Sine(amplitude=2.0), positive=0.5, negative=-1.5)
        assert clipper.sample(0.25) == 0.5
        assert clipper.sample(0.75) == -1.5

    def test_soft_passes_values_inside_thresholds(self):
        clipper = Clipper.soft_symmetric(Constant(0.3), 0.5)
        assert clipper.sample(0.0) == 0.3

    def test_soft_approaches_one(self):
        clipper = Clipper.soft(Constant(100.0), 0.5, -0.5)
        assert clipper.mode is ClipMode.SOFT
        assert 0.99 < clipper.sample(0.0) <= 1.0

    def test_soft_is_monotonic(self):
        values = [Clipper.soft_symmetric(Constant(v), 0.6).sample(0.0) for v in np.linspace(-3, 3, 61)]
        assert all(b >= a for a, b in zip(values, values[1:]))

    def test_mode_by_name(self):
        assert Clipper(Constant(0.0), mode="soft").mode is ClipMode.SOFT


def test_operators_preserve_noise_determinism():
    chain = Normalized(Mix(WhiteNoise(seed=3), Sine(frequency=2.0), 0.3))
    np.testing.assert_array_equal(chain.sample_many(TIMES), chain.sample_many(TIMES))
