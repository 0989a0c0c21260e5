"""
Tests for ranges, contexts and the Signal sampling contract.
"""

import math

import numpy as np
import pytest

from mixsig.core import (
    BIPOLAR,
    UNBOUNDED,
    UNIT,
    Map,
    Phase,
    PhaseKind,
    Signal,
    SignalContext,
    SignalRange,
    remap_range,
)
from mixsig.generators import Constant, Sine
from mixsig.spec import SPEC_MODELS, build

NON_FINITE = [math.nan, math.inf, -math.inf]
EXTREME_TIMES = NON_FINITE + [1e308, -1e308]
ALL_TAGS = [model.model_fields["type"].default for model in SPEC_MODELS]


class _Broken(Signal):
    """Signal that always produces NaN."""

    def __init__(self, output_range=UNIT):
        self._range = output_range

    def output_range(self):
        return self._range

    def _sample(self, t):
        return math.nan


class TestSignalRange:
    """SignalRange construction and arithmetic."""

    def test_new_swaps_reversed_bounds(self):
        assert SignalRange.new(3.0, -2.0) == SignalRange(-2.0, 3.0)

    @pytest.mark.parametrize("bad", NON_FINITE)
    def test_new_non_finite_falls_back_to_unit(self, bad):
        assert SignalRange.new(bad, 1.0) == UNIT
        assert SignalRange.new(0.0, bad) == UNIT

    def test_centers(self):
        assert BIPOLAR.center == 0.0
        assert UNIT.center == 0.5
        assert UNBOUNDED.center == 0.0

    def test_around_uses_absolute_amplitude(self):
        assert SignalRange.around(-2.0, 1.0) == SignalRange(-1.0, 3.0)

    def test_plus_and_times(self):
        assert UNIT.plus(BIPOLAR) == SignalRange(-1.0, 2.0)
        assert BIPOLAR.times(SignalRange(0.0, 2.0)) == SignalRange(-2.0, 2.0)
        assert UNIT.plus(UNBOUNDED) == UNBOUNDED

    def test_scaled_negative_factor(self):
        assert UNIT.scaled(-2.0) == SignalRange(-2.0, 0.0)

    def test_remap_degenerate_source_returns_target_center(self):
        assert remap_range(7.0, SignalRange(1.0, 1.0), BIPOLAR) == 0.0
        assert remap_range(7.0, UNBOUNDED, UNIT) == 0.5

    def test_remap_bipolar_to_unit(self):
        assert remap_range(-1.0, BIPOLAR, UNIT) == 0.0
        assert remap_range(1.0, BIPOLAR, UNIT) == 1.0


class TestSignalContext:
    """Context normalization and builders."""

    def test_frame_and_seed_wrap(self):
        ctx = SignalContext(frame=2 ** 64 + 5, seed=-1)
        assert ctx.frame == 5
        assert ctx.seed == 2 ** 64 - 1

    def test_progress_fields_clamped(self):
        ctx = SignalContext.full(Phase.START, 1.5, -0.2, -3.0)
        assert ctx.phase_t == 1.0
        assert ctx.loop_t == 0.0
        assert ctx.absolute_t == 0.0

    def test_nan_progress_becomes_zero(self):
        assert SignalContext.for_phase(Phase.END, math.nan).phase_t == 0.0

    def test_builders_return_new_contexts(self):
        base = SignalContext(frame=1)
        ctx = base.with_char_index(4).with_dimensions(3, 7).with_seed(9)
        assert base.char_index is None
        assert (ctx.char_index, ctx.width, ctx.height, ctx.seed) == (4, 3, 7, 9)

    def test_negative_char_index_rejected(self):
        with pytest.raises(ValueError):
            SignalContext(char_index=-1)

    def test_custom_phase(self):
        assert Phase.custom(7).kind is PhaseKind.CUSTOM
        assert Phase.custom(7) != Phase.custom(8)
        with pytest.raises(ValueError):
            Phase(PhaseKind.START, 3)


class TestTotality:
    """Public sampling never returns a non-finite value."""

    @pytest.mark.parametrize("t", NON_FINITE)
    def test_sine_non_finite_time(self, t):
        assert Sine().sample(t) == Sine().sample(0.0)

    def test_nan_output_replaced_by_range_center(self):
        assert _Broken().sample(1.0) == 0.5
        assert _Broken(BIPOLAR).sample(1.0) == 0.0
        assert _Broken(SignalRange(2.0, 4.0)).sample_with_context(1.0, SignalContext()) == 3.0

    def test_map_non_finite_result(self):
        exploding = Map(Constant(0.0), lambda v: 1.0 / v if v else math.inf)
        assert exploding.sample(0.0) == 0.0

    def test_sample_with_none_context_matches_sample(self):
        sine = Sine(frequency=3.0)
        assert sine.sample_with_context(0.1, None) == sine.sample(0.1)

    @pytest.mark.parametrize("t", EXTREME_TIMES)
    @pytest.mark.parametrize("tag", ALL_TAGS)
    def test_every_built_signal_at_extreme_time(self, tag, t, minimal_spec):
        signal = build(minimal_spec(tag))
        value = signal.sample(t)
        declared = signal.output_range()
        assert math.isfinite(value)
        assert declared.min - 1e-9 <= value <= declared.max + 1e-9

    @pytest.mark.parametrize("huge", [1e308, -1e308])
    def test_huge_parameters(self, huge):
        assert math.isfinite(Sine(frequency=huge).sample(10.0))
        assert math.isfinite(Sine(frequency=2.0, phase=huge).sample(0.3))


class TestBatchSampling:
    """sample_many, sample_sweep and render."""

    def test_sample_many_matches_scalar(self):
        sine = Sine(frequency=2.0)
        times = [0.0, 0.1, 0.2, 0.3]
        np.testing.assert_allclose(sine.sample_many(times), [sine.sample(t) for t in times])

    def test_sweep_length_and_start(self):
        values = Constant(2.0).sample_sweep(0.0, 0.01, 5)
        assert values.shape == (5,)
        assert np.all(values == 2.0)

    def test_sweep_rejects_negative_count(self):
        with pytest.raises(ValueError):
            Constant(1.0).sample_sweep(0.0, 0.1, -1)

    def test_render(self):
        audio = Sine(frequency=1.0).render(1.0, sample_rate=100)
        assert len(audio) == 100
        assert np.max(np.abs(audio)) <= 1.0

    def test_render_rejects_bad_duration(self):
        with pytest.raises(ValueError):
            Sine().render(0.0)


class TestFluentBuilders:
    """Builder methods wrap the receiver in operators."""

    def test_chain(self):
        signal = Sine().scale(2.0).add(Constant(1.0)).clamp(-1.0, 1.5)
        assert signal.sample(0.25) == 1.5
        assert signal.sample(0.75) == -1.0

    def test_normalized_sine_scenario(self):
        normalized = Sine().normalized()
        assert normalized.sample(0.0) == 0.5
        assert normalized.sample(0.25) == 1.0
        assert normalized.sample(0.75) == 0.0
