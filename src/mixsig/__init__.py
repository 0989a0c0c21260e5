"""
mixsig: composable, deterministic signal sampling.

Signals are pure functions of time (and optionally a sampling context)
that can be combined into trees of generators, noise, envelopes,
operators and filters, or described declaratively and built from specs.
"""

from .errors import (
    MixsigError,
    SpecError,
)

from .core import (
    SignalRange,
    BIPOLAR,
    UNIT,
    UNBOUNDED,
    Phase,
    PhaseKind,
    SignalContext,
    Signal,
    Map,
)

from .generators import (
    Sine,
    Triangle,
    Square,
    Sawtooth,
    Constant,
    Ramp,
    Step,
    Pulse,
    Keyframes,
)

from .noise import (
    Tier,
    WhiteNoise,
    PerlinNoise,
    PinkNoise,
    CorrelatedNoise,
    GaussianNoise,
    PoissonNoise,
    StudentTNoise,
    ImpulseNoise,
    SeededRandom,
    SpatialNoise,
    PerCharacterNoise,
    Rng,
)

from .modulation import (
    Adsr,
    LinearEnvelope,
    Impact,
    PhaseAccumulator,
    PhaseSine,
)

from .composition import (
    Add,
    Sum,
    Multiply,
    Scale,
    Mix,
    FrequencyMod,
    VcaCentered,
)

from .processing import (
    Clamp,
    Remap,
    Normalized,
    Quantize,
    Invert,
    Abs,
    Clipper,
    LowPass,
    Biquad,
    Svf,
)

from .spec import (
    build,
    parse_spec,
    loads_spec,
    load_spec,
)

__version__ = "0.1.0"

__all__ = [
    # Errors
    "MixsigError",
    "SpecError",

    # Core
    "SignalRange",
    "BIPOLAR",
    "UNIT",
    "UNBOUNDED",
    "Phase",
    "PhaseKind",
    "SignalContext",
    "Signal",
    "Map",

    # Generators
    "Sine",
    "Triangle",
    "Square",
    "Sawtooth",
    "Constant",
    "Ramp",
    "Step",
    "Pulse",
    "Keyframes",

    # Noise
    "Tier",
    "WhiteNoise",
    "PerlinNoise",
    "PinkNoise",
    "CorrelatedNoise",
    "GaussianNoise",
    "PoissonNoise",
    "StudentTNoise",
    "ImpulseNoise",
    "SeededRandom",
    "SpatialNoise",
    "PerCharacterNoise",
    "Rng",

    # Modulation
    "Adsr",
    "LinearEnvelope",
    "Impact",
    "PhaseAccumulator",
    "PhaseSine",

    # Composition
    "Add",
    "Sum",
    "Multiply",
    "Scale",
    "Mix",
    "FrequencyMod",
    "VcaCentered",

    # Processing
    "Clamp",
    "Remap",
    "Normalized",
    "Quantize",
    "Invert",
    "Abs",
    "Clipper",
    "LowPass",
    "Biquad",
    "Svf",

    # Specs
    "build",
    "parse_spec",
    "loads_spec",
    "load_spec",
]
