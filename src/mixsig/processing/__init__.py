"""Processing stages: range shaping operators and stateful filters."""

from .operators import (
    Clamp,
    Remap,
    Normalized,
    NormalizedFrom,
    Quantize,
    Invert,
    Abs,
    Clipper,
    ClipMode,
)

from .filters import (
    Filter,
    LowPass,
    Biquad,
    BiquadMode,
    Svf,
    SvfMode,
    SvfTaps,
    rbj_coefficients,
)

__all__ = [
    # Operators
    "Clamp",
    "Remap",
    "Normalized",
    "NormalizedFrom",
    "Quantize",
    "Invert",
    "Abs",
    "Clipper",
    "ClipMode",

    # Filters
    "Filter",
    "LowPass",
    "Biquad",
    "BiquadMode",
    "Svf",
    "SvfMode",
    "SvfTaps",
    "rbj_coefficients",
]
