"""Core abstractions: ranges, sanitizers, contexts and the Signal contract."""

from .ranges import (
    SignalRange,
    BIPOLAR,
    UNIT,
    UNBOUNDED,
    finite_or,
    finite_or_min,
    finite_or_clamp,
    remap_range,
    unit_to_bipolar,
    bipolar_to_unit,
)

from .context import (
    Phase,
    PhaseKind,
    SignalContext,
)

from .signal import (
    Signal,
    Map,
    finite_time,
)

__all__ = [
    # Ranges
    "SignalRange",
    "BIPOLAR",
    "UNIT",
    "UNBOUNDED",
    "finite_or",
    "finite_or_min",
    "finite_or_clamp",
    "remap_range",
    "unit_to_bipolar",
    "bipolar_to_unit",

    # Context
    "Phase",
    "PhaseKind",
    "SignalContext",

    # Signal contract
    "Signal",
    "Map",
    "finite_time",
]
