"""Envelopes and phase tools for parameter automation and FM synthesis."""

from .envelopes import (
    Adsr,
    LinearEnvelope,
    Impact,
)

from .phase import (
    PhaseAccumulator,
    PhaseSine,
    integrate_signal,
    integration_steps,
    wrap_phase,
)

__all__ = [
    # Envelopes
    "Adsr",
    "LinearEnvelope",
    "Impact",

    # Phase
    "PhaseAccumulator",
    "PhaseSine",
    "integrate_signal",
    "integration_steps",
    "wrap_phase",
]
