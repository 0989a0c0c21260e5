"""Composition operators: sums, products, blends, scaling and modulation."""

from .operators import (
    Add,
    Sum,
    Multiply,
    Scale,
    Mix,
    FrequencyMod,
    VcaCentered,
)

__all__ = [
    # Arithmetic
    "Add",
    "Sum",
    "Multiply",
    "Scale",
    "Mix",

    # Modulation
    "FrequencyMod",
    "VcaCentered",
]
