"""Leaf generators: periodic oscillators and utility shapes."""

from .oscillators import (
    Oscillator,
    Sine,
    Triangle,
    Square,
    Sawtooth,
)

from .shapes import (
    Constant,
    Ramp,
    Step,
    Pulse,
    Keyframes,
)

__all__ = [
    # Oscillators
    "Oscillator",
    "Sine",
    "Triangle",
    "Square",
    "Sawtooth",

    # Shapes
    "Constant",
    "Ramp",
    "Step",
    "Pulse",
    "Keyframes",
]
