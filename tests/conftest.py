"""
Shared fixtures.
"""

import pytest

from mixsig.spec import SPEC_MODELS

ALL_TAGS = [model.model_fields["type"].default for model in SPEC_MODELS]

REQUIRED = {
    "constant": {"value": 0.5},
    "keyframes": {"keyframes": [[0.0, 0.0], [1.0, 1.0]]},
    "phase_sine": {"phase": {"type": "ramp"}},
    "add": {"a": {"type": "sine"}, "b": {"type": "triangle"}},
    "multiply": {"a": {"type": "sine"}, "b": {"type": "constant", "value": 2.0}},
    "mix": {"a": {"type": "sine"}, "b": {"type": "square"}},
    "frequency_mod": {"carrier": {"type": "sine"}, "modulator": {"type": "sine", "frequency": 0.5}},
    "vca_centered": {"carrier": {"type": "sine"}, "amount": {"type": "ramp"}},
}

UNARY = {"scale", "clamp", "quantize", "remap", "invert", "abs", "normalized", "clipper", "lowpass", "biquad", "svf"}


def _minimal(tag):
    data = {"type": tag}
    if tag in UNARY:
        data["signal"] = {"type": "sine"}
    data.update(REQUIRED.get(tag, {}))
    return data


@pytest.fixture
def minimal_spec():
    """Smallest valid mapping for a spec tag."""
    return _minimal
